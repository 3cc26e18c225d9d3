"""AI-assisted programming quiz service."""
