from __future__ import annotations
import logging

from codequiz.config import LOG_LEVEL

# Client libraries that log every HTTP request at INFO.
NOISY_LOGGERS = ("httpx", "httpcore", "openai")


def setup_console_logging(level: int | str = LOG_LEVEL) -> None:
    """
    Call once at app or CLI start. Logs go to stderr at ``level``; the HTTP
    client loggers are held at WARNING unless running at DEBUG.
    """
    level = logging.getLevelName(level) if isinstance(level, str) else level
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)
    noisy_level = level if level <= logging.DEBUG else max(level, logging.WARNING)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)

    if root.handlers:
        # already configured (avoid duplicates)
        return

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root.addHandler(handler)
