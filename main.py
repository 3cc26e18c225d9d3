import argparse

import uvicorn

from codequiz.app import app


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the CodeQuiz API server")
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    uvicorn.run(
        app,
        host=args.host,
        port=args.port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
