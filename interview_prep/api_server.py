"""Run the Interview Prep API under uvicorn."""

import argparse
import os

import uvicorn
from dotenv import load_dotenv

APP_PATH = "interview_prep.api.main:app"
LOG_LEVELS = ("critical", "error", "warning", "info", "debug", "trace")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="interview-prep-api", description="Serve the Interview Prep HTTP API")
    parser.add_argument("--host", default=os.getenv("API_HOST", "127.0.0.1"), help="bind address (env: API_HOST)")
    parser.add_argument(
        "--port", type=int, default=int(os.getenv("API_PORT", "8000")), help="bind port (env: API_PORT)"
    )
    parser.add_argument("--reload", action="store_true", help="restart when source files change")
    parser.add_argument("--log-level", default="info", choices=LOG_LEVELS, help="uvicorn log level")
    return parser


def main(argv: list[str] | None = None) -> None:
    # .env has to be applied before the parser defaults and the app settings are read
    load_dotenv()
    args = build_parser().parse_args(argv)
    uvicorn.run(APP_PATH, host=args.host, port=args.port, reload=args.reload, log_level=args.log_level)


if __name__ == "__main__":
    main()
