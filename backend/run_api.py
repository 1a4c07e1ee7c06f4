#!/usr/bin/env python
"""
Run the ResumeTailor API server.

Usage:
    python run_api.py
    python run_api.py --reload  # Development mode
"""

import argparse
import logging
import sys

import uvicorn

from shared.config import get_settings, validate_settings
from shared.exceptions import ConfigurationMissingError


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def main():
    parser = argparse.ArgumentParser(description="Run ResumeTailor API server")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    parser.add_argument("--host", type=str, help="Host to bind to")
    parser.add_argument("--port", type=int, help="Port to bind to")
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.debug)

    try:
        validate_settings(settings)
    except ConfigurationMissingError as e:
        logging.getLogger(__name__).critical(e.message)
        sys.exit(1)

    uvicorn.run(
        "api:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload or settings.reload,
    )


if __name__ == "__main__":
    main()
