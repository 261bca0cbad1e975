"""Entry point for running the Othello server via ``python -m othello``."""

from __future__ import annotations

import logging
import os

import uvicorn


def main() -> None:
    """Start the FastAPI-powered Othello room server."""

    host = os.environ.get("OTHELLO_HOST", "0.0.0.0")
    port = int(os.environ.get("OTHELLO_PORT", "8000"))
    log_level = os.environ.get("OTHELLO_LOG_LEVEL", "info").lower()

    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run("othello.server:app", host=host, port=port, reload=False, log_level=log_level)


if __name__ == "__main__":
    main()
