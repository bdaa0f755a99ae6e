"""Entry point for running XOEngine via ``python -m xoengine``."""

from __future__ import annotations

import logging
import os

import uvicorn


def main() -> None:
    """Start the FastAPI-powered tic-tac-toe web server."""

    level = os.environ.get("XOENGINE_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    host = os.environ.get("XOENGINE_HOST", "0.0.0.0")
    port = int(os.environ.get("XOENGINE_PORT", "8000"))
    uvicorn.run("xoengine.ui:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    main()
