"""
Static Frontend

Serves the prebuilt frontend from the same process as the API.
"""

from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from src.core.config import settings
from src.core.logger import get_logger

logger = get_logger(__name__)


def mount_frontend(app: FastAPI, directory: Optional[str] = None) -> bool:
    """
    Mount the frontend directory at ``/`` if it exists.

    Must run after the API routers are included; the mount matches every path.

    Returns:
        bool: True if the frontend was mounted
    """
    static_dir = Path(directory or settings.static__dir)
    if not static_dir.is_dir():
        logger.info("Static frontend skipped (%s not found)", static_dir)
        return False

    app.mount("/", StaticFiles(directory=static_dir, html=True), name="frontend")
    logger.info("Static frontend served from %s", static_dir.resolve())
    return True
