"""MindCanvas - a freeform mind map canvas for GNOME."""

import logging
import os
from typing import Optional

__version__ = "1.0.0"
__app_id__ = "io.github.mindcanvas.MindCanvas"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None):
    """Configure root logging from MINDCANVAS_LOG_LEVEL (default WARNING)."""
    name = (level or os.environ.get("MINDCANVAS_LOG_LEVEL") or "WARNING").upper()
    logging.basicConfig(level=getattr(logging, name, logging.WARNING), format=LOG_FORMAT)
