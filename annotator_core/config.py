"""
Configuration management for the annotation core.
"""

import os
import tempfile
from typing import Optional

from annotator_core.geometry import Shape


class Config:
    """Configuration class for annotation tool settings."""

    # Service Configuration
    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "annotator_core")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # History Configuration
    HISTORY_CAPACITY: int = int(os.getenv("HISTORY_CAPACITY", "100"))

    # Zoom Configuration
    # One wheel event changes the zoom box size by at most ZOOM_STEP
    ZOOM_STEP: float = float(os.getenv("ZOOM_STEP", "0.1"))
    ZOOM_WHEEL_CLIP: float = float(os.getenv("ZOOM_WHEEL_CLIP", "1.0"))
    MIN_ZOOM_SIZE: int = int(os.getenv("MIN_ZOOM_SIZE", "10"))

    # Label Configuration
    N_COLOR_CANDIDATES: int = int(os.getenv("N_COLOR_CANDIDATES", "10"))
    DEFAULT_LABEL: str = os.getenv("DEFAULT_LABEL", "foreground")

    # Window Configuration
    WINDOW_WIDTH: int = int(os.getenv("WINDOW_WIDTH", "512"))
    WINDOW_HEIGHT: int = int(os.getenv("WINDOW_HEIGHT", "512"))

    # Export Configuration
    EXPORT_FOLDER: Optional[str] = os.getenv("EXPORT_FOLDER")

    @classmethod
    def get_window_shape(cls) -> Shape:
        """Get the initial window shape."""
        return Shape(w=cls.WINDOW_WIDTH, h=cls.WINDOW_HEIGHT)

    @classmethod
    def get_export_folder(cls) -> str:
        """Get the folder annotation exports are written to.

        Supports two modes:
        1. Explicit: Uses EXPORT_FOLDER environment variable
        2. Fallback: A folder named after the service in the temp directory
        """
        if cls.EXPORT_FOLDER:
            return cls.EXPORT_FOLDER
        return os.path.join(tempfile.gettempdir(), cls.SERVICE_NAME)
