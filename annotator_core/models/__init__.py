"""
Common data models for the annotation tools.
"""

from .events import (
    EventKind,
    MouseButton,
    ToolEvent,
    ImageRequest,
)

__all__ = [
    "EventKind",
    "MouseButton",
    "ToolEvent",
    "ImageRequest",
]
