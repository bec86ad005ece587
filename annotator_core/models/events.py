"""
Event models for input handed to the annotation tools.
"""

from enum import Enum
from typing import Optional, Tuple
from pydantic import BaseModel, Field


class EventKind(str, Enum):
    """Kind of input events."""

    PRESS = "press"
    HELD = "held"
    RELEASE = "release"
    WHEEL = "wheel"
    KEY = "key"


class MouseButton(str, Enum):
    """Mouse buttons the tools react to."""

    LEFT = "left"
    RIGHT = "right"


class ToolEvent(BaseModel):
    """One input event. Mouse positions are in view coordinates."""

    kind: EventKind
    mouse_pos: Optional[Tuple[int, int]] = None
    button: Optional[MouseButton] = None
    key: Optional[str] = None  # e.g. 'Delete', 'Up', 'a'
    wheel_delta: float = 0.0
    ctrl: bool = False
    shift: bool = False
    alt: bool = False

    @classmethod
    def press(cls, mouse_pos: Tuple[int, int], button: MouseButton = MouseButton.LEFT, **kwargs) -> "ToolEvent":
        return cls(kind=EventKind.PRESS, mouse_pos=mouse_pos, button=button, **kwargs)

    @classmethod
    def held(cls, mouse_pos: Tuple[int, int], button: MouseButton = MouseButton.LEFT, **kwargs) -> "ToolEvent":
        return cls(kind=EventKind.HELD, mouse_pos=mouse_pos, button=button, **kwargs)

    @classmethod
    def release(cls, mouse_pos: Tuple[int, int], button: MouseButton = MouseButton.LEFT, **kwargs) -> "ToolEvent":
        return cls(kind=EventKind.RELEASE, mouse_pos=mouse_pos, button=button, **kwargs)

    @classmethod
    def wheel(cls, wheel_delta: float, mouse_pos: Optional[Tuple[int, int]] = None) -> "ToolEvent":
        return cls(kind=EventKind.WHEEL, wheel_delta=wheel_delta, mouse_pos=mouse_pos)

    @classmethod
    def key_pressed(cls, key: str, **kwargs) -> "ToolEvent":
        return cls(kind=EventKind.KEY, key=key, **kwargs)


class ImageRequest(BaseModel):
    """Request to open an image, e.g. sent from another thread."""

    file_path: str
    requested_by: Optional[str] = Field(default=None, description="Name of the sender")
