from minbar.engine.errors import (
    InvalidSession,
    MinbarError,
    OutOfRange,
    SessionAlreadyActive,
)
from minbar.engine.host import SessionHost
from minbar.engine.input import InputRouter
from minbar.engine.segments import Segment, SegmentKind
from minbar.engine.session import Session, ViewMode
from minbar.engine.themes import THEMES, Theme, theme_for
from minbar.engine.view import format_clock, render_state

__all__ = [
    "InputRouter",
    "InvalidSession",
    "MinbarError",
    "OutOfRange",
    "Segment",
    "SegmentKind",
    "Session",
    "SessionAlreadyActive",
    "SessionHost",
    "THEMES",
    "Theme",
    "ViewMode",
    "format_clock",
    "render_state",
    "theme_for",
]
