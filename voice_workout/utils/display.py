import os
import sys
from typing import Optional


class DisplayNotAvailableError(RuntimeError):
    """Raised when the desktop client starts without a display server."""


def missing_display_reason() -> Optional[str]:
    """
    Explain why a window cannot be opened, or return None if it can.

    Windows and macOS always have a display; elsewhere DISPLAY or
    WAYLAND_DISPLAY must be set.
    """
    if sys.platform.startswith(("win32", "cygwin")) or sys.platform == "darwin":
        return None
    if os.environ.get("DISPLAY") or os.environ.get("WAYLAND_DISPLAY"):
        return None
    return (
        "No display server detected. The workout recorder needs an X11 or "
        "Wayland session to open its window."
    )


def ensure_display() -> None:
    reason = missing_display_reason()
    if reason:
        raise DisplayNotAvailableError(reason)
