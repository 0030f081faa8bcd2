from typing import Optional


class MicrophoneUnavailableError(RuntimeError):
    """Raised when no input device can be opened, e.g. permission was denied."""


class APIError(Exception):
    """A failed call to the API, with a message fit for display."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)
