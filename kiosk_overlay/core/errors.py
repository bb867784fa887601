"""Exception types shared by the overlay orchestration and generation paths."""

__all__ = ["InvalidArgument", "OverlayTransportError", "GenerationError"]


class InvalidArgument(ValueError):
    """Raised for a malformed overlay request before any external call is made."""


class OverlayTransportError(Exception):
    """Raised by transports when the generation service cannot be reached or parsed."""


class GenerationError(Exception):
    """Failure inside the overlay generation service, carrying an HTTP status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
