"""Exceptions for the Botany bounded context."""


class RecognizerUnavailableError(Exception):
    """Raised when the external recognizer is unreachable or misbehaves."""

    pass


class UnknownImageError(Exception):
    """Raised when a recognition request names an image that does not exist."""

    def __init__(self, key: str):
        super().__init__(f"Unknown image: {key}")
        self.key = key
