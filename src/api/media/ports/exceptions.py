"""Exceptions for the Media bounded context."""


class UnsupportedMediaTypeError(Exception):
    """Raised when an upload is declared as anything but JPEG or PNG."""

    pass


class ImageTooLargeError(Exception):
    """Raised when an upload exceeds the configured size cap."""

    pass


class EmptyImageError(Exception):
    """Raised when an upload carries no bytes."""

    pass


class ObjectStoreError(Exception):
    """Raised when the object store fails for any reason but a missing key."""

    pass


class ImageMetadataWriteError(Exception):
    """Raised when an image was stored but its metadata row was not written.

    The object exists in the bucket without a matching ``images`` row. The
    orphaned key is carried on the exception and logged so the two can be
    reconciled by hand.
    """

    def __init__(self, message: str, key: str):
        super().__init__(message)
        self.key = key
