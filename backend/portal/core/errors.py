from typing import Optional


class UploadError(Exception):
    """Base class for failures on the upload path. Rendered as a 500 response."""

    default_message = "Upload failed"

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ConfigurationError(UploadError):
    pass


class RequestValidationFailed(UploadError):
    """The form body is missing fields or carries unusable values."""


class UpstreamError(UploadError):
    """GitHub answered with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ProtocolError(UploadError):
    """GitHub answered 2xx but the body lacks the fields we need."""


class BackupError(Exception):
    """Raised inside the Drive backup task only; never leaves it."""
