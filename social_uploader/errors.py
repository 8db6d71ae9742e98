"""Exception hierarchy for upload orchestration."""


class UploaderError(Exception):
    """Base error for the uploader package."""


class ConfigurationError(UploaderError):
    """Raised when components are wired with a structurally invalid setup."""


class ClipValidationError(UploaderError):
    """Raised when a clip fails validation. Fatal for that clip only."""


class UnknownPlatformError(UploaderError):
    """Raised when no uploader is registered for a platform identifier."""

    def __init__(self, platform: str):
        super().__init__(f"Unknown platform: {platform}")
        self.platform = platform


class UploadError(UploaderError):
    """Transient upload failure, eligible for retry."""


class AuthenticationError(UploadError):
    """Platform authentication failed; retried with re-authentication."""
