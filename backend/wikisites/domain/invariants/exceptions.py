class PlatformError(Exception):
    """Base class for errors that map onto an HTTP response."""
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {
            "error": type(self).__name__,
            "message": self.message,
        }


class ValidationError(PlatformError):
    status_code = 400


class AuthenticationRequired(PlatformError):
    status_code = 401


class PermissionDenied(PlatformError):
    status_code = 403


class NotFound(PlatformError):
    status_code = 404


class Conflict(PlatformError):
    status_code = 409
