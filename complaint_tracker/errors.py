"""Error kinds raised by services and rendered as ``{"error": message}``."""


class ComplaintTrackerError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ComplaintTrackerError):
    status_code = 400


class UploadRejected(ValidationError):
    """Disallowed file type, oversized file, or too many files."""


class Unauthenticated(ComplaintTrackerError):
    status_code = 401


class Forbidden(ComplaintTrackerError):
    status_code = 403


class NotFound(ComplaintTrackerError):
    status_code = 404


class Conflict(ComplaintTrackerError):
    status_code = 409


class Unavailable(ComplaintTrackerError):
    status_code = 503
