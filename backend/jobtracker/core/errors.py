from __future__ import annotations


class JobTrackerError(Exception):
    """Base class for failures surfaced by the job endpoints."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str = "Request failed") -> None:
        super().__init__(message)
        self.message = message


class JobValidationError(JobTrackerError):
    """The submitted form could not be turned into a job record."""

    status_code = 422
    code = "VALIDATION_ERROR"


class JobNotFoundError(JobTrackerError):
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, message: str = "Job application not found") -> None:
        super().__init__(message)


class PersistenceError(JobTrackerError):
    """Raised when the database rejects a read or write."""

    status_code = 500
    code = "PERSISTENCE_ERROR"


class FileUploadError(JobTrackerError):
    """Raised when the remote file store rejects an upload or download."""

    status_code = 502
    code = "UPLOAD_ERROR"
