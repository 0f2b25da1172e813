from jobtracker.client.api import JobTrackerClient, JobTrackerClientError
from jobtracker.client.form import FormFile, JobForm, JobFormPayload, JobFormState, format_date

__all__ = [
    "FormFile",
    "JobForm",
    "JobFormPayload",
    "JobFormState",
    "JobTrackerClient",
    "JobTrackerClientError",
    "format_date",
]
