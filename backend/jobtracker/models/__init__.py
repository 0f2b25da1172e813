from jobtracker.models.job_application import JobApplication, JobStatus
from jobtracker.models.job_file import JobFile

__all__ = ["JobApplication", "JobFile", "JobStatus"]
