from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from jobtracker.models.job_application import JobStatus
from jobtracker.schemas.job_file import JobFileOut

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class JobApplicationFields(BaseModel):
    """Scalar job fields after the multipart form has been normalized."""

    company_name: str
    job_title: str
    job_description: Optional[str] = None
    job_url: Optional[str] = None
    status: JobStatus = JobStatus.TO_APPLY
    has_been_contacted: bool = False
    date_submitted: Optional[date] = None
    date_of_interview: Optional[date] = None
    confirmation_received: bool = False
    rejection_received: bool = False

    model_config = _CAMEL


class JobApplicationOut(BaseModel):
    id: int
    company_name: str
    job_title: str
    job_description: Optional[str]
    job_url: Optional[str]
    status: str
    has_been_contacted: bool
    date_submitted: Optional[date]
    date_of_interview: Optional[date]
    confirmation_received: bool
    rejection_received: bool
    created_at: datetime
    updated_at: datetime
    files: List[JobFileOut] = []

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class DeletedOut(BaseModel):
    deleted: bool = True
