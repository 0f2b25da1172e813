"""
Job form state for creating and editing job applications.

One `JobFormState` owns every field the user can edit. `JobForm` adds the
submission lifecycle (busy flag, submit label) on top of it and hands a
multipart-ready `JobFormPayload` to whatever handler the caller supplies.
"""
from __future__ import annotations

import logging
import mimetypes
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Mapping

logger = logging.getLogger(__name__)

ARCHIVED = "ARCHIVED"
TO_APPLY = "TO_APPLY"


def format_date(value: date | datetime | str | None) -> str:
    """Render a stored date as `YYYY-MM-DD`, or `""` when there is none or it cannot be parsed."""
    if value is None or value == "":
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    s = str(value).strip()
    try:
        return date.fromisoformat(s).isoformat()
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        logger.warning("Ignoring unparseable date %r", s)
        return ""


@dataclass(frozen=True)
class FormFile:
    name: str
    data: bytes
    content_type: str = "application/octet-stream"

    @classmethod
    def from_path(cls, path: str | Path) -> "FormFile":
        p = Path(path)
        guessed, _ = mimetypes.guess_type(p.name)
        return cls(name=p.name, data=p.read_bytes(), content_type=guessed or "application/octet-stream")


@dataclass
class JobFormPayload:
    fields: dict[str, str]
    files: list[FormFile] = field(default_factory=list)

    def as_multipart(self) -> tuple[dict[str, str], list[tuple[str, tuple[str, bytes, str]]]]:
        """`(data, files)` arguments for an httpx request."""
        return dict(self.fields), [("files", (f.name, f.data, f.content_type)) for f in self.files]


@dataclass
class JobFormState:
    company_name: str = ""
    job_title: str = ""
    job_url: str = ""
    job_description: str = ""
    status: str = ""
    has_been_contacted: bool = False
    date_submitted: str = ""
    date_of_interview: str = ""
    confirmation_received: bool = False
    rejection_received: bool = False
    files: list[FormFile] = field(default_factory=list)

    @classmethod
    def from_job(cls, job: Mapping[str, Any] | None) -> "JobFormState":
        if not job:
            return cls()
        return cls(
            company_name=job.get("companyName") or "",
            job_title=job.get("jobTitle") or "",
            job_url=job.get("jobUrl") or "",
            job_description=job.get("jobDescription") or "",
            status=job.get("status") or "",
            has_been_contacted=bool(job.get("hasBeenContacted")),
            date_submitted=format_date(job.get("dateSubmitted")),
            date_of_interview=format_date(job.get("dateOfInterview")),
            confirmation_received=bool(job.get("confirmationReceived")),
            rejection_received=bool(job.get("rejectionReceived")),
        )

    def resolved_status(self) -> str:
        # A rejection always archives the job, whatever status was picked.
        if self.rejection_received:
            return ARCHIVED
        return self.status or TO_APPLY

    def to_payload(self) -> JobFormPayload:
        fields = {
            "companyName": self.company_name,
            "jobTitle": self.job_title,
            "jobUrl": self.job_url,
            "jobDescription": self.job_description,
            "status": self.resolved_status(),
            "hasBeenContacted": str(self.has_been_contacted).lower(),
            "dateSubmitted": self.date_submitted,
            "dateOfInterview": self.date_of_interview,
            "confirmationReceived": str(self.confirmation_received).lower(),
            "rejectionReceived": str(self.rejection_received).lower(),
        }
        return JobFormPayload(fields=fields, files=list(self.files))


class JobForm:
    def __init__(self, job: Mapping[str, Any] | None = None, state: JobFormState | None = None) -> None:
        self.job = job
        self.state = state if state is not None else JobFormState.from_job(job)
        self.is_submitting = False

    @property
    def disabled(self) -> bool:
        return self.is_submitting

    @property
    def submit_label(self) -> str:
        if self.is_submitting:
            return "Saving..."
        return "Update" if self.job else "Create"

    def submit(self, on_submit: Callable[[JobFormPayload], Any]) -> bool:
        """
        Build the payload and pass it to `on_submit`.

        Handler errors are logged, not raised. Returns True when the handler finished
        without raising.
        """
        self.is_submitting = True
        try:
            on_submit(self.state.to_payload())
            return True
        except Exception:
            logger.exception("Error submitting job form")
            return False
        finally:
            self.is_submitting = False
