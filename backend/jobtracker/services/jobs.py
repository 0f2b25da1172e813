from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Mapping

from pydantic import ValidationError
from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from jobtracker.core.errors import (
    FileUploadError,
    JobNotFoundError,
    JobValidationError,
    PersistenceError,
)
from jobtracker.models.job_application import JobApplication, JobStatus
from jobtracker.models.job_file import JobFile
from jobtracker.schemas.job_application import JobApplicationFields
from jobtracker.services.files import (
    IncomingFile,
    job_directory,
    prepare_files,
    remove_uploaded,
    upload_files,
)
from jobtracker.services.webdav import FileStore, WebDAVError

logger = logging.getLogger(__name__)


def _text(values: Mapping[str, str | None], key: str) -> str | None:
    raw = values.get(key)
    if raw is None:
        return None
    s = str(raw).strip()
    return s or None


def _flag(values: Mapping[str, str | None], key: str) -> bool:
    # Only the literal string "true" counts as checked.
    return values.get(key) == "true"


def parse_date(raw: str | None, field: str) -> date | None:
    if raw is None:
        return None
    s = str(raw).strip()
    if not s:
        return None
    try:
        return date.fromisoformat(s)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00")).date()
    except ValueError:
        raise JobValidationError(f"{field} is not a valid date: {s!r}")


def parse_status(raw: str | None) -> JobStatus:
    s = (raw or "").strip()
    if not s:
        return JobStatus.TO_APPLY
    try:
        return JobStatus(s)
    except ValueError:
        allowed = ", ".join(v.value for v in JobStatus)
        raise JobValidationError(f"Invalid status {s!r}; expected one of {allowed}")


def parse_job_form(values: Mapping[str, str | None], *, creating: bool = True) -> JobApplicationFields:
    """
    Turn raw multipart values (camelCase keys) into job fields.

    A new job always starts uncontacted; on update hasBeenContacted follows the same
    literal "true" rule as the other checkboxes.
    """
    company_name = _text(values, "companyName")
    job_title = _text(values, "jobTitle")
    if not company_name:
        raise JobValidationError("companyName is required")
    if not job_title:
        raise JobValidationError("jobTitle is required")

    try:
        return JobApplicationFields(
            company_name=company_name,
            job_title=job_title,
            job_description=_text(values, "jobDescription"),
            job_url=_text(values, "jobUrl"),
            status=parse_status(values.get("status")),
            has_been_contacted=False if creating else _flag(values, "hasBeenContacted"),
            date_submitted=parse_date(values.get("dateSubmitted"), "dateSubmitted"),
            date_of_interview=parse_date(values.get("dateOfInterview"), "dateOfInterview"),
            confirmation_received=_flag(values, "confirmationReceived"),
            rejection_received=_flag(values, "rejectionReceived"),
        )
    except ValidationError as exc:
        raise JobValidationError(str(exc)) from exc


def _columns(fields: JobApplicationFields) -> dict:
    data = fields.model_dump()
    data["status"] = fields.status.value
    return data


def list_jobs(db: Session) -> list[JobApplication]:
    try:
        return (
            db.query(JobApplication)
            .options(selectinload(JobApplication.files))
            .order_by(desc(JobApplication.updated_at), desc(JobApplication.id))
            .all()
        )
    except SQLAlchemyError as exc:
        raise PersistenceError("Could not load job applications") from exc


def get_job(db: Session, job_id: int) -> JobApplication:
    try:
        job = (
            db.query(JobApplication)
            .options(selectinload(JobApplication.files))
            .filter(JobApplication.id == job_id)
            .first()
        )
    except SQLAlchemyError as exc:
        raise PersistenceError(f"Could not load job application {job_id}") from exc
    if not job:
        raise JobNotFoundError()
    return job


def _attach_files(
    db: Session,
    store: FileStore,
    job: JobApplication,
    files: list[IncomingFile],
    *,
    new_job: bool = False,
) -> None:
    """
    Upload files for a job whose row is flushed but not committed, then commit.

    Any failure rolls the transaction back and removes whatever reached the store.
    """
    try:
        paths = upload_files(store, job.id, files, new_job=new_job)
    except FileUploadError:
        db.rollback()
        raise

    try:
        for f, path in zip(files, paths):
            db.add(
                JobFile(
                    job_application_id=job.id,
                    file_name=f.file_name,
                    file_type=f.content_type,
                    size_bytes=f.size,
                    nextcloud_path=path,
                )
            )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        remove_uploaded(store, paths)
        raise PersistenceError("Could not save job files") from exc


def create_job(
    db: Session,
    store: FileStore,
    fields: JobApplicationFields,
    files: list[IncomingFile] | None = None,
) -> JobApplication:
    prepared = prepare_files(files or [])

    job = JobApplication(**_columns(fields))
    try:
        db.add(job)
        db.flush()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError("Could not save job application") from exc

    job_id = job.id
    _attach_files(db, store, job, prepared, new_job=True)
    logger.info("Created job application %s with %d file(s)", job_id, len(prepared))

    return get_job(db, job_id)


def update_job(
    db: Session,
    store: FileStore,
    job_id: int,
    fields: JobApplicationFields,
    files: list[IncomingFile] | None = None,
) -> JobApplication:
    job = get_job(db, job_id)
    prepared = prepare_files(files or [], existing_names=[f.file_name for f in job.files])

    try:
        for k, v in _columns(fields).items():
            setattr(job, k, v)
        job.updated_at = datetime.now(timezone.utc)
        db.flush()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError(f"Could not update job application {job_id}") from exc

    _attach_files(db, store, job, prepared)
    logger.info("Updated job application %s, added %d file(s)", job_id, len(prepared))

    return get_job(db, job_id)


def delete_job(db: Session, store: FileStore, job_id: int) -> None:
    job = get_job(db, job_id)

    if job.files:
        try:
            store.delete(job_directory(job.id))
        except WebDAVError as exc:
            raise FileUploadError(f"Could not remove files of job {job_id}") from exc

    try:
        db.delete(job)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError(f"Could not delete job application {job_id}") from exc
    logger.info("Deleted job application %s", job_id)


def get_job_file(db: Session, job_id: int, file_id: int) -> JobFile:
    job = get_job(db, job_id)
    for f in job.files:
        if f.id == file_id:
            return f
    raise JobNotFoundError("File not found")


def read_job_file(db: Session, store: FileStore, job_id: int, file_id: int) -> tuple[JobFile, bytes]:
    job_file = get_job_file(db, job_id, file_id)
    try:
        return job_file, store.download_file(job_file.nextcloud_path)
    except WebDAVError as exc:
        raise FileUploadError(f"Could not download {job_file.nextcloud_path}") from exc


def delete_job_file(db: Session, store: FileStore, job_id: int, file_id: int) -> None:
    job_file = get_job_file(db, job_id, file_id)

    try:
        store.delete(job_file.nextcloud_path)
    except WebDAVError as exc:
        raise FileUploadError(f"Could not remove {job_file.nextcloud_path}") from exc

    try:
        job_file.application.updated_at = datetime.now(timezone.utc)
        db.delete(job_file)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError(f"Could not delete file {file_id}") from exc
