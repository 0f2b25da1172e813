import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from jobtracker.core.database import get_db
from jobtracker.core.errors import JobTrackerError
from jobtracker.dependencies.forms import get_job_form_values, get_uploaded_files
from jobtracker.dependencies.storage import get_file_store
from jobtracker.schemas.job_application import DeletedOut, JobApplicationOut
from jobtracker.services import jobs as jobs_service
from jobtracker.services.files import IncomingFile
from jobtracker.services.webdav import FileStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/jobs", tags=["jobs"])


def _failure(message: str, exc: JobTrackerError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s: %s", message, exc.message, exc_info=exc)
    else:
        logger.warning("%s: %s", message, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message, "code": exc.code, "message": exc.message},
    )


@router.get("", response_model=list[JobApplicationOut])
def list_jobs(db: Session = Depends(get_db)):
    try:
        return jobs_service.list_jobs(db)
    except JobTrackerError as exc:
        return _failure("Failed to fetch jobs", exc)


@router.post("", response_model=JobApplicationOut)
def create_job(
    values: dict = Depends(get_job_form_values),
    files: list[IncomingFile] = Depends(get_uploaded_files),
    db: Session = Depends(get_db),
    store: FileStore = Depends(get_file_store),
):
    try:
        fields = jobs_service.parse_job_form(values, creating=True)
        return jobs_service.create_job(db, store, fields, files)
    except JobTrackerError as exc:
        return _failure("Failed to create job application", exc)


@router.get("/{job_id}", response_model=JobApplicationOut)
def get_job(job_id: int, db: Session = Depends(get_db)):
    try:
        return jobs_service.get_job(db, job_id)
    except JobTrackerError as exc:
        return _failure("Failed to fetch job application", exc)


@router.put("/{job_id}", response_model=JobApplicationOut)
def update_job(
    job_id: int,
    values: dict = Depends(get_job_form_values),
    files: list[IncomingFile] = Depends(get_uploaded_files),
    db: Session = Depends(get_db),
    store: FileStore = Depends(get_file_store),
):
    try:
        fields = jobs_service.parse_job_form(values, creating=False)
        return jobs_service.update_job(db, store, job_id, fields, files)
    except JobTrackerError as exc:
        return _failure("Failed to update job application", exc)


@router.delete("/{job_id}", response_model=DeletedOut)
def delete_job(
    job_id: int,
    db: Session = Depends(get_db),
    store: FileStore = Depends(get_file_store),
):
    try:
        jobs_service.delete_job(db, store, job_id)
    except JobTrackerError as exc:
        return _failure("Failed to delete job application", exc)
    return {"deleted": True}


@router.get("/{job_id}/files/{file_id}")
def download_job_file(
    job_id: int,
    file_id: int,
    db: Session = Depends(get_db),
    store: FileStore = Depends(get_file_store),
):
    try:
        job_file, data = jobs_service.read_job_file(db, store, job_id, file_id)
    except JobTrackerError as exc:
        return _failure("Failed to fetch job file", exc)

    disposition = f"attachment; filename*=UTF-8''{quote(job_file.file_name)}"
    return Response(
        content=data,
        media_type=job_file.file_type or "application/octet-stream",
        headers={"Content-Disposition": disposition},
    )


@router.delete("/{job_id}/files/{file_id}", response_model=DeletedOut)
def delete_job_file(
    job_id: int,
    file_id: int,
    db: Session = Depends(get_db),
    store: FileStore = Depends(get_file_store),
):
    try:
        jobs_service.delete_job_file(db, store, job_id, file_id)
    except JobTrackerError as exc:
        return _failure("Failed to delete job file", exc)
    return {"deleted": True}
