from __future__ import annotations

import logging
import posixpath
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, replace
from typing import Iterable

from jobtracker.core.config import settings
from jobtracker.core.errors import FileUploadError, JobValidationError
from jobtracker.services.webdav import FileStore, WebDAVError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IncomingFile:
    file_name: str
    content_type: str | None
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


# Names the store would resolve to the parent or the job folder itself.
_RESERVED_NAMES = {"", ".", ".."}


def sanitize_file_name(raw: str | None) -> str:
    name = (raw or "").replace("/", "_").replace("\\", "_").strip()
    if name in _RESERVED_NAMES:
        return "file"
    return name


def dedupe_file_name(name: str, taken: set[str]) -> str:
    """
    `cv.pdf` -> `cv (1).pdf` -> `cv (2).pdf` ... until the name is free.
    """
    if name not in taken:
        return name
    stem, ext = posixpath.splitext(name)
    n = 1
    while f"{stem} ({n}){ext}" in taken:
        n += 1
    return f"{stem} ({n}){ext}"


def prepare_files(files: Iterable[IncomingFile], existing_names: Iterable[str] = ()) -> list[IncomingFile]:
    """
    Drop empty uploads, enforce the size cap and give every file a unique name within its job.
    """
    taken = set(existing_names)
    out: list[IncomingFile] = []
    for f in files:
        if f.size == 0:
            continue
        if f.size > settings.MAX_UPLOAD_BYTES:
            max_mb = settings.MAX_UPLOAD_BYTES / (1024 * 1024)
            raise JobValidationError(f"File {f.file_name!r} is too large. Max allowed size is {max_mb:.1f} MB.")
        name = dedupe_file_name(sanitize_file_name(f.file_name), taken)
        taken.add(name)
        out.append(replace(f, file_name=name))
    return out


def job_directory(job_id: int) -> str:
    return f"{settings.WEBDAV_ROOT}/{job_id}"


def job_file_path(job_id: int, file_name: str) -> str:
    return f"{job_directory(job_id)}/{file_name}"


def remove_uploaded(store: FileStore, paths: Iterable[str]) -> None:
    for path in paths:
        try:
            store.delete(path)
        except WebDAVError:
            logger.warning("Could not remove uploaded file %s", path, exc_info=True)


def upload_files(
    store: FileStore,
    job_id: int,
    files: list[IncomingFile],
    *,
    new_job: bool = False,
) -> list[str]:
    """
    Upload every file concurrently and return their paths in input order.

    Either every file ends up on the store or none does: when any upload fails the
    ones that succeeded are deleted again and FileUploadError is raised. For a
    `new_job` the job folder itself is removed as well.
    """
    if not files:
        return []

    paths = [job_file_path(job_id, f.file_name) for f in files]
    try:
        store.make_directories(job_directory(job_id))
    except WebDAVError as exc:
        raise FileUploadError(f"Could not create remote folder for job {job_id}") from exc

    workers = max(1, min(settings.MAX_CONCURRENT_UPLOADS, len(files)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="upload") as pool:
        futures = {
            pool.submit(store.upload_file, f.data, path, f.content_type): path
            for f, path in zip(files, paths)
        }
        wait(futures)

    uploaded: list[str] = []
    first_error: BaseException | None = None
    for future, path in futures.items():
        exc = future.exception()
        if exc is None:
            uploaded.append(path)
            continue
        logger.error("Upload to %s failed: %s", path, exc)
        if first_error is None:
            first_error = exc

    if first_error is not None:
        remove_uploaded(store, [job_directory(job_id)] if new_job else uploaded)
        raise FileUploadError(f"Failed to upload files for job {job_id}") from first_error

    return paths
