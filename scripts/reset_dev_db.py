"""
Dev-only reset script for the job tracker.

What it does:
- Deletes the remote folder of every job that has files (best-effort).
- Deletes all rows from job_files and job_applications.

Guardrails:
- Requires ENV=dev
- Requires confirmation prompt unless --yes is passed
- Logs actions to logs/ with a timestamped file
"""

from __future__ import annotations

import argparse
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from jobtracker.core.config import settings
from jobtracker.core.database import SessionLocal
from jobtracker.models.job_application import JobApplication
from jobtracker.models.job_file import JobFile
from jobtracker.services.files import job_directory
from jobtracker.services.webdav import WebDAVError, get_file_store

REPO_ROOT = Path(__file__).resolve().parents[1]


def utc_now_stamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")


def iter_job_ids_with_files(db) -> list[int]:
    rows = db.query(JobFile.job_application_id).distinct().order_by(JobFile.job_application_id).all()
    return [job_id for (job_id,) in rows]


def log_write(fp: Path, lines: Iterable[str]) -> None:
    fp.parent.mkdir(parents=True, exist_ok=True)
    with fp.open("a", encoding="utf-8") as f:
        for line in lines:
            f.write(line.rstrip("\n") + "\n")


def main() -> int:
    parser = argparse.ArgumentParser(description="Dev reset: remote file cleanup + delete job rows.")
    parser.add_argument("--yes", action="store_true", help="Skip confirmation prompt.")
    args = parser.parse_args()

    if (settings.ENV or "").strip().lower() != "dev":
        print(f"Refusing to run: ENV must be 'dev' (got {settings.ENV!r})")
        return 2

    log_path = REPO_ROOT / "logs" / f"reset_dev_db_{utc_now_stamp()}.log"
    log_write(log_path, [f"[start] {datetime.now(timezone.utc).isoformat()} env={settings.ENV}"])

    if not args.yes:
        resp = input(
            "WARNING: This will DELETE every job folder on the file store and all job rows.\n\n"
            "Type RESET to continue: "
        ).strip()
        if resp != "RESET":
            print("Cancelled.")
            log_write(log_path, ["[cancelled] user did not confirm"])
            return 1

    deleted = 0
    delete_failed = 0
    store = get_file_store()

    with SessionLocal() as db:
        job_ids = iter_job_ids_with_files(db)
        log_write(log_path, [f"[files] jobs_with_files={len(job_ids)} webdav={settings.WEBDAV_URL or 'memory'}"])

        for job_id in job_ids:
            folder = job_directory(job_id)
            try:
                store.delete(folder)
                deleted += 1
                log_write(log_path, [f"[files] deleted folder={folder}"])
            except WebDAVError as e:
                delete_failed += 1
                log_write(log_path, [f"[files] delete_failed folder={folder} err={e}"])

        files_removed = db.query(JobFile).delete()
        jobs_removed = db.query(JobApplication).delete()
        db.commit()
        log_write(log_path, [f"[db] job_files={files_removed} job_applications={jobs_removed}"])

    log_write(
        log_path,
        [
            f"[done] folders_deleted={deleted} folders_failed={delete_failed}",
            f"[done] {datetime.now(timezone.utc).isoformat()}",
        ],
    )
    print(f"Done. Log written to: {log_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
