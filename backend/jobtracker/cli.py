"""
Command-line front end for the job tracker API.

Usage:
  jobtracker --api-url http://localhost:8000 list
  jobtracker add --company Acme --title Engineer --status APPLIED \
    --date-submitted 2024-03-05 --file resume.pdf --file cover.pdf
  jobtracker show 12
"""

from __future__ import annotations

import argparse
import json
import os
import sys

import httpx

from jobtracker.client.api import JobTrackerClient, JobTrackerClientError
from jobtracker.client.form import FormFile, JobForm, JobFormPayload, JobFormState, format_date
from jobtracker.core.logging import configure_logging

DEFAULT_API_URL = "http://localhost:8000"


def _print_job_line(job: dict) -> None:
    files = job.get("files") or []
    print(
        f"{job['id']:>5}  {job.get('status', ''):<20} {job.get('companyName', '')} - {job.get('jobTitle', '')}"
        f"  submitted={format_date(job.get('dateSubmitted')) or '-'} files={len(files)}"
    )


def _cmd_list(client: JobTrackerClient, args: argparse.Namespace) -> int:
    jobs = client.list_jobs()
    if not jobs:
        print("No job applications yet.")
        return 0
    for job in jobs:
        _print_job_line(job)
    return 0


def _cmd_show(client: JobTrackerClient, args: argparse.Namespace) -> int:
    job = client.get_job(args.job_id)
    print(json.dumps(job, indent=2))
    return 0


def _cmd_add(client: JobTrackerClient, args: argparse.Namespace) -> int:
    state = JobFormState(
        company_name=args.company,
        job_title=args.title,
        job_url=args.url or "",
        job_description=args.description or "",
        status=args.status or "",
        date_submitted=args.date_submitted or "",
        date_of_interview=args.date_of_interview or "",
        confirmation_received=args.confirmation,
        rejection_received=args.rejection,
        files=[FormFile.from_path(p) for p in args.file or []],
    )
    form = JobForm(state=state)
    created: dict = {}

    def _submit(payload: JobFormPayload) -> None:
        created.update(client.create_job(payload))

    if not form.submit(_submit):
        print("Failed to create job application; see log for details.", file=sys.stderr)
        return 1
    _print_job_line(created)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="jobtracker", description="Track job applications.")
    p.add_argument("--api-url", default=os.getenv("JOBTRACKER_API_URL", DEFAULT_API_URL))
    p.add_argument("--log-level", default=os.getenv("LOG_LEVEL", "WARNING"))
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List job applications, most recently updated first.")

    show = sub.add_parser("show", help="Print one job application as JSON.")
    show.add_argument("job_id", type=int)

    add = sub.add_parser("add", help="Create a job application.")
    add.add_argument("--company", required=True)
    add.add_argument("--title", required=True)
    add.add_argument("--url")
    add.add_argument("--description")
    add.add_argument("--status", choices=["TO_APPLY", "APPLIED", "INTERVIEW_SCHEDULED", "ARCHIVED"])
    add.add_argument("--date-submitted", help="YYYY-MM-DD")
    add.add_argument("--date-of-interview", help="YYYY-MM-DD")
    add.add_argument("--confirmation", action="store_true", help="Confirmation received.")
    add.add_argument("--rejection", action="store_true", help="Rejection received (archives the job).")
    add.add_argument("--file", action="append", help="Attach a file; repeat for several.")
    return p


_COMMANDS = {
    "list": _cmd_list,
    "show": _cmd_show,
    "add": _cmd_add,
}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    with JobTrackerClient(args.api_url) as client:
        try:
            return _COMMANDS[args.command](client, args)
        except (JobTrackerClientError, httpx.HTTPError) as e:
            print(f"[jobtracker] request failed: {e}", file=sys.stderr)
            return 1


if __name__ == "__main__":
    raise SystemExit(main())
