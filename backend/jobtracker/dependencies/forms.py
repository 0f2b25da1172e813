from __future__ import annotations

from typing import List, Optional

from fastapi import File, Form, UploadFile

from jobtracker.services.files import IncomingFile


def get_job_form_values(
    company_name: Optional[str] = Form(default=None, alias="companyName"),
    job_title: Optional[str] = Form(default=None, alias="jobTitle"),
    job_description: Optional[str] = Form(default=None, alias="jobDescription"),
    job_url: Optional[str] = Form(default=None, alias="jobUrl"),
    status: Optional[str] = Form(default=None),
    has_been_contacted: Optional[str] = Form(default=None, alias="hasBeenContacted"),
    date_submitted: Optional[str] = Form(default=None, alias="dateSubmitted"),
    date_of_interview: Optional[str] = Form(default=None, alias="dateOfInterview"),
    confirmation_received: Optional[str] = Form(default=None, alias="confirmationReceived"),
    rejection_received: Optional[str] = Form(default=None, alias="rejectionReceived"),
) -> dict[str, Optional[str]]:
    return {
        "companyName": company_name,
        "jobTitle": job_title,
        "jobDescription": job_description,
        "jobUrl": job_url,
        "status": status,
        "hasBeenContacted": has_been_contacted,
        "dateSubmitted": date_submitted,
        "dateOfInterview": date_of_interview,
        "confirmationReceived": confirmation_received,
        "rejectionReceived": rejection_received,
    }


def get_uploaded_files(
    files: Optional[List[UploadFile]] = File(default=None),
) -> list[IncomingFile]:
    out: list[IncomingFile] = []
    for upload in files or []:
        data = upload.file.read()
        out.append(
            IncomingFile(
                file_name=upload.filename or "",
                content_type=upload.content_type,
                data=data,
            )
        )
    return out
