from __future__ import annotations

from datetime import date, datetime

import pytest

from jobtracker.client.form import FormFile, JobForm, JobFormState, format_date


def test_format_date():
    assert format_date(date(2024, 3, 5)) == "2024-03-05"
    assert format_date(datetime(2024, 3, 5, 23, 59)) == "2024-03-05"
    assert format_date("2024-03-05") == "2024-03-05"
    assert format_date("2024-03-05T08:00:00Z") == "2024-03-05"
    assert format_date(None) == ""
    assert format_date("") == ""


@pytest.mark.parametrize("status", ["", "APPLIED", "INTERVIEW_SCHEDULED"])
def test_rejection_forces_archived(status):
    state = JobFormState(company_name="Acme", job_title="Engineer", status=status, rejection_received=True)
    assert state.to_payload().fields["status"] == "ARCHIVED"


def test_unset_status_defaults_to_to_apply():
    state = JobFormState(company_name="Acme", job_title="Engineer")
    assert state.to_payload().fields["status"] == "TO_APPLY"


def test_chosen_status_is_kept_without_rejection():
    state = JobFormState(company_name="Acme", job_title="Engineer", status="APPLIED")
    assert state.to_payload().fields["status"] == "APPLIED"


def test_payload_serializes_checkboxes_and_files():
    cv = FormFile(name="cv.pdf", data=b"pdf", content_type="application/pdf")
    state = JobFormState(
        company_name="Acme",
        job_title="Engineer",
        confirmation_received=True,
        files=[cv],
    )
    payload = state.to_payload()
    assert payload.fields["confirmationReceived"] == "true"
    assert payload.fields["rejectionReceived"] == "false"

    data, files = payload.as_multipart()
    assert data["companyName"] == "Acme"
    assert files == [("files", ("cv.pdf", b"pdf", "application/pdf"))]


def test_from_job_prefills_fields():
    record = {
        "id": 4,
        "companyName": "Acme",
        "jobTitle": "Engineer",
        "jobUrl": None,
        "jobDescription": "Build things",
        "status": "APPLIED",
        "dateSubmitted": "2024-03-05",
        "dateOfInterview": None,
        "confirmationReceived": True,
        "rejectionReceived": False,
    }
    state = JobFormState.from_job(record)
    assert state.company_name == "Acme"
    assert state.job_url == ""
    assert state.date_submitted == "2024-03-05"
    assert state.date_of_interview == ""
    assert state.confirmation_received is True
    assert state.rejection_received is False
    assert state.files == []


def test_from_job_without_record_is_blank():
    assert JobFormState.from_job(None) == JobFormState()


def test_form_file_from_path(tmp_path):
    p = tmp_path / "resume.pdf"
    p.write_bytes(b"%PDF")
    f = FormFile.from_path(p)
    assert f.name == "resume.pdf"
    assert f.data == b"%PDF"
    assert f.content_type == "application/pdf"


def test_submit_labels_and_busy_state():
    form = JobForm()
    assert form.submit_label == "Create"
    assert JobForm(job={"id": 1, "companyName": "Acme"}).submit_label == "Update"

    seen = {}

    def handler(payload):
        seen["busy"] = form.is_submitting
        seen["disabled"] = form.disabled
        seen["label"] = form.submit_label
        seen["status"] = payload.fields["status"]

    form.state.company_name = "Acme"
    form.state.job_title = "Engineer"
    assert form.submit(handler) is True
    assert seen == {"busy": True, "disabled": True, "label": "Saving...", "status": "TO_APPLY"}
    assert form.is_submitting is False


def test_submit_logs_handler_errors_and_reenables(caplog):
    form = JobForm(state=JobFormState(company_name="Acme", job_title="Engineer"))

    def handler(payload):
        raise RuntimeError("server said no")

    with caplog.at_level("ERROR"):
        assert form.submit(handler) is False
    assert form.is_submitting is False
    assert "Error submitting job form" in caplog.text


def test_format_date_ignores_unparseable_values():
    assert format_date("not a date") == ""
    state = JobFormState.from_job({"companyName": "Acme", "jobTitle": "Engineer", "dateSubmitted": "someday"})
    assert state.date_submitted == ""


def test_contacted_flag_round_trips_through_payload():
    state = JobFormState.from_job({"companyName": "Acme", "jobTitle": "Engineer", "hasBeenContacted": True})
    assert state.has_been_contacted is True
    assert state.to_payload().fields["hasBeenContacted"] == "true"
    assert JobFormState().to_payload().fields["hasBeenContacted"] == "false"
