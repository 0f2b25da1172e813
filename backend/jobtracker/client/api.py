from __future__ import annotations

import logging
from typing import Any

import httpx

from jobtracker.client.form import JobFormPayload

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class JobTrackerClientError(Exception):
    def __init__(self, status_code: int, message: str, payload: Any = None) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.payload = payload


class JobTrackerClient:
    """Thin httpx wrapper around the /api/jobs endpoints."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout, transport=transport)

    def __enter__(self) -> "JobTrackerClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _send(self, method: str, url: str, **kwargs) -> Any:
        res = self._client.request(method, url, **kwargs)
        if res.is_success:
            return res.json()

        try:
            payload = res.json()
        except ValueError:
            payload = None
        message = payload.get("error") if isinstance(payload, dict) else None
        logger.warning("%s %s failed with %s: %s", method, url, res.status_code, message)
        raise JobTrackerClientError(res.status_code, message or res.reason_phrase, payload)

    def list_jobs(self) -> list[dict]:
        return self._send("GET", "/api/jobs")

    def get_job(self, job_id: int) -> dict:
        return self._send("GET", f"/api/jobs/{job_id}")

    def create_job(self, payload: JobFormPayload) -> dict:
        data, files = payload.as_multipart()
        return self._send("POST", "/api/jobs", data=data, files=files or None)

    def update_job(self, job_id: int, payload: JobFormPayload) -> dict:
        data, files = payload.as_multipart()
        return self._send("PUT", f"/api/jobs/{job_id}", data=data, files=files or None)

    def delete_job(self, job_id: int) -> dict:
        return self._send("DELETE", f"/api/jobs/{job_id}")
