from __future__ import annotations

import logging
import threading
from typing import Protocol
from urllib.parse import quote

import httpx

from jobtracker.core.config import settings

logger = logging.getLogger(__name__)

# MKCOL on an existing collection answers 405 on Nextcloud/ownCloud/Apache.
_MKCOL_EXISTS = {405}


class WebDAVError(Exception):
    """Raised when the WebDAV server rejects a request or cannot be reached."""


class FileStore(Protocol):
    def make_directories(self, path: str) -> None: ...

    def upload_file(self, data: bytes, path: str, content_type: str | None = None) -> None: ...

    def download_file(self, path: str) -> bytes: ...

    def delete(self, path: str) -> None: ...


def normalize_path(path: str) -> str:
    parts = [p for p in (path or "").split("/") if p]
    return "/" + "/".join(parts)


def parent_directories(path: str) -> list[str]:
    """`/a/b/c.pdf` -> [`/a`, `/a/b`]"""
    parts = [p for p in normalize_path(path).split("/") if p][:-1]
    return ["/" + "/".join(parts[: i + 1]) for i in range(len(parts))]


class WebDAVFileStore:
    def __init__(
        self,
        base_url: str,
        *,
        username: str = "",
        password: str = "",
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        auth = httpx.BasicAuth(username, password) if username else None
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(auth=auth, timeout=timeout, transport=transport)

    def url_for(self, path: str) -> str:
        return f"{self.base_url}{quote(normalize_path(path), safe='/')}"

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        url = self.url_for(path)
        try:
            return self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise WebDAVError(f"{method} {path} failed: {exc}") from exc

    def make_directories(self, path: str) -> None:
        full = normalize_path(path)
        for directory in parent_directories(full + "/_"):
            res = self._request("MKCOL", directory)
            if res.status_code in _MKCOL_EXISTS or res.is_success:
                continue
            raise WebDAVError(f"MKCOL {directory} returned {res.status_code}")

    def upload_file(self, data: bytes, path: str, content_type: str | None = None) -> None:
        headers = {"Content-Type": content_type} if content_type else {}
        res = self._request("PUT", path, content=data, headers=headers)
        if not res.is_success:
            raise WebDAVError(f"PUT {path} returned {res.status_code}")
        logger.info("Uploaded %d bytes to %s", len(data), path)

    def download_file(self, path: str) -> bytes:
        res = self._request("GET", path)
        if not res.is_success:
            raise WebDAVError(f"GET {path} returned {res.status_code}")
        return res.content

    def delete(self, path: str) -> None:
        res = self._request("DELETE", path)
        # Already gone is fine.
        if res.status_code == 404:
            return
        if not res.is_success:
            raise WebDAVError(f"DELETE {path} returned {res.status_code}")

    def close(self) -> None:
        self._client.close()


class InMemoryFileStore:
    """Process-local store for development when no WebDAV server is configured."""

    def __init__(self) -> None:
        self.files: dict[str, tuple[bytes, str | None]] = {}
        self.directories: set[str] = set()
        self._lock = threading.Lock()

    def make_directories(self, path: str) -> None:
        with self._lock:
            self.directories.update(parent_directories(normalize_path(path) + "/_"))

    def upload_file(self, data: bytes, path: str, content_type: str | None = None) -> None:
        with self._lock:
            self.files[normalize_path(path)] = (bytes(data), content_type)

    def download_file(self, path: str) -> bytes:
        with self._lock:
            entry = self.files.get(normalize_path(path))
        if entry is None:
            raise WebDAVError(f"GET {path} returned 404")
        return entry[0]

    def delete(self, path: str) -> None:
        target = normalize_path(path)
        with self._lock:
            self.files.pop(target, None)
            # Deleting a collection removes everything below it.
            for key in [k for k in self.files if k.startswith(target + "/")]:
                del self.files[key]
            self.directories = {d for d in self.directories if d != target and not d.startswith(target + "/")}


_store: FileStore | None = None
_lock = threading.Lock()


def get_file_store() -> FileStore:
    global _store
    if _store is None:
        with _lock:
            if _store is None:
                _store = _build_file_store()
    return _store


def reset_file_store() -> None:
    """
    Test helper to ensure a fresh store is constructed after settings change.
    """

    global _store
    with _lock:
        _store = None


def _build_file_store() -> FileStore:
    if not settings.webdav_enabled:
        if settings.is_prod:
            raise RuntimeError("WEBDAV_URL must be set in prod")
        logger.warning("WEBDAV_URL is unset; storing uploaded files in memory")
        return InMemoryFileStore()

    logger.info("Storing uploaded files on WebDAV server %s", settings.WEBDAV_URL)
    return WebDAVFileStore(
        settings.WEBDAV_URL,
        username=settings.WEBDAV_USERNAME,
        password=settings.WEBDAV_PASSWORD,
        timeout=settings.WEBDAV_TIMEOUT_SECONDS,
    )
