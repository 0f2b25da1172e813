from __future__ import annotations

from jobtracker.services.webdav import FileStore
from jobtracker.services.webdav import get_file_store as _shared_store


def get_file_store() -> FileStore:
    return _shared_store()
