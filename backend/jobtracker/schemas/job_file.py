from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class JobFileOut(BaseModel):
    id: int
    job_application_id: int
    file_name: str
    file_type: str | None = None
    size_bytes: int | None = None
    nextcloud_path: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)
