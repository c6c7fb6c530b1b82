from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

from shortlinks.schemas.LinkRecord import LinkRecord

# Response DTOs
class LinkInfoResponse(BaseModel):
    # target is the Python field, 'url' is the JSON key
    id: str
    short_url: str
    target: str = Field(..., alias="url")
    clicks: int = 0
    created_at: Optional[datetime] = None

    model_config = {"populate_by_name": True}

    @classmethod
    def from_record(cls, record: LinkRecord, base_url: str) -> "LinkInfoResponse":
        return cls(
            id=record.id,
            short_url=f"{base_url.rstrip('/')}/{record.id}",
            target=record.target,
            clicks=record.clicks,
            created_at=record.created_at,
        )
