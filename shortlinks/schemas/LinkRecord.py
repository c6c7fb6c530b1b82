from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional

# Immutable copy of a stored link; callers never see the ORM row itself.
class LinkRecord(BaseModel):
    id: str
    target: str
    clicks: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, frozen=True)
