# grohuh_server/adapters/api/schemas.py

from typing import Optional

from grohuh_core.domain.models import TriggerState
from pydantic import BaseModel, ConfigDict, Field


class RecordOut(BaseModel):
    """A persisted record: envelope, generated id and every reading field, flattened."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Lower-case ULID, sorts by arrival")
    device: str
    time: str
    buffered: str


class TriggerStateOut(BaseModel):
    triggered: Optional[bool] = Field(None, description="null until the trigger has fired once")

    @classmethod
    def from_domain(cls, state: TriggerState) -> "TriggerStateOut":
        return cls(triggered=state.triggered)
