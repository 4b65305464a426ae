"""
Shared record helpers.

Base class for read records built from ORM rows.

Dependencies: pydantic
System role: Common read-model base
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

from chatflow.core.clock import ensure_utc


class Record(BaseModel):
    """Immutable read record built from an ORM row, timestamps in aware UTC."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @field_validator("created_at", "updated_at", mode="after", check_fields=False)
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)
