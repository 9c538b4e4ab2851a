"""
Pydantic models for chat messages.

``msg_date_time`` accepts anything pydantic parses as a datetime (ISO
text with any offset, or a numeric epoch in seconds or milliseconds).
It is normalised to UTC at millisecond precision and written out as
``YYYY-MM-DDTHH:MM:SS.sssZ``; that fixed‑width text is also what gets
stored, so ordering the stored text orders the messages in time.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


def format_timestamp(value: datetime) -> str:
    """Render a UTC datetime as ``2024-06-04T00:00:00.000Z``."""
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


class Message(BaseModel):
    """A message as submitted, before an identifier is assigned."""

    model_config = ConfigDict(populate_by_name=True)

    msg: str = Field(..., examples=["Hello"])
    msg_from: str = Field(..., alias="msgFrom", examples=["User1"])
    msg_date_time: datetime = Field(..., alias="msgDateTime", examples=["2024-06-04T00:00:00.000Z"])

    @field_validator("msg_date_time")
    @classmethod
    def to_utc(cls, value: datetime) -> datetime:
        # naive timestamps are taken as UTC
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        else:
            value = value.astimezone(timezone.utc)
        return value.replace(microsecond=value.microsecond // 1000 * 1000)

    @field_serializer("msg_date_time")
    def serialize_date_time(self, value: datetime) -> str:
        return format_timestamp(value)


class StoredMessage(Message):
    """A persisted message."""

    id: str
