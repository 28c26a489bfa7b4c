import re
from datetime import datetime, timezone
from typing import List

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from clipmod.utils.hashing import content_hash

ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}")


def storable_text(text: str) -> str:
    """Replace lone UTF-16 surrogates with U+FFFD so the text encodes as UTF-8.

    Valid surrogate pairs are joined into the code point they stand for.
    """
    return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "replace")


class ClipboardEntry(BaseModel):
    """Immutable record of one accepted clipboard sample.

    ``hash`` is fixed when the entry is created and is an identity rather
    than a dedup key: the same text copied twice gets two different hashes.
    On disk the timestamp is stored under ``date`` as an ISO-8601 string.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    content: str
    timestamp: datetime = Field(alias="date")
    hash: str = Field(pattern=r"^[0-9a-f]{64}$")

    @field_validator("content")
    @classmethod
    def _encodable(cls, value: str) -> str:
        return storable_text(value)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _iso_string_only(cls, value):
        # pydantic would otherwise read numbers as unix timestamps
        if isinstance(value, datetime):
            return value
        if isinstance(value, str) and ISO_DATE.match(value):
            return value
        raise ValueError("date must be an ISO-8601 string")

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @classmethod
    def create(cls, content: str, timestamp: datetime) -> "ClipboardEntry":
        content = storable_text(content)
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return cls(
            content=content,
            date=timestamp,
            hash=content_hash(content, timestamp),
        )

    def to_dict(self):
        return self.model_dump(mode="json", by_alias=True)


ENTRY_LIST_ADAPTER = TypeAdapter(List[ClipboardEntry])
