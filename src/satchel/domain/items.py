"""Item domain models."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class JsonItem(BaseModel):
    """An item that encodes its fields as compact JSON.

    Subclasses only declare fields; encoding and decoding come from
    the pydantic schema.
    """

    model_config = ConfigDict(frozen=True)

    def to_bytes(self) -> bytes:
        """Serialize to UTF-8 JSON."""
        return self.model_dump_json().encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes) -> JsonItem | None:
        """Hydrate from UTF-8 JSON.

        Returns None for malformed, truncated or schema-mismatched input.
        """
        try:
            return cls.model_validate_json(data)
        except ValueError:
            # pydantic.ValidationError is a ValueError
            return None


class EventItem(JsonItem):
    """A calendar event."""

    date: datetime
    title: str
    description: str


class NoteItem(JsonItem):
    """A free-form note."""

    text: str
