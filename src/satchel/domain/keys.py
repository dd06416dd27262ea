"""Calendar keys and the key-to-item dispatch table."""
from __future__ import annotations

from enum import Enum

from .items import EventItem, JsonItem, NoteItem


class CalendarKey(str, Enum):
    """Buckets of a calendar container.

    The value is the tag persisted in archives and must never change.
    """

    HOME_EVENTS = "homeEvents"
    WORK_EVENTS = "workEvents"
    NOTES = "notes"

    @classmethod
    def from_tag(cls, tag: str) -> CalendarKey | None:
        """Resolve a persisted tag, or None if it is not a known key."""
        try:
            return cls(tag)
        except ValueError:
            return None

    @property
    def item_type(self) -> type[JsonItem]:
        """The item variant stored under this key."""
        return ITEM_TYPES[self]


# Single source of truth for which item class each key decodes to.
ITEM_TYPES: dict[CalendarKey, type[JsonItem]] = {
    CalendarKey.HOME_EVENTS: EventItem,
    CalendarKey.WORK_EVENTS: EventItem,
    CalendarKey.NOTES: NoteItem,
}


def _check_dispatch_table() -> None:
    missing = [key.value for key in CalendarKey if key not in ITEM_TYPES]
    if missing:
        raise RuntimeError(f"No item type registered for keys: {', '.join(missing)}")


_check_dispatch_table()
