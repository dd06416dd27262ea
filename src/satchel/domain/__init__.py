"""Domain models for Satchel."""

from .base import ContainerItem, ItemEncodeError, ItemTypeMismatch, SatchelError
from .container import Container
from .items import EventItem, JsonItem, NoteItem
from .keys import ITEM_TYPES, CalendarKey

__all__ = [
    "ITEM_TYPES",
    "CalendarKey",
    "Container",
    "ContainerItem",
    "EventItem",
    "ItemEncodeError",
    "ItemTypeMismatch",
    "JsonItem",
    "NoteItem",
    "SatchelError",
]
