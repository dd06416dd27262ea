"""Satchel - keyed item container with single-file persistence."""

from satchel.domain import CalendarKey, Container, EventItem, NoteItem
from satchel.infrastructure import load_container, load_container_with_report, write_container

__all__ = [
    "CalendarKey",
    "Container",
    "EventItem",
    "NoteItem",
    "load_container",
    "load_container_with_report",
    "write_container",
]
