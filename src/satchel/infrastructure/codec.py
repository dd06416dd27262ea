"""Container persistence: encode to and decode from archive envelopes."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import structlog

from satchel.domain import ITEM_TYPES, CalendarKey, Container, ContainerItem, ItemEncodeError
from satchel.metrics import archive_write_duration, dropped_items, dropped_keys, track_operation

from .archive import Envelope, read_envelope, write_envelope

logger = structlog.get_logger()


@dataclass
class DecodeReport:
    """What was dropped while decoding an envelope."""

    dropped_keys: list[str] = field(default_factory=list)
    dropped_items: dict[str, int] = field(default_factory=dict)

    @property
    def dropped_key_count(self) -> int:
        return len(self.dropped_keys)

    @property
    def dropped_item_count(self) -> int:
        return sum(self.dropped_items.values())

    @property
    def is_clean(self) -> bool:
        """True if nothing was dropped."""
        return not self.dropped_keys and not self.dropped_items


def _tag(key: Enum) -> str:
    tag = getattr(key, "value", None)
    if not isinstance(tag, str):
        raise TypeError(f"Key {key!r} has no string form to persist")
    return tag


def encode_container(container: Container) -> Envelope:
    """Convert a container to an envelope of per-item JSON blobs.

    Raises ItemEncodeError if any item fails to encode.
    """
    envelope: Envelope = {}
    for key, items in container.content.items():
        tag = _tag(key)
        blobs = []
        for index, item in enumerate(items):
            try:
                blob = item.to_bytes()
            except Exception as e:
                raise ItemEncodeError(
                    f"Cannot encode item {index} under {tag!r}: {e}"
                ) from e
            if not isinstance(blob, bytes):
                raise ItemEncodeError(
                    f"Item {index} under {tag!r} encoded to "
                    f"{type(blob).__name__}, expected bytes"
                )
            blobs.append(blob)
        envelope[tag] = blobs
    return envelope


def decode_envelope(
    envelope: Mapping[str, list[bytes]],
) -> tuple[Container[CalendarKey], DecodeReport]:
    """Rebuild a calendar container from an envelope.

    Unknown tags and blobs that fail to decode are dropped and recorded
    in the returned report.
    """
    report = DecodeReport()
    content: dict[CalendarKey, list[ContainerItem]] = {}

    for tag, blobs in envelope.items():
        key = CalendarKey.from_tag(tag)
        if key is None:
            logger.warning("unknown_key_dropped", key=tag, items=len(blobs))
            report.dropped_keys.append(tag)
            dropped_keys.inc()
            continue

        item_type = ITEM_TYPES[key]
        decoded = []
        for blob in blobs:
            item = item_type.from_bytes(blob)
            if item is None:
                continue
            decoded.append(item)

        failed = len(blobs) - len(decoded)
        if failed:
            logger.warning(
                "undecodable_items_dropped",
                key=tag,
                item_type=item_type.__name__,
                dropped=failed,
                kept=len(decoded),
            )
            report.dropped_items[tag] = failed
            dropped_items.labels(key=tag).inc(failed)

        content[key] = decoded

    return Container(content), report


@track_operation("write", archive_write_duration)
def write_container(container: Container, path: Path | str) -> None:
    """Persist a container to path atomically.

    Raises:
        ItemEncodeError: an item could not be encoded (nothing is written)
        ArchiveWriteError: the file could not be written
    """
    envelope = encode_container(container)
    write_envelope(envelope, path)
    logger.info("container_saved", path=str(path), items=len(container))


@track_operation("read")
def load_container_with_report(
    path: Path | str,
) -> tuple[Container[CalendarKey], DecodeReport]:
    """Load a calendar container from path along with a decode report.

    Raises:
        ArchiveNotFoundError: path does not exist
        ArchiveReadError: path cannot be read
        EnvelopeFormatError: the file is not a valid archive
    """
    envelope = read_envelope(path)
    container, report = decode_envelope(envelope)
    logger.info(
        "container_loaded",
        path=str(path),
        items=len(container),
        dropped_keys=report.dropped_key_count,
        dropped_items=report.dropped_item_count,
    )
    return container, report


def load_container(path: Path | str) -> Container[CalendarKey]:
    """Load a calendar container from path."""
    container, _ = load_container_with_report(path)
    return container
