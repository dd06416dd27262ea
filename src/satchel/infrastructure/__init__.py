"""Persistence infrastructure for Satchel."""

from .archive import (
    ArchiveError,
    ArchiveNotFoundError,
    ArchiveReadError,
    ArchiveWriteError,
    EnvelopeFormatError,
    read_envelope,
    write_envelope,
)
from .codec import (
    DecodeReport,
    decode_envelope,
    encode_container,
    load_container,
    load_container_with_report,
    write_container,
)

__all__ = [
    "ArchiveError",
    "ArchiveNotFoundError",
    "ArchiveReadError",
    "ArchiveWriteError",
    "DecodeReport",
    "EnvelopeFormatError",
    "decode_envelope",
    "encode_container",
    "load_container",
    "load_container_with_report",
    "read_envelope",
    "write_container",
    "write_envelope",
]
