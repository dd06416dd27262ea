"""Archive file I/O.

An archive is a single msgpack document whose top level is a map from key
string to an array of ``bin`` blobs. Nothing here knows about item types.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path

import msgpack
import structlog

from satchel.domain.base import SatchelError

logger = structlog.get_logger()

Envelope = dict[str, list[bytes]]


class ArchiveError(SatchelError):
    """Base exception for archive I/O failures."""

    def __init__(self, message: str, path: Path | str):
        super().__init__(f"{message}: {path}")
        self.path = Path(path)


class ArchiveNotFoundError(ArchiveError):
    """Raised when the archive path does not exist."""

    pass


class ArchiveReadError(ArchiveError):
    """Raised when the archive exists but cannot be read."""

    pass


class ArchiveWriteError(ArchiveError):
    """Raised when the archive cannot be written."""

    pass


class EnvelopeFormatError(ArchiveError):
    """Raised when the archive is not a map of key strings to blob lists."""

    pass


def pack_envelope(envelope: Envelope) -> bytes:
    """Encode an envelope to msgpack bytes."""
    return msgpack.packb(envelope, use_bin_type=True)


def unpack_envelope(data: bytes, path: Path | str = "<bytes>") -> Envelope:
    """Decode and validate msgpack bytes as an envelope.

    Raises EnvelopeFormatError if the bytes are not msgpack or have the
    wrong shape.
    """
    try:
        decoded = msgpack.unpackb(data, raw=False, strict_map_key=False)
    except (ValueError, TypeError, msgpack.exceptions.UnpackException) as e:
        raise EnvelopeFormatError(f"Not a valid archive ({e})", path) from e

    if not isinstance(decoded, dict):
        raise EnvelopeFormatError(
            f"Archive top level is {type(decoded).__name__}, expected a map", path
        )

    for tag, blobs in decoded.items():
        if not isinstance(tag, str):
            raise EnvelopeFormatError(f"Archive key {tag!r} is not a string", path)
        if not isinstance(blobs, list) or not all(isinstance(b, bytes) for b in blobs):
            raise EnvelopeFormatError(
                f"Archive entry {tag!r} is not a list of byte blobs", path
            )

    return decoded


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Atomically write bytes to path using a temporary file and replace.

    Either the old file remains or the new file fully replaces it. An
    existing file's permission bits carry over to the replacement.
    """
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        if path.exists():
            shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
    finally:
        if os.path.exists(tmp_name):
            try:
                os.remove(tmp_name)
            except OSError:
                logger.debug("temp_file_not_removed", path=tmp_name, exc_info=True)


def write_envelope(envelope: Envelope, path: Path | str) -> None:
    """Write an envelope to path atomically.

    Raises ArchiveWriteError naming the path on any filesystem failure.
    """
    path = Path(path)
    data = pack_envelope(envelope)

    try:
        atomic_write_bytes(path, data)
    except OSError as e:
        logger.error("archive_write_failed", path=str(path), error=str(e))
        raise ArchiveWriteError(f"Cannot write archive ({e.strerror or e})", path) from e

    logger.debug("archive_written", path=str(path), size=len(data), keys=len(envelope))


def read_envelope(path: Path | str) -> Envelope:
    """Read and validate the envelope stored at path.

    Raises:
        ArchiveNotFoundError: path does not exist
        ArchiveReadError: path exists but cannot be read
        EnvelopeFormatError: contents are not a valid envelope
    """
    path = Path(path)

    try:
        data = path.read_bytes()
    except FileNotFoundError as e:
        raise ArchiveNotFoundError("Archive not found", path) from e
    except OSError as e:
        raise ArchiveReadError(f"Cannot read archive ({e.strerror or e})", path) from e

    envelope = unpack_envelope(data, path)
    logger.debug("archive_read", path=str(path), size=len(data), keys=len(envelope))
    return envelope
