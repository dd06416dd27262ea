"""Base classes and protocols for domain models."""

from typing import Protocol, TypeVar


class SatchelError(Exception):
    """Base exception for all errors raised by Satchel."""

    pass


class ItemTypeMismatch(SatchelError, TypeError):  # noqa: N818
    """Raised when an item variant does not match what a key holds."""

    pass


class ItemEncodeError(SatchelError):
    """Raised when an item cannot be encoded; the write is aborted."""

    pass


T = TypeVar("T", bound="ContainerItem")


class ContainerItem(Protocol):
    """Protocol for items that can be stored in a Container."""

    def to_bytes(self) -> bytes:
        """Serialize to a self-contained byte blob."""
        ...

    @classmethod
    def from_bytes(cls: type[T], data: bytes) -> T | None:
        """Hydrate from a byte blob, or None if the blob is malformed."""
        ...
