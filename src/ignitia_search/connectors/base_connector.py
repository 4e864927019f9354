"""Base interface for search index transports.

A transport only knows how to obtain the raw serialized index. Decoding the
payload into documents is the loader's job.
"""
from __future__ import annotations

from abc import ABC, abstractmethod


class IndexTransport(ABC):
    """Abstract transport for the serialized index.

    Implementations should be safe to construct without side effects and should
    not perform I/O until `fetch_text()` is awaited.
    """

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable location of the payload, used in log and error messages."""

    @abstractmethod
    async def fetch_text(self) -> str:
        """Return the raw payload text. Raise on any transport failure."""
        raise NotImplementedError
