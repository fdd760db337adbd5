"""Byte source contract consumed by the clippings ingestor."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class ByteSource(Protocol):
    """Anything that can hand back the raw bytes stored under a path."""

    def read(self, path: Path) -> bytes:
        """Return the complete payload; raise ``OSError`` when unavailable."""
