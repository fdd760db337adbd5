"""Local filesystem byte source."""

from __future__ import annotations

from pathlib import Path


class LocalByteSource:
    def read(self, path: Path) -> bytes:
        return Path(path).read_bytes()
