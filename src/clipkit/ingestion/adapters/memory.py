"""In-memory byte source for tests and embedding callers."""

from __future__ import annotations

from pathlib import Path


class MemoryByteSource:
    """Serve payloads registered with :meth:`add` instead of touching disk."""

    def __init__(self) -> None:
        self._payloads: dict[Path, bytes] = {}

    def add(self, path: str | Path, data: bytes | str) -> None:
        payload = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        self._payloads[Path(path)] = payload

    def read(self, path: Path) -> bytes:
        try:
            return self._payloads[Path(path)]
        except KeyError as exc:
            raise FileNotFoundError(f"No in-memory payload for {path}") from exc
