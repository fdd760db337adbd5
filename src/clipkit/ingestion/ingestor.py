"""File-level entrypoint: read bytes, decode, parse."""

from __future__ import annotations

from dataclasses import dataclass, replace
import logging
from pathlib import Path

from clipkit.ingestion.adapters.base import ByteSource
from clipkit.ingestion.adapters.local import LocalByteSource
from clipkit.ingestion.encoding import decode, detect_encoding
from clipkit.ingestion.models import ParseResult
from clipkit.ingestion.parser import ParseOptions, parse

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_SIZE = 50 * 1024 * 1024


@dataclass(slots=True)
class IngestionError(Exception):
    """Domain error for unreadable or oversized clippings sources."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message} (path={self.path})"


@dataclass(frozen=True, slots=True)
class IngestionResult:
    """Parse output together with the source it came from."""

    path: Path
    encoding: str
    result: ParseResult

    @property
    def is_empty(self) -> bool:
        return self.result.is_empty

    @property
    def is_failed_import(self) -> bool:
        return self.result.is_failed_import


class ClippingsIngestor:
    """Read a clippings export through a byte source and parse it."""

    def __init__(
        self,
        source: ByteSource | None = None,
        *,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        options: ParseOptions | None = None,
    ) -> None:
        if max_file_size < 1:
            raise ValueError("max_file_size must be >= 1")
        self._source = source or LocalByteSource()
        self._max_file_size = max_file_size
        self._options = options or ParseOptions()

    @property
    def options(self) -> ParseOptions:
        return self._options

    def ingest(self, path: str | Path) -> IngestionResult:
        """Parse the file at *path*; read failures raise :class:`IngestionError`."""

        source_path = Path(path)
        raw_bytes = self._read_bytes(source_path)
        if len(raw_bytes) > self._max_file_size:
            raise IngestionError(
                source_path,
                f"File is {len(raw_bytes)} bytes; limit is {self._max_file_size}",
            )

        encoding = detect_encoding(raw_bytes)
        text = decode(raw_bytes, encoding)
        logger.debug("Decoded %s as %s (%d bytes)", source_path, encoding, len(raw_bytes))

        parsed = parse(text, self._options)
        result = replace(parsed, meta=replace(parsed.meta, file_size=len(raw_bytes)))
        return IngestionResult(path=source_path, encoding=encoding, result=result)

    def _read_bytes(self, path: Path) -> bytes:
        try:
            return self._source.read(path)
        except OSError as exc:
            raise IngestionError(path, f"Failed to read source file: {exc}") from exc
