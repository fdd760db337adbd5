"""Byte source implementations and contracts."""

from .base import ByteSource
from .local import LocalByteSource
from .memory import MemoryByteSource

__all__ = ["ByteSource", "LocalByteSource", "MemoryByteSource"]
