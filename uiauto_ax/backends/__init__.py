# uiauto_ax/backends/__init__.py
"""Node Handle Service implementations."""

from .memory import BoxedValue, MemoryHandle, MemoryHandleService, MemoryNode

__all__ = ["BoxedValue", "MemoryHandle", "MemoryHandleService", "MemoryNode"]
