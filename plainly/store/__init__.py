"""Record store interface and the file-backed implementation."""

from plainly.store.base import Storage
from plainly.store.json_store import JSONStore

__all__ = ["Storage", "JSONStore"]
