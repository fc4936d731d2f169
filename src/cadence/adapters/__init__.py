"""Adapters - I/O implementations of ports."""

from .json_store import JsonEventStore, EventStoreError

__all__ = [
    "JsonEventStore",
    "EventStoreError",
]
