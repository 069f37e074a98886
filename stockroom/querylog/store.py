"""
Per-screen, in-memory query log.

Entries are kept newest first for the lifetime of one mounted screen and are
discarded with it. Nothing is persisted.
"""
import logging

from .entries import QueryLogEntry

logger = logging.getLogger(__name__)


class QueryLogStore:

    def __init__(self):
        self._entries = []
        self._subscribers = []

    def append(self, description, source, duration_ms=None):
        """
        Record an operation about to be issued and return the new entry.

        `description` is a QueryOperation, or any text (wrapped as a raw
        operation). Empty text is accepted as is.
        """
        entry = QueryLogEntry.create(description, source, duration_ms=duration_ms)
        self._entries.insert(0, entry)
        self._notify()
        return entry

    def record_duration(self, entry, duration_ms):
        """Replace `entry` in place with a copy carrying the measured duration"""
        for index, current in enumerate(self._entries):
            if current.id == entry.id:
                updated = current.with_duration(duration_ms)
                self._entries[index] = updated
                self._notify()
                return updated
        return None

    def all(self):
        return tuple(self._entries)

    def get(self, entry_id):
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def clear(self):
        self._entries = []
        self._notify()

    def subscribe(self, callback):
        """Call `callback(store)` on every change; returns an unsubscribe function"""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self):
        for callback in list(self._subscribers):
            try:
                callback(self)
            except Exception:
                logger.exception("Query log subscriber failed")

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self.all())
