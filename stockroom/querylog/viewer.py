"""
Collapsible "SQL Queries" panel over a query log.

The viewer accepts either a QueryLogStore (or any sequence of entries) or,
for single-query callers, one description string, which it shows as a single
synthesized entry.
"""
import logging

from django.template.loader import render_to_string
from django.utils import timezone

from stockroom.core import toasts
from .entries import QueryLogEntry
from .store import QueryLogStore

logger = logging.getLogger(__name__)

EMPTY_STATE = "No SQL queries recorded yet"
COPY_TOAST_DURATION_MS = 2000


class MemoryClipboard:
    """
    Clipboard owned by one screen session.

    The server cannot reach the browser clipboard; the copied text is held
    here and returned to the client, which writes it to the real clipboard.
    """

    def __init__(self):
        self.text = None

    def write_text(self, text):
        self.text = text


class QueryLogViewer:

    def __init__(self, entries=None, query=None, clipboard=None, toast_queue=None):
        if query:
            self._source = (QueryLogEntry.create(query, ''),)
        elif entries is None:
            self._source = ()
        else:
            self._source = entries
        self.expanded = False
        self.clipboard = clipboard if clipboard is not None else MemoryClipboard()
        self.toast_queue = toast_queue
        self._html = None
        self._unsubscribe = None
        if isinstance(self._source, QueryLogStore):
            self._unsubscribe = self._source.subscribe(self._on_store_change)

    def _on_store_change(self, store):
        self._html = None

    def close(self):
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    @property
    def entries(self):
        if isinstance(self._source, QueryLogStore):
            return self._source.all()
        return tuple(self._source)

    @property
    def title(self):
        count = len(self.entries)
        return f"SQL Queries ({count})" if count > 0 else "SQL Queries"

    def toggle(self):
        self.expanded = not self.expanded
        self._html = None
        return self.expanded

    def get_entry(self, entry_id):
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    def copy(self, entry_id):
        """Put one entry's description, and only that, on the clipboard"""
        entry = self.get_entry(entry_id)
        if entry is None:
            return None
        text = entry.description
        try:
            self.clipboard.write_text(text)
        except Exception as e:
            logger.warning(f"Clipboard write failed for query log entry {entry_id}: {e}")
            self._toast(toasts.error("Could not copy query to clipboard"))
            return None
        self._toast(toasts.Toast(
            title="Copied to clipboard",
            description="Query copied to clipboard",
            duration=COPY_TOAST_DURATION_MS,
        ))
        return text

    def _toast(self, toast):
        if self.toast_queue is not None:
            self.toast_queue.push(toast)

    @staticmethod
    def _entry_context(entry):
        return {
            'id': entry.id,
            'time': timezone.localtime(entry.timestamp).strftime('%H:%M:%S'),
            'source': entry.source,
            'duration': f"{round(entry.duration_ms)}ms" if entry.duration_ms is not None else '',
            'description': entry.description,
        }

    def as_dict(self):
        entries = self.entries
        return {
            'title': self.title,
            'count': len(entries),
            'expanded': self.expanded,
            'empty_message': EMPTY_STATE if not entries else None,
            'entries': [entry.as_dict() for entry in entries] if self.expanded else [],
        }

    def render(self):
        if self._html is None:
            entries = self.entries
            self._html = render_to_string('querylog/viewer.html', {
                'title': self.title,
                'expanded': self.expanded,
                'entries': [self._entry_context(entry) for entry in entries],
                'empty_message': EMPTY_STATE,
            })
        return self._html
