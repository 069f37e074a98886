"""
Mounted screen sessions of this process.

A session is one ScreenController owned by the user who mounted it. The
registry is bounded; mounting beyond the limit unmounts the oldest session.
"""
import logging
import threading
import uuid
from collections import OrderedDict

from django.conf import settings

logger = logging.getLogger(__name__)


class ScreenSessionRegistry:

    def __init__(self, limit=None):
        self._limit = limit
        self._sessions = OrderedDict()
        self._lock = threading.Lock()

    @property
    def limit(self):
        if self._limit is not None:
            return self._limit
        return getattr(settings, 'SCREEN_SESSION_LIMIT', 200)

    def open(self, controller, owner_id):
        session_id = str(uuid.uuid4())
        evicted = []
        with self._lock:
            self._sessions[session_id] = (owner_id, controller)
            while len(self._sessions) > self.limit:
                old_id, (_, old_controller) = self._sessions.popitem(last=False)
                evicted.append((old_id, old_controller))
        for old_id, old_controller in evicted:
            logger.info(f"Evicting screen session {old_id} ({old_controller.schema.key})")
            old_controller.unmount()
        return session_id

    def get(self, session_id, owner_id):
        with self._lock:
            found = self._sessions.get(session_id)
        if found is None or found[0] != owner_id:
            return None
        return found[1]

    def close(self, session_id, owner_id):
        with self._lock:
            found = self._sessions.get(session_id)
            if found is None or found[0] != owner_id:
                return None
            del self._sessions[session_id]
        found[1].unmount()
        return found[1]

    def clear(self):
        with self._lock:
            sessions, self._sessions = self._sessions, OrderedDict()
        for _, controller in sessions.values():
            controller.unmount()

    def __len__(self):
        return len(self._sessions)


sessions = ScreenSessionRegistry()
