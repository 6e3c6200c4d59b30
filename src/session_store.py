"""
Checkpoint persistence keyed by thread id.

Checkpoints are stored as serialized JSON snapshots: a save replaces the
previous snapshot in one assignment under a lock, and every load returns a
fresh object, so no caller keeps a live reference into the store.
"""

import logging
import threading
import time
from collections import OrderedDict
from typing import Protocol

from src.config import settings
from src.schemas import WizardCheckpoint

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    def load(self, thread_id: str) -> WizardCheckpoint | None: ...

    def save(self, checkpoint: WizardCheckpoint) -> None: ...

    def delete(self, thread_id: str) -> None: ...


class InMemorySessionStore:
    """
    Process-local checkpoint store.

    Memory is bounded the same way on every access:
    - records idle for longer than ``ttl_seconds`` are dropped
    - beyond ``max_sessions`` the least recently used records are evicted
    """

    def __init__(self, max_sessions: int | None = None, ttl_seconds: int | None = None):
        self.max_sessions = max_sessions or settings.max_sessions
        self.ttl_seconds = ttl_seconds or settings.session_ttl_seconds

        # thread_id -> (last access timestamp, checkpoint JSON)
        self._records: OrderedDict[str, tuple[float, str]] = OrderedDict()
        self._lock = threading.Lock()

    def _prune(self, now: float) -> None:
        expired = [tid for tid, (ts, _) in self._records.items() if now - ts > self.ttl_seconds]
        for tid in expired:
            del self._records[tid]
        if expired:
            logger.info(f"Expired {len(expired)} wizard sessions")

        while len(self._records) > self.max_sessions:
            oldest, _ = self._records.popitem(last=False)
            logger.info(f"Evicted wizard session for thread {oldest}")

    def load(self, thread_id: str) -> WizardCheckpoint | None:
        with self._lock:
            now = time.time()
            self._prune(now)
            record = self._records.get(thread_id)
            if record is None:
                return None
            self._records[thread_id] = (now, record[1])
            self._records.move_to_end(thread_id)
            snapshot = record[1]

        return WizardCheckpoint.model_validate_json(snapshot)

    def save(self, checkpoint: WizardCheckpoint) -> None:
        snapshot = checkpoint.model_dump_json(by_alias=True)
        with self._lock:
            now = time.time()
            self._records[checkpoint.thread_id] = (now, snapshot)
            self._records.move_to_end(checkpoint.thread_id)
            self._prune(now)

    def delete(self, thread_id: str) -> None:
        with self._lock:
            self._records.pop(thread_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


# Global session store instance
session_store = InMemorySessionStore()
