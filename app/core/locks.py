"""
Per-job mutual exclusion for operations that read and then rewrite a job's
whole resume set (insert, resequence, move, delete, weight propagation).

Locks are re-entrant and live for the lifetime of the process. Operations on
different jobs never contend.
"""
import threading
from contextlib import contextmanager
from typing import Hashable, Iterator


class JobLockRegistry:
    def __init__(self):
        self._guard = threading.Lock()
        self._locks = {}

    def lock_for(self, job_id: Hashable):
        with self._guard:
            lock = self._locks.get(job_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[job_id] = lock
            return lock

    @contextmanager
    def hold(self, job_id: Hashable) -> Iterator[None]:
        lock = self.lock_for(job_id)
        with lock:
            yield

    def forget(self, job_id: Hashable) -> None:
        """Drop the lock of a deleted job."""
        with self._guard:
            self._locks.pop(job_id, None)


job_locks = JobLockRegistry()
