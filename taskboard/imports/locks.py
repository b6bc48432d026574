"""Per-board serialization of import calls.

Reconciling lists and labels is a check-then-create sequence. Two imports
into the same board must not interleave it, otherwise both can create the
same list or label. The registry lives in process memory, so it only
serializes imports handled by the same worker process, and only contends
when imports run on separate threads.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class BoardLockRegistry:
    """Hands out one lock per board ID.

    A board's lock exists only while some caller holds or waits for it, so
    the registry does not grow with the number of boards ever imported into.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._users: dict[str, int] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def is_held(self, board_id: str) -> bool:
        with self._guard:
            lock = self._locks.get(board_id)
            return lock is not None and lock.locked()

    @contextmanager
    def hold(self, board_id: str) -> Iterator[None]:
        """Hold the board's lock for the duration of the block."""
        with self._guard:
            lock = self._locks.setdefault(board_id, threading.Lock())
            self._users[board_id] = self._users.get(board_id, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._users[board_id] -= 1
                if not self._users[board_id]:
                    del self._users[board_id]
                    del self._locks[board_id]


board_locks = BoardLockRegistry()
