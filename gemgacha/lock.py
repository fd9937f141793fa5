from __future__ import annotations

import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from uuid import uuid4

import redis

from gemgacha.errors import AccountBusyError, NotFoundError


class AccountLocks:
    """In-process per-account mutexes.

    Locks are registered when an account is created; ids that were never
    registered have no lock and `hold` rejects them with NotFoundError.
    """

    def __init__(self) -> None:
        self._locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def register(self, user_id: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(user_id, threading.Lock())

    def lock_for(self, user_id: str) -> threading.Lock | None:
        with self._guard:
            return self._locks.get(user_id)

    @contextmanager
    def hold(self, user_id: str) -> Iterator[None]:
        lock = self.lock_for(user_id)
        if lock is None:
            raise NotFoundError("User not found")
        with lock:
            yield

    def __len__(self) -> int:
        return len(self._locks)


# Compare-and-delete so an expired lock re-taken by another worker is left alone.
_RELEASE_IF_OWNER = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
end
return 0
"""


@contextmanager
def account_lock(
    *,
    r: redis.Redis,
    user_id: str,
    ttl_ms: int = 5_000,
    wait_ms: int = 2_000,
    poll_s: float = 0.005,
) -> Iterator[None]:
    """Per-account lock shared by every worker talking to the same Redis.

    Polls until `wait_ms` elapses, then gives up with AccountBusyError.
    """

    key = f"lock:account:{user_id}"
    token = uuid4().hex
    deadline = time.monotonic() + wait_ms / 1000
    while not r.set(key, token, nx=True, px=ttl_ms):
        if time.monotonic() >= deadline:
            raise AccountBusyError("Account is busy, try again")
        time.sleep(poll_s)
    try:
        yield
    finally:
        r.register_script(_RELEASE_IF_OWNER)(keys=[key], args=[token])
