from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager

import redis

from gemgacha.api.models import Account
from gemgacha.errors import NotFoundError
from gemgacha.lock import AccountLocks, account_lock


ACCOUNT_KEY_PREFIX = "gemgacha:account:"  # + {user_id}


class AccountStore(ABC):
    """Holds every account for the lifetime of the process.

    `transaction()` is the only way to mutate an account: it yields a working
    copy under the account's lock and commits it only if the block exits cleanly.
    """

    @abstractmethod
    def get(self, user_id: str) -> Account | None:
        raise NotImplementedError

    @abstractmethod
    def exists(self, user_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def create(self, user_id: str, account: Account) -> Account:
        raise NotImplementedError

    @abstractmethod
    def transaction(self, user_id: str) -> AbstractContextManager[Account]:
        raise NotImplementedError

    def require(self, user_id: str) -> Account:
        account = self.get(user_id)
        if account is None:
            raise NotFoundError("User not found")
        return account


class InMemoryAccountStore(AccountStore):
    def __init__(self) -> None:
        self._accounts: dict[str, Account] = {}
        self._locks = AccountLocks()

    def get(self, user_id: str) -> Account | None:
        account = self._accounts.get(user_id)
        if account is None:
            return None
        return account.model_copy(deep=True)

    def exists(self, user_id: str) -> bool:
        return user_id in self._accounts

    def create(self, user_id: str, account: Account) -> Account:
        with self._locks.register(user_id):
            self._accounts.setdefault(user_id, account.model_copy(deep=True))
            return self._accounts[user_id].model_copy(deep=True)

    @contextmanager
    def transaction(self, user_id: str) -> Iterator[Account]:
        with self._locks.hold(user_id):
            current = self._accounts.get(user_id)
            if current is None:
                # Lock registered by a create() that has not stored the account yet.
                raise NotFoundError("User not found")
            working = current.model_copy(deep=True)
            yield working
            self._accounts[user_id] = working

    def __len__(self) -> int:
        return len(self._accounts)


def _account_key(user_id: str) -> str:
    return f"{ACCOUNT_KEY_PREFIX}{user_id}"


class RedisAccountStore(AccountStore):
    """Accounts as JSON documents in a (volatile) Redis shared by several workers."""

    def __init__(self, *, r: redis.Redis, ttl_seconds: int = 0) -> None:
        self._r = r
        self._ttl = ttl_seconds or None

    def get(self, user_id: str) -> Account | None:
        raw = self._r.get(_account_key(user_id))
        if not raw:
            return None
        return Account.model_validate_json(raw)

    def exists(self, user_id: str) -> bool:
        return bool(self._r.exists(_account_key(user_id)))

    def _save(self, user_id: str, account: Account, *, only_if_new: bool = False) -> bool:
        return bool(self._r.set(_account_key(user_id), account.model_dump_json(), ex=self._ttl, nx=only_if_new))

    def create(self, user_id: str, account: Account) -> Account:
        self._save(user_id, account, only_if_new=True)
        return self.require(user_id)

    @contextmanager
    def transaction(self, user_id: str) -> Iterator[Account]:
        with account_lock(r=self._r, user_id=user_id):
            working = self.get(user_id)
            if working is None:
                raise NotFoundError("User not found")
            yield working
            self._save(user_id, working)
