from __future__ import annotations

import random
from collections.abc import Generator

import fakeredis
import pytest
from fastapi.testclient import TestClient

from gemgacha.account_store import AccountStore, InMemoryAccountStore, RedisAccountStore
from gemgacha.api.models import Account
from gemgacha.main import create_app
from gemgacha.settings import Settings


class ScriptedRandom(random.Random):
    """Random source whose `random()` replays fixed values.

    Integer helpers (randint/choice) keep using the seeded generator.
    """

    def __init__(self, rolls: list[float], seed: int = 0) -> None:
        super().__init__(seed)
        self._rolls = list(rolls)

    def random(self) -> float:
        if not self._rolls:
            raise AssertionError("ScriptedRandom ran out of rolls")
        return self._rolls.pop(0)

    def getrandbits(self, k: int) -> int:
        # Defining this keeps randint/choice on the seeded bit generator instead of random().
        return super().getrandbits(k)


@pytest.fixture(params=["memory", "redis"])
def store(request: pytest.FixtureRequest) -> AccountStore:
    if request.param == "redis":
        return RedisAccountStore(r=fakeredis.FakeRedis(decode_responses=True))
    return InMemoryAccountStore()


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture()
def make_account(store: AccountStore):
    """Create an account with explicit balances/inventory and return its id."""

    def _make(user_id: str = "u1", **fields: object) -> str:
        store.create(user_id, Account(**fields))
        return user_id

    return _make


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    app = create_app(Settings(seed=42))
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def client_and_redis() -> Generator[tuple[TestClient, fakeredis.FakeRedis], None, None]:
    """API client backed by the redis account store on fakeredis."""

    from gemgacha.api.deps import get_store

    r = fakeredis.FakeRedis(decode_responses=True)
    redis_store = RedisAccountStore(r=r)
    app = create_app(Settings(seed=42))

    def _override() -> Generator[RedisAccountStore, None, None]:
        yield redis_store

    app.dependency_overrides[get_store] = _override
    with TestClient(app) as c:
        yield c, r
    app.dependency_overrides.clear()


@pytest.fixture()
def scripted_random() -> type[ScriptedRandom]:
    return ScriptedRandom
