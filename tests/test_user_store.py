"""Tests for the user stores."""

import asyncio

from udagram.users_service.models import User
from udagram.users_service.store import InMemoryUserStore, PostgresUserStore


def test_in_memory_add_if_absent_admits_one_of_concurrent_inserts():
    store = InMemoryUserStore()

    async def race():
        users = [User(email="alice@example.com", password_hash=f"hash-{i}") for i in range(10)]
        return await asyncio.gather(*(store.add_if_absent(u) for u in users))

    results = asyncio.run(race())

    assert results.count(True) == 1
    assert len(store) == 1


def test_in_memory_get():
    store = InMemoryUserStore()
    user = User(email="alice@example.com", password_hash="hash")

    assert asyncio.run(store.get("alice@example.com")) is None
    asyncio.run(store.add_if_absent(user))
    assert asyncio.run(store.get("alice@example.com")) is user


def test_short_view_has_no_hash():
    user = User(email="alice@example.com", password_hash="hash")

    assert user.short().model_dump() == {"email": "alice@example.com"}


class FakeConnection:
    """Stands in for an asyncpg connection with a primary key on email."""

    def __init__(self, rows):
        self.rows = rows
        self.queries = []

    async def fetchrow(self, query, email):
        self.queries.append(query)
        return self.rows.get(email)

    async def fetchval(self, query, email, password_hash, created_at, updated_at):
        self.queries.append(query)
        if email in self.rows:
            return None
        self.rows[email] = {
            "email": email,
            "password_hash": password_hash,
            "created_at": created_at,
            "updated_at": updated_at,
        }
        return email


class FakePool:
    def __init__(self):
        self.conn = FakeConnection({})
        self.closed = False

    def acquire(self):
        pool = self

        class _Acquire:
            async def __aenter__(self):
                return pool.conn

            async def __aexit__(self, *exc):
                return False

        return _Acquire()

    async def close(self):
        self.closed = True


def test_postgres_store_insert_if_absent_and_get():
    pool = FakePool()
    store = PostgresUserStore(pool)
    user = User(email="alice@example.com", password_hash="hash")

    async def scenario():
        first = await store.add_if_absent(user)
        second = await store.add_if_absent(User(email="alice@example.com", password_hash="other"))
        fetched = await store.get("alice@example.com")
        missing = await store.get("bob@example.com")
        await store.close()
        return first, second, fetched, missing

    first, second, fetched, missing = asyncio.run(scenario())

    assert (first, second) == (True, False)
    assert fetched == user
    assert missing is None
    assert pool.closed
    assert any("ON CONFLICT (email) DO NOTHING" in q for q in pool.conn.queries)
