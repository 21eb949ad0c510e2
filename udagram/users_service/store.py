"""
User persistence.

Both stores expose the same coroutine interface:

    get(email) -> User | None
    add_if_absent(user) -> bool

add_if_absent is atomic: when two registrations race for one email,
exactly one of them gets True.
"""

import logging
from typing import Protocol

import asyncpg

from .models import User

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    email TEXT PRIMARY KEY,
    password_hash TEXT NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""


class UserStore(Protocol):
    async def get(self, email: str) -> User | None: ...

    async def add_if_absent(self, user: User) -> bool: ...

    async def close(self) -> None: ...


class InMemoryUserStore:
    """Process-local store keyed by email, used for local runs and tests."""

    def __init__(self):
        self._users: dict[str, User] = {}

    async def get(self, email: str) -> User | None:
        return self._users.get(email)

    async def add_if_absent(self, user: User) -> bool:
        # No await between the check and the insert, so this cannot interleave.
        if user.email in self._users:
            return False
        self._users[user.email] = user
        return True

    async def close(self) -> None:
        self._users.clear()

    def __len__(self) -> int:
        return len(self._users)


class PostgresUserStore:
    """User store backed by a PostgreSQL table through an asyncpg pool."""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    @classmethod
    async def connect(cls, database_url: str, min_size: int = 1, max_size: int = 10) -> "PostgresUserStore":
        """Open a pool and make sure the users table exists."""
        pool = await asyncpg.create_pool(
            database_url,
            min_size=min_size,
            max_size=max_size,
            command_timeout=60,
        )
        async with pool.acquire() as conn:
            await conn.execute(SCHEMA)
        logger.info("Connected to PostgreSQL")
        return cls(pool)

    async def get(self, email: str) -> User | None:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                SELECT email, password_hash, created_at, updated_at
                FROM users
                WHERE email = $1
                """,
                email
            )
        if not row:
            return None
        return User(
            email=row["email"],
            password_hash=row["password_hash"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    async def add_if_absent(self, user: User) -> bool:
        async with self.pool.acquire() as conn:
            inserted = await conn.fetchval(
                """
                INSERT INTO users (email, password_hash, created_at, updated_at)
                VALUES ($1, $2, $3, $4)
                ON CONFLICT (email) DO NOTHING
                RETURNING email
                """,
                user.email, user.password_hash, user.created_at, user.updated_at
            )
        return inserted is not None

    async def close(self) -> None:
        await self.pool.close()
