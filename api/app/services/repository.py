from __future__ import annotations

import json
import re
from functools import lru_cache
from typing import Any

import asyncpg  # type: ignore[import-untyped]

from app.core.config import get_settings
from app.services.store import InMemoryRecordStore


class RepositoryError(Exception):
    """Base repository error."""


class RepositoryUnavailableError(RepositoryError):
    """Raised when the database is unavailable or not configured."""


class RepositoryNotFoundError(RepositoryError):
    """Raised when the requested entity does not exist."""


class RepositoryConflictError(RepositoryError):
    """Raised when an operation violates state transition rules."""


class RepositoryValidationError(RepositoryError):
    """Raised when payload validation fails before persistence."""


RECORD_TABLE_RE = re.compile(r"^[a-z_][a-z0-9_]*$")


def escape_like_prefix(prefix: str) -> str:
    escaped = prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"{escaped}%"


class PostgresRecordStore:
    """Key-value records in a single ``(key text primary key, value jsonb)`` table."""

    def __init__(
        self,
        database_url: str | None,
        min_pool_size: int,
        max_pool_size: int,
        table: str = "kv_store",
    ) -> None:
        if not RECORD_TABLE_RE.match(table):
            raise ValueError(f"invalid record table name: {table!r}")
        self.database_url = database_url
        self.min_pool_size = min_pool_size
        self.max_pool_size = max_pool_size
        self.table = table
        self._pool: asyncpg.Pool | None = None

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None

    async def ping(self) -> None:
        pool = await self._get_pool()
        try:
            await pool.fetchval("select 1")
        except (asyncpg.PostgresError, OSError) as exc:
            raise RepositoryUnavailableError("database unavailable") from exc

    async def get(self, key: str) -> Any | None:
        pool = await self._get_pool()
        try:
            value = await pool.fetchval(f"select value from {self.table} where key = $1", key)
        except (asyncpg.PostgresError, OSError) as exc:
            raise RepositoryUnavailableError("database unavailable") from exc
        if value is None:
            return None
        return self._decode_value(value)

    async def set(self, key: str, value: Any) -> None:
        pool = await self._get_pool()
        try:
            await pool.execute(
                f"""
                insert into {self.table} (key, value)
                values ($1, $2::jsonb)
                on conflict (key) do update set value = excluded.value
                """,
                key,
                json.dumps(value),
            )
        except (asyncpg.PostgresError, OSError) as exc:
            raise RepositoryUnavailableError("database unavailable") from exc

    async def get_by_prefix(self, prefix: str) -> list[Any]:
        pool = await self._get_pool()
        try:
            rows = await pool.fetch(
                f"""
                select key, value
                from {self.table}
                where key like $1 escape '\\'
                order by key
                """,
                escape_like_prefix(prefix),
            )
        except (asyncpg.PostgresError, OSError) as exc:
            raise RepositoryUnavailableError("database unavailable") from exc
        return [self._decode_value(row["value"]) for row in rows]

    async def _get_pool(self) -> asyncpg.Pool:
        if not self.database_url:
            raise RepositoryUnavailableError("JB_DATABASE_URL is required")

        if self._pool is not None:
            return self._pool

        try:
            self._pool = await asyncpg.create_pool(
                dsn=self.database_url,
                min_size=self.min_pool_size,
                max_size=self.max_pool_size,
                command_timeout=15,
            )
            return self._pool
        except Exception as exc:  # pragma: no cover - depends on environment
            raise RepositoryUnavailableError("database unavailable") from exc

    @staticmethod
    def _decode_value(value: Any) -> Any:
        # asyncpg hands jsonb back as text unless a codec is registered.
        if isinstance(value, str):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                return None
        return value


def coerce_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return str(value)


def coerce_json_dict(value: Any) -> dict[str, Any]:
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            return {}
    if isinstance(value, dict):
        return value
    return {}


@lru_cache
def get_repository() -> PostgresRecordStore | InMemoryRecordStore:
    settings = get_settings()
    if settings.record_store_backend == "memory":
        return InMemoryRecordStore()
    return PostgresRecordStore(
        database_url=settings.database_url,
        min_pool_size=settings.database_pool_min_size,
        max_pool_size=settings.database_pool_max_size,
        table=settings.record_table,
    )
