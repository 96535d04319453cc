#!/usr/bin/env python3
"""Key-value runtime helpers for memory/sqlite/neon log persistence."""

from __future__ import annotations

import logging
import os
import sqlite3
from typing import Any, Iterable, Protocol


logger = logging.getLogger(__name__)

DEFAULT_NEON_DSN_ENV = "NEON_DATABASE_URL"
DEFAULT_NEON_CONNECT_TIMEOUT_S = 15

KV_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS kv_store (
  key TEXT PRIMARY KEY,
  value BYTEA NOT NULL,
  updated_at TIMESTAMP
)
"""

UPSERT_SQL = """
INSERT INTO kv_store (key, value, updated_at)
VALUES (%s, %s, {now})
ON CONFLICT (key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
"""


class KeyValueStore(Protocol):
    def get(self, key: str) -> bytes | None: ...

    def set(self, key: str, value: bytes) -> None: ...


def _require_psycopg():
    try:
        import psycopg  # type: ignore[import-not-found]
    except ImportError as exc:  # pragma: no cover - depends on local env
        raise SystemExit(
            "psycopg is not installed. install with: pip install 'psycopg[binary]'"
        ) from exc
    return psycopg


def is_sqlite_conn(conn: Any) -> bool:
    return isinstance(conn, sqlite3.Connection)


def _adapt_sqlite_query(query: str) -> str:
    return query.replace("%s", "?")


def fetch_one(conn: Any, query: str, params: Iterable[Any] = ()) -> Any | None:
    if is_sqlite_conn(conn):
        return conn.execute(_adapt_sqlite_query(query), tuple(params)).fetchone()
    with conn.cursor() as cur:
        cur.execute(query, tuple(params))
        return cur.fetchone()


def exec_write(conn: Any, query: str, params: Iterable[Any] = ()) -> int:
    if is_sqlite_conn(conn):
        cur = conn.execute(_adapt_sqlite_query(query), tuple(params))
        return cur.rowcount
    with conn.cursor() as cur:
        cur.execute(query, tuple(params))
        return cur.rowcount


def now_expr(conn: Any) -> str:
    if is_sqlite_conn(conn):
        return "datetime('now')"
    return "now()"


def _to_bytes(value: Any) -> bytes:
    if isinstance(value, bytes):
        return value
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    return str(value).encode("utf-8")


class MemoryKeyValueStore:
    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self.data: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> bytes | None:
        return self.data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self.data[key] = bytes(value)


class _ConnectionKeyValueStore:
    def __init__(self, conn: Any) -> None:
        self.conn = conn
        exec_write(self.conn, KV_TABLE_SQL)
        self.conn.commit()

    def get(self, key: str) -> bytes | None:
        row = fetch_one(self.conn, "SELECT value FROM kv_store WHERE key = %s", (key,))
        if row is None:
            return None
        return _to_bytes(row[0])

    def set(self, key: str, value: bytes) -> None:
        exec_write(self.conn, UPSERT_SQL.format(now=now_expr(self.conn)), (key, value))
        self.conn.commit()
        logger.debug("stored %d bytes under %s", len(value), key)

    def close(self) -> None:
        self.conn.close()


class SqliteKeyValueStore(_ConnectionKeyValueStore):
    def __init__(self, path: str) -> None:
        super().__init__(sqlite3.connect(path))


class NeonKeyValueStore(_ConnectionKeyValueStore):
    def __init__(self, dsn: str, connect_timeout: int = DEFAULT_NEON_CONNECT_TIMEOUT_S) -> None:
        psycopg = _require_psycopg()
        try:
            conn = psycopg.connect(dsn, connect_timeout=connect_timeout)
        except Exception as exc:  # pragma: no cover - external infra
            raise SystemExit(f"failed to connect to Neon: {exc}") from exc
        super().__init__(conn)


def resolve_neon_dsn(neon_dsn: str | None, neon_dsn_env: str) -> str:
    if neon_dsn:
        return neon_dsn
    env_value = os.environ.get(neon_dsn_env)
    if env_value:
        return env_value
    raise SystemExit(
        f"--neon-dsn is required when --backend neon (or set env: {neon_dsn_env})"
    )


def open_kv_store(
    *,
    backend: str,
    db: str | None = None,
    neon_dsn: str | None = None,
    neon_dsn_env: str = DEFAULT_NEON_DSN_ENV,
    neon_connect_timeout: int = DEFAULT_NEON_CONNECT_TIMEOUT_S,
) -> KeyValueStore:
    if backend == "memory":
        return MemoryKeyValueStore()

    if backend == "sqlite":
        if not db:
            raise SystemExit("--db is required when --backend sqlite")
        return SqliteKeyValueStore(db)

    if backend == "neon":
        dsn = resolve_neon_dsn(neon_dsn, neon_dsn_env)
        return NeonKeyValueStore(dsn, connect_timeout=neon_connect_timeout)

    raise SystemExit(f"unsupported backend: {backend}")
