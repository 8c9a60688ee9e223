"""
db/connection.py
----------------
Manages the PostgreSQL connection pool.
Uses psycopg2's ThreadedConnectionPool so one pool can be shared by many
threads, and closes connections that sit idle longer than a timeout.
"""

import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Optional, Sequence

import psycopg2
from psycopg2 import pool, extras

import config
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class QueryResult:
    """Rows returned by a statement (as dicts) and the affected row count."""
    rows: list[dict] = field(default_factory=list)
    rowcount: int = 0


class IdleTimeoutConnectionPool(pool.ThreadedConnectionPool):
    """
    Thread-safe pool that opens connections on demand, keeps up to `maxconn`
    of them idle, and closes those unused for more than `idle_timeout` seconds.

    Nothing is opened at construction time.
    """

    def __init__(
        self,
        maxconn: int,
        idle_timeout: float,
        *args,
        clock: Callable[[], float] = time.monotonic,
        **kwargs,
    ):
        self.idle_timeout = idle_timeout
        self._clock = clock
        self._idle_since: dict[int, float] = {}
        super().__init__(0, maxconn, *args, **kwargs)
        # Returned connections are only kept while len(pool) < minconn.
        self.minconn = maxconn

    def _getconn(self, key=None):
        self._reclaim_idle()
        conn = super()._getconn(key)
        self._idle_since.pop(id(conn), None)
        return conn

    def _putconn(self, conn, key=None, close=False):
        super()._putconn(conn, key, close)
        if not conn.closed and conn in self._pool:
            self._idle_since[id(conn)] = self._clock()

    def _reclaim_idle(self) -> None:
        """Close idle connections older than the idle timeout. Called under the pool lock."""
        cutoff = self._clock() - self.idle_timeout
        for conn in list(self._pool):
            if self._idle_since.get(id(conn), cutoff) < cutoff or conn.closed:
                self._pool.remove(conn)
                self._idle_since.pop(id(conn), None)
                if not conn.closed:
                    conn.close()
                logger.debug("Closed idle database connection.")


class Pool:
    """
    The data store's connection pool.

    `connect()` checks that a connection can be opened and `query()` runs one
    statement on a pooled connection, committing on success and rolling back
    on failure. Driver errors are raised unchanged.
    """

    def __init__(
        self,
        host: str = config.DATABASE_HOST,
        user: str = config.DATABASE_USERNAME,
        password: str = config.DATABASE_PASSWORD,
        database: str = config.DATABASE_NAME,
        port: int = config.DATABASE_PORT,
        max_connections: int = config.POOL_MAX_CONNECTIONS,
        idle_timeout_ms: int = config.POOL_IDLE_TIMEOUT_MS,
    ):
        self.host = host
        self.port = port
        # Callers beyond capacity wait here instead of getting PoolError.
        self._slots = threading.BoundedSemaphore(max_connections)
        self._pool = IdleTimeoutConnectionPool(
            max_connections,
            idle_timeout_ms / 1000,
            host=host,
            user=user,
            password=password,
            dbname=database,
            port=port,
        )

    @property
    def target(self) -> str:
        """Connection target for log messages, without credentials."""
        return f"postgres://{self.host}:{self.port}"

    def connect(self) -> None:
        """
        Open (or reuse) one connection and give it back to the pool.

        Raises:
            psycopg2.OperationalError: If the database is unreachable.
            psycopg2.pool.PoolError: If the pool is closed.
        """
        with self._checkout():
            pass

    @contextmanager
    def _checkout(self) -> Iterator[Any]:
        """
        Borrow a connection, waiting while all `max_connections` are in use.
        """
        with self._slots:
            conn = self._pool.getconn()
            try:
                yield conn
            finally:
                self._pool.putconn(conn)

    def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> QueryResult:
        """
        Execute a single statement.

        Args:
            sql: Statement text with %s placeholders.
            params: Values bound to the placeholders, in order.

        Returns:
            A QueryResult; `rows` is empty for statements that return nothing.
        """
        with self._checkout() as conn:
            try:
                with conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
                    cur.execute(sql, params)
                    rows = [dict(r) for r in cur.fetchall()] if cur.description else []
                    rowcount = cur.rowcount
                conn.commit()
                return QueryResult(rows=rows, rowcount=rowcount)
            except Exception:
                self._rollback(conn)
                raise

    @staticmethod
    def _rollback(conn) -> None:
        """Roll back after a failed statement without hiding the original error."""
        if conn.closed:
            return
        try:
            conn.rollback()
        except psycopg2.Error as e:
            logger.debug(f"Rollback failed, discarding connection: {e}")
            conn.close()

    def close(self) -> None:
        """Close all connections in the pool."""
        if not self._pool.closed:
            self._pool.closeall()
            logger.info("Database connection pool closed.")
