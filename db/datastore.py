"""
db/datastore.py
---------------
The data store: owns the connection pool, connects with retry, makes sure
the required tables exist, and runs parameterized queries.

Error handling differs per operation and is intentional:
    - execute, find_user, get_users and get_unused_guid raise database errors.
    - drop_table, update_value and table creation log them and return normally.
"""

import re
import threading
import time
from typing import Any, Callable, Iterable, Optional

import psycopg2

import config
from db import init_db
from db.connection import Pool, QueryResult
from db.errors import ValidationError
from repositories.account_repo import AccountRepository
from repositories.game_repo import GameRepository
from repositories.stream_repo import StreamRepository
from utils.logger import get_logger
from utils.tokens import generate_url

logger = get_logger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class DataStore:
    """
    Pooled PostgreSQL access for accounts, games and streams.

    Args:
        pool: Object with ``connect()`` and ``query(sql, params)``; defaults to
            a Pool built from configuration. No connection is opened here.
        sleep: Called with the retry delay in seconds between connect attempts.
        token_factory: Returns a random token of the given length.
        retry_delay_ms: Fixed delay between connect attempts.
    """

    def __init__(
        self,
        pool=None,
        sleep: Callable[[float], Any] = time.sleep,
        token_factory: Callable[[int], str] = generate_url,
        retry_delay_ms: int = config.CONNECT_RETRY_DELAY_MS,
    ):
        self.pool = pool if pool is not None else Pool()
        self.connected = False
        self._ready = threading.Event()
        self._connect_lock = threading.Lock()
        self._sleep = sleep
        self._retry_delay_ms = retry_delay_ms

        self.accounts = AccountRepository(self)
        self.games = GameRepository(self, token_factory)
        self.streams = StreamRepository(self)

    # ── CONNECTION ────────────────────────────────────────

    def connect(self) -> int:
        """
        Connect to the database, retrying forever, then create missing tables.

        Concurrent calls run one at a time; a call made once the store is
        ready returns 0 without touching the database.

        Returns:
            The number of tables created during bootstrap.
        """
        with self._connect_lock:
            if self._ready.is_set():
                return 0

            while True:
                try:
                    self.pool.connect()
                    break
                except psycopg2.Error as e:
                    logger.warning(f"Can't connect to database: {e}")
                    self._sleep(self._retry_delay_ms / 1000)
                    logger.info("Retrying to connect to database...")

            self.connected = True
            logger.info(f"Connected to database on {self.pool.target}")

            count = self.ensure_tables(config.REQUIRED_TABLES)
            already = "" if count > 0 else "already "
            logger.info(f"All tables have {already}been created")
            self._ready.set()
            return count

    @property
    def is_ready(self) -> bool:
        """True once connected and the required tables have been checked."""
        return self._ready.is_set()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until `connect()` has finished. Returns False on timeout."""
        return self._ready.wait(timeout)

    def close(self) -> None:
        """Close the pool. The store cannot be used afterwards."""
        self._ready.clear()
        self.connected = False
        self.pool.close()

    # ── QUERIES ───────────────────────────────────────────

    def execute(self, query: str, params: Any = None) -> QueryResult:
        """
        Run one query on the pool.

        Args:
            query: SQL text with %s placeholders.
            params: Ordered values for the placeholders. A single value that
                is not a list or tuple is wrapped in a list.

        Raises:
            ValidationError: If `query` is empty; the pool is not contacted.
            psycopg2.Error: Any database error, unchanged.
        """
        if not query:
            logger.error(f"Query '{query}' is not valid")
            raise ValidationError(f"Query '{query}' is not valid")

        if params is not None and not isinstance(params, (list, tuple)):
            logger.warning("Query parameters are not a sequence, converting")
            params = [params]

        return self.pool.query(query, params)

    def drop_table(self, table: str) -> None:
        """
        Drop a table. A failed drop is logged and not raised.

        Raises:
            ValidationError: If `table` is empty or not a plain identifier.
        """
        if not table or not _IDENTIFIER.match(table):
            logger.error(f"Can't drop table: {table}")
            raise ValidationError(f"Can't drop table: {table}")

        try:
            self.execute(f"DROP TABLE {table}")
        except psycopg2.Error as e:
            logger.error(f"Can't drop table: {e}")
            return
        logger.warning(f"Dropped table {table}")

    def ensure_tables(self, tables: Iterable[str]) -> int:
        """Create the missing tables in order. See db.init_db.ensure_tables."""
        return init_db.ensure_tables(self, tables)

    # ── DOMAIN HELPERS ────────────────────────────────────

    def update_value(self, game: int, stream: int, value: str) -> Optional[QueryResult]:
        return self.streams.update_value(game, stream, value)

    def find_user(self, username: str) -> Optional[dict]:
        return self.accounts.find_user(username)

    def get_users(self, prefix: str) -> list[dict]:
        return self.accounts.get_users(prefix)

    def get_unused_guid(self, max_attempts: Optional[int] = None) -> str:
        return self.games.get_unused_guid(max_attempts)


_store: Optional[DataStore] = None
_store_lock = threading.Lock()


def get_datastore() -> DataStore:
    """Return the shared DataStore, creating it on first use (not connected)."""
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                _store = DataStore()
    return _store


def close_datastore() -> None:
    """Close the shared DataStore, if any."""
    global _store
    with _store_lock:
        if _store is not None:
            _store.close()
            _store = None
