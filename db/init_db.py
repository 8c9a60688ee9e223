"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Tables are checked and created one at a time, in the order given, because
`game` and `stream` reference the tables before them.

Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from typing import Callable, Iterable

import psycopg2

from db.errors import ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)

ACCOUNT_SQL = """
    CREATE TABLE account (
        id          SERIAL      PRIMARY KEY,
        username    TEXT        UNIQUE NOT NULL,
        password    TEXT        NOT NULL,
        created_at  TIMESTAMP   NOT NULL DEFAULT NOW()
    )
"""

GAME_SQL = """
    CREATE TABLE game (
        id          SERIAL      PRIMARY KEY,
        account     INTEGER     NOT NULL REFERENCES account(id),
        guid        TEXT        UNIQUE NOT NULL,
        created_at  TIMESTAMP   NOT NULL DEFAULT NOW()
    )
"""

STREAM_SQL = """
    CREATE TABLE stream (
        id          INTEGER     NOT NULL,
        game        INTEGER     NOT NULL REFERENCES game(id),
        language    INTEGER     NOT NULL,
        active      BOOLEAN     NOT NULL DEFAULT FALSE,
        player      INTEGER     REFERENCES account(id),
        value       TEXT        NOT NULL,

        PRIMARY KEY (id, game)
    )
"""


def _create_table(store, sql: str, table: str, purpose: str) -> bool:
    try:
        store.execute(sql)
    except psycopg2.Error as e:
        logger.error(f"Can't create table: {e}")
        return False
    logger.info(f"Created table '{table}' for {purpose}")
    return True


def create_account_table(store) -> bool:
    """Create the `account` table. Errors are logged, never raised."""
    return _create_table(store, ACCOUNT_SQL, "account", "users")


def create_game_table(store) -> bool:
    """Create the `game` table. Errors are logged, never raised."""
    return _create_table(store, GAME_SQL, "game", "games")


def create_stream_table(store) -> bool:
    """Create the `stream` table. Errors are logged, never raised."""
    return _create_table(store, STREAM_SQL, "stream", "streams")


TABLE_CREATORS: dict[str, Callable[..., bool]] = {
    "Account": create_account_table,
    "Game": create_game_table,
    "Stream": create_stream_table,
}


def table_exists(store, table: str) -> bool:
    """
    Check whether a table exists.
    to_regclass() is case-sensitive on identifier text, so the name is lower-cased.
    """
    result = store.execute("SELECT to_regclass(%s) AS to_regclass", [table.lower()])
    return result.rows[0]["to_regclass"] is not None


def ensure_tables(store, tables: Iterable[str]) -> int:
    """
    Create every missing table, strictly one after another.

    Args:
        store: Anything with an ``execute(query, params)`` method (a DataStore).
        tables: Logical table names, parents before children.

    Returns:
        The number of tables created in this run (0 if all already existed).

    Raises:
        ValidationError: If a table name is empty. Database errors are logged
            per table and do not stop the run.
    """
    created = 0
    logger.info("Creating tables if they don't exist")

    for table in tables or []:
        if not table:
            logger.error(f"Table '{table}' is not valid")
            raise ValidationError(f"Table '{table}' is not valid")

        try:
            if table_exists(store, table):
                continue
        except psycopg2.Error as e:
            logger.error(f"Can't execute query: {e}")
            continue

        creator = TABLE_CREATORS.get(table)
        if creator is None:
            logger.error(f"No definition for table '{table}'")
            continue
        if creator(store):
            created += 1

    return created


if __name__ == "__main__":
    from db.datastore import DataStore

    store = DataStore()
    store.connect()
    store.close()
    print("✅ Database schema created successfully.")
