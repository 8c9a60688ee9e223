"""
main.py
-------
Entry point: brings the data store up.

Responsibilities:
    - Connect to PostgreSQL, retrying until the database is reachable.
    - Create the account, game and stream tables if they are missing.
    - Close the pool on exit.
"""

from db.datastore import close_datastore, get_datastore
from utils.logger import get_logger

logger = get_logger(__name__)


def main() -> None:
    """Connect the shared data store and report the schema state."""
    logger.info("Initializing database...")
    store = get_datastore()
    try:
        created = store.connect()
        logger.info(f"🚀 Data store is ready ({created} table(s) created).")
    finally:
        close_datastore()
        logger.info("Data store stopped.")


if __name__ == "__main__":
    main()
