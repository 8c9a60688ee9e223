"""
repositories/stream_repo.py
----------------------------
Data access layer for game streams.
"""

from typing import Optional

import psycopg2

from db.connection import QueryResult
from db.errors import ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)


class StreamRepository:
    """Repository for writes on the stream table."""

    def __init__(self, store):
        self.store = store

    def update_value(self, game: int, stream: int, value: str) -> Optional[QueryResult]:
        """
        Set the value of one stream of a game.

        Database errors are logged and not raised; the caller gets None.

        Raises:
            ValidationError: If `game` or `stream` is missing or zero.
        """
        if not game or not stream:
            logger.error("Game or stream not supplied")
            raise ValidationError("Game or stream not supplied")

        sql = "UPDATE stream SET value = %s WHERE game = %s AND id = %s;"
        try:
            return self.store.execute(sql, [value, game, stream])
        except psycopg2.Error as e:
            logger.error(f"Can't update value: {e}")
            return None
