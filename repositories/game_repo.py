"""
repositories/game_repo.py
--------------------------
Data access layer for games.
"""

from typing import Callable, Optional

import config
from db.errors import GuidAllocationError
from utils.logger import get_logger
from utils.tokens import generate_url

logger = get_logger(__name__)


class GameRepository:
    """Repository for queries on the game table."""

    def __init__(self, store, token_factory: Callable[[int], str] = generate_url):
        self.store = store
        self.token_factory = token_factory

    def get_unused_guid(self, max_attempts: Optional[int] = None) -> str:
        """
        Draw random tokens until one is not used by any game.

        Args:
            max_attempts: Give up after this many tokens. None means keep
                trying forever, which only ends if a free token exists.

        Returns:
            A GUID with no matching row in `game`.

        Raises:
            GuidAllocationError: If `max_attempts` tokens were all taken.
        """
        sql = "SELECT guid FROM game WHERE guid = %s;"
        attempts = 0
        while max_attempts is None or attempts < max_attempts:
            attempts += 1
            guid = self.token_factory(config.GUID_LENGTH)
            if not self.store.execute(sql, [guid]).rows:
                return guid
            logger.debug(f"GUID {guid} is taken, drawing another")

        logger.error(f"No unused GUID after {attempts} attempts")
        raise GuidAllocationError(f"No unused GUID after {attempts} attempts")
