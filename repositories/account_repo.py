"""
repositories/account_repo.py
-----------------------------
Data access layer for user accounts.
All SQL queries related to the `account` table live here.
"""

from typing import Optional

from db.errors import ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class AccountRepository:
    """Read-only lookups on the account table. Database errors propagate."""

    def __init__(self, store):
        self.store = store

    def find_user(self, username: str) -> Optional[dict]:
        """
        Find an account by username, ignoring case.

        Args:
            username: The username to look up.

        Returns:
            ``{"username": ...}`` with the stored spelling, or None.

        Raises:
            ValidationError: If `username` is empty.
        """
        if not username:
            logger.error(f"Username '{username}' is not valid")
            raise ValidationError(f"Username '{username}' is not valid")

        sql = "SELECT username FROM account WHERE LOWER(username) = LOWER(%s);"
        result = self.store.execute(sql, [username])
        if result.rows:
            return {"username": result.rows[0]["username"]}
        return None

    def get_users(self, prefix: str) -> list[dict]:
        """
        Find all accounts whose username starts with `prefix`.

        Returns:
            List of dicts: [{'username': str, 'exact': bool}, ...], where
            `exact` is True only for a case-sensitive full match.
        """
        sql = """
            SELECT username
            FROM account
            WHERE username LIKE %s
            ORDER BY username;
        """
        result = self.store.execute(sql, [_escape_like(prefix or "") + "%"])
        return [
            {"username": r["username"], "exact": r["username"] == prefix}
            for r in result.rows
        ]
