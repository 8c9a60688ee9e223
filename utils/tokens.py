"""
utils/tokens.py
---------------
Short random tokens used as shareable game identifiers.
"""

import secrets
import string

URL_ALPHABET = string.ascii_letters + string.digits


def generate_url(length: int = 6) -> str:
    """Return a random URL-safe token of `length` letters and digits."""
    return "".join(secrets.choice(URL_ALPHABET) for _ in range(length))
