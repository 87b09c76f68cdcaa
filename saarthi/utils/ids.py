"""
Short random identifiers for reports and notices.
"""

import secrets
import string

_ALPHABET = string.digits + string.ascii_lowercase


def generate_id(length: int = 7) -> str:
    """Random base36 identifier (7 characters by default)."""
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))
