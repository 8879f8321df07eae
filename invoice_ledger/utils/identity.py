"""
Record Identity Module.

Issues string identifiers for records created by ingestion. An id is the
record-kind prefix, a millisecond timestamp and a random suffix drawn per
call, e.g. ``inv-1760870400000-3f9a0c21d4e7``. The random suffix keeps ids
distinct when many records are created within the same millisecond.
"""

import secrets
import time

# 48 random bits per id
_RANDOM_BYTES = 6


def new_id(prefix: str) -> str:
    """
    Generate a fresh record identifier.

    Args:
        prefix: Record-kind prefix ("inv", "prod", "cust").

    Returns:
        Identifier string of the form ``<prefix>-<millis>-<hex>``.

    Example:
        >>> new_id("inv").startswith("inv-")
        True
    """
    millis = int(time.time() * 1000)
    return f"{prefix}-{millis}-{secrets.token_hex(_RANDOM_BYTES)}"
