"""Hash helpers shared by every step of the web app login.

All hashing is plain SHA-256. Salting happens by string concatenation at
the call site, never inside these helpers.
"""

from __future__ import annotations

import base64
import hashlib

_URL_ESCAPE = str.maketrans({"+": "-", "/": "_", "=": "."})


def base64url_escape(value: str) -> str:
    """Map a standard base64 string onto the gateway's url alphabet.

    This is not RFC 4648 base64url: padding is kept and ``=`` becomes ``.``.
    """
    return value.translate(_URL_ESCAPE)


def paired_hash(first: str, second: str) -> str:
    """Return the base64 encoded SHA-256 of ``first:second``."""
    digest = hashlib.sha256(f"{first}:{second}".encode()).digest()
    return base64.b64encode(digest).decode()


def paired_hash_url_safe(first: str, second: str) -> str:
    """Return :func:`paired_hash` in the gateway's url alphabet."""
    return base64url_escape(paired_hash(first, second))


def hex_hash(value: str) -> str:
    """Return the lowercase hex SHA-256 digest of value."""
    return hashlib.sha256(value.encode()).hexdigest()
