"""
auth/models.py -- Domain dataclass for the user identity.

Pattern: Data class (pure data container, zero logic). Mirrors
products/models.py -- dataclasses own domain shape; stores and routes do the
work.

Layer rule: no imports from api/ or products/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """An account that owns products.

    email is stored case-normalized (stripped, lowercased) and is unique.
    hashed_password is a bcrypt hash with the salt embedded; the plaintext
    never reaches this object.

    id is None before the record is written to the database.
    """

    name: str
    email: str
    hashed_password: str
    id: int | None = None
    created_at: str = ""  # ISO 8601, set by store on insert
