"""
products/models.py -- Domain dataclass for inventory products.

Pure data container with zero logic. Ownership rules (who may read, change,
or delete a record) live in products/store.py, where every query carries the
owner_id predicate.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Product:
    """A product owned by exactly one user.

    owner_id is set once, on insert, from the authenticated requester. The
    store has no code path that writes it again.

    id is None before the record is written to the database.
    """

    name: str
    description: str
    category: str
    price: float  # non-negative, two decimal places
    owner_id: int
    id: Optional[int] = None
    created_at: str = ""  # ISO 8601, set by store on insert
    updated_at: str = ""  # ISO 8601, refreshed on every update
