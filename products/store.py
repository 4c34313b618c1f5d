"""
products/store.py -- SQLAlchemy Core persistence layer for products.

Uses SQLAlchemy Core (not ORM) so the dataclass in products/models.py remains
the authoritative domain representation. Swapping SQLite for PostgreSQL is a
connection string change, not a rewrite.

Pattern: Repository + Data Mapper. ProductStore is the repository;
_row_to_product is the mapper. Route handlers never touch SQL directly.

Ownership:
  Every read and write takes owner_id and puts "owner_id = :owner" in the
  WHERE clause next to the id match. Update and delete are each ONE
  conditional statement, so there is no window between "does this user own
  it?" and "change it". A product that exists under another account is
  indistinguishable from one that does not exist: both come back as
  None / False.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = ProductStore("sqlite:///stockroom.db")
    created = store.create(Product(name="Widget", description="A widget",
                                   category="Tools", price=19.99, owner_id=1))
    store.update_owned(1, created.id, {"price": 25.0})
    store.delete_owned(1, created.id)
    store.close()
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Integer, MetaData, Numeric, String, Table, Text, create_engine, event
from sqlalchemy.engine import Engine

from products.models import Product

logger = logging.getLogger("stockroom.products")

# Fields a caller may change through update_owned(). id and owner_id are
# deliberately absent.
_UPDATABLE: frozenset[str] = frozenset({"name", "description", "category", "price"})

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_products = Table(
    "products",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("owner_id", Integer, nullable=False, index=True),
    Column("name", String(255), nullable=False),
    Column("description", Text, nullable=False),
    Column("category", String(100), nullable=False),
    Column("price", Numeric(12, 2, asdecimal=False), nullable=False),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# WAL mode
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety."""
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    # Fixed microsecond precision keeps lexical order equal to time order.
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ProductStore:
    """Repository for Product entities, always scoped by owner."""

    def __init__(self, db_url: str) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        metadata.create_all(self.engine)

    def list_for_owner(self, owner_id: int) -> list[Product]:
        """Return every product owned by owner_id, newest first.

        Ties on created_at fall back to id (also newest first). No pagination.
        """
        with self.engine.connect() as conn:
            rows = conn.execute(
                _products.select()
                .where(_products.c.owner_id == owner_id)
                .order_by(_products.c.created_at.desc(), _products.c.id.desc())
            ).fetchall()
        return [_row_to_product(r) for r in rows]

    def get_owned(self, owner_id: int, product_id: int) -> Optional[Product]:
        """Return the product if owner_id owns it, else None."""
        with self.engine.connect() as conn:
            row = conn.execute(
                _products.select().where((_products.c.id == product_id) & (_products.c.owner_id == owner_id))
            ).fetchone()
        return _row_to_product(row) if row is not None else None

    def create(self, product: Product) -> Product:
        """Insert a new product and return it with id and timestamps filled in."""
        now = _now_iso()
        with self.engine.begin() as conn:
            result = conn.execute(
                _products.insert().values(
                    owner_id=product.owner_id,
                    name=product.name,
                    description=product.description,
                    category=product.category,
                    price=product.price,
                    created_at=now,
                    updated_at=now,
                )
            )
            product_id = result.inserted_primary_key[0]
        logger.info("Product created (id=%d, owner_id=%d)", product_id, product.owner_id)
        return Product(
            id=product_id,
            owner_id=product.owner_id,
            name=product.name,
            description=product.description,
            category=product.category,
            price=product.price,
            created_at=now,
            updated_at=now,
        )

    def update_owned(self, owner_id: int, product_id: int, fields: dict) -> Optional[Product]:
        """Apply a partial update to a product owned by owner_id.

        Executes a single UPDATE ... WHERE id = :id AND owner_id = :owner
        RETURNING statement. Returns the updated product, or None when no row
        matched (absent or owned by someone else).

        Only keys in _UPDATABLE are accepted. Unknown keys (including id and
        owner_id) raise ValueError rather than being silently ignored --
        callers are expected to filter request bodies first.

        An empty fields dict changes nothing and returns the current record,
        still subject to the ownership check.
        """
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Fields not updatable: {sorted(unknown)!r}")
        if not fields:
            return self.get_owned(owner_id, product_id)

        with self.engine.begin() as conn:
            row = conn.execute(
                _products.update()
                .where((_products.c.id == product_id) & (_products.c.owner_id == owner_id))
                .values(**fields, updated_at=_now_iso())
                .returning(*_products.c)
            ).fetchone()
        if row is None:
            return None
        logger.info("Product updated (id=%d, fields=%s)", product_id, ",".join(sorted(fields)))
        return _row_to_product(row)

    def delete_owned(self, owner_id: int, product_id: int) -> bool:
        """Permanently delete a product owned by owner_id.

        Single DELETE ... WHERE id = :id AND owner_id = :owner statement.
        Returns True if a row was deleted, False if absent or not owned.
        """
        with self.engine.begin() as conn:
            result = conn.execute(
                _products.delete().where((_products.c.id == product_id) & (_products.c.owner_id == owner_id))
            )
        deleted = result.rowcount > 0
        if deleted:
            logger.info("Product deleted (id=%d, owner_id=%d)", product_id, owner_id)
        return deleted

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_product(row) -> Product:
    return Product(
        id=row.id,
        owner_id=row.owner_id,
        name=row.name,
        description=row.description,
        category=row.category,
        price=float(row.price),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
