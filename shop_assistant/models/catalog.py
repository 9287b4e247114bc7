import random
import re
from typing import Iterable

import aiosqlite
from pydantic import ValidationError

from shop_assistant.exceptions import StorageError
from shop_assistant.logger import get_logger
from shop_assistant.models.schemas import SKU_FORMAT, CatalogEntry

logger = get_logger(__name__)

SAMPLE_CATEGORIES = ["Apparel", "Footwear", "Accessories", "Electronics", "Home", "Beauty"]


def _to_entries(rows) -> list[CatalogEntry]:
    """Build catalog entries, skipping rows the external store got wrong."""
    entries = []
    for row in rows:
        try:
            entries.append(CatalogEntry(**dict(row)))
        except ValidationError as e:
            logger.warning("Skipping malformed catalog row id=%s: %s", row["id"], e)
    return entries


async def list_active_products(db_path: str, limit: int) -> list[CatalogEntry]:
    """Return up to `limit` active products in a stable order (by id)."""
    if limit <= 0:
        return []
    try:
        async with aiosqlite.connect(db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT * FROM products WHERE is_active = 1 ORDER BY id ASC LIMIT ?",
                (limit,),
            )
            rows = await cursor.fetchall()
    except aiosqlite.Error as e:
        raise StorageError(f"Failed to load catalog: {e}") from e
    return _to_entries(rows)


async def get_products_by_sku(db_path: str, skus: Iterable[str]) -> dict[str, CatalogEntry]:
    """Look up active products by exact SKU. Missing SKUs are absent from the result."""
    skus = list(dict.fromkeys(skus))
    if not skus:
        return {}
    placeholders = ", ".join("?" for _ in skus)
    try:
        async with aiosqlite.connect(db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                f"SELECT * FROM products WHERE is_active = 1 AND sku IN ({placeholders})",
                skus,
            )
            rows = await cursor.fetchall()
    except aiosqlite.Error as e:
        raise StorageError(f"Failed to look up products: {e}") from e
    entries = _to_entries(rows)
    return {entry.sku: entry for entry in entries}


async def add_product(
    db_path: str,
    sku: str,
    name: str,
    price: float,
    category: str | None = None,
    description: str | None = None,
    currency: str = "GBP",
    image_url: str | None = None,
    is_active: bool = True,
) -> int:
    """Insert a product. Returns the product id."""
    if not re.fullmatch(SKU_FORMAT, sku):
        raise ValueError(f"Invalid SKU {sku!r}, expected SKU-####")
    async with aiosqlite.connect(db_path) as db:
        cursor = await db.execute(
            "INSERT INTO products "
            "(sku, name, description, category, price, currency, image_url, is_active) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (sku, name, description, category, price, currency, image_url, int(is_active)),
        )
        await db.commit()
        return cursor.lastrowid


async def seed_catalog(db_path: str, count: int = 50, seed: int | None = None) -> int:
    """Fill an empty products table with sample items. Returns rows inserted."""
    rng = random.Random(seed)
    async with aiosqlite.connect(db_path) as db:
        cursor = await db.execute("SELECT COUNT(*) FROM products")
        (existing,) = await cursor.fetchone()
        if existing:
            return 0

        rows = []
        for i in range(1, count + 1):
            category = rng.choice(SAMPLE_CATEGORIES)
            rows.append((
                f"SKU-{i:04d}",
                f"{category} Item {i}",
                f"Sample description for {category} Item {i}.",
                category,
                round(rng.uniform(5, 105), 2),   # £5-£105
                "GBP",
            ))
        await db.executemany(
            "INSERT INTO products (sku, name, description, category, price, currency) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            rows,
        )
        await db.commit()
    return len(rows)
