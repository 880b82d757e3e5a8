"""
Service layer for products.

Products are the documents users submit to collect recommendations
on.  Besides plain CRUD this service owns ``recommendationCount``:
new products always start at zero, and ``reconcile_counts`` recomputes
the counter of every product from the recommendations table when it
has drifted (for instance after rows were edited by hand).  The
per-recommendation increments and decrements are performed by
``RecommendationService`` in the same transaction as the insert or
delete they belong to.

All queries use parameterized statements.  Storage failures surface
as ``StorageError``; malformed identities as ``InvalidInputError``.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Dict, List

from boycott_api.app.core.db import storage_cursor
from boycott_api.app.core.errors import NotFoundError
from boycott_api.app.core.ids import parse_id
from boycott_api.app.schemas.product import ProductCreate, ProductUpdate
from boycott_api.app.schemas.results import DeleteResult, InsertResult, UpdateResult
from boycott_api.app.services.documents import (
    dump_extra,
    field_value,
    load_extra,
    split_fields,
    utc_now,
)


logger = logging.getLogger(__name__)

# Document key -> text column.  ``recommendationCount`` has its own
# integer column and is handled separately.
PRODUCT_TEXT_COLUMNS = {
    "userEmail": "user_email",
    "productName": "product_name",
    "queryTitle": "query_title",
}


class ProductService:
    """Service class for managing products."""

    @classmethod
    async def list_products(cls) -> List[Dict[str, Any]]:
        """Return every product.  No ordering is guaranteed."""
        with storage_cursor("list products") as cursor:
            rows = cursor.execute("SELECT * FROM products").fetchall()
        return [cls._row_to_document(row) for row in rows]

    @classmethod
    async def get_product(cls, product_id: Any) -> Dict[str, Any]:
        """Retrieve a single product.

        Raises ``InvalidInputError`` for a malformed id and
        ``NotFoundError`` if no product has it.
        """
        pid = parse_id(product_id)
        with storage_cursor("get product") as cursor:
            row = cursor.execute("SELECT * FROM products WHERE id = ?", (pid,)).fetchone()
        if row is None:
            raise NotFoundError("Product", pid)
        return cls._row_to_document(row)

    @classmethod
    async def create_product(cls, data: ProductCreate) -> InsertResult:
        """Insert a new product with ``recommendationCount`` set to 0."""
        payload = data.dict(exclude_unset=True)
        payload.pop("recommendationCount", None)
        columns, extra = split_fields(payload, PRODUCT_TEXT_COLUMNS)
        now = utc_now()
        with storage_cursor("create product") as cursor:
            cursor.execute(
                """
                INSERT INTO products
                    (user_email, product_name, query_title, recommendation_count, extra, created_at, updated_at)
                VALUES (?, ?, ?, 0, ?, ?, ?)
                """,
                (
                    columns.get("user_email"),
                    columns.get("product_name"),
                    columns.get("query_title"),
                    dump_extra(extra),
                    now,
                    now,
                ),
            )
            product_id = cursor.lastrowid
        logger.info("Created product %s for %s", product_id, columns.get("user_email"))
        return InsertResult(insertedId=product_id)

    @classmethod
    async def update_product(cls, product_id: Any, data: ProductUpdate) -> UpdateResult:
        """Merge the provided fields into a product, creating it if absent.

        Only keys present in the request are written; unknown keys are
        merged into the stored extra fields.  When no product has the
        given id, one is inserted under that id from the patch alone.
        The lookup and the write share a write-locked transaction, so
        concurrent upserts of the same id resolve to one insert and
        one update.
        """
        pid = parse_id(product_id)
        patch = data.dict(exclude_unset=True)
        # The counter column cannot hold NULL.
        count = patch.pop("recommendationCount", None)
        columns, extra = split_fields(patch, PRODUCT_TEXT_COLUMNS)
        now = utc_now()

        with storage_cursor("update product", immediate=True) as cursor:
            row = cursor.execute("SELECT * FROM products WHERE id = ?", (pid,)).fetchone()
            if row is None:
                cursor.execute(
                    """
                    INSERT INTO products
                        (id, user_email, product_name, query_title, recommendation_count, extra, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        pid,
                        columns.get("user_email"),
                        columns.get("product_name"),
                        columns.get("query_title"),
                        count if count is not None else 0,
                        dump_extra(extra),
                        now,
                        now,
                    ),
                )
                logger.info("Upserted product %s", pid)
                return UpdateResult(matchedCount=0, modifiedCount=0, upsertedId=pid, upsertedCount=1)

            current = dict(row)
            current_extra = load_extra(current["extra"])
            merged_extra = dict(current_extra)
            # A known field written as text replaces a non-text value kept in extra.
            for key in PRODUCT_TEXT_COLUMNS:
                if key in patch:
                    merged_extra.pop(key, None)
            merged_extra.update(extra)
            new_values = {column: columns.get(column, current[column]) for column in PRODUCT_TEXT_COLUMNS.values()}
            new_values["recommendation_count"] = count if count is not None else current["recommendation_count"]
            changed = any(new_values[c] != current[c] for c in new_values) or merged_extra != current_extra
            if changed:
                cursor.execute(
                    """
                    UPDATE products
                    SET user_email = ?, product_name = ?, query_title = ?, recommendation_count = ?,
                        extra = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        new_values["user_email"],
                        new_values["product_name"],
                        new_values["query_title"],
                        new_values["recommendation_count"],
                        dump_extra(merged_extra),
                        now,
                        pid,
                    ),
                )
                logger.info("Updated product %s", pid)
        return UpdateResult(matchedCount=1, modifiedCount=1 if changed else 0)

    @classmethod
    async def delete_product(cls, product_id: Any) -> DeleteResult:
        """Delete a product.

        Recommendations referencing it are left in place; they no
        longer show up in anyone's incoming recommendations.
        """
        pid = parse_id(product_id)
        with storage_cursor("delete product") as cursor:
            cursor.execute("DELETE FROM products WHERE id = ?", (pid,))
            deleted = cursor.rowcount
        if deleted:
            logger.info("Deleted product %s", pid)
        return DeleteResult(deletedCount=deleted)

    @classmethod
    async def reconcile_counts(cls) -> UpdateResult:
        """Recompute ``recommendationCount`` for every product.

        ``modifiedCount`` in the result is the number of products whose
        stored counter disagreed with the recommendations table.
        """
        with storage_cursor("reconcile recommendation counts", immediate=True) as cursor:
            total = cursor.execute("SELECT COUNT(*) AS n FROM products").fetchone()["n"]
            cursor.execute(
                """
                UPDATE products
                SET recommendation_count = (
                    SELECT COUNT(*) FROM recommendations r WHERE r.query_id = products.id
                )
                WHERE recommendation_count != (
                    SELECT COUNT(*) FROM recommendations r WHERE r.query_id = products.id
                )
                """
            )
            fixed = cursor.rowcount
        if fixed:
            logger.warning("Reconciled recommendation counts on %s of %s products", fixed, total)
        else:
            logger.info("Recommendation counts consistent on all %s products", total)
        return UpdateResult(matchedCount=total, modifiedCount=fixed)

    @staticmethod
    def _row_to_document(row: sqlite3.Row) -> Dict[str, Any]:
        """Convert a database row to the product document clients see."""
        extra = load_extra(row["extra"])
        doc: Dict[str, Any] = {"_id": row["id"]}
        doc.update(extra)
        for key, column in PRODUCT_TEXT_COLUMNS.items():
            value = field_value(row, column, extra, key)
            if value is not None:
                doc[key] = value
        doc["recommendationCount"] = row["recommendation_count"]
        doc["createdAt"] = row["created_at"]
        doc["updatedAt"] = row["updated_at"]
        return doc
