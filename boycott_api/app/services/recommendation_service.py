"""
Business logic for recommendations.

A recommendation is written against a product and every insert or
delete moves that product's ``recommendationCount`` by one.  The row
change and the counter update are issued in one transaction that takes
SQLite's write lock before its first read (``BEGIN IMMEDIATE``), so a
failure in either leaves both untouched and two requests can never act
on the same stale lookup.

``list_incoming_for_user`` answers "what did other people recommend
on my queries": recommendations on products owned by the caller,
excluding the caller's own, joined to their product for display.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Dict, List, Optional

from boycott_api.app.core.db import storage_cursor
from boycott_api.app.core.errors import InvalidInputError, NotFoundError
from boycott_api.app.core.ids import parse_id
from boycott_api.app.schemas.recommendation import RecommendationCreate
from boycott_api.app.schemas.results import (
    DeleteResult,
    InsertResult,
    RecommendationDeleteResult,
    UpdateResult,
)
from boycott_api.app.services.documents import (
    dump_extra,
    field_value,
    load_extra,
    split_fields,
    utc_now,
)


logger = logging.getLogger(__name__)

# Document key -> text column.  ``queryId`` has its own integer column.
RECOMMENDATION_TEXT_COLUMNS = {
    "recommenderEmail": "recommender_email",
    "boycottingReason": "boycotting_reason",
    "recommendationText": "recommendation_text",
}


def _require_email(email: Optional[str]) -> str:
    if email is None or not email.strip():
        raise InvalidInputError("email is required")
    return email.strip()


class RecommendationService:
    """Service for recommendations and the product counters they drive."""

    @classmethod
    async def list_by_recommender(cls, email: Optional[str]) -> List[Dict[str, Any]]:
        """Return every recommendation written by ``email``."""
        email = _require_email(email)
        with storage_cursor("list recommendations") as cursor:
            rows = cursor.execute(
                "SELECT * FROM recommendations WHERE recommender_email = ?",
                (email,),
            ).fetchall()
        return [cls._row_to_document(row) for row in rows]

    @classmethod
    async def create_recommendation(cls, data: RecommendationCreate) -> InsertResult:
        """Insert a recommendation and increment its product's counter.

        ``queryId`` must be a well-formed identity of an existing
        product; otherwise ``InvalidInputError`` is raised and nothing
        is written.  ``createdAt`` is always set by the server.
        """
        payload = data.dict(exclude_unset=True)
        raw_query_id = payload.pop("queryId", None)
        if raw_query_id is None:
            raise InvalidInputError("queryId is required")
        query_id = parse_id(raw_query_id, "queryId")
        columns, extra = split_fields(payload, RECOMMENDATION_TEXT_COLUMNS)

        with storage_cursor("create recommendation", immediate=True) as cursor:
            cursor.execute(
                """
                INSERT INTO recommendations
                    (query_id, recommender_email, boycotting_reason, recommendation_text, extra, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    query_id,
                    columns.get("recommender_email"),
                    columns.get("boycotting_reason"),
                    columns.get("recommendation_text"),
                    dump_extra(extra),
                    utc_now(),
                ),
            )
            recommendation_id = cursor.lastrowid
            cursor.execute(
                "UPDATE products SET recommendation_count = recommendation_count + 1 WHERE id = ?",
                (query_id,),
            )
            if cursor.rowcount != 1:
                # Rolls the insert back with the transaction.
                raise InvalidInputError(
                    "queryId does not reference an existing product",
                    {"queryId": query_id},
                )
        logger.info(
            "%s recommended on product %s (recommendation %s)",
            columns.get("recommender_email"), query_id, recommendation_id,
        )
        return InsertResult(insertedId=recommendation_id)

    @classmethod
    async def delete_recommendation(cls, recommendation_id: Any) -> RecommendationDeleteResult:
        """Delete a recommendation and decrement its product's counter.

        Raises ``NotFoundError`` if the recommendation does not exist,
        including when a concurrent request removed it first; the
        counter is only decremented for a row this call deleted.  If
        the product has since been deleted the update result reports
        zero matched documents.
        """
        rid = parse_id(recommendation_id)
        with storage_cursor("delete recommendation", immediate=True) as cursor:
            row = cursor.execute(
                "SELECT query_id FROM recommendations WHERE id = ?",
                (rid,),
            ).fetchone()
            if row is None:
                raise NotFoundError("Recommendation", rid)
            cursor.execute("DELETE FROM recommendations WHERE id = ?", (rid,))
            deleted = cursor.rowcount
            if deleted != 1:
                raise NotFoundError("Recommendation", rid)
            cursor.execute(
                "UPDATE products SET recommendation_count = recommendation_count - 1 WHERE id = ?",
                (row["query_id"],),
            )
            matched = cursor.rowcount
        logger.info("Deleted recommendation %s on product %s", rid, row["query_id"])
        if not matched:
            logger.warning("Product %s of recommendation %s no longer exists", row["query_id"], rid)
        return RecommendationDeleteResult(
            deleteResult=DeleteResult(deletedCount=deleted),
            updateResult=UpdateResult(matchedCount=matched, modifiedCount=matched),
        )

    @classmethod
    async def list_incoming_for_user(cls, user_email: Optional[str]) -> List[Dict[str, Any]]:
        """Return recommendations other users made on ``user_email``'s products.

        Returns an empty list straight away, without reading the
        recommendations table, when the user owns no products.
        Recommendations whose product no longer exists are dropped.
        """
        user_email = _require_email(user_email)
        with storage_cursor("list incoming recommendations") as cursor:
            owned = cursor.execute(
                "SELECT id FROM products WHERE user_email = ? LIMIT 1",
                (user_email,),
            ).fetchone()
            if owned is None:
                return []
            rows = cursor.execute(
                """
                SELECT r.*, p.product_name, p.query_title, p.extra AS product_extra
                FROM recommendations r
                JOIN products p ON p.id = r.query_id
                WHERE p.user_email = ? AND r.recommender_email IS NOT ?
                """,
                (user_email, user_email),
            ).fetchall()
        results = []
        for row in rows:
            extra = load_extra(row["extra"])
            product_extra = load_extra(row["product_extra"])
            record = {"_id": row["id"], "queryId": row["query_id"]}
            for key, column in RECOMMENDATION_TEXT_COLUMNS.items():
                record[key] = field_value(row, column, extra, key)
            record["createdAt"] = row["created_at"]
            record["productName"] = field_value(row, "product_name", product_extra, "productName")
            record["queryTitle"] = field_value(row, "query_title", product_extra, "queryTitle")
            results.append(record)
        return results

    @staticmethod
    def _row_to_document(row: sqlite3.Row) -> Dict[str, Any]:
        """Convert a database row to the recommendation document clients see."""
        extra = load_extra(row["extra"])
        doc: Dict[str, Any] = {"_id": row["id"]}
        doc.update(extra)
        doc["queryId"] = row["query_id"]
        for key, column in RECOMMENDATION_TEXT_COLUMNS.items():
            value = field_value(row, column, extra, key)
            if value is not None:
                doc[key] = value
        doc["createdAt"] = row["created_at"]
        return doc
