"""
Write-result envelopes returned by mutating endpoints.

Clients of the catalog were written against a document store and
expect its result shapes (``insertedId``, ``matchedCount`` and so on),
so these models keep the camelCase field names on the wire.
"""

from typing import Optional

from pydantic import BaseModel


class InsertResult(BaseModel):
    acknowledged: bool = True
    insertedId: int


class UpdateResult(BaseModel):
    acknowledged: bool = True
    matchedCount: int = 0
    modifiedCount: int = 0
    upsertedId: Optional[int] = None
    upsertedCount: int = 0


class DeleteResult(BaseModel):
    acknowledged: bool = True
    deletedCount: int = 0


class RecommendationDeleteResult(BaseModel):
    """Result of deleting a recommendation and decrementing its product."""

    deleteResult: DeleteResult
    updateResult: UpdateResult
