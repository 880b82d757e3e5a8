"""
Pydantic schemas for recommendations.

A recommendation is written by one user against another user's
product and references it through ``queryId``.
"""

from typing import Any

from pydantic import BaseModel, Field


class RecommendationCreate(BaseModel):
    """Schema for creating a recommendation.

    Bodies are schema-less, so the text fields accept any JSON value.
    ``queryId`` is typed loosely because clients send it either as a
    number or as a string; the service parses and validates it.
    """

    queryId: Any = Field(None, description="Identity of the product being recommended on")
    recommenderEmail: Any = Field(None, description="Email of the author")
    boycottingReason: Any = None
    recommendationText: Any = None

    class Config:
        extra = "allow"
