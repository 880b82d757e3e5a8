"""
Pydantic schemas for products.

A product (the UI also calls it a "query") is a schema-less document
submitted by a user.  Only a handful of fields carry meaning for the
service: the owner's ``userEmail``, the display fields ``productName``
and ``queryTitle`` and the derived ``recommendationCount``.  Any other
keys a client sends are accepted as-is and stored alongside them,
which is why both request models allow extra fields.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, validator


class ProductCreate(BaseModel):
    """Schema for creating a new product.

    ``userEmail`` is required.  A ``recommendationCount`` sent by the
    client is accepted but ignored; new products always start at 0.
    """

    userEmail: str = Field(..., description="Email of the submitting user")
    productName: Any = Field(None, description="Name of the product")
    queryTitle: Any = Field(None, description="Title of the query shown to other users")

    class Config:
        extra = "allow"

    @validator("userEmail")
    def require_email(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("userEmail must not be empty")
        return v


class ProductUpdate(BaseModel):
    """Schema for merging fields into a product.

    All fields are optional; only the keys present in the request body
    are written.  Unknown keys are merged into the stored document.
    Display fields take any JSON value, like the rest of the document.
    """

    userEmail: Optional[str] = None
    productName: Any = None
    queryTitle: Any = None
    recommendationCount: Optional[int] = None

    class Config:
        extra = "allow"
