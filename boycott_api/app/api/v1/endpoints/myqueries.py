"""
"My queries" endpoints for API v1.

Views over the products a user owns.  Currently a single route: the
recommendations other users have made on them, each enriched with the
product's display fields.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Query

from boycott_api.app.services.recommendation_service import RecommendationService

router = APIRouter()


@router.get("/recommendations", response_model=List[Dict[str, Any]])
async def list_incoming_recommendations(
    email: Optional[str] = Query(None, description="Email of the product owner"),
) -> List[Dict[str, Any]]:
    """Recommendations on the caller's products, excluding their own."""
    return await RecommendationService.list_incoming_for_user(email)
