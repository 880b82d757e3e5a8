"""
Recommendation endpoints for API v1.

Creating or deleting a recommendation also moves the referenced
product's ``recommendationCount``; see ``RecommendationService``.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Query

from boycott_api.app.schemas.recommendation import RecommendationCreate
from boycott_api.app.schemas.results import InsertResult, RecommendationDeleteResult
from boycott_api.app.services.recommendation_service import RecommendationService

router = APIRouter()


@router.get("", response_model=List[Dict[str, Any]])
async def list_recommendations(
    email: Optional[str] = Query(None, description="Email of the recommender"),
) -> List[Dict[str, Any]]:
    """List recommendations written by ``email``.  400 if it is missing."""
    return await RecommendationService.list_by_recommender(email)


@router.post("", response_model=InsertResult)
async def create_recommendation(data: RecommendationCreate) -> InsertResult:
    """Create a recommendation and increment its product's counter."""
    return await RecommendationService.create_recommendation(data)


@router.delete("/{recommendation_id}", response_model=RecommendationDeleteResult)
async def delete_recommendation(recommendation_id: str) -> RecommendationDeleteResult:
    """Delete a recommendation and decrement its product's counter."""
    return await RecommendationService.delete_recommendation(recommendation_id)
