"""
Farm insight endpoints.
"""

from fastapi import APIRouter, Depends, Path

from src.api.dependencies import get_execute_action_use_case, get_farm_insights_use_case
from src.application.dto.requests import FarmInsightsRequest, InsightActionRequest
from src.application.dto.responses import (
    ErrorResponse,
    FarmInsightsResponse,
    InsightActionResponse,
    InsightCategoriesResponse,
    InsightResponse,
)
from src.application.use_cases import ExecuteInsightActionUseCase, GetFarmInsightsUseCase

router = APIRouter(prefix="/api/insights", tags=["insights"])


@router.post(
    "",
    response_model=FarmInsightsResponse,
    responses={422: {"model": ErrorResponse}},
)
async def get_farm_insights(
    request: FarmInsightsRequest,
    use_case: GetFarmInsightsUseCase = Depends(get_farm_insights_use_case),
) -> FarmInsightsResponse:
    """
    Ranked insights for a farm.

    An unknown farm yields an empty list rather than an error.
    """
    insights = await use_case.get_insights_for_farm(
        request.farm_id,
        user_id=request.user_id,
        limit=request.limit,
    )
    return FarmInsightsResponse(
        farm_id=request.farm_id,
        total=len(insights),
        insights=[InsightResponse.from_entity(i) for i in insights],
    )


@router.get(
    "/{farm_id}/categories",
    response_model=InsightCategoriesResponse,
)
async def get_insight_categories(
    farm_id: int = Path(..., ge=1),
    user_id: str | None = None,
    use_case: GetFarmInsightsUseCase = Depends(get_farm_insights_use_case),
) -> InsightCategoriesResponse:
    """Insights grouped by category."""
    grouped = await use_case.get_insights_by_category(farm_id, user_id=user_id)
    return InsightCategoriesResponse(
        farm_id=farm_id,
        categories={
            insight_type.value: [InsightResponse.from_entity(i) for i in insights]
            for insight_type, insights in grouped.items()
        },
    )


@router.post(
    "/actions",
    response_model=InsightActionResponse,
    responses={422: {"model": ErrorResponse}},
)
async def execute_insight_action(
    request: InsightActionRequest,
    use_case: ExecuteInsightActionUseCase = Depends(get_execute_action_use_case),
) -> InsightActionResponse:
    """Run an insight's action (navigate, view, or schedule a task)."""
    result = await use_case.execute(request.model_dump())
    return InsightActionResponse(success=result.success, message=result.message)
