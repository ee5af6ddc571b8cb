"""
app/api/routers/age_distribution.py

Age distribution report endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from app.schemas.age_distribution import AgeDistributionResponse, AgeGroupShareResponse
from app.services.age_distribution_service import (
    AgeDistributionService,
    get_age_distribution_service,
)

router = APIRouter(prefix="/api", tags=["reports"])


@router.get("/age-distribution", response_model=AgeDistributionResponse)
def get_age_distribution(
    report_service: AgeDistributionService = Depends(get_age_distribution_service),
) -> AgeDistributionResponse:
    try:
        distribution = report_service.get_distribution()
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to compute age distribution.",
        ) from exc

    return AgeDistributionResponse(
        distribution=[
            AgeGroupShareResponse(
                age_group=item.age_group,
                count=item.count,
                percentage=item.percentage,
            )
            for item in distribution
        ],
        total_users=sum(item.count for item in distribution),
    )
