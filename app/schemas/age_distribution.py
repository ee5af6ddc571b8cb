"""
app/schemas/age_distribution.py

Response schemas for the age distribution report.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AgeGroupShareResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    age_group: str = Field(..., alias="ageGroup")
    count: int = Field(..., ge=0)
    percentage: float = Field(..., ge=0.0, le=100.0)


class AgeDistributionResponse(BaseModel):
    """
    API response model for the bucketed age report.
    """

    model_config = ConfigDict(populate_by_name=True)

    distribution: list[AgeGroupShareResponse] = Field(default_factory=list)
    total_users: int = Field(..., ge=0, alias="totalUsers")
