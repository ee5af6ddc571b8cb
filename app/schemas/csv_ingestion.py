"""
app/schemas/csv_ingestion.py

Response schemas for CSV ingestion endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CSVIngestionSummaryResponse(BaseModel):
    """
    API response model for one ingestion run.
    """

    model_config = ConfigDict(populate_by_name=True)

    message: str = "CSV processed successfully"
    records_processed: int = Field(..., ge=0, alias="recordsProcessed")
    errors: int = Field(..., ge=0)
    error_log: str | None = Field(default=None, alias="errorLog")


class UsageResponse(BaseModel):
    message: str
    usage: str
    example: str
