"""
app/schemas package marker.
"""

from app.schemas.age_distribution import AgeDistributionResponse, AgeGroupShareResponse
from app.schemas.csv_ingestion import CSVIngestionSummaryResponse, UsageResponse

__all__ = [
    "AgeDistributionResponse",
    "AgeGroupShareResponse",
    "CSVIngestionSummaryResponse",
    "UsageResponse",
]
