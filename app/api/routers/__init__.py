"""
app/api/routers package marker.
"""

from app.api.routers.age_distribution import router as age_distribution_router
from app.api.routers.csv_ingestion import router as csv_ingestion_router

__all__ = [
    "age_distribution_router",
    "csv_ingestion_router",
]
