"""
app/services package marker.
"""

from app.services.age_distribution_service import AgeDistributionService, AgeGroupShare
from app.services.batch_accumulator import BatchAccumulator
from app.services.batch_writer import TransactionalBatchWriter
from app.services.csv_ingestion_service import (
    CSVIngestionService,
    IngestionInputError,
    IngestionRunContext,
    PipelineState,
    get_csv_ingestion_service,
)
from app.services.error_sink import ErrorSink, read_error_log

__all__ = [
    "AgeDistributionService",
    "AgeGroupShare",
    "BatchAccumulator",
    "CSVIngestionService",
    "ErrorSink",
    "IngestionInputError",
    "IngestionRunContext",
    "PipelineState",
    "TransactionalBatchWriter",
    "get_csv_ingestion_service",
    "read_error_log",
]
