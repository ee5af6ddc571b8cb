"""
app/api/routers/csv_ingestion.py

CSV ingestion HTTP endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, UploadFile, status
from fastapi.responses import PlainTextResponse

from app.api.dependencies import get_csv_upload
from app.repositories.errors import StoreResetError, UserStoreError
from app.schemas.csv_ingestion import CSVIngestionSummaryResponse, UsageResponse
from app.services.csv_ingestion_service import (
    CSVIngestionService,
    IngestionInputError,
    get_csv_ingestion_service,
)
from app.services.error_sink import read_error_log
from app.validators.header_validator import CSVHeaderValidationError

router = APIRouter(tags=["ingestion"])

ERROR_LOG_ROUTE = "/error-log"


@router.get("/", response_model=UsageResponse)
def usage() -> UsageResponse:
    return UsageResponse(
        message="CSV to JSON Converter API",
        usage='POST /api/process-csv with CSV file in "csvFile" field',
        example='curl -X POST -F "csvFile=@sample_data.csv" http://localhost:8000/api/process-csv',
    )


@router.post(
    "/api/process-csv",
    response_model=CSVIngestionSummaryResponse,
    response_model_exclude_none=True,
)
def process_csv(
    file: UploadFile = Depends(get_csv_upload),
    ingestion_service: CSVIngestionService = Depends(get_csv_ingestion_service),
) -> CSVIngestionSummaryResponse:
    """
    Replace the users table with the valid rows of one uploaded CSV file.
    """

    try:
        summary = ingestion_service.ingest_upload(upload_file=file)
    except (CSVHeaderValidationError, IngestionInputError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except StoreResetError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to clear existing user records.",
        ) from exc
    except UserStoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to persist CSV records.",
        ) from exc
    finally:
        file.file.close()

    has_log = summary.errors > 0 and ingestion_service.error_log_path.exists()
    return CSVIngestionSummaryResponse(
        records_processed=summary.records_processed,
        errors=summary.errors,
        error_log=ERROR_LOG_ROUTE if has_log else None,
    )


@router.get(ERROR_LOG_ROUTE, response_class=PlainTextResponse)
def get_error_log(
    ingestion_service: CSVIngestionService = Depends(get_csv_ingestion_service),
) -> PlainTextResponse:
    """
    Return the rejected-row log of the most recent run.
    """

    content = read_error_log(ingestion_service.error_log_path)
    if content is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No error log found",
        )
    return PlainTextResponse(content)
