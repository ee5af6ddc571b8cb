"""
Run one CSV ingestion from the command line.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys

from app.config import get_csv_ingestion_settings
from app.repositories.errors import UserStoreError
from app.services.age_distribution_service import AgeDistributionService
from app.services.csv_ingestion_service import CSVIngestionService, IngestionInputError
from app.validators.header_validator import CSVHeaderValidationError
from db.session import dispose_engine


def main() -> int:
    parser = argparse.ArgumentParser(description="Replace the users table with the rows of a CSV file.")
    parser.add_argument("--file", required=True, help="Path to the CSV file.")
    parser.add_argument(
        "--batch-size",
        dest="batch_size",
        type=int,
        default=None,
        help="Records per transaction (defaults to CSV_INGEST_BATCH_SIZE).",
    )
    parser.add_argument(
        "--no-report",
        dest="report",
        action="store_false",
        help="Skip the age distribution report after the run.",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").strip().upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    settings = get_csv_ingestion_settings()
    service = CSVIngestionService(
        batch_size=args.batch_size or settings.batch_size,
        error_log_path=settings.error_log_path,
        max_captured_errors=settings.max_captured_errors,
        log_row_errors=settings.log_row_errors,
        after_run=(lambda _summary: AgeDistributionService().log_report()) if args.report else None,
    )

    try:
        summary = service.ingest_file(args.file)
    except (CSVHeaderValidationError, IngestionInputError, UserStoreError) as exc:
        print(json.dumps({"error": str(exc)}, indent=2), file=sys.stderr)
        return 1
    finally:
        dispose_engine()

    payload = {
        "recordsProcessed": summary.records_processed,
        "errors": summary.errors,
        "failedBatches": summary.failed_batches,
        "errorLog": str(service.error_log_path) if summary.row_errors else None,
    }
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
