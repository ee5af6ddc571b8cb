"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation.
"""

from __future__ import annotations

from fastapi import File, HTTPException, UploadFile, status

UPLOAD_FIELD_NAME = "csvFile"


def get_csv_upload(
    csv_file: UploadFile | None = File(default=None, alias=UPLOAD_FIELD_NAME),
) -> UploadFile:
    """
    Require one uploaded file with a `.csv` extension.
    """

    if csv_file is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f'No CSV file provided. Please upload a CSV file using the key "{UPLOAD_FIELD_NAME}"',
        )

    filename = (csv_file.filename or "").strip().lower()
    if not filename.endswith(".csv"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid file type. Only .csv files are allowed!",
        )

    return csv_file
