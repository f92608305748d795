"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation.
"""

from __future__ import annotations

from fastapi import File, HTTPException, UploadFile, status

CSV_CONTENT_TYPES = {
    "text/csv",
    "application/csv",
    "application/vnd.ms-excel",
}


def _is_csv_upload(file: UploadFile) -> bool:
    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").strip().lower()
    return filename.endswith(".csv") or content_type in CSV_CONTENT_TYPES


def get_csv_uploads(files: list[UploadFile] = File(...)) -> list[UploadFile]:
    """
    Validate that every uploaded file is a CSV by extension or MIME type.
    """

    if not files:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="At least one CSV file is required.",
        )

    rejected = [file.filename or "<unnamed>" for file in files if not _is_csv_upload(file)]
    if rejected:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Only CSV files are allowed. Rejected: {', '.join(rejected)}",
        )

    return files
