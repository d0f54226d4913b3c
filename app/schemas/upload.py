"""
Pydantic schemas for upload endpoints.
"""
from typing import Optional

from app.schemas.common import CamelModel


class UploadResponse(CamelModel):
    success: bool = True
    url: str
    public_id: str


class CvUploadResponse(UploadResponse):
    """CV upload; textContent is only filled for PDFs."""
    text_content: Optional[str] = None
    extraction_error: Optional[str] = None
