"""
Upload endpoints for CVs and company logos.
"""
import logging
from typing import Optional
from fastapi import APIRouter, File, UploadFile

from app.schemas.upload import UploadResponse, CvUploadResponse
from app.services import media_service
from app.services.cv_text_extractor import extract_cv_text, CvTextExtractionError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Uploads"])


def _read(upload: Optional[UploadFile]) -> bytes:
    if upload is None:
        return b""
    return upload.file.read()


@router.post("/upload-cv", response_model=CvUploadResponse)
def upload_cv(cv: Optional[UploadFile] = File(None)):
    """
    Upload a CV (PDF, DOC, DOCX; max 5MB).

    For PDFs the text is extracted and returned as textContent for display;
    the profile never stores client-supplied text. Extraction problems never fail the upload.
    """
    data = _read(cv)
    content_type = cv.content_type if cv else None
    result = media_service.upload_file(media_service.CV, data, cv.filename if cv else None, content_type)

    text_content = None
    extraction_error = None
    try:
        text_content = extract_cv_text(data, content_type)
    except CvTextExtractionError as e:
        logger.warning(f"CV uploaded but text extraction failed: public_id={result.public_id}, error={e}")
        extraction_error = str(e)

    return CvUploadResponse(
        url=result.url,
        public_id=result.public_id,
        text_content=text_content,
        extraction_error=extraction_error,
    )


@router.post("/upload-logo", response_model=UploadResponse)
def upload_logo(logo: Optional[UploadFile] = File(None)):
    """Upload a company logo (JPG, PNG, WEBP, SVG; max 2MB)."""
    data = _read(logo)
    result = media_service.upload_file(
        media_service.LOGO,
        data,
        logo.filename if logo else None,
        logo.content_type if logo else None,
    )
    return UploadResponse(url=result.url, public_id=result.public_id)
