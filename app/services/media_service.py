"""
File ingestion: validates uploaded CVs and logos and stores them on Cloudinary.
"""
import logging
import time
from dataclasses import dataclass
from pathlib import PurePath
from typing import Optional

import cloudinary
import cloudinary.uploader

from app.core.config import CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY, CLOUDINARY_API_SECRET
from app.core.errors import ValidationFailed, UpstreamServiceError

logger = logging.getLogger(__name__)

MB = 1024 * 1024


@dataclass(frozen=True)
class UploadCategory:
    name: str
    max_bytes: int
    allowed_types: tuple
    folder: str
    resource_type: str
    too_large_message: str
    invalid_type_message: str


CV = UploadCategory(
    name="cv",
    max_bytes=5 * MB,
    allowed_types=(
        "application/pdf",
        "application/msword",  # .doc
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",  # .docx
    ),
    folder="cv_uploads",
    resource_type="raw",
    too_large_message="File is too large. Max 5MB.",
    invalid_type_message="Invalid file type. Only PDF, DOC, DOCX allowed.",
)

LOGO = UploadCategory(
    name="logo",
    max_bytes=2 * MB,
    allowed_types=("image/jpeg", "image/png", "image/webp", "image/svg+xml"),
    folder="company_logos",
    resource_type="image",
    too_large_message="File is too large. Max 2MB.",
    invalid_type_message="Invalid file type. Only JPG, PNG, WEBP, or SVG are allowed.",
)


@dataclass
class UploadResult:
    url: str
    public_id: str


def _is_configured() -> bool:
    return bool(CLOUDINARY_CLOUD_NAME and CLOUDINARY_API_KEY and CLOUDINARY_API_SECRET)


if _is_configured():
    cloudinary.config(
        cloud_name=CLOUDINARY_CLOUD_NAME,
        api_key=CLOUDINARY_API_KEY,
        api_secret=CLOUDINARY_API_SECRET,
        secure=True,
    )
else:
    logger.warning(
        "Cloudinary environment variables (CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY, "
        "CLOUDINARY_API_SECRET) are not fully set - file uploads will fail"
    )


def validate_upload(category: UploadCategory, size: int, content_type: Optional[str]) -> None:
    """
    Reject empty, oversized or disallowed files before anything is sent to the media host.
    
    Raises:
        ValidationFailed: with the user-facing message for the category
    """
    if size <= 0:
        raise ValidationFailed("No file provided.")
    if size > category.max_bytes:
        raise ValidationFailed(category.too_large_message)
    if content_type not in category.allowed_types:
        raise ValidationFailed(category.invalid_type_message)


def build_public_id(category: UploadCategory, filename: Optional[str]) -> str:
    """Original file stem plus a millisecond timestamp, e.g. 'jane_doe_cv_1718000000000'."""
    millis = int(time.time() * 1000)
    stem = PurePath(filename).stem if filename and "." in filename else ""
    if not stem:
        return f"{category.name}_{millis}"
    return f"{stem}_{millis}"


def upload_file(
    category: UploadCategory,
    data: bytes,
    filename: Optional[str],
    content_type: Optional[str],
) -> UploadResult:
    """
    Validate and upload one file. No retry: a single failure is reported to the caller.
    
    Raises:
        ValidationFailed: size/type rejected
        UpstreamServiceError: Cloudinary not configured or upload failed
    """
    validate_upload(category, len(data), content_type)
    
    if not _is_configured():
        raise UpstreamServiceError("Cloudinary upload failed: Cloudinary not configured. Missing API credentials.")
    
    public_id = build_public_id(category, filename)
    try:
        result = cloudinary.uploader.upload(
            data,
            folder=category.folder,
            public_id=public_id,
            resource_type=category.resource_type,
        )
    except Exception as e:
        logger.error(f"Cloudinary upload error ({category.name}): {e}", exc_info=True)
        raise UpstreamServiceError(f"Cloudinary upload failed: {e}.")
    
    if not result or "secure_url" not in result:
        error_message = (result or {}).get("error", {}).get("message", "no result returned")
        logger.error(f"Cloudinary upload returned no URL ({category.name}): {result}")
        raise UpstreamServiceError(f"Cloudinary upload failed: {error_message}.")
    
    logger.info(f"Uploaded {category.name}: public_id={result['public_id']}, bytes={len(data)}")
    return UploadResult(url=result["secure_url"], public_id=result["public_id"])
