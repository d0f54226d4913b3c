import base64
import logging
from typing import Optional

import fitz  # pymupdf

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"


class CvTextExtractionError(Exception):
    pass


def extract_cv_text(data: bytes, mime_type: Optional[str]) -> Optional[str]:
    """
    Extract plain text from CV bytes.
    
    Only PDFs are parsed; other formats return None and the caller falls back
    to sending the file itself as a data URI.
    
    Raises:
        CvTextExtractionError: the PDF could not be opened or read
    """
    if mime_type != PDF_MIME_TYPE:
        return None
    
    try:
        text = ""
        with fitz.open(stream=data, filetype="pdf") as doc:
            for page in doc:
                text += page.get_text()
    except Exception as e:
        logger.warning(f"PDF text extraction failed: {e}")
        raise CvTextExtractionError(f"Could not extract text from PDF: {e}") from e
    
    text = text.strip()
    # Scanned PDFs yield no text layer
    return text or None


def build_data_uri(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"
