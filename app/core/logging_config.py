"""
Logging configuration for the job board API.

Secrets and candidate CV content never reach the log files: use
sanitize_log_data() before logging request payloads or model inputs.
"""
import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any

LOG_FILE = "jobboard.log"

THIRD_PARTY_LOGGERS = ("uvicorn", "uvicorn.access", "stripe", "cloudinary", "openai", "httpx", "urllib3")

SECRET_MARKERS = ("password", "token", "secret", "api_key", "database_url", "authorization")

# CV payloads: personal data, and data URIs run to megabytes
CV_CONTENT_KEYS = {"cv_text_content", "cv_data_uri", "file_data", "textcontent", "cvtextcontent", "cvdatauri"}


def setup_logging(log_level: str = "INFO", log_dir: str = "logs"):
    """
    Configure the root logger: stdout plus a rotating file (10MB x 5).

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for the rotating log file
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    directory = Path(log_dir)
    directory.mkdir(exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)-7s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))

    # File handler keeps function/line for post-mortem on failed applications
    file_handler = RotatingFileHandler(
        directory / LOG_FILE,
        maxBytes=10 * 1024 * 1024,
        backupCount=5
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)-7s [%(name)s] %(funcName)s:%(lineno)d %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))

    root.addHandler(console_handler)
    root.addHandler(file_handler)

    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _placeholder(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    return f"<{len(value)} chars>"


def sanitize_log_data(data: dict) -> dict:
    """
    Copy of data safe to log: secrets redacted, CV content replaced by its
    length. Nested dicts are sanitized too.
    """
    sanitized = {}
    for key, value in data.items():
        lowered = str(key).lower()
        if any(marker in lowered for marker in SECRET_MARKERS):
            sanitized[key] = "***REDACTED***" if value else None
        elif lowered in CV_CONTENT_KEYS:
            sanitized[key] = _placeholder(value)
        elif isinstance(value, dict):
            sanitized[key] = sanitize_log_data(value)
        else:
            sanitized[key] = value
    return sanitized
