"""
Health check endpoint for deployment monitoring.
"""
from datetime import datetime
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.core import config
from app.db.session import get_db
from app.services import media_service

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
def health_check(db: Session = Depends(get_db)):
    """
    Database probe plus which integrations are configured.

    Missing integrations do not make the service unhealthy: AI steps degrade
    to fallback results, uploads and payments fail per request.
    """
    status = "healthy"

    try:
        db.execute(text("SELECT 1"))
        db_status = "connected"
    except Exception as e:
        db_status = f"error: {str(e)}"
        status = "degraded"

    return {
        "status": status,
        "timestamp": datetime.utcnow().isoformat(),
        "database": db_status,
        "integrations": {
            "openai": bool(config.OPENAI_API_KEY),
            "stripe": bool(config.STRIPE_SECRET_KEY),
            "cloudinary": media_service._is_configured(),
        },
    }
