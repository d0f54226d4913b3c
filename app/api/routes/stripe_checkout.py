"""
Stripe endpoints for buying job post credits.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.orm import Session

from app.core.auth_dependency import AuthSession, get_optional_session, ensure_same_user
from app.db.session import get_db
from app.schemas.billing import (
    CreateCheckoutSessionRequest,
    CreateCheckoutSessionResponse,
    FulfillOrderRequest,
    FulfillOrderResponse,
)
from app.services import stripe_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stripe", tags=["Stripe"])


@router.post("/create-checkout-session", response_model=CreateCheckoutSessionResponse)
def create_checkout_session(
    request: CreateCheckoutSessionRequest,
    origin: Optional[str] = Header(None),
    session: Optional[AuthSession] = Depends(get_optional_session)
):
    """Start a one-off payment for a single job post."""
    ensure_same_user(session, request.user_id)
    result = stripe_service.create_checkout_session(request.user_id, request.price_id, origin=origin)
    return CreateCheckoutSessionResponse(session_id=result["sessionId"])


@router.post("/fulfill-order", response_model=FulfillOrderResponse)
def fulfill_order(
    request: FulfillOrderRequest,
    session: Optional[AuthSession] = Depends(get_optional_session),
    db: Session = Depends(get_db)
):
    """Credit one purchased job post for a paid session. Repeating the call is harmless."""
    ensure_same_user(session, request.user_id)
    credited = stripe_service.fulfill_order(db, request.session_id, request.user_id)
    message = "Order fulfilled successfully, posts updated." if credited else "Order already fulfilled."
    return FulfillOrderResponse(message=message, credited=credited)


# ✅ STRIPE WEBHOOK
@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    stripe_signature: str = Header(None),
    db: Session = Depends(get_db)
):
    payload = await request.body()
    event = stripe_service.verify_webhook(payload, stripe_signature)
    stripe_service.handle_webhook_event(db, event)
    return {"status": "success"}
