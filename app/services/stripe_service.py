"""
Stripe service for job post checkout, order fulfillment, and webhook handling.
"""
import logging
from typing import Optional
import stripe
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import (
    STRIPE_SECRET_KEY,
    STRIPE_WEBHOOK_SECRET,
    STRIPE_JOB_POST_PRICE_ID,
    FRONTEND_URL
)
from app.core.errors import AppError, ValidationFailed, PaymentRequired, Forbidden, NotFound, UpstreamServiceError
from app.db.models.user import User
from app.db.models.credit_purchase import CreditPurchase

logger = logging.getLogger(__name__)

stripe.api_key = STRIPE_SECRET_KEY or None
if not stripe.api_key:
    logger.warning("STRIPE_SECRET_KEY is empty; job post purchases will fail until it is set")

CHECKOUT_COMPLETED = "checkout.session.completed"


def _require_configured():
    if not STRIPE_SECRET_KEY:
        raise UpstreamServiceError("Stripe is not configured on the server.")


def _stripe_error(e: stripe.error.StripeError, action: str) -> AppError:
    """Map a Stripe SDK error onto the HTTP status Stripe reported (500 when absent)."""
    message = getattr(e, "user_message", None) or str(e) or "Unknown Stripe error"
    return AppError(f"Failed to {action}: {message}", status_code=getattr(e, "http_status", None) or 500)


def create_checkout_session(
    user_id: str,
    price_id: str,
    origin: Optional[str] = None
) -> dict:
    """
    Create Stripe Checkout session for one job post credit.

    Args:
        user_id: Purchasing recruiter, carried as client_reference_id
        price_id: Stripe price for one job post
        origin: Frontend origin for redirect URLs (defaults to FRONTEND_URL)

    Returns:
        Dictionary with 'sessionId' key
    """
    _require_configured()
    if not user_id or not price_id:
        raise ValidationFailed("Missing userId or priceId.")

    if STRIPE_JOB_POST_PRICE_ID and price_id != STRIPE_JOB_POST_PRICE_ID:
        logger.warning(f"Checkout requested with unexpected price_id={price_id} for user_id={user_id}")

    base_url = (origin or FRONTEND_URL).rstrip("/")

    try:
        session = stripe.checkout.Session.create(
            payment_method_types=['card'],
            line_items=[{
                'price': price_id,
                'quantity': 1,
            }],
            mode='payment',
            success_url=f"{base_url}/dashboard/post-job?session_id={{CHECKOUT_SESSION_ID}}&purchase=success",
            cancel_url=f"{base_url}/dashboard/post-job?purchase=cancelled",
            client_reference_id=user_id,
            metadata={
                'user_id': user_id,
            },
        )

        logger.info(f"Created checkout session for user_id={user_id}, session_id={session.id}")
        return {'sessionId': session.id}

    except stripe.error.StripeError as e:
        logger.error(f"Stripe error creating checkout session: {e}")
        raise _stripe_error(e, "create checkout session")


def credit_purchase(db: Session, session_id: str, user_id: str, quantity: int = 1) -> bool:
    """
    Grant purchased job posts for one paid checkout session.

    Returns False when the session was already credited.
    """
    if db.query(CreditPurchase).filter(CreditPurchase.stripe_session_id == session_id).first():
        logger.info(f"Checkout session already fulfilled: session_id={session_id}")
        return False

    user = db.get(User, user_id)
    if not user:
        raise NotFound("User profile not found.")

    db.add(CreditPurchase(user_id=user_id, stripe_session_id=session_id, quantity=quantity))
    user.purchased_posts_remaining = (user.purchased_posts_remaining or 0) + quantity
    try:
        db.commit()
    except IntegrityError:
        # The webhook and the fulfill endpoint raced on the same session
        db.rollback()
        logger.info(f"Checkout session fulfilled concurrently: session_id={session_id}")
        return False

    logger.info(
        f"Job post credits purchased: user_id={user_id}, quantity={quantity}, "
        f"session_id={session_id}, purchased_posts_remaining={user.purchased_posts_remaining}"
    )
    return True


def fulfill_order(db: Session, session_id: str, user_id: str) -> bool:
    """
    Verify a completed checkout session and credit the buyer.

    Raises:
        ValidationFailed: missing ids
        PaymentRequired: session not paid
        Forbidden: session belongs to another user
        AppError: Stripe API failure (upstream HTTP status)
    """
    _require_configured()
    if not session_id or not user_id:
        raise ValidationFailed("Missing sessionId or userId.")

    try:
        session = stripe.checkout.Session.retrieve(session_id)
    except stripe.error.StripeError as e:
        logger.error(f"Stripe error retrieving checkout session {session_id}: {e}")
        raise _stripe_error(e, "fulfill order")

    if session.get("payment_status") != "paid":
        raise PaymentRequired("Payment not successful.")

    if session.get("client_reference_id") != user_id:
        logger.warning(f"Checkout session {session_id} does not belong to user_id={user_id}")
        raise Forbidden("User ID mismatch.")

    return credit_purchase(db, session_id, user_id)


def verify_webhook(payload: bytes, signature: str) -> dict:
    """
    Check the Stripe-Signature header against the raw body and return the event.

    A malformed payload or a bad signature is a 400; a missing webhook secret is a 500.
    """
    if not STRIPE_WEBHOOK_SECRET:
        raise UpstreamServiceError("STRIPE_WEBHOOK_SECRET not configured")

    try:
        event = stripe.Webhook.construct_event(payload, signature, STRIPE_WEBHOOK_SECRET)
    except ValueError as e:
        logger.warning(f"Rejected webhook with unparseable body: {e}")
        raise ValidationFailed(f"Invalid webhook payload: {e}")
    except stripe.error.SignatureVerificationError as e:
        logger.warning(f"Rejected webhook with bad signature: {e}")
        raise ValidationFailed(f"Invalid signature: {e}")

    logger.info(f"Webhook {event['id']} accepted ({event['type']})")
    return event


def handle_webhook_event(db: Session, event: dict) -> bool:
    """Fulfill paid checkout.session.completed events; other events are acknowledged and ignored."""
    if event["type"] != CHECKOUT_COMPLETED:
        logger.debug(f"Ignoring webhook event type {event['type']}")
        return False

    session = event["data"]["object"]
    user_id = session.get("client_reference_id")
    if session.get("payment_status") != "paid" or not user_id:
        logger.warning(f"Checkout completed without payment or user: session_id={session.get('id')}")
        return False

    return credit_purchase(db, session["id"], user_id)
