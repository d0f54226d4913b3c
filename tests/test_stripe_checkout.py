"""
Tests for job post checkout, fulfillment and the Stripe webhook.
"""
from types import SimpleNamespace

import pytest
import stripe

from app.db.models.credit_purchase import CreditPurchase
from app.services import stripe_service


@pytest.fixture(autouse=True)
def stripe_configured(monkeypatch):
    monkeypatch.setattr(stripe_service, "STRIPE_SECRET_KEY", "sk_test_123")
    monkeypatch.setattr(stripe_service, "STRIPE_WEBHOOK_SECRET", "whsec_test")
    monkeypatch.setattr(stripe_service, "STRIPE_JOB_POST_PRICE_ID", "price_job_post")


@pytest.fixture
def checkout_sessions(monkeypatch):
    """Fake Stripe checkout sessions keyed by id."""
    sessions = {}

    def retrieve(session_id):
        if session_id not in sessions:
            raise stripe.error.InvalidRequestError(f"No such checkout.session: '{session_id}'", "id", http_status=404)
        return sessions[session_id]

    monkeypatch.setattr(stripe.checkout.Session, "retrieve", retrieve)
    return sessions


def test_create_checkout_session(client, recruiter, monkeypatch):
    created = {}

    def create(**kwargs):
        created.update(kwargs)
        return SimpleNamespace(id="cs_test_1", url="https://checkout.stripe.com/c/pay/cs_test_1")

    monkeypatch.setattr(stripe.checkout.Session, "create", create)

    response = client.post(
        "/api/stripe/create-checkout-session",
        json={"userId": recruiter.id, "priceId": "price_job_post"},
        headers={"Origin": "https://jobs.example.com"},
    )

    assert response.status_code == 200
    assert response.json() == {"sessionId": "cs_test_1"}
    assert created["mode"] == "payment"
    assert created["client_reference_id"] == recruiter.id
    assert created["line_items"] == [{"price": "price_job_post", "quantity": 1}]
    assert created["success_url"] == (
        "https://jobs.example.com/dashboard/post-job?session_id={CHECKOUT_SESSION_ID}&purchase=success"
    )
    assert created["cancel_url"] == "https://jobs.example.com/dashboard/post-job?purchase=cancelled"


def test_checkout_requires_stripe(client, recruiter, monkeypatch):
    monkeypatch.setattr(stripe_service, "STRIPE_SECRET_KEY", None)
    response = client.post(
        "/api/stripe/create-checkout-session",
        json={"userId": recruiter.id, "priceId": "price_job_post"},
    )
    assert response.status_code == 500


def test_checkout_requires_price(client, recruiter):
    response = client.post("/api/stripe/create-checkout-session", json={"userId": recruiter.id})
    assert response.status_code == 400


def test_fulfill_order_is_idempotent(client, db_session, recruiter, checkout_sessions):
    checkout_sessions["cs_paid"] = {"id": "cs_paid", "payment_status": "paid", "client_reference_id": recruiter.id}
    body = {"sessionId": "cs_paid", "userId": recruiter.id}

    first = client.post("/api/stripe/fulfill-order", json=body)
    second = client.post("/api/stripe/fulfill-order", json=body)

    assert first.status_code == 200
    assert first.json()["credited"] is True
    assert second.status_code == 200
    assert second.json()["credited"] is False

    db_session.refresh(recruiter)
    assert recruiter.purchased_posts_remaining == 1
    assert db_session.query(CreditPurchase).count() == 1


def test_unpaid_session(client, db_session, recruiter, checkout_sessions):
    checkout_sessions["cs_open"] = {"id": "cs_open", "payment_status": "unpaid", "client_reference_id": recruiter.id}

    response = client.post("/api/stripe/fulfill-order", json={"sessionId": "cs_open", "userId": recruiter.id})

    assert response.status_code == 402
    db_session.refresh(recruiter)
    assert recruiter.purchased_posts_remaining == 0


def test_session_of_another_user(client, db_session, recruiter, other_recruiter, checkout_sessions):
    checkout_sessions["cs_other"] = {"id": "cs_other", "payment_status": "paid", "client_reference_id": other_recruiter.id}

    response = client.post("/api/stripe/fulfill-order", json={"sessionId": "cs_other", "userId": recruiter.id})

    assert response.status_code == 403
    db_session.refresh(recruiter)
    assert recruiter.purchased_posts_remaining == 0


def test_stripe_error_status_is_kept(client, recruiter, checkout_sessions):
    response = client.post("/api/stripe/fulfill-order", json={"sessionId": "cs_missing", "userId": recruiter.id})
    assert response.status_code == 404
    assert "No such checkout.session" in response.json()["error"]


def test_webhook_and_fulfill_credit_once(client, db_session, recruiter, checkout_sessions, monkeypatch):
    session = {"id": "cs_hook", "payment_status": "paid", "client_reference_id": recruiter.id}
    checkout_sessions["cs_hook"] = session
    event = {"id": "evt_1", "type": "checkout.session.completed", "data": {"object": session}}
    monkeypatch.setattr(stripe.Webhook, "construct_event", lambda payload, sig, secret: event)

    hook = client.post("/api/stripe/webhook", content=b"{}", headers={"Stripe-Signature": "t=1,v1=abc"})
    assert hook.status_code == 200

    fulfill = client.post("/api/stripe/fulfill-order", json={"sessionId": "cs_hook", "userId": recruiter.id})
    assert fulfill.json()["credited"] is False

    db_session.refresh(recruiter)
    assert recruiter.purchased_posts_remaining == 1


def test_webhook_bad_signature(client, monkeypatch):
    def reject(payload, sig, secret):
        raise stripe.error.SignatureVerificationError("No signatures found", sig)

    monkeypatch.setattr(stripe.Webhook, "construct_event", reject)

    response = client.post("/api/stripe/webhook", content=b"{}", headers={"Stripe-Signature": "bad"})
    assert response.status_code == 400
