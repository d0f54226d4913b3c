from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from app.db.base import Base, generate_id


class CreditPurchase(Base):
    """One fulfilled Stripe checkout session; the unique session id makes fulfillment idempotent."""
    __tablename__ = "credit_purchases"

    id = Column(String(32), primary_key=True, default=generate_id)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    stripe_session_id = Column(String, unique=True, nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
