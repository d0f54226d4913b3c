"""
Pydantic schemas for Stripe checkout endpoints.
"""
from pydantic import Field

from app.schemas.common import CamelModel


class CreateCheckoutSessionRequest(CamelModel):
    """Request schema for creating checkout session."""
    user_id: str = Field(..., min_length=1, description="Purchasing recruiter")
    price_id: str = Field(..., min_length=1, description="Stripe price for one job post")

    class Config:
        json_schema_extra = {
            "example": {
                "userId": "4f1c2e0d9b8a4c7e8f6a5b4c3d2e1f00",
                "priceId": "price_..."
            }
        }


class CreateCheckoutSessionResponse(CamelModel):
    """Response schema for checkout session creation."""
    session_id: str = Field(..., description="Stripe checkout session ID")


class FulfillOrderRequest(CamelModel):
    session_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)


class FulfillOrderResponse(CamelModel):
    success: bool = True
    message: str
    credited: bool = Field(..., description="False when this session had already been fulfilled")
