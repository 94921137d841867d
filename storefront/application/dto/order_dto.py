"""
Order DTO
=========

Pydantic models for order API requests and responses.
Field names match the storefront frontend.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class CheckoutItemRequest(BaseModel):
    """One cart line submitted at checkout."""
    product_id: int = Field(..., description="Catalog product identifier")
    quantity: int = Field(..., description="Units ordered (must be positive)")
    price: Optional[Decimal] = Field(
        None, description="Unit price shown to the shopper; checked against the catalog"
    )


class PlaceOrderRequest(BaseModel):
    """DTO for placing an order (registered or guest checkout)."""
    items: List[CheckoutItemRequest] = Field(default_factory=list)
    total_amount: Decimal = Field(..., description="Order total shown to the shopper")
    shipping_address: str = Field(..., description="Free-text shipping address")
    payment_method: Optional[str] = Field(None, description="COD (default), PayPal or Card")
    user_id: Optional[int] = Field(None, description="Claimed registered user id")
    guest_name: Optional[str] = None
    guest_email: Optional[EmailStr] = None
    guest_phone: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "items": [{"product_id": 1, "quantity": 2, "price": "10.00"}],
                "total_amount": "20.00",
                "shipping_address": "123 Test St, Springfield",
                "payment_method": "COD",
                "guest_name": "Test Guest",
                "guest_email": "guest@test.com",
                "guest_phone": "1234567890",
            }
        }
    )

    @field_validator("guest_name", "guest_email", "guest_phone", "payment_method", mode="before")
    @classmethod
    def blank_as_missing(cls, value):
        """The checkout form posts empty strings for untouched fields."""
        return _blank_to_none(value)


class OrderReceiptResponse(BaseModel):
    """DTO returned after a successful checkout."""
    message: str = "Order placed successfully"
    order_id: int
    order_number: str
    total_amount: Decimal
    payment_status: str
    status: str


class OrderLineResponse(BaseModel):
    product_id: int
    quantity: int
    price: Decimal
    subtotal: Decimal
    product_name: Optional[str] = None
    image_url: Optional[str] = None


class OrderSummaryResponse(BaseModel):
    """DTO for order listings."""
    id: int
    order_number: str
    website_id: int
    website_name: Optional[str] = None
    user_id: Optional[int] = None
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    display_name: str
    display_email: Optional[str] = None
    total_amount: Decimal
    shipping_address: str
    payment_method: str
    payment_status: str
    status: str
    created_at: datetime
    updated_at: datetime


class OrderDetailResponse(BaseModel):
    """DTO for a single order with its items."""
    id: int
    order_number: str
    website_id: int
    user_id: Optional[int] = None
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    total_amount: Decimal
    shipping_address: str
    payment_method: str
    payment_status: str
    status: str
    created_at: datetime
    updated_at: datetime
    items: List[OrderLineResponse] = Field(default_factory=list)


class TrackOrderRequest(BaseModel):
    """DTO for the public tracking page."""
    order_id: Union[int, str] = Field(..., description="Order id or order number, e.g. 42 or 'ORD-42'")
    email: str = Field(..., description="Guest e-mail or the owner's registered e-mail")


class UpdateOrderStatusRequest(BaseModel):
    status: str = Field(..., description="pending, processing, shipped, delivered or cancelled")


class OrderStatusResponse(BaseModel):
    order_id: int
    status: str
    payment_status: str
    message: str
