# techmarket/schemas/order.py

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Any


class CreateOrderRequest(BaseModel):
    amount: Optional[float] = None     # major unit, not range-checked


class GeoPoint(BaseModel):
    latitude: float
    longitude: float


# ────────────── Checkout callback ──────────────
# the storefront posts camelCase order details and gateway-prefixed ids
class OrderDetails(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    amount: Optional[float] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    address: Optional[str] = None
    gps: Optional[GeoPoint] = None
    items: List[Dict[str, Any]] = []   # listing snapshots from the cart


class VerifyPaymentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_id: Optional[str] = Field(None, alias="razorpay_order_id")
    payment_id: Optional[str] = Field(None, alias="razorpay_payment_id")
    signature: Optional[str] = Field(None, alias="razorpay_signature")
    order_details: OrderDetails = Field(default_factory=OrderDetails, alias="orderDetails")
    is_mock: bool = Field(False, alias="isMock")


class VerifyPaymentResponse(BaseModel):
    success: bool
    error: Optional[str] = None
