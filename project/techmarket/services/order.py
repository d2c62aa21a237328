# techmarket/services/order.py

import json

from fastapi import HTTPException, Request

from techmarket.config import settings
from techmarket.models.order import Order as OrderModel
from techmarket.schemas.order import VerifyPaymentRequest
from techmarket.utils.security import verify_payment_signature

PAID = "PAID"


def check_signature(payload: VerifyPaymentRequest) -> bool:
    """
    True when the callback is signed correctly.
    Without PAYMENT_SIGNATURE_SECRET nothing is checked and False is returned
    so the caller can record that the order was accepted unverified.
    """
    secret = settings.PAYMENT_SIGNATURE_SECRET
    if not secret:
        return False
    if not verify_payment_signature(payload.order_id, payload.payment_id, payload.signature, secret):
        raise HTTPException(status_code=400, detail="Invalid signature")
    return True


async def record_paid_order_service(payload: VerifyPaymentRequest, request: Request) -> OrderModel:
    """
    Writes one PAID order row for a client-reported payment completion.

    The row is committed here, before any notification is attempted.
    There is no dedupe on the payment id: repeated callbacks write repeated rows.
    """
    db = request.state.db
    log = request.app.state.log

    verified = check_signature(payload)
    if not verified:
        await log.log_warning(
            "order",
            "Payment signature not verified, accepting client callback",
            {"order_id": payload.order_id, "payment_id": payload.payment_id, "mock": payload.is_mock},
        )

    details = payload.order_details
    db_order = OrderModel(
        gateway_order_id=payload.order_id,
        gateway_payment_id=payload.payment_id,
        amount=details.amount,
        currency=settings.CURRENCY,
        status=PAID,
        customer_name=details.customer_name,
        customer_email=details.customer_email,
        customer_address=details.address,
        gps_coordinates=json.dumps(details.gps.model_dump()) if details.gps else None,
        items=json.dumps(details.items),
    )
    db.add(db_order)
    await db.commit()
    await db.refresh(db_order)

    await log.log_info("order", "Order recorded", {"id": db_order.id, "payment_id": payload.payment_id})
    return db_order

