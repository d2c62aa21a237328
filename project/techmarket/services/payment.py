# techmarket/services/payment.py

import time

import stripe
from fastapi import Request

from techmarket.config import settings


def epoch_ms() -> int:
    return int(time.time() * 1000)


def to_minor_units(amount: float) -> int:
    """Rupees -> paise, rounded to the nearest integer."""
    return round(amount * 100)


def mock_order(amount: float | None) -> dict:
    """
    Stand-in order handle used while no gateway key is configured.
    The amount is multiplied as-is, without rounding or range checks;
    a missing amount is echoed back as null.
    """
    return {
        "id": f"order_mock_{epoch_ms()}",
        "currency": settings.CURRENCY,
        "amount": amount * 100 if amount is not None else None,
        "mock": True,
    }


async def create_order_service(amount: float, request: Request) -> dict:
    """
    Creates a payment order for `amount` (major currency unit).

    Without STRIPE_SECRET_KEY a mock handle is returned immediately.
    Otherwise a PaymentIntent is created and returned as the gateway sent it.
    Gateway errors propagate to the caller; there is no retry.
    """
    log = request.app.state.log

    if not settings.payment_live:
        order = mock_order(amount)
        await log.log_info("payment", "Mock order created", order)
        return order

    receipt = f"receipt_{epoch_ms()}"
    intent = await stripe.PaymentIntent.create_async(
        api_key=settings.STRIPE_SECRET_KEY,
        amount=to_minor_units(amount),
        currency=settings.CURRENCY.lower(),
        description=f"{settings.STORE_NAME} order",
        metadata={"receipt": receipt},
    )

    await log.log_info("payment", "Gateway order created", {"id": intent.id, "receipt": receipt})
    return intent.to_dict()
