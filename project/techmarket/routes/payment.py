# techmarket/routes/payment.py

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import JSONResponse
from techmarket.schemas.order import CreateOrderRequest, VerifyPaymentRequest, VerifyPaymentResponse
from techmarket.services.notify import notify_order_service
from techmarket.services.order import record_paid_order_service
from techmarket.services.payment import create_order_service

router = APIRouter()

# ────────────── CREATE ORDER ──────────────
@router.post(
    "/create-order",
    status_code=status.HTTP_200_OK,
    summary="Start a payment",
    response_description="Gateway order handle, or a mock handle when no gateway key is set",
    responses={
        200: {
            "description": "Order handle created",
            "content": {
                "application/json": {
                    "example": {"id": "order_mock_1735689600000", "currency": "INR", "amount": 249900, "mock": True}
                }
            },
        },
        500: {"description": "Payment gateway error"},
    },
)
async def create_order(request: Request, payload: CreateOrderRequest):
    try:
        return await create_order_service(payload.amount, request)
    except Exception as e:
        await request.app.state.log.log_error(
            "payment", f"Gateway order failed: {str(e)}", {"amount": payload.amount}
        )
        raise HTTPException(status_code=500, detail=str(e))


# ────────────── VERIFY PAYMENT ──────────────
@router.post(
    "/verify-payment",
    response_model=VerifyPaymentResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Record a completed payment and send order emails",
    responses={
        200: {"description": "Order recorded (and emails sent when mail is configured)"},
        400: {"description": "Invalid signature (only when signing is configured)"},
        500: {"description": "Order could not be recorded, or notification failed after recording"},
    },
)
async def verify_payment(request: Request, payload: VerifyPaymentRequest):
    """
    Records the order first, then notifies.

    - The order row is committed before any email is sent.
    - A notification failure is reported as 500 but does not remove the order.
    """
    log = request.app.state.log
    try:
        order = await record_paid_order_service(payload, request)
        await notify_order_service(payload.order_id, payload.payment_id, payload.order_details, request)
        await log.log_info("payment", "Payment completed", {"order": order.id})
        return {"success": True}
    except HTTPException:
        raise
    except Exception as e:
        await log.log_error(
            "payment",
            f"Payment verification/email error: {str(e)}",
            {"order_id": payload.order_id, "payment_id": payload.payment_id},
        )
        return JSONResponse(
            content={"success": False, "error": str(e)},
            status_code=500,
        )
