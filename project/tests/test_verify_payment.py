"""Payment verification: order persistence, signing, and notification ordering."""

import json
import smtplib
from concurrent.futures import ThreadPoolExecutor

import pytest

from techmarket.config import settings
from techmarket.utils.security import payment_signature

CART = [
    {"id": 1, "title": "UltraCharge 20000mAh Power Bank", "price": 2499, "seller_name": "TechGear Official"},
    {"id": 4, "title": "HyperFast 65W GaN Charger", "price": 1999, "seller_name": "PowerUp"},
]


def callback(payment_id="pay_mock_1", signature="mock_signature", gps=True):
    """Body the storefront checkout posts after a (mock) payment."""
    return {
        "razorpay_order_id": "order_mock_1",
        "razorpay_payment_id": payment_id,
        "razorpay_signature": signature,
        "orderDetails": {
            "amount": 4498,
            "customerName": "Asha Rao",
            "customerEmail": "asha@example.com",
            "address": "12 MG Road, Bangalore - 560001",
            "gps": {"latitude": 12.9716, "longitude": 77.5946} if gps else None,
            "items": CART,
        },
        "isMock": True,
    }


def test_verify_records_one_paid_order(client, fetch_orders):
    res = client.post("/api/verify-payment", json=callback())
    assert res.status_code == 200
    assert res.json()["success"] is True

    (order,) = fetch_orders()
    assert order.status == "PAID"
    assert order.currency == "INR"
    assert order.gateway_order_id == "order_mock_1"
    assert order.gateway_payment_id == "pay_mock_1"
    assert order.amount == 4498
    assert order.customer_name == "Asha Rao"
    assert order.customer_email == "asha@example.com"
    assert order.customer_address == "12 MG Road, Bangalore - 560001"
    assert json.loads(order.gps_coordinates) == {"latitude": 12.9716, "longitude": 77.5946}
    assert json.loads(order.items) == CART
    assert order.created_at is not None


@pytest.mark.parametrize("signature", ["mock_signature", "", None, "definitely-not-hex"])
def test_unsigned_mode_accepts_any_signature(client, fetch_orders, signature):
    res = client.post("/api/verify-payment", json=callback(signature=signature))
    assert res.json() == {"success": True}
    assert len(fetch_orders()) == 1


def test_missing_gps_is_stored_as_null(client, fetch_orders):
    client.post("/api/verify-payment", json=callback(gps=False))
    (order,) = fetch_orders()
    assert order.gps_coordinates is None


def test_items_are_a_snapshot(client, fetch_orders):
    client.post("/api/verify-payment", json=callback())
    client.post("/api/products", json={"title": "Later listing", "price": 10})

    (order,) = fetch_orders()
    assert [i["title"] for i in json.loads(order.items)] == [i["title"] for i in CART]


def test_same_payment_id_twice_writes_two_rows(client, fetch_orders):
    with ThreadPoolExecutor(max_workers=2) as pool:
        responses = list(pool.map(
            lambda _: client.post("/api/verify-payment", json=callback(payment_id="pay_dup")),
            range(2),
        ))

    assert all(r.json()["success"] for r in responses)
    orders = fetch_orders()
    assert len(orders) == 2
    assert {o.gateway_payment_id for o in orders} == {"pay_dup"}
    assert orders[0].id != orders[1].id


def test_signed_mode_rejects_bad_signature(client, fetch_orders, monkeypatch):
    monkeypatch.setattr(settings, "PAYMENT_SIGNATURE_SECRET", "whsec_test")

    res = client.post("/api/verify-payment", json=callback(signature="forged"))
    assert res.status_code == 400
    assert res.json()["detail"] == "Invalid signature"
    assert fetch_orders() == []


def test_signed_mode_rejects_non_ascii_signature(client, fetch_orders, monkeypatch):
    monkeypatch.setattr(settings, "PAYMENT_SIGNATURE_SECRET", "whsec_test")

    res = client.post("/api/verify-payment", json=callback(signature="é"))
    assert res.status_code == 400
    assert res.json()["detail"] == "Invalid signature"
    assert fetch_orders() == []


def test_field_names_are_also_accepted(client, fetch_orders):
    res = client.post("/api/verify-payment", json={
        "order_id": "order_mock_2",
        "payment_id": "pay_mock_2",
        "order_details": {"amount": 10, "customer_name": "Ravi"},
    })
    assert res.json() == {"success": True}

    (order,) = fetch_orders()
    assert order.gateway_order_id == "order_mock_2"
    assert order.customer_name == "Ravi"


def test_signed_mode_accepts_valid_signature(client, fetch_orders, monkeypatch):
    monkeypatch.setattr(settings, "PAYMENT_SIGNATURE_SECRET", "whsec_test")
    signature = payment_signature("order_mock_1", "pay_signed", "whsec_test")

    res = client.post("/api/verify-payment", json=callback(payment_id="pay_signed", signature=signature))
    assert res.status_code == 200
    assert len(fetch_orders()) == 1


def test_emails_sent_after_order(client, fetch_orders, mail):
    res = client.post("/api/verify-payment", json=callback())
    assert res.status_code == 200

    customer, admin = mail.sent
    assert customer["To"] == "asha@example.com"
    assert customer["Subject"] == "Order Confirmation - TechMarket"
    assert admin["To"] == "admin@techmarket.test"
    assert admin["Subject"] == "New Order Received!"
    assert len(fetch_orders()) == 1


def test_admin_email_falls_back_to_smtp_user(client, mail, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_EMAIL", None)
    client.post("/api/verify-payment", json=callback())
    assert mail.sent[1]["To"] == "shop@techmarket.test"


def test_email_failure_keeps_order(client, fetch_orders, mail):
    mail.fail_with = smtplib.SMTPServerDisconnected("relay went away")

    res = client.post("/api/verify-payment", json=callback())
    assert res.status_code == 500
    body = res.json()
    assert body["success"] is False
    assert "relay went away" in body["error"]

    (order,) = fetch_orders()
    assert order.status == "PAID"
