# techmarket/services/notify.py

import os
import smtplib
from email.mime.text import MIMEText

from fastapi import Request
from jinja2 import Environment, FileSystemLoader, select_autoescape
from starlette.concurrency import run_in_threadpool

from techmarket.config import settings
from techmarket.schemas.order import OrderDetails

TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "..", "templates", "email")

env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html"]),
)

CURRENCY_SYMBOLS = {"INR": "₹"}


def money(amount) -> str:
    if isinstance(amount, float):
        amount = int(amount) if amount.is_integer() else f"{amount:.2f}"
    symbol = CURRENCY_SYMBOLS.get(settings.CURRENCY.upper())
    if symbol:
        return f"{symbol}{amount}"
    return f"{amount} {settings.CURRENCY}"


def map_link(details: OrderDetails) -> str | None:
    if details.gps is None:
        return None
    return f"https://www.google.com/maps?q={details.gps.latitude},{details.gps.longitude}"


def render_customer_confirmation(order_id: str, details: OrderDetails) -> str:
    return env.get_template("customer_confirmation.html").render(
        order_id=order_id, details=details, money=money
    )


def render_admin_alert(payment_id: str, details: OrderDetails) -> str:
    return env.get_template("admin_alert.html").render(
        payment_id=payment_id, details=details, money=money, map_link=map_link(details)
    )


def send_mail(to: str, subject: str, html: str) -> None:
    """Blocking SMTP send, one connection per message."""
    m = MIMEText(html, "html", "utf-8")
    m["Subject"] = subject
    m["From"] = settings.SMTP_FROM
    m["To"] = to
    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=10) as s:
        s.ehlo()
        if s.has_extn("starttls"):
            s.starttls()
            s.ehlo()
        if settings.SMTP_USER and settings.SMTP_PASS:
            s.login(settings.SMTP_USER, settings.SMTP_PASS)
        s.send_message(m)


async def notify_order_service(order_id: str, payment_id: str, details: OrderDetails, request: Request) -> bool:
    """
    Sends the customer confirmation, then the admin alert.

    Returns False when mail is not configured (nothing sent).
    SMTP errors propagate; the caller decides what the client sees.
    """
    log = request.app.state.log

    if not settings.mail_enabled:
        await log.log_info("notify", "Mail not configured, notifications skipped", {"order_id": order_id})
        return False

    await run_in_threadpool(
        send_mail,
        details.customer_email,
        f"Order Confirmation - {settings.STORE_NAME}",
        render_customer_confirmation(order_id, details),
    )
    await log.log_info("notify", "Customer confirmation sent", {"order_id": order_id, "to": details.customer_email})

    admin = settings.ADMIN_EMAIL or settings.SMTP_USER
    await run_in_threadpool(
        send_mail,
        admin,
        "New Order Received!",
        render_admin_alert(payment_id, details),
    )
    await log.log_info("notify", "Admin alert sent", {"order_id": order_id, "to": admin})
    return True
