# techmarket/utils/security.py

"""
Signing of payment completion callbacks.

The signature is hex(HMAC-SHA256(secret, "<order_id>|<payment_id>")),
the same shape hosted checkouts hand back to the browser.
"""

import hashlib
import hmac


def payment_signature(order_id: str, payment_id: str, secret: str) -> str:
    """
    Computes the expected signature for a completed payment.

    :param order_id: gateway order id
    :param payment_id: gateway payment id
    :param secret: shared signing secret
    :return: hex digest
    """
    message = f"{order_id}|{payment_id}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def verify_payment_signature(order_id: str, payment_id: str, signature: str | None, secret: str) -> bool:
    """
    Constant-time comparison of the client-reported signature.

    :return: True when signature matches, otherwise False
    """
    if not signature:
        return False
    expected = payment_signature(order_id or "", payment_id or "", secret)
    # bytes, so non-ASCII input is a mismatch rather than a TypeError
    return hmac.compare_digest(expected.encode(), signature.encode())
