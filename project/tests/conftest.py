"""Shared fixtures: an isolated SQLite file, no live integrations."""

import asyncio
import os
import tempfile

import pytest

TMP_DIR = tempfile.mkdtemp(prefix="techmarket-tests-")
DB_PATH = os.path.join(TMP_DIR, "test.db")

# must be set before techmarket.config is imported
os.environ.update({
    "DATABASE_URL": f"sqlite+aiosqlite:///{DB_PATH}",
    "LOG_DIR": os.path.join(TMP_DIR, "log"),
    "LOG_PRINT": "0",
    "STATIC_DIR": os.path.join(TMP_DIR, "no-client"),
    "STRIPE_SECRET_KEY": "",
    "PAYMENT_SIGNATURE_SECRET": "",
    "SMTP_HOST": "",
    "SMTP_USER": "",
    "SMTP_PASS": "",
    "ADMIN_EMAIL": "",
    "OPENAI_API_KEY": "",
})

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.future import select  # noqa: E402

from techmarket.config import settings  # noqa: E402
from techmarket.main import app  # noqa: E402
from techmarket.models.order import Order  # noqa: E402
from techmarket.utils.database import AsyncSessionLocal  # noqa: E402


def remove_db():
    for suffix in ("", "-wal", "-shm"):
        path = DB_PATH + suffix
        if os.path.exists(path):
            os.remove(path)


@pytest.fixture
def client():
    """App with a freshly created and seeded database."""
    remove_db()
    with TestClient(app) as c:
        yield c
    remove_db()


@pytest.fixture
def fetch_orders():
    """Reads order rows straight from the database."""
    async def _fetch():
        async with AsyncSessionLocal() as session:
            result = await session.execute(select(Order).order_by(Order.id))
            return result.scalars().all()

    return lambda: asyncio.run(_fetch())


class FakeSMTP:
    """Records messages instead of talking to a relay."""

    sent = []
    fail_with = None

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.logged_in = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def ehlo(self):
        pass

    def has_extn(self, name):
        return name == "starttls"

    def starttls(self):
        pass

    def login(self, user, password):
        self.logged_in = user

    def send_message(self, message):
        if FakeSMTP.fail_with is not None:
            raise FakeSMTP.fail_with
        FakeSMTP.sent.append(message)


@pytest.fixture
def mail(monkeypatch):
    """Mail enabled against FakeSMTP; yields the list of sent messages."""
    import techmarket.services.notify as notify

    FakeSMTP.sent = []
    FakeSMTP.fail_with = None
    monkeypatch.setattr(notify.smtplib, "SMTP", FakeSMTP)
    monkeypatch.setattr(settings, "SMTP_HOST", "smtp.test")
    monkeypatch.setattr(settings, "SMTP_USER", "shop@techmarket.test")
    monkeypatch.setattr(settings, "SMTP_PASS", "secret")
    monkeypatch.setattr(settings, "ADMIN_EMAIL", "admin@techmarket.test")
    yield FakeSMTP
    FakeSMTP.sent = []
    FakeSMTP.fail_with = None
