import asyncio
import re
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient

from app.db.store import InMemoryLedgerStore
from app.main import app
from app.services.notification_service import Notifier
from utils.time_utils import Clock

TZ = "Asia/Kolkata"
NOW = datetime(2026, 10, 19, 10, 30, tzinfo=ZoneInfo(TZ))


class FixedClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, now=NOW):
        super().__init__(TZ)
        self.current = now

    def now(self):
        return self.current

    def advance(self, **kwargs):
        self.current = self.current + timedelta(**kwargs)


class RecordingNotifier(Notifier):
    def __init__(self):
        self.sent = []

    async def send_sms(self, to_phone, message):
        self.sent.append((to_phone, message))
        return {"provider": "test"}

    def last_code(self):
        return re.search(r"\b(\d{5})\b", self.sent[-1][1]).group(1)


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def store():
    return InMemoryLedgerStore()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(store, clock, notifier):
    app.state.store = store
    app.state.clock = clock
    app.state.notifier = notifier
    return TestClient(app)


SIGNUP = {
    "full_name": "Ravi Kumar",
    "phone": "+919876543210",
    "email": "ravi@example.com",
    "password": "s3cret-pass",
    "address": "12 MG Road",
    "city": "Bengaluru",
    "state": "Karnataka",
    "zip": "560001",
    "company": "Kumar Logistics",
}


def register(client, notifier, **overrides):
    """Signs a user up through the API and returns bearer headers."""
    profile = {**SIGNUP, **overrides}
    assert client.post("/api/v1/auth/signup", json=profile).status_code == 200
    response = client.post(
        "/api/v1/auth/verify-otp",
        json={"phone": profile["phone"], "otp": notifier.last_code()},
    )
    assert response.status_code == 200
    token = response.json()["data"]["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(client, notifier):
    return register(client, notifier)
