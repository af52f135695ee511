from datetime import timedelta

import pytest

from app.core.config import settings
from conftest import NOW, SIGNUP, register

API = "/api/v1"


def _add_vehicle(client, headers, **fields):
    payload = {"vehicle_no": "KA01AB1234", **fields}
    response = client.post(f"{API}/vehicles", json=payload, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()["data"]


class TestSignupFlow:

    def test_signup_does_not_echo_code_by_default(self, client, notifier):
        response = client.post(f"{API}/auth/signup", json=SIGNUP)
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["otp"] is None
        assert body["data"]["expires_in_minutes"] == 5
        assert notifier.sent[-1][0] == SIGNUP["phone"]

    def test_signup_echoes_code_when_enabled(self, client, notifier, monkeypatch):
        monkeypatch.setattr(settings, "EXPOSE_OTP_IN_RESPONSE", True)
        response = client.post(f"{API}/auth/signup", json=SIGNUP)
        assert response.json()["data"]["otp"] == notifier.last_code()

    def test_signup_missing_field(self, client):
        response = client.post(f"{API}/auth/signup", json={**SIGNUP, "city": " "})
        assert response.status_code == 422
        assert response.json()["details"] == {"missing_fields": ["city"]}

    def test_verify_creates_account(self, client, notifier):
        client.post(f"{API}/auth/signup", json=SIGNUP)
        response = client.post(
            f"{API}/auth/verify-otp",
            json={"phone": SIGNUP["phone"], "otp": notifier.last_code()},
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["token"]
        assert data["token_type"] == "bearer"
        assert data["user"]["email"] == SIGNUP["email"]
        assert "password" not in data["user"]
        assert "password_hash" not in data["user"]

    def test_verify_errors(self, client, notifier, clock):
        response = client.post(f"{API}/auth/verify-otp", json={"phone": SIGNUP["phone"], "otp": "12345"})
        assert response.status_code == 404

        client.post(f"{API}/auth/signup", json=SIGNUP)
        code = notifier.last_code()
        wrong = "10000" if code != "10000" else "10001"
        response = client.post(f"{API}/auth/verify-otp", json={"phone": SIGNUP["phone"], "otp": wrong})
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_OTP"

        clock.advance(minutes=5, seconds=1)
        response = client.post(f"{API}/auth/verify-otp", json={"phone": SIGNUP["phone"], "otp": code})
        assert response.status_code == 400
        assert response.json()["code"] == "OTP_EXPIRED"

    def test_resend(self, client, notifier):
        response = client.post(f"{API}/auth/resend-otp", json={"phone": SIGNUP["phone"]})
        assert response.status_code == 404

        client.post(f"{API}/auth/signup", json=SIGNUP)
        response = client.post(f"{API}/auth/resend-otp", json={"phone": SIGNUP["phone"]})
        assert response.status_code == 200
        assert len(notifier.sent) == 2

    def test_duplicate_signup(self, client, auth_headers):
        response = client.post(f"{API}/auth/signup", json=SIGNUP)
        assert response.status_code == 409
        assert response.json()["code"] == "DUPLICATE_USER"

    def test_login(self, client, auth_headers):
        response = client.post(f"{API}/auth/login", json={"phone": SIGNUP["phone"], "password": SIGNUP["password"]})
        assert response.status_code == 200
        assert response.json()["data"]["user"]["phone"] == SIGNUP["phone"]

        wrong = client.post(f"{API}/auth/login", json={"phone": SIGNUP["phone"], "password": "nope"})
        unknown = client.post(f"{API}/auth/login", json={"phone": "+910000000000", "password": "nope"})
        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json()["error"] == unknown.json()["error"]


class TestAuthorization:

    @pytest.mark.parametrize("method,path", [
        ("get", "/vehicles"),
        ("get", "/incomes"),
        ("get", "/expenses"),
        ("get", "/dashboard/stats"),
        ("get", "/dashboard/monthly"),
        ("get", "/alerts"),
    ])
    def test_requires_token(self, client, method, path):
        response = getattr(client, method)(f"{API}{path}")
        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHENTICATED"

    def test_rejects_bad_token(self, client):
        response = client.get(f"{API}/vehicles", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401

    def test_session_expires(self, client, auth_headers, clock):
        clock.advance(days=7)
        response = client.get(f"{API}/vehicles", headers=auth_headers)
        assert response.status_code == 401

    def test_other_users_vehicle_is_forbidden(self, client, notifier, auth_headers):
        vehicle = _add_vehicle(client, auth_headers)
        other = register(client, notifier, phone="+919800000001", email="asha@example.com")

        assert client.get(f"{API}/vehicles/{vehicle['id']}", headers=other).status_code == 403
        assert client.delete(f"{API}/vehicles/{vehicle['id']}", headers=other).status_code == 403
        assert client.get(f"{API}/vehicles", headers=other).json()["data"] == []


class TestLedger:

    def test_vehicle_crud(self, client, auth_headers):
        vehicle = _add_vehicle(client, auth_headers, vehicle_no="ka01 ab1234", emi_amount=45000)
        assert vehicle["vehicle_no"] == "KA01AB1234"
        assert vehicle["emi_amount"] == 45000
        assert "user_id" not in vehicle

        response = client.put(
            f"{API}/vehicles/{vehicle['id']}",
            json={"permit_date": "2027-01-31"},
            headers=auth_headers,
        )
        assert response.json()["data"]["permit_date"] == "2027-01-31"

        assert client.delete(f"{API}/vehicles/{vehicle['id']}", headers=auth_headers).status_code == 200
        assert client.get(f"{API}/vehicles/{vehicle['id']}", headers=auth_headers).status_code == 404

    def test_income_and_expense(self, client, auth_headers):
        _add_vehicle(client, auth_headers)

        response = client.post(
            f"{API}/incomes",
            json={"vehicle": "KA01AB1234", "amount": "10000.50", "payment_status": "paid"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["data"]["amount"] == 10000.5

        response = client.post(
            f"{API}/expenses",
            json={"vehicle": "KA01AB1234", "amount": 4000, "documents": []},
            headers=auth_headers,
        )
        assert response.status_code == 422
        assert response.json()["details"] == {"missing_fields": ["documents"]}

        response = client.post(
            f"{API}/expenses",
            json={"vehicle": "KA01AB1234", "amount": 4000, "documents": ["bill.pdf"]},
            headers=auth_headers,
        )
        assert response.status_code == 200

        assert len(client.get(f"{API}/incomes?status=paid", headers=auth_headers).json()["data"]) == 1
        assert client.get(f"{API}/incomes?status=unpaid", headers=auth_headers).json()["data"] == []
        assert len(client.get(f"{API}/expenses", headers=auth_headers).json()["data"]) == 1

    def test_negative_amount_rejected(self, client, auth_headers):
        _add_vehicle(client, auth_headers)
        response = client.post(f"{API}/incomes", json={"vehicle": "KA01AB1234", "amount": -1}, headers=auth_headers)
        assert response.status_code == 422

    @pytest.mark.parametrize("amount", ["1234567890123456", "10.005"])
    def test_amount_precision_is_bounded(self, client, auth_headers, amount):
        _add_vehicle(client, auth_headers)
        response = client.post(f"{API}/incomes", json={"vehicle": "KA01AB1234", "amount": amount}, headers=auth_headers)
        assert response.status_code == 422

    def test_largest_amount_is_exact_on_the_wire(self, client, auth_headers):
        _add_vehicle(client, auth_headers)
        response = client.post(
            f"{API}/incomes",
            json={"vehicle": "KA01AB1234", "amount": "9999999999999.99"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert repr(response.json()["data"]["amount"]) == "9999999999999.99"

    def test_unknown_vehicle(self, client, auth_headers):
        response = client.post(f"{API}/incomes", json={"vehicle": "ZZ99", "amount": 1}, headers=auth_headers)
        assert response.status_code == 404


class TestDashboard:

    def test_stats_and_monthly(self, client, auth_headers):
        _add_vehicle(client, auth_headers)
        _add_vehicle(client, auth_headers, vehicle_no="MH12CD0001")
        client.post(f"{API}/incomes", json={"vehicle": "KA01AB1234", "amount": 10000, "date": "2026-10-02"}, headers=auth_headers)
        client.post(f"{API}/incomes", json={"vehicle": "KA01AB1234", "amount": 5000, "date": "2026-09-12"}, headers=auth_headers)
        client.post(
            f"{API}/expenses",
            json={"vehicle": "KA01AB1234", "amount": 4000, "documents": ["bill.pdf"], "date": "2026-10-05"},
            headers=auth_headers,
        )

        stats = client.get(f"{API}/dashboard/stats", headers=auth_headers).json()["data"]
        assert stats == {
            "total_income": 15000,
            "total_expense": 4000,
            "net_profit": 11000,
            "income_count": 2,
            "expense_count": 1,
        }

        other = client.get(f"{API}/dashboard/stats?vehicle_no=MH12CD0001", headers=auth_headers).json()["data"]
        assert other["net_profit"] == 0
        assert other["income_count"] == 0

        series = client.get(f"{API}/dashboard/monthly", headers=auth_headers).json()["data"]
        assert [bucket["label"] for bucket in series] == [
            "May 2026", "Jun 2026", "Jul 2026", "Aug 2026", "Sep 2026", "Oct 2026",
        ]
        assert series[-1]["income"] == 10000
        assert series[-1]["expense"] == 4000
        assert series[-2]["income"] == 5000

    def test_alerts(self, client, auth_headers):
        today = NOW.date()
        _add_vehicle(
            client,
            auth_headers,
            insurance_date=(today + timedelta(days=2)).isoformat(),
            tax_date=(today + timedelta(days=30)).isoformat(),
            permit_date=(today - timedelta(days=1)).isoformat(),
        )

        alerts = client.get(f"{API}/alerts", headers=auth_headers).json()["data"]
        assert alerts == [{
            "vehicle_no": "KA01AB1234",
            "type": "Insurance",
            "date": str(today + timedelta(days=2)),
            "days_left": 2,
            "critical": True,
            "overdue": False,
        }]

        wide = client.get(f"{API}/alerts?horizon_days=30&include_overdue=true", headers=auth_headers).json()["data"]
        assert {alert["type"]: alert["days_left"] for alert in wide} == {"Tax": 30, "Insurance": 2, "Permit": -1}

    def test_alerts_negative_horizon(self, client, auth_headers):
        assert client.get(f"{API}/alerts?horizon_days=-1", headers=auth_headers).status_code == 422

    def test_notify(self, client, notifier, auth_headers):
        response = client.post(
            f"{API}/notify",
            json={"mobile": "+91 98450 12345", "message": "Payment of 10000 is due"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert notifier.sent[-1] == ("+919845012345", "Payment of 10000 is due")

        response = client.post(f"{API}/notify", json={"mobile": "", "message": "hi"}, headers=auth_headers)
        assert response.status_code == 422


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"
    assert client.get("/live").json() == {"status": "alive"}
    assert client.get("/ready").json() == {"status": "ready"}
