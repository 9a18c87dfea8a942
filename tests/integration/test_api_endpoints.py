"""API endpoint integration tests.

Tests the FastAPI endpoints for subscriptions, payroll, payments, billing
history and advisory sessions.
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import IntegrityError

from billing_engine.calculators.dates import commitment_end, utcnow

pytestmark = pytest.mark.asyncio


def money(value) -> Decimal:
    return Decimal(str(value))


class TestHealthEndpoints:
    """Test health check endpoint."""

    async def test_health_check(self, client: AsyncClient):
        """Health endpoint should return 200."""
        response = await client.get("/api/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
        assert "timestamp" in data


class TestSubscriptionEndpoints:
    """Test subscription tier endpoints."""

    async def test_get_creates_disabled_subscription(self, client: AsyncClient, seed):
        company = await seed()

        response = await client.get("/api/subscriptions", params={"email": company.owner_email})

        assert response.status_code == 200, response.text
        data = response.json()
        assert data["payrollEnabled"] is False
        assert data["taxEnabled"] is False
        assert data["advisoryEnabled"] is False
        assert data["feePercent"] == 0

    async def test_email_lookup_ignores_case(self, client: AsyncClient, seed):
        company = await seed(email="Owner@Example.com")

        response = await client.get("/api/subscriptions", params={"email": "owner@example.com"})

        assert response.status_code == 200

    async def test_owner_email_unique_regardless_of_case(
        self, client: AsyncClient, seed
    ):
        company = await seed(email="Owner@Example.com")
        with pytest.raises(IntegrityError):
            await seed(email="owner@example.com")

        response = await client.get("/api/subscriptions", params={"email": "OWNER@example.com"})

        assert response.status_code == 200
        assert response.json()["companyId"] == str(company.company_id)

    async def test_enable_payroll_and_tax(self, client: AsyncClient, seed):
        company = await seed()

        response = await client.put(
            "/api/subscriptions",
            json={"email": company.owner_email, "payrollEnabled": True, "taxEnabled": True},
        )

        assert response.status_code == 200, response.text
        data = response.json()
        assert data["payrollEnabled"] is True
        assert data["taxEnabled"] is True
        assert data["commitmentActive"] is True
        assert data["commitmentEndDate"] is not None
        assert data["feePercent"] == 4

    async def test_small_team_gets_remediation_fields(self, client: AsyncClient, seed):
        company = await seed(active=3)

        response = await client.put(
            "/api/subscriptions",
            json={"email": company.owner_email, "advisoryEnabled": True},
        )

        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "INSUFFICIENT_TEAM_SIZE"
        assert data["currentTeamSize"] == 3
        assert data["required"] == 5
        assert "message" in data

    async def test_disable_payroll_inside_commitment(self, client: AsyncClient, seed):
        started = utcnow() - timedelta(days=10)
        company = await seed(payroll=True, payroll_enabled_at=started)

        response = await client.put(
            "/api/subscriptions",
            json={"email": company.owner_email, "payrollEnabled": False},
        )

        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "COMMITMENT_ACTIVE"
        assert data["daysRemaining"] == (commitment_end(started) - started).days - 10
        assert "commitmentEndDate" in data

    async def test_unknown_company(self, client: AsyncClient):
        response = await client.put(
            "/api/subscriptions",
            json={"email": "nobody@example.com", "taxEnabled": True},
        )

        assert response.status_code == 404
        assert response.json()["code"] == "COMPANY_NOT_FOUND"


class TestPayrollEndpoints:
    """Test payroll run and schedule endpoints."""

    async def test_run_payroll(self, client: AsyncClient, seed):
        company = await seed(card=True, payroll=True, tax=True)

        response = await client.post("/api/payroll/run", json={"email": company.owner_email})

        assert response.status_code == 200, response.text
        data = response.json()
        assert money(data["payrollAmount"]) == Decimal("300000.00")
        assert money(data["fee"]) == Decimal("12000.00")
        assert money(data["totalCharged"]) == Decimal("312000.00")
        assert data["feePercent"] == 4
        assert data["employeeCount"] == 5
        assert data["nextPayrollDate"] is not None
        assert "billingId" in data

    async def test_run_payroll_is_idempotent_per_key(self, client: AsyncClient, seed):
        company = await seed(card=True, payroll=True)
        body = {"email": company.owner_email, "idempotencyKey": "payroll-2026-01"}

        first = await client.post("/api/payroll/run", json=body)
        second = await client.post("/api/payroll/run", json=body)

        assert first.status_code == 200
        assert second.status_code == 200
        assert first.json()["billingId"] == second.json()["billingId"]

        history = await client.get("/api/billing/history", params={"email": company.owner_email})
        assert len(history.json()["history"]) == 1

    async def test_empty_idempotency_key_is_rejected(self, client: AsyncClient, seed):
        company = await seed(card=True, payroll=True)
        body = {"email": company.owner_email, "idempotencyKey": ""}

        first = await client.post("/api/payroll/run", json=body)
        second = await client.post("/api/payroll/run", json=body)

        assert first.status_code == 400
        assert second.status_code == 400
        assert first.json()["code"] == "VALIDATION_ERROR"

    async def test_failed_run_leaves_nothing_behind(self, app, seed, monkeypatch):
        """A failure after the billing row is flushed rolls the whole run back."""
        company = await seed(card=True, payroll=True)

        def fail(*args, **kwargs):
            raise RuntimeError("schedule advance failed")

        monkeypatch.setattr("billing_engine.services.payroll_service.next_payroll_date", fail)

        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post(
                "/api/payroll/run", json={"email": company.owner_email}
            )
            assert response.status_code == 500
            assert response.json()["code"] == "INTERNAL_ERROR"

            history = await client.get(
                "/api/billing/history", params={"email": company.owner_email}
            )
            assert history.json()["history"] == []

            schedule = await client.get(
                "/api/payroll/schedule", params={"email": company.owner_email}
            )
            assert schedule.json()["lastRunAt"] is None

    async def test_run_without_card(self, client: AsyncClient, seed):
        company = await seed(payroll=True)

        response = await client.post("/api/payroll/run", json={"email": company.owner_email})

        assert response.status_code == 400
        assert response.json()["code"] == "PAYMENT_METHOD_MISSING"

    async def test_run_without_payroll_tier(self, client: AsyncClient, seed):
        company = await seed(card=True, tax=True)

        response = await client.post("/api/payroll/run", json={"email": company.owner_email})

        assert response.status_code == 400
        assert response.json()["code"] == "PAYROLL_NOT_ENABLED"

    async def test_run_without_subscription(self, client: AsyncClient, seed):
        company = await seed(card=True)

        response = await client.post("/api/payroll/run", json={"email": company.owner_email})

        assert response.status_code == 404
        assert response.json()["code"] == "SUBSCRIPTION_NOT_FOUND"

    async def test_preview(self, client: AsyncClient, seed):
        company = await seed(payroll=True, advisory=True)

        response = await client.get("/api/payroll/preview", params={"email": company.owner_email})

        assert response.status_code == 200
        data = response.json()
        assert data["feePercent"] == 3
        assert money(data["totalCharged"]) == Decimal("309000.00")

    async def test_schedule_roundtrip(self, client: AsyncClient, seed):
        company = await seed()
        next_date = date.today() + timedelta(days=3)

        response = await client.put(
            "/api/payroll/schedule",
            json={
                "email": company.owner_email,
                "frequency": "weekly",
                "nextPayrollDate": next_date.isoformat(),
            },
        )
        assert response.status_code == 200, response.text

        response = await client.get("/api/payroll/schedule", params={"email": company.owner_email})
        data = response.json()
        assert data["frequency"] == "weekly"
        assert data["nextPayrollDate"] == next_date.isoformat()

    async def test_schedule_rejects_unknown_frequency(self, client: AsyncClient, seed):
        company = await seed()

        response = await client.put(
            "/api/payroll/schedule",
            json={"email": company.owner_email, "frequency": "daily"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"


class TestPaymentEndpoints:
    """Test card and billing history endpoints."""

    async def test_card_status_before_connecting(self, client: AsyncClient, seed):
        company = await seed()

        response = await client.get("/api/payments/amex", params={"email": company.owner_email})

        assert response.status_code == 200
        assert response.json() == {"connected": False, "card": None}

    async def test_connect_amex(self, client: AsyncClient, seed):
        company = await seed()

        response = await client.post(
            "/api/payments/amex",
            params={"email": company.owner_email},
            json={
                "cardholderName": "John Doe",
                "last4": "1234",
                "expiryMonth": 12,
                "expiryYear": 2025,
            },
        )

        assert response.status_code == 200, response.text
        data = response.json()
        assert data["connected"] is True
        assert data["card"]["brand"] == "amex"
        assert data["card"]["last4"] == "1234"
        assert data["card"]["cardholderName"] == "John Doe"

        status = await client.get("/api/payments/amex", params={"email": company.owner_email})
        assert status.json()["connected"] is True
        assert status.json()["card"]["last4"] == "1234"

    async def test_connected_card_unlocks_payroll(self, client: AsyncClient, seed):
        company = await seed(payroll=True)
        await client.post(
            "/api/payments/amex",
            params={"email": company.owner_email},
            json={"last4": "1005"},
        )

        response = await client.post("/api/payroll/run", json={"email": company.owner_email})

        assert response.status_code == 200, response.text

    async def test_card_number_must_be_four_digits(self, client: AsyncClient, seed):
        company = await seed()

        response = await client.post(
            "/api/payments/amex",
            params={"email": company.owner_email},
            json={"last4": "10a5"},
        )

        assert response.status_code == 400

    async def test_billing_history_after_run(self, client: AsyncClient, seed):
        company = await seed(card=True, payroll=True, tax=True)
        await client.post("/api/payroll/run", json={"email": company.owner_email})

        response = await client.get("/api/billing/history", params={"email": company.owner_email})

        assert response.status_code == 200
        [entry] = response.json()["history"]
        assert money(entry["amount"]) == Decimal("312000.00")
        assert entry["status"] == "paid"
        assert entry["description"] == "Payroll - 5 employees (4% fee)"
        assert "date" in entry

    async def test_billing_history_empty(self, client: AsyncClient, seed):
        company = await seed()

        response = await client.get("/api/billing/history", params={"email": company.owner_email})

        assert response.status_code == 200
        assert response.json() == {"history": []}


class TestAdvisoryEndpoints:
    """Test advisory session endpoints."""

    def booking(self, email: str, **overrides) -> dict:
        body = {
            "email": email,
            "type": "Quarterly Review",
            "date": "2026-11-03",
            "time": "14:30",
            "duration": 60,
        }
        body.update(overrides)
        return body

    async def test_book_session(self, client: AsyncClient, seed):
        company = await seed(tax=True)

        response = await client.post("/api/advisory", json=self.booking(company.owner_email))

        assert response.status_code == 201, response.text
        data = response.json()
        assert data["status"] == "scheduled"
        assert data["type"] == "Quarterly Review"
        assert data["date"] == "2026-11-03"
        assert data["duration"] == 60

        listed = await client.get("/api/advisory", params={"email": company.owner_email})
        assert [s["sessionId"] for s in listed.json()] == [data["sessionId"]]

    async def test_book_without_tier(self, client: AsyncClient, seed):
        company = await seed(payroll=True)

        response = await client.post("/api/advisory", json=self.booking(company.owner_email))

        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "TIER_NOT_ENABLED"
        assert data["requiredTiers"] == ["tax", "advisory"]

    async def test_book_with_small_team(self, client: AsyncClient, seed):
        company = await seed(active=4, advisory=True)

        response = await client.post("/api/advisory", json=self.booking(company.owner_email))

        assert response.status_code == 400
        assert response.json()["currentTeamSize"] == 4

    async def test_book_for_unknown_company(self, client: AsyncClient):
        response = await client.post("/api/advisory", json=self.booking("ghost@example.com"))

        assert response.status_code == 404

    async def test_missing_fields(self, client: AsyncClient, seed):
        company = await seed(tax=True)

        response = await client.post(
            "/api/advisory", json={"email": company.owner_email, "type": "Review"}
        )

        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "VALIDATION_ERROR"
        assert data["errors"]
