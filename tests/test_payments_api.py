"""Payment endpoints through the HTTP layer."""

from decimal import Decimal

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from components.payment.repository import PaymentRepository
from components.user.models import Role

pytestmark = pytest.mark.asyncio

PAYMENT = {
    "payment_date": "2024-10-01",
    "amount": "100.00",
    "payment_method": "card",
    "location": "x",
}


async def create_payment(client: AsyncClient, headers: dict, **overrides) -> dict:
    response = await client.post("/api/payments", headers=headers, json={**PAYMENT, **overrides})
    assert response.status_code == 201, response.text
    return response.json()


class TestGate:
    async def test_missing_token_is_403(self, client: AsyncClient, users):
        response = await client.get("/api/payments")

        assert response.status_code == 403
        assert response.json() == {"message": "token required"}

    async def test_invalid_token_is_403(self, client: AsyncClient, users):
        response = await client.get("/api/payments", headers={"Authorization": "Bearer nope"})

        assert response.status_code == 403
        assert response.json() == {"message": "invalid token"}

    @pytest.mark.parametrize(
        "method, path",
        [
            ("POST", "/api/payments"),
            ("PUT", "/api/payments/1"),
            ("DELETE", "/api/payments/1"),
        ],
    )
    async def test_usuario_role_is_401(self, client: AsyncClient, headers, method, path):
        response = await client.request(method, path, headers=headers[Role.USUARIO], json=PAYMENT)

        assert response.status_code == 401
        assert response.json() == {"message": "not authorized"}

    async def test_denied_caller_does_not_learn_missing_payment(self, client: AsyncClient, headers):
        response = await client.delete("/api/payments/999", headers=headers[Role.USUARIO])

        assert response.status_code == 401


class TestCreateAndList:
    async def test_create_returns_201_with_active_record(self, client: AsyncClient, headers, users):
        owner = users[Role.USUARIO]
        data = await create_payment(client, headers[Role.ADMIN], user_id=owner.id)

        assert data["id"] > 0
        assert data["active"] is True
        assert data["user_id"] == owner.id
        assert data["payment_date"] == "2024-10-01"
        assert Decimal(data["amount"]) == Decimal("100.00")
        assert data["payment_method"] == "card"
        assert data["location"] == "x"
        assert data["description"] is None

    async def test_owner_defaults_to_caller(self, client: AsyncClient, headers, users):
        data = await create_payment(client, headers[Role.SUPER])

        assert data["user_id"] == users[Role.SUPER].id

    async def test_missing_required_field_is_422(self, client: AsyncClient, headers):
        body = {k: v for k, v in PAYMENT.items() if k != "location"}
        response = await client.post("/api/payments", headers=headers[Role.ADMIN], json=body)

        assert response.status_code == 422

    async def test_usuario_lists_only_own_payments(self, client: AsyncClient, headers, users):
        owner = users[Role.USUARIO]
        mine = await create_payment(client, headers[Role.ADMIN], user_id=owner.id)
        await create_payment(client, headers[Role.ADMIN])

        response = await client.get(
            "/api/payments",
            headers=headers[Role.USUARIO],
            params={"user_id": users[Role.ADMIN].id},
        )

        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [mine["id"]]

    async def test_admin_lists_requested_user(self, client: AsyncClient, headers, users):
        owner = users[Role.USUARIO]
        mine = await create_payment(client, headers[Role.ADMIN], user_id=owner.id)

        response = await client.get("/api/payments", headers=headers[Role.ADMIN], params={"user_id": owner.id})

        assert [p["id"] for p in response.json()] == [mine["id"]]


class TestUpdate:
    async def test_update_returns_200(self, client: AsyncClient, headers):
        payment = await create_payment(client, headers[Role.ADMIN])

        response = await client.put(
            f"/api/payments/{payment['id']}", headers=headers[Role.ADMIN], json={"amount": "150"}
        )

        assert response.status_code == 200
        assert response.json() == {"message": "payment updated successfully"}

    async def test_identical_update_returns_304(self, client: AsyncClient, headers):
        payment = await create_payment(client, headers[Role.ADMIN])

        response = await client.put(
            f"/api/payments/{payment['id']}",
            headers=headers[Role.SUPER],
            json={"amount": "100.00", "payment_method": "card"},
        )

        assert response.status_code == 304

    async def test_unknown_payment_returns_404(self, client: AsyncClient, headers):
        response = await client.put("/api/payments/999", headers=headers[Role.ADMIN], json={"amount": "1"})

        assert response.status_code == 404
        assert response.json() == {"message": "payment not found"}


class TestDeactivate:
    async def test_example_scenario(self, client: AsyncClient, headers, users, db_manager):
        owner = users[Role.USUARIO]
        actor = users[Role.ADMIN]
        payment = await create_payment(client, headers[Role.ADMIN], user_id=owner.id)

        response = await client.delete(f"/api/payments/{payment['id']}", headers=headers[Role.ADMIN])

        assert response.status_code == 200
        assert response.json() == {"message": "payment deleted successfully"}

        async with db_manager.get_db() as session:
            trail = await PaymentRepository(session).audit_trail(payment["id"])
        assert [(r.payment_id, r.deleted_by) for r in trail] == [(payment["id"], actor.id)]

        listed = await client.get("/api/payments", headers=headers[Role.USUARIO])
        assert listed.json() == []
        listed = await client.get("/api/payments", headers=headers[Role.ADMIN], params={"user_id": owner.id})
        assert listed.json() == []

    async def test_unknown_payment_returns_404_without_audit(self, client: AsyncClient, headers, db_manager):
        response = await client.delete("/api/payments/999", headers=headers[Role.SUPER])

        assert response.status_code == 404
        async with db_manager.get_db() as session:
            assert await PaymentRepository(session).audit_trail(999) == []


async def storage_down(*args, **kwargs):
    raise OperationalError("SELECT 1", {}, Exception("db down"))


class TestStorageFaults:
    async def test_create_failure_is_500_with_error(self, client: AsyncClient, headers, monkeypatch):
        monkeypatch.setattr(AsyncSession, "commit", storage_down)

        response = await client.post("/api/payments", headers=headers[Role.ADMIN], json=PAYMENT)

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "payment creation failed"
        assert "db down" in body["error"]

    async def test_list_failure_is_500_with_error(self, client: AsyncClient, headers, monkeypatch):
        monkeypatch.setattr(AsyncSession, "execute", storage_down)

        response = await client.get("/api/payments", headers=headers[Role.USUARIO])

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "payment fetch failed"
        assert "db down" in body["error"]

    async def test_update_failure_is_500_with_error(self, client: AsyncClient, headers, monkeypatch):
        payment = await create_payment(client, headers[Role.ADMIN])
        monkeypatch.setattr(AsyncSession, "commit", storage_down)

        response = await client.put(
            f"/api/payments/{payment['id']}", headers=headers[Role.ADMIN], json={"amount": "150"}
        )

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "payment update failed"
        assert "db down" in body["error"]

    async def test_delete_failure_is_500_and_payment_stays_listed(
        self, client: AsyncClient, headers, monkeypatch
    ):
        payment = await create_payment(client, headers[Role.ADMIN])
        monkeypatch.setattr(AsyncSession, "execute", storage_down)

        response = await client.delete(f"/api/payments/{payment['id']}", headers=headers[Role.ADMIN])

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "disablePayment error"
        assert "db down" in body["error"]

        monkeypatch.undo()
        listed = await client.get("/api/payments", headers=headers[Role.ADMIN])
        assert [p["id"] for p in listed.json()] == [payment["id"]]
