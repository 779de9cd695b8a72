"""
Barrel + Verse Backend — Purchase Route Tests
===============================================

What we test:
    ✅ Purchases require a session (401)
    ✅ The owner is the session user, whatever the body says
    ✅ Status is always "completed"
    ✅ Users only ever see their own purchases (another user's id → 404)
    ✅ Invalid item type / amount → 400
"""

import pytest

from conftest import logged_in_client

PURCHASE = {"itemType": "course", "itemId": "course-123", "amount": "19.99", "stripePaymentId": "pi_abc"}


class TestPurchaseRoutes:

    @pytest.mark.asyncio
    async def test_requires_session(self, client):
        assert (await client.get("/api/purchases")).status_code == 401
        assert (await client.post("/api/purchases", json=PURCHASE)).status_code == 401
        assert (await client.get("/api/purchases/some-id")).status_code == 401

    @pytest.mark.asyncio
    async def test_create_purchase(self, user_client):
        response = await user_client.post("/api/purchases", json=PURCHASE)

        assert response.status_code == 200
        purchase = response.json()
        assert purchase["userId"] == user_client.user.id
        assert purchase["itemType"] == "course"
        assert purchase["itemId"] == "course-123"
        assert purchase["amount"] == "19.99"
        assert purchase["stripePaymentId"] == "pi_abc"
        assert purchase["status"] == "completed"

    @pytest.mark.asyncio
    async def test_client_cannot_choose_owner_or_status(self, user_client):
        response = await user_client.post(
            "/api/purchases",
            json={**PURCHASE, "userId": "someone-else", "status": "refunded"},
        )

        assert response.json()["userId"] == user_client.user.id
        assert response.json()["status"] == "completed"

    @pytest.mark.asyncio
    async def test_payment_id_is_optional(self, user_client):
        response = await user_client.post(
            "/api/purchases", json={"itemType": "experience", "itemId": "exp-1", "amount": "120"}
        )

        assert response.status_code == 200
        assert response.json()["stripePaymentId"] is None
        assert response.json()["amount"] == "120.00"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("override", [
        {"itemType": "wine"},
        {"amount": "12.345"},
        {"amount": "123456789.00"},
        {"amount": "19.99\n"},
        {"amount": "\u0663"},
        {"itemId": ""},
    ])
    async def test_invalid_body(self, user_client, override):
        response = await user_client.post("/api/purchases", json={**PURCHASE, **override})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_list_and_get_own_purchases(self, user_client):
        created = (await user_client.post("/api/purchases", json=PURCHASE)).json()

        listing = await user_client.get("/api/purchases")
        single = await user_client.get(f"/api/purchases/{created['id']}")

        assert [p["id"] for p in listing.json()] == [created["id"]]
        assert single.json() == created

    @pytest.mark.asyncio
    async def test_purchases_are_private(self, user_client, make_client, memory_storage):
        mine = (await user_client.post("/api/purchases", json=PURCHASE)).json()
        other = await logged_in_client(make_client, memory_storage, "other@example.com")

        assert (await other.get("/api/purchases")).json() == []
        response = await other.get(f"/api/purchases/{mine['id']}")
        assert response.status_code == 404
        assert response.json()["error"] == "Purchase not found"
