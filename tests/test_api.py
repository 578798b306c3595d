import pytest
from httpx import ASGITransport, AsyncClient

from app import app
from conftest import VALID_PHONE
from core.cache import get_view_state_store
from core.functions_client import get_functions_client
from core.get_db import get_db_async

LISTING = {
    "address": "12 Congress Ave",
    "city": "Austin",
    "state": "TX",
    "zip_code": "78701",
    "price": 450000,
    "market_price": 500000,
    "beds": 3,
    "baths": 2,
    "sqft": 1800,
    "property_type": "Single Family",
    "reward": 5000,
}


@pytest.fixture
async def client(session_factory, functions, store):
    async def override_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_async] = override_db
    app.dependency_overrides[get_functions_client] = lambda: functions
    app.dependency_overrides[get_view_state_store] = lambda: store
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def signup_and_signin(client, email, account_type="buyer", name="Test User"):
    res = await client.post(
        "/v1/auth/signup",
        json={
            "email": email,
            "password": "secret123",
            "name": name,
            "phone": VALID_PHONE,
            "account_type": account_type,
        },
    )
    assert res.status_code == 201, res.text
    res = await client.post("/v1/auth/signin", json={"email": email, "password": "secret123"})
    assert res.status_code == 200, res.text
    # each test user authenticates with its own bearer token, not the shared cookie jar
    client.cookies.clear()
    return {"Authorization": f"Bearer {res.json()['access_token']}"}


class TestAuth:
    async def test_signup_normalizes_and_signin_issues_token(self, client):
        res = await client.post(
            "/v1/auth/signup",
            json={"email": "  Sam@Example.com ", "password": "secret123", "phone": VALID_PHONE},
        )
        assert res.status_code == 201
        body = res.json()
        assert body["email"] == "sam@example.com"
        assert body["phone"] == "+16502530000"
        assert body["account_type"] == "buyer"
        assert "hashed_password" not in body

        res = await client.post(
            "/v1/auth/signin", json={"email": "sam@example.com", "password": "secret123"}
        )
        assert res.status_code == 200
        assert res.json()["access_token"]
        assert "access_token" in res.cookies

    async def test_duplicate_email_and_bad_password(self, client):
        await signup_and_signin(client, "dup@example.com")
        res = await client.post(
            "/v1/auth/signup", json={"email": "dup@example.com", "password": "secret123"}
        )
        assert res.status_code == 400

        res = await client.post(
            "/v1/auth/signin", json={"email": "dup@example.com", "password": "wrong1234"}
        )
        assert res.status_code == 401

    async def test_validation_error_shape(self, client):
        res = await client.post(
            "/v1/auth/signup", json={"email": "weak@example.com", "password": "onlyletters"}
        )
        assert res.status_code == 422
        body = res.json()
        assert body["success"] is False
        assert body["error"] == "Validation failed"
        assert body["details"][0]["field"] == "password"
        assert body["details"][0]["msg"] == "Password must contain: number"

    async def test_protected_route_requires_token(self, client):
        res = await client.get("/v1/profile/me")
        assert res.status_code == 401

        headers = await signup_and_signin(client, "me@example.com", name="Me")
        res = await client.get("/v1/profile/me", headers=headers)
        assert res.status_code == 200
        assert res.json()["name"] == "Me"


class TestMarketplaceFlow:
    async def test_listing_and_waitlist_over_http(self, client, functions_calls):
        seller = await signup_and_signin(client, "seller@example.com", "seller", "Sam Seller")
        buyer = await signup_and_signin(client, "buyer@example.com", "buyer", "Bea Buyer")

        res = await client.post("/v1/listings", json=LISTING, headers=seller)
        assert res.status_code == 201, res.text
        listing = res.json()
        assert listing["title"] == "Single Family in Austin, TX"
        assert listing["below_market"] == 10
        assert listing["reward"] == 5000

        res = await client.get("/v1/listings", params={"location": "Austin"})
        assert [item["id"] for item in res.json()] == [listing["id"]]

        pid = listing["id"]
        res = await client.get(f"/v1/listings/{pid}/contact", headers=buyer)
        assert res.json()["visible"] is False

        res = await client.post(
            f"/v1/listings/{pid}/waitlist",
            json={"name": "Bea Buyer", "email": "buyer@example.com", "phone": VALID_PHONE},
            headers=buyer,
        )
        assert res.status_code == 201
        request_id = res.json()["id"]

        res = await client.get(f"/v1/listings/{pid}/waitlist/status", headers=buyer)
        assert res.json()["status"] == "pending"

        res = await client.patch(
            f"/v1/waitlist/{request_id}", json={"status": "accepted"}, headers=buyer
        )
        assert res.status_code == 403

        res = await client.patch(
            f"/v1/waitlist/{request_id}", json={"status": "accepted"}, headers=seller
        )
        assert res.status_code == 200
        assert res.json()["status"] == "accepted"
        assert functions_calls[-1][0] == "/functions/v1/send-email"

        res = await client.get(f"/v1/listings/{pid}/contact", headers=buyer)
        contact = res.json()
        assert contact["visible"] is True
        assert contact["email"] == "seller@example.com"
        assert contact["phone"] == "+16502530000"

        res = await client.get("/v1/notifications/unread-count", headers=buyer)
        assert res.json() == {"count": 1}

    async def test_listing_from_extracted_text(self, client):
        text = (
            "Condo at 500 Lamar Blvd, Austin, TX 78703. 2 beds 1.5 baths 950 sq ft. "
            "Asking $310,000. Comps: $340,000."
        )
        res = await client.post("/v1/listings/extract", json={"text": text})
        assert res.status_code == 401

        seller = await signup_and_signin(client, "draft@example.com", "seller")
        res = await client.post("/v1/listings/extract", json={"text": text}, headers=seller)
        assert res.status_code == 200, res.text
        draft = res.json()
        assert draft["missing"] == []
        assert draft["property_type"] == "Condo"

        draft.pop("missing")
        res = await client.post("/v1/listings", json=draft, headers=seller)
        assert res.status_code == 201, res.text
        assert res.json()["title"] == "Condo in Austin, TX"
        assert res.json()["below_market"] == 9

    async def test_bounty_claim_over_http(self, client):
        seller = await signup_and_signin(client, "s2@example.com", "seller")
        wholesaler = await signup_and_signin(client, "w2@example.com", "wholesaler")
        pid = (await client.post("/v1/listings", json=LISTING, headers=seller)).json()["id"]

        res = await client.post(f"/v1/listings/{pid}/bounty-claims", headers=wholesaler)
        assert res.status_code == 201
        claim_id = res.json()["id"]

        res = await client.post(
            f"/v1/bounty-claims/{claim_id}/advance",
            json={"buyer_name": "Carl Cash"},
            headers=wholesaler,
        )
        assert res.json()["status"] == "found_buyer"

        res = await client.post(f"/v1/bounty-claims/{claim_id}/advance", headers=wholesaler)
        assert res.json()["status"] == "submitted_offer"

        res = await client.get("/v1/bounty-claims/payouts", headers=wholesaler)
        assert res.json()["total_pending"] == 5000


class TestViewState:
    async def test_round_trip(self, client, store):
        headers = await signup_and_signin(client, "view@example.com")

        res = await client.put(
            "/v1/view-state/filters", json={"value": {"city": "Austin"}}, headers=headers
        )
        assert res.status_code == 200
        res = await client.get("/v1/view-state/filters", headers=headers)
        assert res.json() == {"name": "filters", "value": {"city": "Austin"}}

        res = await client.get("/v1/view-state/Bad-Name", headers=headers)
        assert res.status_code == 400
