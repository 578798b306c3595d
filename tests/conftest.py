import json
import uuid
from decimal import Decimal

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.pool import StaticPool

import models.models  # noqa: F401
from core.functions_client import FunctionsClient
from core.get_db import Base, build_engine, build_session_factory
from models.enums import AccountType
from models.models import Profile
from repos.property_repo import PropertyRepo

VALID_PHONE = "(650) 253-0000"


class FakeStore:
    """In-memory stand-in for the Upstash view-state store."""

    def __init__(self):
        self.data = {}
        self.ttls = {}
        self.fail_writes = False

    async def get_json(self, key):
        return self.data.get(key)

    async def set_json(self, key, value, ttl=3600):
        if self.fail_writes:
            return False
        self.data[key] = value
        self.ttls[key] = ttl
        return True

    async def delete(self, key):
        return self.data.pop(key, None) is not None


class FakeStorage:
    def __init__(self):
        self.deleted_prefixes = []

    @staticmethod
    def property_folder(property_id):
        return f"property_images/{property_id}"

    async def safe_delete_by_prefix(self, prefix):
        self.deleted_prefixes.append(prefix)
        return {"deleted": {}, "partial": False}

    def contract_template_url(self):
        return "https://res.cloudinary.com/demo/raw/upload/fl_attachment/contract.pdf"


@pytest_asyncio.fixture
async def engine():
    engine = build_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_profile(db):
    async def _make(
        name="Test User",
        email=None,
        account_type=AccountType.BUYER,
        phone="+16502530000",
        password="secret123",
    ):
        profile = Profile(
            email=email or f"user-{uuid.uuid4().hex[:8]}@example.com",
            name=name,
            phone=phone,
            account_type=account_type,
        )
        profile.set_password(password)
        db.add(profile)
        await db.commit()
        await db.refresh(profile)
        return profile

    return _make


@pytest.fixture
def make_listing(db):
    async def _make(owner, **overrides):
        data = {
            "user_id": owner.id,
            "title": "Single Family in Austin, TX",
            "location": "Austin, TX 78701",
            "full_address": "12 Congress Ave",
            "city": "Austin",
            "state": "TX",
            "zip_code": "78701",
            "price": Decimal("450000"),
            "market_price": Decimal("500000"),
            "beds": 3,
            "baths": Decimal("2"),
            "sqft": 1800,
            "property_type": "Single Family",
            "images": ["https://img.example.com/front.jpg"],
            "reward": None,
            "comparable_addresses": [],
        }
        data.update(overrides)
        return await PropertyRepo(db).create(data)

    return _make


@pytest.fixture
def functions_calls():
    return []


@pytest.fixture
def functions(functions_calls):
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content or b"{}")
        functions_calls.append((request.url.path, body))
        if request.url.path.endswith("/send-email"):
            return httpx.Response(200, json={"id": "email_123"})
        if request.url.path.endswith("/generate-property-blog"):
            return httpx.Response(
                200,
                json={
                    "title": "A Rare Austin Deal",
                    "content": " ".join(["word"] * 600),
                    "excerpt": "Ten percent under market.",
                },
            )
        return httpx.Response(404, json={"error": "Not found"})

    return FunctionsClient(
        base_url="http://functions.test",
        api_key="test-key",
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def storage():
    return FakeStorage()
