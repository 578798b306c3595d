from decimal import Decimal

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from core.settings import settings
from models.enums import AccountType
from repos.notification_repo import NotificationRepo
from schemas.schema import ListingCreate, ListingFilters, ListingUpdate
from services.property_service import PropertyService


def listing_form(**overrides):
    data = {
        "address": " 12 Congress Ave ",
        "city": " Austin ",
        "state": "TX",
        "zip_code": "78701",
        "price": Decimal("450000"),
        "market_price": Decimal("500000"),
        "beds": 3,
        "baths": Decimal("2"),
        "sqft": 1800,
        "property_type": "Single Family",
    }
    data.update(overrides)
    return ListingCreate(**data)


@pytest.fixture
async def seller(make_profile):
    return await make_profile("Sam Seller", account_type=AccountType.SELLER)


@pytest.fixture
def service(db, storage):
    return PropertyService(db, storage=storage)


class TestCreateListing:
    async def test_builds_title_location_and_defaults(self, db, service, seller):
        listing = await service.create_listing(
            seller, listing_form(reward=Decimal("0"), comparable_addresses=[" ", "3 Oak St"])
        )

        assert listing.title == "Single Family in Austin, TX"
        assert listing.location == "Austin, TX 78701"
        assert listing.full_address == "12 Congress Ave"
        assert listing.below_market == 10
        assert listing.reward is None
        assert listing.images == [settings.DEFAULT_LISTING_IMAGE]
        assert listing.comparable_addresses == ["3 Oak St"]

        notes = await NotificationRepo(db).list_for_user(seller.id)
        assert [n.title for n in notes] == ["Listing Published"]

    async def test_keeps_supplied_images_and_reward(self, service, seller):
        listing = await service.create_listing(
            seller,
            listing_form(images=["https://img.example.com/a.jpg", ""], reward=Decimal("2500")),
        )
        assert listing.images == ["https://img.example.com/a.jpg"]
        assert listing.reward == 2500

    def test_blank_city_rejected(self):
        with pytest.raises(ValidationError):
            listing_form(city="   ")

    def test_price_must_be_positive(self):
        with pytest.raises(ValidationError):
            listing_form(price=Decimal("0"))


class TestSearch:
    async def test_location_matches_whole_prefix_or_suffix(self, service, seller, make_listing):
        await make_listing(seller)
        await make_listing(seller, location="Dallas, TX 75201", city="Dallas", zip_code="75201")

        for term in ("Austin, TX 78701", "austin", "TX 78701"):
            found = await service.list_listings(ListingFilters(location=term))
            assert [item.city for item in found] == ["Austin"], term

        assert await service.list_listings(ListingFilters(location="Aus")) == []

    async def test_price_and_below_market_filters(self, service, seller, make_listing):
        await make_listing(seller)
        await make_listing(seller, price=Decimal("490000"))

        cheap = await service.list_listings(ListingFilters(max_price=Decimal("460000")))
        assert [item.price for item in cheap] == [450000]

        deals = await service.list_listings(ListingFilters(min_below_market=5))
        assert [item.below_market for item in deals] == [10]

    async def test_owner_listings(self, service, seller, make_profile, make_listing):
        other = await make_profile()
        await make_listing(seller)
        await make_listing(other)
        mine = await service.list_owner_listings(seller)
        assert len(mine) == 1
        assert mine[0].user_id == seller.id


class TestOwnership:
    async def test_update_applies_changes(self, service, seller, make_listing):
        listing = await make_listing(seller, reward=Decimal("1000"))
        updated = await service.update_listing(
            seller,
            listing.id,
            ListingUpdate(price=Decimal("400000"), reward=Decimal("-1"), images=[]),
        )
        assert updated.price == 400000
        assert updated.below_market == 20
        assert updated.reward is None
        assert updated.images == [settings.DEFAULT_LISTING_IMAGE]

    @pytest.mark.parametrize("field", ["address", "city", "state", "zip_code", "property_type"])
    def test_update_cannot_blank_required_fields(self, field):
        with pytest.raises(ValidationError):
            ListingUpdate(**{field: "   "})

    async def test_update_rebuilds_location_and_title(self, service, seller, make_listing):
        listing = await make_listing(seller)
        updated = await service.update_listing(
            seller,
            listing.id,
            ListingUpdate(
                city="  Round Rock ",
                property_type=" Townhouse ",
                comparable_addresses=["  9 Elm St ", "", "  "],
            ),
        )
        assert updated.city == "Round Rock"
        assert updated.location == "Round Rock, TX 78701"
        assert updated.title == "Townhouse in Round Rock, TX"
        assert updated.comparable_addresses == ["9 Elm St"]
        assert updated.state == "TX"

    async def test_non_owner_cannot_update(self, service, seller, make_profile, make_listing):
        listing = await make_listing(seller)
        stranger = await make_profile()
        with pytest.raises(HTTPException) as exc:
            await service.update_listing(stranger, listing.id, ListingUpdate(beds=5))
        assert exc.value.status_code == 403

    async def test_delete_removes_listing_and_images(
        self, service, storage, seller, make_listing
    ):
        listing = await make_listing(seller)
        result = await service.delete_listing(seller, listing.id)

        assert result == {"message": "Listing deleted"}
        assert storage.deleted_prefixes == [f"property_images/{listing.id}"]
        with pytest.raises(HTTPException) as exc:
            await service.get_listing(listing.id)
        assert exc.value.status_code == 404
