import pytest
from pydantic import ValidationError

from core.listing_text import ListingTextParser
from schemas.schema import ListingTextIn
from services.property_service import PropertyService

FULL_TEXT = (
    "Single Family home at 123 Main St, Austin, TX 78701. "
    "3 beds 2 baths, 1,500 sqft. Asking $250K, ARV 320K-340K, rehab $30,000. "
    "Market value $300,000."
)


class TestListingTextParser:
    def test_full_description(self):
        draft = ListingTextParser.parse(FULL_TEXT)

        assert draft.address == "123 Main St"
        assert draft.city == "Austin"
        assert draft.state == "TX"
        assert draft.zip_code == "78701"
        assert (draft.beds, draft.baths, draft.sqft) == (3, 2, 1500)
        assert draft.property_type == "House"
        assert draft.price == 250000
        assert draft.market_price == 300000
        assert draft.after_repair_value == 330000
        assert draft.estimated_rehab == 30000
        assert draft.missing == []
        assert "123 Main St" not in draft.description
        assert draft.description.startswith("Single Family home at")

    def test_partial_text_reports_missing_fields(self):
        draft = ListingTextParser.parse("Duplex in need of work,\n4 bd / 2.5 ba, list price: 1.2M")

        assert draft.property_type == "Multi-Family"
        assert draft.beds == 4
        assert draft.baths == 2.5
        assert draft.price == 1200000
        assert draft.address is None
        assert draft.missing == ["address", "city", "state", "zip_code", "sqft", "market_price"]

    def test_market_price_is_not_read_as_asking_price(self):
        draft = ListingTextParser.parse("Market price $300,000 and asking 280k")
        assert draft.market_price == 300000
        assert draft.price == 280000

    @pytest.mark.parametrize(
        "raw, expected",
        [("250K", 250000), ("1,250,000", 1250000), ("1.5m", 1500000), ("99.50", 99.5)],
    )
    def test_money(self, raw, expected):
        assert ListingTextParser.money(raw) == expected

    def test_blank_text_rejected(self):
        with pytest.raises(ValidationError):
            ListingTextIn(text="   ")


class TestDraftFromText:
    async def test_service_returns_draft(self, db, make_profile):
        seller = await make_profile("Sam Seller")
        draft = await PropertyService(db).draft_from_text(seller, ListingTextIn(text=FULL_TEXT))
        assert draft.city == "Austin"
        assert draft.missing == []
