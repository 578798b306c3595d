import uuid
from decimal import Decimal

import pytest

from models.enums import AccountType
from models.utils import (
    below_market,
    build_location,
    build_title,
    display_name,
    normalize_role,
    ordered_pair,
)


class TestBelowMarket:
    def test_ten_percent_under_market(self):
        assert below_market(Decimal("450000"), Decimal("500000")) == 10

    @pytest.mark.parametrize(
        "price, market",
        [(500000, 500000), (550000, 500000), (100, 0), (None, 500000), (450000, None)],
    )
    def test_clamps_to_zero(self, price, market):
        assert below_market(price, market) == 0

    def test_rounds_half_up(self):
        # 12.5% under market
        assert below_market(175000, 200000) == 13
        assert below_market(99, 100) == 1


class TestListingText:
    def test_location_and_title(self):
        assert build_location(" Austin", "TX ", "78701") == "Austin, TX 78701"
        assert build_title("Condo", "Austin", "TX") == "Condo in Austin, TX"


class TestParticipants:
    def test_ordered_pair_is_order_independent(self):
        a, b = uuid.uuid4(), uuid.uuid4()
        assert ordered_pair(a, b) == ordered_pair(b, a)

    def test_display_name_fallbacks(self):
        assert display_name("  Dana ", "dana@example.com") == "Dana"
        assert display_name("", "dana@example.com") == "dana@example.com"
        assert display_name(None, None) == "Unknown User"

    def test_normalize_role_defaults_to_buyer(self):
        assert normalize_role("SELLER") == AccountType.SELLER
        assert normalize_role(AccountType.WHOLESALER) == AccountType.WHOLESALER
        assert normalize_role("landlord") == AccountType.BUYER
        assert normalize_role(None) == AccountType.BUYER
