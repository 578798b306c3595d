import math
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from .enums import AccountType


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def below_market(price: Decimal | float | None, market_price: Decimal | float | None) -> int:
    """Whole-percent discount of price against market price, rounded half up.

    Zero when either value is missing, the market price is not positive, or the
    listing is not priced under market.
    """
    if price is None or market_price is None:
        return 0
    price = float(price)
    market_price = float(market_price)
    if market_price <= 0 or price >= market_price:
        return 0
    return math.floor((market_price - price) / market_price * 100 + 0.5)


def build_location(city: str, state: str, zip_code: str) -> str:
    return f"{city.strip()}, {state.strip()} {zip_code.strip()}"


def build_title(property_type: str, city: str, state: str) -> str:
    return f"{property_type} in {city.strip()}, {state.strip()}"


def ordered_pair(a: uuid.UUID, b: uuid.UUID) -> tuple[uuid.UUID, uuid.UUID]:
    return (a, b) if str(a) <= str(b) else (b, a)


def display_name(name: str | None, email: str | None) -> str:
    if name and name.strip():
        return name.strip()
    if email:
        return email
    return "Unknown User"


def normalize_role(value) -> AccountType:
    if isinstance(value, AccountType):
        return value
    try:
        return AccountType(str(value).lower())
    except ValueError:
        return AccountType.BUYER
