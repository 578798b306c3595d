import re
from decimal import Decimal, InvalidOperation

from schemas.schema import ListingDraftOut

MONEY = r"(\d[\d,]*(?:\.\d+)?\s*[kKmM]?)\b"


class ListingTextParser:
    """Pulls listing form fields out of a free-text property description.

    Nothing here is authoritative: the draft is shown to the seller for review
    before a real ListingCreate is submitted.
    """

    ADDRESS_RE = re.compile(
        r"(\d+\s+[A-Za-z0-9 .'\-#]+?),\s*([A-Za-z .'\-]+?),\s*([A-Z]{2})\b(?:\s*(\d{5}))?"
    )
    SHORT_ADDRESS_RE = re.compile(r"(\d+\s+[A-Za-z0-9 .'\-#]+?),\s*([A-Z]{2})\s*(\d{5})\b")
    BEDS_RE = re.compile(r"(\d+)\s*(?:bedrooms?|beds?|br|b/r|bd)\b", re.IGNORECASE)
    BATHS_RE = re.compile(
        r"(\d+(?:\.\d+)?)\s*(?:bathrooms?|baths?|ba|b/a|bth)\b", re.IGNORECASE
    )
    SQFT_RE = re.compile(
        r"(\d{1,3}(?:,\d{3})+|\d+)\s*(?:sq\.?\s*ft|sqft|square\s*f(?:ee|oo)t|sf)\b",
        re.IGNORECASE,
    )
    PRICE_RE = re.compile(
        r"(?<!market )(?:asking(?:\s*price)?|list(?:ed)?\s*(?:price|at)|price)"
        r"\s*[:;]?\s*\$?\s*" + MONEY,
        re.IGNORECASE,
    )
    MARKET_RE = re.compile(
        r"(?:market\s*(?:price|value)|appraised(?:\s*at)?|comps?)\s*[:;]?\s*\$?\s*" + MONEY,
        re.IGNORECASE,
    )
    ARV_RE = re.compile(
        r"(?:arv|after\s*repair\s*value)\s*[:;]?\s*\$?\s*"
        + MONEY
        + r"(?:\s*(?:-|to)\s*\$?\s*"
        + MONEY
        + r")?",
        re.IGNORECASE,
    )
    REHAB_RE = re.compile(
        r"(?:rehab|renovation|repairs?)\s*(?:cost|estimate|budget)?\s*[:;]?\s*\$?\s*" + MONEY,
        re.IGNORECASE,
    )

    # first match wins, so more specific names come first
    PROPERTY_TYPES = [
        ("Multi-Family", re.compile(r"\b(?:multi[\s-]?family|duplex|triplex|fourplex|quadplex)\b", re.I)),
        ("Condo", re.compile(r"\bcondo(?:minium)?\b", re.I)),
        ("Apartment", re.compile(r"\bapartment\b", re.I)),
        ("Studio", re.compile(r"\bstudio\b", re.I)),
        ("House", re.compile(r"\b(?:single[\s-]?family|sfh|row\s*home|town\s*(?:home|house)|house|home)\b", re.I)),
        ("Land", re.compile(r"\b(?:land|vacant\s+lot)\b", re.I)),
    ]

    REQUIRED = [
        "address",
        "city",
        "state",
        "zip_code",
        "beds",
        "baths",
        "sqft",
        "property_type",
        "price",
        "market_price",
    ]

    @staticmethod
    def money(raw: str | None) -> Decimal | None:
        if not raw:
            return None
        raw = raw.replace(",", "").replace(" ", "")
        multiplier = 1
        if raw[-1] in "kK":
            multiplier, raw = 1000, raw[:-1]
        elif raw[-1] in "mM":
            multiplier, raw = 1000000, raw[:-1]
        try:
            return Decimal(raw) * multiplier
        except InvalidOperation:
            return None

    @classmethod
    def _address(cls, text: str) -> tuple[dict, tuple[int, int] | None]:
        match = cls.ADDRESS_RE.search(text)
        if match:
            return {
                "address": match.group(1).strip(),
                "city": match.group(2).strip(),
                "state": match.group(3),
                "zip_code": match.group(4),
            }, match.span()

        match = cls.SHORT_ADDRESS_RE.search(text)
        if match:
            return {
                "address": match.group(1).strip(),
                "state": match.group(2),
                "zip_code": match.group(3),
            }, match.span()
        return {}, None

    @classmethod
    def parse(cls, text: str) -> ListingDraftOut:
        text = re.sub(r"\s+", " ", text).strip()
        fields, span = cls._address(text)

        beds = cls.BEDS_RE.search(text)
        if beds:
            fields["beds"] = int(beds.group(1))
        baths = cls.BATHS_RE.search(text)
        if baths:
            fields["baths"] = Decimal(baths.group(1))
        sqft = cls.SQFT_RE.search(text)
        if sqft:
            fields["sqft"] = int(sqft.group(1).replace(",", ""))

        for name, pattern in cls.PROPERTY_TYPES:
            if pattern.search(text):
                fields["property_type"] = name
                break

        price = cls.PRICE_RE.search(text)
        if price:
            fields["price"] = cls.money(price.group(1))
        market = cls.MARKET_RE.search(text)
        if market:
            fields["market_price"] = cls.money(market.group(1))
        arv = cls.ARV_RE.search(text)
        if arv:
            low, high = cls.money(arv.group(1)), cls.money(arv.group(2))
            fields["after_repair_value"] = (low + high) / 2 if low and high else low
        rehab = cls.REHAB_RE.search(text)
        if rehab:
            fields["estimated_rehab"] = cls.money(rehab.group(1))

        description = text
        if span:
            description = (text[: span[0]] + text[span[1] :]).strip(" .,;")
            description = re.sub(r"\s+([.,;])", r"\1", description)
        fields["description"] = description or None

        fields = {k: v for k, v in fields.items() if v is not None}
        missing = [name for name in cls.REQUIRED if name not in fields]
        return ListingDraftOut(**fields, missing=missing)
