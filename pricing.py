from typing import Any, Mapping

from schemas import Pricing
from validators import to_number

# All amounts in AUD
PRICING = {
    "base": 85,              # turnover base
    "per_bedroom": 20,
    "per_bathroom": 15,
    "deep_clean": 90,        # add-on
    "linen_addon": 35,       # linen add-on per turnover
    "linen_standalone": 45,  # pickup 10 + processing 25 + delivery 10
    "currency": "AUD",
}

LINEN_STANDALONE_BREAKDOWN = {"pickup": 10, "processing": 25, "delivery": 10}


def _count(value: Any):
    # Malformed or negative counts silently price as zero
    number = to_number(value)
    if number is None or number < 0:
        return 0
    return number


def compute_turnover_price(bedrooms: Any = 0, bathrooms: Any = 0, add_ons: Any = None) -> Pricing:
    """Price a turnover clean from room counts and selected add-ons.

    Never raises: bad counts become 0 and a non-mapping ``add_ons`` means no
    add-ons were selected.
    """
    if not isinstance(add_ons, Mapping):
        add_ons = {}
    deep = bool(add_ons.get("deepClean"))
    linen = bool(add_ons.get("premiumLinen"))

    base = PRICING["base"]
    bedrooms_cost = _count(bedrooms) * PRICING["per_bedroom"]
    bathrooms_cost = _count(bathrooms) * PRICING["per_bathroom"]
    deep_cost = PRICING["deep_clean"] if deep else 0
    linen_cost = PRICING["linen_addon"] if linen else 0

    total = base + bedrooms_cost + bathrooms_cost + deep_cost + linen_cost

    return Pricing(
        total=total,
        breakdown={
            "base": base,
            "bedroomsCost": bedrooms_cost,
            "bathroomsCost": bathrooms_cost,
            "deepClean": deep_cost,
            "premiumLinen": linen_cost,
        },
        currency=PRICING["currency"],
    )


def override_price(price) -> Pricing:
    return Pricing(
        total=price,
        breakdown={"customOverride": price},
        currency=PRICING["currency"],
    )


def linen_order_price() -> Pricing:
    return Pricing(
        total=PRICING["linen_standalone"],
        breakdown=dict(LINEN_STANDALONE_BREAKDOWN),
        currency=PRICING["currency"],
    )
