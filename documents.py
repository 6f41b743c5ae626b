"""
Request body -> canonical document builders.

Each builder validates fields in a fixed order (first failure wins, as a 400
``HTTPException``), derives pricing and defaults, and returns the typed model
that gets written to the store.
"""

from typing import Any, Dict

from fastapi import HTTPException

from pricing import compute_turnover_price, linen_order_price, override_price
from schemas import (
    CHECKLIST_FIELDS,
    AddOns,
    AddressOnly,
    Checklist,
    Job,
    JobSchedule,
    LinenItems,
    LinenOrder,
    LinenSchedule,
    Preferences,
    Property,
    Quote,
)
from validators import (
    is_boolean,
    is_non_empty_string,
    optional_trimmed,
    require_non_empty_string,
    require_non_negative_int,
    require_object,
    to_number,
)

LINEN_ITEM_FIELDS = ("queenSets", "doubleSets", "singleSets", "towelSets", "bathMats", "teaTowels")


def _as_object(body: Any) -> Dict[str, Any]:
    return body if isinstance(body, dict) else {}


def _property(raw: Any) -> Property:
    prop = require_object(raw, "property")
    address = require_non_empty_string(prop.get("address"), "property.address")
    bedrooms = require_non_negative_int(prop.get("bedrooms"), "property.bedrooms")
    bathrooms = require_non_negative_int(prop.get("bathrooms"), "property.bathrooms")
    return Property(address=address, bedrooms=bedrooms, bathrooms=bathrooms)


def _add_ons(raw: Any) -> AddOns:
    raw = _as_object(raw)
    return AddOns(deep_clean=bool(raw.get("deepClean")), premium_linen=bool(raw.get("premiumLinen")))


def build_quote(body: Any) -> Quote:
    body = _as_object(body)

    host_name = require_non_empty_string(body.get("hostName"), "hostName")
    email = require_non_empty_string(body.get("email"), "email")
    prop = _property(body.get("property"))

    preferences = body.get("preferences") or {}
    raw_add_ons = _as_object(preferences).get("addOns") or {}
    pricing = compute_turnover_price(prop.bedrooms, prop.bathrooms, raw_add_ons)

    return Quote(
        host_name=host_name,
        email=email,
        phone=optional_trimmed(body.get("phone")),
        property=prop,
        preferences=Preferences(add_ons=_add_ons(raw_add_ons)),
        notes=optional_trimmed(body.get("notes")),
        pricing=pricing,
        currency=pricing.currency,
    )


def build_job(body: Any) -> Job:
    body = _as_object(body)

    schedule = require_object(body.get("schedule"), "schedule")
    require_non_empty_string(schedule.get("start"), "schedule.start", "schedule.start is required (ISO string)")
    require_non_empty_string(schedule.get("end"), "schedule.end", "schedule.end is required (ISO string)")
    prop = _property(body.get("property"))

    raw_add_ons = body.get("addOns") or {}
    add_ons = _add_ons(raw_add_ons)

    # Only a JSON number overrides the computed price
    price = body.get("price")
    if isinstance(price, (int, float)) and to_number(price) is not None:
        pricing = override_price(to_number(price))
    else:
        pricing = compute_turnover_price(prop.bedrooms, prop.bathrooms, raw_add_ons)

    return Job(
        quote_id=optional_trimmed(body.get("quoteId")),
        # stored as supplied, not trimmed or parsed
        schedule=JobSchedule(start=schedule["start"], end=schedule["end"]),
        property=prop,
        add_ons=add_ons,
        pricing=pricing,
        currency=pricing.currency,
        checklist=Checklist(linens_changed=add_ons.premium_linen),
        notes=optional_trimmed(body.get("notes")),
    )


def build_linen_order(body: Any) -> LinenOrder:
    body = _as_object(body)

    prop = require_object(body.get("property"), "property")
    address = require_non_empty_string(prop.get("address"), "property.address")
    pickup_at = body.get("pickupAt")
    return_at = body.get("returnAt")
    if not is_non_empty_string(pickup_at) or not is_non_empty_string(return_at):
        raise HTTPException(status_code=400, detail="pickupAt and returnAt are required")

    items = _as_object(body.get("items"))
    counts = {name: to_number(items.get(name)) or 0 for name in LINEN_ITEM_FIELDS}

    pricing = linen_order_price()
    return LinenOrder(
        job_id=optional_trimmed(body.get("jobId")),
        property=AddressOnly(address=address),
        items=LinenItems(**counts),
        schedule=LinenSchedule(pickup_at=pickup_at, return_at=return_at),
        pricing=pricing,
        currency=pricing.currency,
        notes=optional_trimmed(body.get("notes")),
    )


def checklist_updates(body: Any) -> Dict[str, bool]:
    """Dotted-path ``$set`` fields for a checklist patch.

    Unknown keys are ignored; any recognised key with a non-boolean value
    rejects the whole patch before anything is written.
    """
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Request body must be an object")

    update = {}
    for key, value in body.items():
        if key not in CHECKLIST_FIELDS:
            continue
        if not is_boolean(value):
            raise HTTPException(status_code=400, detail=f"Checklist field {key} must be boolean")
        update[f"checklist.{key}"] = value

    if not update:
        raise HTTPException(status_code=400, detail="No valid checklist fields provided")
    return update
