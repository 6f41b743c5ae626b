"""
Document Schemas for LuxeClean

Each top-level Pydantic model is the canonical shape of one MongoDB
collection. Attributes are snake_case in Python and camelCase on the wire
and in storage.
- Quote -> "quotes" collection
- Job -> "jobs" collection
- LinenOrder -> "linen_orders" collection

createdAt / updatedAt are stamped by the document store, not by these models.
"""

from typing import Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Number = Union[int, float]

CHECKLIST_FIELDS = (
    "bathroomsDone",
    "kitchenDone",
    "floorsDone",
    "trashOut",
    "linensChanged",
    "restockSupplies",
    "photosTaken",
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)


class Property(CamelModel):
    address: str = Field(..., description="Street address, trimmed")
    bedrooms: int = Field(..., ge=0)
    bathrooms: int = Field(..., ge=0)


class AddressOnly(CamelModel):
    address: str = Field(..., description="Street address, trimmed")


class AddOns(CamelModel):
    deep_clean: bool = False
    premium_linen: bool = False


class Preferences(CamelModel):
    add_ons: AddOns = Field(default_factory=AddOns)


class Pricing(CamelModel):
    total: Number
    breakdown: Dict[str, Number] = Field(..., description="Named addends of total")
    currency: str = "AUD"


class JobSchedule(CamelModel):
    start: str = Field(..., description="ISO-8601 start, not parsed")
    end: str = Field(..., description="ISO-8601 end, not parsed")


class LinenSchedule(CamelModel):
    pickup_at: str
    return_at: str


class Checklist(CamelModel):
    bathrooms_done: bool = False
    kitchen_done: bool = False
    floors_done: bool = False
    trash_out: bool = False
    linens_changed: bool = False
    restock_supplies: bool = False
    photos_taken: bool = False


class LinenItems(CamelModel):
    queen_sets: Number = 0
    double_sets: Number = 0
    single_sets: Number = 0
    towel_sets: Number = 0
    bath_mats: Number = 0
    tea_towels: Number = 0


class Quote(CamelModel):
    """
    Priced turnover quote requested by a host
    Collection: quotes
    """
    host_name: str
    email: str
    phone: Optional[str] = None
    property: Property
    preferences: Preferences = Field(default_factory=Preferences)
    notes: Optional[str] = None
    pricing: Pricing
    currency: str = "AUD"
    status: Literal["quoted"] = "quoted"


class Job(CamelModel):
    """
    Scheduled turnover clean
    Collection: jobs
    """
    quote_id: Optional[str] = Field(None, description="Informational link to a quote")
    schedule: JobSchedule
    property: Property
    add_ons: AddOns = Field(default_factory=AddOns)
    pricing: Pricing
    currency: str = "AUD"
    status: Literal["scheduled"] = "scheduled"
    checklist: Checklist = Field(default_factory=Checklist)
    notes: Optional[str] = None


class LinenOrder(CamelModel):
    """
    Standalone linen pickup/return order
    Collection: linen_orders
    """
    job_id: Optional[str] = Field(None, description="Informational link to a job")
    property: AddressOnly
    items: LinenItems = Field(default_factory=LinenItems)
    schedule: LinenSchedule
    pricing: Pricing
    currency: str = "AUD"
    status: Literal["scheduled"] = "scheduled"
    notes: Optional[str] = None
