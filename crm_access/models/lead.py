from datetime import datetime, UTC
from enum import Enum as PyEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from crm_access.models.scope import ServiceType, coerce_service_types


class LeadTemperature(str, PyEnum):
    """Lead heat classification"""

    HOT = "hot"
    WARM = "warm"
    COLD = "cold"
    NOT_CONTACTED = "not_contacted"


class Lead(BaseModel):
    """
    Sales lead.

    Ownership: created_by is the user who entered the lead, assigned_to
    the user currently working it. Either may be empty.
    """

    id: str
    name: str = ""
    email: str | None = None
    mobile: str | None = None
    status: str = "new"
    lead_status: LeadTemperature = LeadTemperature.NOT_CONTACTED
    service_types: frozenset[ServiceType] = Field(default_factory=frozenset)
    created_by: str | None = None
    assigned_to: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_validator("service_types", mode="before")
    @classmethod
    def _coerce_service_types(cls, value):
        return coerce_service_types(value)
