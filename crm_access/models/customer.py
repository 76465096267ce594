from datetime import date, datetime, UTC

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from crm_access.models.scope import ServiceType, coerce_service_types


class Customer(BaseModel):
    """
    Converted customer.

    Carries the same ownership attributes as a lead. lead_id links back
    to the lead it was converted from, if any.
    """

    id: str
    name: str = ""
    email: str | None = None
    mobile: str | None = None
    status: str = "email_sent"
    service_types: frozenset[ServiceType] = Field(default_factory=frozenset)
    created_by: str | None = None
    assigned_to: str | None = None
    lead_id: str | None = None
    next_renewal: date | None = None
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
