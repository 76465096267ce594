from datetime import datetime, UTC
from enum import Enum as PyEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from crm_access.models.scope import ServiceType, coerce_service_types


class CommunicationType(str, PyEnum):
    """Kind of contact made"""

    CALL = "call"
    EMAIL = "email"
    MEETING = "meeting"
    NOTE = "note"
    REMARK = "remark"
    OTHER = "other"


class CommunicationRecord(BaseModel):
    """
    A logged call, email, meeting or note against a lead or customer.

    A record has no assignee of its own. contact_assigned_to and
    contact_service_types mirror the linked lead/customer and are filled
    in by link_contacts(); the assigned_to and service_types properties
    expose them under the names the evaluator reads.
    """

    id: str
    type: CommunicationType = CommunicationType.NOTE
    notes: str = ""
    created_by: str | None = None
    lead_id: str | None = None
    customer_id: str | None = None
    duration: int | None = None
    recording_url: str | None = None
    date: datetime = Field(default_factory=lambda: datetime.now(UTC))

    contact_assigned_to: str | None = None
    contact_service_types: frozenset[ServiceType] = Field(default_factory=frozenset)

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_validator("contact_service_types", mode="before")
    @classmethod
    def _coerce_service_types(cls, value):
        return coerce_service_types(value)

    @property
    def assigned_to(self) -> str | None:
        return self.contact_assigned_to

    @property
    def service_types(self) -> frozenset[ServiceType]:
        return self.contact_service_types

    @property
    def has_recording(self) -> bool:
        return bool(self.recording_url)
