"""Per-user permission record: scope fields, action flags and service types."""

from enum import Enum as PyEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from crm_access.core.logging_config import report_integrity_issue
from crm_access.models.scope import Scope, ServiceType, coerce_service_types


class Resource(str, PyEnum):
    """Resources guarded by the engine"""

    LEADS = "leads"
    CUSTOMERS = "customers"
    COMMUNICATIONS = "communications"
    USERS = "users"

    @property
    def label(self) -> str:
        """Singular, human readable name used in error messages"""
        return {
            Resource.LEADS: "Lead",
            Resource.CUSTOMERS: "Customer",
            Resource.COMMUNICATIONS: "Communication",
            Resource.USERS: "User",
        }[self]


RECORD_SCOPES = frozenset(Scope)
USER_SCOPES = frozenset({Scope.NONE, Scope.OWN, Scope.SUBORDINATES, Scope.ALL})

# Scope fields and the values each one may legally hold
SCOPE_FIELDS: dict[str, frozenset[Scope]] = {
    "view_leads": RECORD_SCOPES,
    "edit_leads": RECORD_SCOPES,
    "delete_leads": RECORD_SCOPES,
    "view_customers": RECORD_SCOPES,
    "edit_customers": RECORD_SCOPES,
    "delete_customers": RECORD_SCOPES,
    "view_communications": RECORD_SCOPES,
    "view_users": USER_SCOPES,
}

FLAG_FIELDS: tuple[str, ...] = (
    "create_leads",
    "assign_leads",
    "create_customers",
    "assign_customers",
    "manage_renewals",
    "add_communications",
    "play_recordings",
    "download_recordings",
    "create_admin",
    "create_employee",
    "edit_user_permissions",
    "delete_user",
    "clear_system_data",
)


class UserPermissions(BaseModel):
    """
    Permission record attached to every user.

    Fields missing from a stored record take the most restrictive value,
    and unknown scope values are read as NONE. Stored records written in
    camelCase (viewLeads, allowedServiceTypes, ...) load as well.
    """

    # Leads
    view_leads: Scope = Scope.NONE
    create_leads: bool = False
    edit_leads: Scope = Scope.NONE
    delete_leads: Scope = Scope.NONE
    assign_leads: bool = False

    # Customers
    view_customers: Scope = Scope.NONE
    create_customers: bool = False
    edit_customers: Scope = Scope.NONE
    delete_customers: Scope = Scope.NONE
    assign_customers: bool = False
    manage_renewals: bool = False

    # Communications
    view_communications: Scope = Scope.NONE
    add_communications: bool = False
    play_recordings: bool = False
    download_recordings: bool = False

    # User management
    view_users: Scope = Scope.NONE
    create_admin: bool = False
    create_employee: bool = False
    edit_user_permissions: bool = False
    delete_user: bool = False

    # System level
    clear_system_data: bool = False

    allowed_service_types: frozenset[ServiceType] = Field(default_factory=frozenset)

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_validator(*SCOPE_FIELDS, mode="before")
    @classmethod
    def _coerce_scope(cls, value):
        return Scope.coerce(value)

    @field_validator("allowed_service_types", mode="before")
    @classmethod
    def _coerce_service_types(cls, value):
        return coerce_service_types(value)

    def scope_for(self, field: str) -> Scope:
        """Return the scope stored in a scope field, NONE for unknown fields."""
        if field not in SCOPE_FIELDS:
            report_integrity_issue("Unknown scope field %r treated as 'none'", field)
            return Scope.NONE
        return getattr(self, field)

    def has_flag(self, flag: str) -> bool:
        """Return a boolean action flag, False for unknown flags."""
        if flag not in FLAG_FIELDS:
            report_integrity_issue("Unknown permission flag %r treated as false", flag)
            return False
        return getattr(self, flag)

    def allows_service_types(self, service_types, required: bool = False) -> bool:
        """
        Check line-of-business gating for a record.

        At least one of the record's types must be allowed. A record
        without service types passes only when gating is not required
        for its kind.
        """
        if not service_types:
            return not required
        return not self.allowed_service_types.isdisjoint(service_types)
