from pydantic import BaseModel, ConfigDict, Field

from crm_access.models.permissions import UserPermissions
from crm_access.models.role import Position, Role
from crm_access.models.scope import Scope, ServiceType


class UserCreate(BaseModel):
    """Provision a new admin or employee"""

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    role: Role = Field(default=Role.EMPLOYEE, description="Authorization role")
    position: Position | None = Field(default=None, description="Descriptive job title")
    permissions: UserPermissions | None = Field(
        default=None, description="Explicit permissions (default: role defaults)"
    )
    created_by_admin_id: str | None = Field(
        default=None, description="Admin the employee reports to (developer callers only)"
    )
    employee_creation_limit: int | None = Field(
        default=None, ge=0, description="Max employees an admin may create (developer callers only)"
    )


class PermissionsUpdate(BaseModel):
    """
    Partial permission edit.

    Only fields that are set are applied; everything else keeps its
    current value.
    """

    view_leads: Scope | None = None
    create_leads: bool | None = None
    edit_leads: Scope | None = None
    delete_leads: Scope | None = None
    assign_leads: bool | None = None

    view_customers: Scope | None = None
    create_customers: bool | None = None
    edit_customers: Scope | None = None
    delete_customers: Scope | None = None
    assign_customers: bool | None = None
    manage_renewals: bool | None = None

    view_communications: Scope | None = None
    add_communications: bool | None = None
    play_recordings: bool | None = None
    download_recordings: bool | None = None

    view_users: Scope | None = None
    create_admin: bool | None = None
    create_employee: bool | None = None
    edit_user_permissions: bool | None = None
    delete_user: bool | None = None

    clear_system_data: bool | None = None

    allowed_service_types: set[ServiceType] | None = None

    model_config = ConfigDict(extra="forbid")
