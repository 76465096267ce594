"""Role-based default permission sets used when provisioning users."""

import logging

from crm_access.config import settings
from crm_access.models.permissions import UserPermissions
from crm_access.models.role import Role
from crm_access.models.scope import Scope, ServiceType, coerce_service_types

logger = logging.getLogger(__name__)

ALL_SERVICE_TYPES = frozenset(ServiceType)

DEFAULT_DEVELOPER_PERMISSIONS = UserPermissions(
    view_leads=Scope.ALL,
    create_leads=True,
    edit_leads=Scope.ALL,
    delete_leads=Scope.ALL,
    assign_leads=True,
    view_customers=Scope.ALL,
    create_customers=True,
    edit_customers=Scope.ALL,
    delete_customers=Scope.ALL,
    assign_customers=True,
    manage_renewals=True,
    view_communications=Scope.ALL,
    add_communications=True,
    play_recordings=True,
    download_recordings=True,
    view_users=Scope.ALL,
    create_admin=True,
    create_employee=True,
    edit_user_permissions=True,
    delete_user=True,
    clear_system_data=True,
    allowed_service_types=ALL_SERVICE_TYPES,
)

DEFAULT_ADMIN_PERMISSIONS = UserPermissions(
    view_leads=Scope.CREATED,
    create_leads=True,
    edit_leads=Scope.CREATED,
    delete_leads=Scope.CREATED,
    assign_leads=True,
    view_customers=Scope.SUBORDINATES,
    create_customers=True,
    edit_customers=Scope.CREATED,
    delete_customers=Scope.CREATED,
    assign_customers=True,
    manage_renewals=True,
    view_communications=Scope.CREATED,
    add_communications=True,
    play_recordings=True,
    download_recordings=True,
    view_users=Scope.SUBORDINATES,
    create_admin=False,
    create_employee=True,
    edit_user_permissions=True,
    delete_user=True,
    clear_system_data=False,
    allowed_service_types=ALL_SERVICE_TYPES,
)

DEFAULT_EMPLOYEE_PERMISSIONS = UserPermissions(
    view_leads=Scope.ASSIGNED,
    create_leads=True,
    edit_leads=Scope.ASSIGNED,
    delete_leads=Scope.NONE,
    assign_leads=False,
    view_customers=Scope.ASSIGNED,
    create_customers=True,
    edit_customers=Scope.ASSIGNED,
    delete_customers=Scope.NONE,
    assign_customers=False,
    manage_renewals=False,
    view_communications=Scope.ASSIGNED,
    add_communications=True,
    play_recordings=True,
    download_recordings=False,
    view_users=Scope.NONE,
    create_admin=False,
    create_employee=False,
    edit_user_permissions=False,
    delete_user=False,
    clear_system_data=False,
    allowed_service_types=coerce_service_types(settings.default_employee_service_types),
)

_DEFAULTS_BY_ROLE = {
    Role.DEVELOPER: DEFAULT_DEVELOPER_PERMISSIONS,
    Role.ADMIN: DEFAULT_ADMIN_PERMISSIONS,
    Role.EMPLOYEE: DEFAULT_EMPLOYEE_PERMISSIONS,
}


def default_permissions_for(role: Role | str | None) -> UserPermissions:
    """
    Seed permissions for a newly provisioned user.

    Never fails: unknown roles get the employee defaults, the most
    restrictive set. The returned record is immutable, so callers may
    share it freely and derive edited copies with model_copy().
    """
    try:
        return _DEFAULTS_BY_ROLE[Role(role)]
    except ValueError:
        logger.warning("No default permissions for role %r, using employee defaults", role)
        return DEFAULT_EMPLOYEE_PERMISSIONS


# Fields that may not deviate from the role default for a given role
ROLE_LOCKED_FIELDS: dict[Role, frozenset[str]] = {
    Role.DEVELOPER: frozenset(),
    Role.ADMIN: frozenset({"create_admin", "clear_system_data"}),
    Role.EMPLOYEE: frozenset(
        {
            "create_admin",
            "clear_system_data",
            "view_users",
            "create_employee",
            "edit_user_permissions",
            "delete_user",
        }
    ),
}


def locked_field_violations(role: Role, permissions: UserPermissions) -> list[str]:
    """Locked fields whose value differs from the role default, sorted."""
    defaults = default_permissions_for(role)
    return sorted(
        field
        for field in ROLE_LOCKED_FIELDS.get(role, frozenset())
        if getattr(permissions, field) != getattr(defaults, field)
    )
