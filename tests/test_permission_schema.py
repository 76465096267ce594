import logging

import pytest
from pydantic import ValidationError

from crm_access.access.defaults import (
    DEFAULT_ADMIN_PERMISSIONS,
    DEFAULT_DEVELOPER_PERMISSIONS,
    DEFAULT_EMPLOYEE_PERMISSIONS,
    default_permissions_for,
    locked_field_violations,
)
from crm_access.models.permissions import FLAG_FIELDS, SCOPE_FIELDS, UserPermissions
from crm_access.models.role import Role
from crm_access.models.scope import Scope, ServiceType
from crm_access.models.user import User


class TestDefaultPermissions:
    """Tests for role-based default permission sets"""

    def test_developer_has_everything(self):
        """Developer defaults are ALL everywhere with every flag on"""
        permissions = default_permissions_for(Role.DEVELOPER)

        for field in SCOPE_FIELDS:
            assert getattr(permissions, field) == Scope.ALL
        for flag in FLAG_FIELDS:
            assert getattr(permissions, flag) is True
        assert permissions.allowed_service_types == frozenset(ServiceType)

    def test_admin_defaults(self):
        """Admin sees created leads, team customers, and cannot create admins"""
        permissions = default_permissions_for("admin")

        assert permissions is DEFAULT_ADMIN_PERMISSIONS
        assert permissions.view_leads == Scope.CREATED
        assert permissions.view_customers == Scope.SUBORDINATES
        assert permissions.view_users == Scope.SUBORDINATES
        assert permissions.create_employee is True
        assert permissions.edit_user_permissions is True
        assert permissions.create_admin is False
        assert permissions.clear_system_data is False

    def test_employee_defaults(self):
        """Employee works assigned records in a single service type"""
        permissions = default_permissions_for(Role.EMPLOYEE)

        assert permissions.view_leads == Scope.ASSIGNED
        assert permissions.view_customers == Scope.ASSIGNED
        assert permissions.delete_leads == Scope.NONE
        assert permissions.view_users == Scope.NONE
        assert permissions.create_employee is False
        assert permissions.allowed_service_types == frozenset({ServiceType.TRAINING})

    @pytest.mark.parametrize("role", ["relationship_manager", "superuser", "", None])
    def test_unknown_role_falls_back_to_employee(self, role):
        """Unknown roles get the most restrictive defaults"""
        assert default_permissions_for(role) is DEFAULT_EMPLOYEE_PERMISSIONS

    def test_defaults_are_immutable(self):
        """Shared default records cannot be mutated in place"""
        with pytest.raises(ValidationError):
            DEFAULT_DEVELOPER_PERMISSIONS.view_leads = Scope.NONE

    def test_defaults_are_a_seed(self):
        """A copy derived from defaults can widen or narrow single fields"""
        widened = DEFAULT_EMPLOYEE_PERMISSIONS.model_copy(update={"view_leads": Scope.ALL})

        assert widened.view_leads == Scope.ALL
        assert DEFAULT_EMPLOYEE_PERMISSIONS.view_leads == Scope.ASSIGNED


class TestPermissionRecord:
    """Tests for loading stored permission records"""

    def test_missing_fields_are_most_restrictive(self):
        """An empty record grants nothing"""
        permissions = UserPermissions()

        for field in SCOPE_FIELDS:
            assert getattr(permissions, field) == Scope.NONE
        for flag in FLAG_FIELDS:
            assert getattr(permissions, flag) is False
        assert permissions.allowed_service_types == frozenset()

    def test_camel_case_record_loads(self):
        """Records stored with camelCase keys are understood"""
        permissions = UserPermissions.model_validate(
            {"viewLeads": "all", "createLeads": True, "allowedServiceTypes": ["wealth", "PMS"]}
        )

        assert permissions.view_leads == Scope.ALL
        assert permissions.create_leads is True
        assert permissions.allowed_service_types == frozenset({ServiceType.WEALTH, ServiceType.PMS})

    def test_unknown_scope_fails_closed(self, caplog):
        """An unrecognized stored scope reads as NONE and is reported"""
        with caplog.at_level(logging.WARNING, logger="crm_access.integrity"):
            permissions = UserPermissions(view_leads="everything")

        assert permissions.view_leads == Scope.NONE
        assert "everything" in caplog.text

    def test_unknown_service_type_dropped(self, caplog):
        """Unknown service types are ignored, known ones kept"""
        with caplog.at_level(logging.WARNING, logger="crm_access.integrity"):
            permissions = UserPermissions(allowed_service_types=["training", "crypto"])

        assert permissions.allowed_service_types == frozenset({ServiceType.TRAINING})
        assert "crypto" in caplog.text

    def test_scope_for_unknown_field_is_none(self):
        """Asking for a scope field that doesn't exist denies"""
        assert DEFAULT_DEVELOPER_PERMISSIONS.scope_for("view_invoices") == Scope.NONE

    def test_has_flag_unknown_flag_is_false(self):
        assert DEFAULT_DEVELOPER_PERMISSIONS.has_flag("launch_rockets") is False

    def test_records_without_service_types_are_not_gated(self):
        assert UserPermissions().allows_service_types([]) is True
        assert UserPermissions().allows_service_types(None) is True

    def test_required_gating_rejects_untyped_records(self):
        assert DEFAULT_DEVELOPER_PERMISSIONS.allows_service_types([], required=True) is False
        assert DEFAULT_DEVELOPER_PERMISSIONS.allows_service_types([ServiceType.WEALTH], required=True) is True


class TestRoleParsing:
    """Tests for separating authorization role from job title"""

    def test_position_label_stored_as_role_is_employee(self):
        """A legacy position stored as role is authorized as an employee"""
        user = User(id="u1", role="relationship_manager")

        assert user.role == Role.EMPLOYEE

    def test_position_is_descriptive(self):
        user = User(id="u1", role="admin", position="accountant")

        assert user.role == Role.ADMIN
        assert user.position.value == "accountant"


class TestLockedFields:
    """Tests for fields that are fixed by role"""

    def test_defaults_have_no_violations(self):
        for role in Role:
            assert locked_field_violations(role, default_permissions_for(role)) == []

    def test_admin_cannot_hold_clear_system_data(self):
        permissions = DEFAULT_ADMIN_PERMISSIONS.model_copy(update={"clear_system_data": True})

        assert locked_field_violations(Role.ADMIN, permissions) == ["clear_system_data"]

    def test_employee_cannot_manage_users(self):
        permissions = DEFAULT_EMPLOYEE_PERMISSIONS.model_copy(
            update={"delete_user": True, "view_users": Scope.ALL}
        )

        assert locked_field_violations(Role.EMPLOYEE, permissions) == ["delete_user", "view_users"]

    def test_developer_has_no_locked_fields(self):
        assert locked_field_violations(Role.DEVELOPER, UserPermissions()) == []
