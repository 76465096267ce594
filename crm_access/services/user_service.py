import logging
import uuid
from collections.abc import Iterable

from crm_access.access.defaults import (
    DEFAULT_DEVELOPER_PERMISSIONS,
    default_permissions_for,
    locked_field_violations,
)
from crm_access.access.hierarchy import admin_of, is_subordinate_of, subordinate_employee_ids
from crm_access.core.exceptions import (
    CreationLimitException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from crm_access.models.permissions import SCOPE_FIELDS, Resource, UserPermissions
from crm_access.models.role import Role
from crm_access.models.user import User
from crm_access.schemas.user_schemas import PermissionsUpdate, UserCreate
from crm_access.services.base import ResourceAccessService

logger = logging.getLogger(__name__)


class UserAccessService(ResourceAccessService[User]):
    """Service layer for user management authorization"""

    resource = Resource.USERS
    view_scope_field = "view_users"

    def list_visible(self, entities: Iterable[User] | None = None) -> list[User]:
        """
        List users visible to the requester.

        Args:
            entities: Users to filter (default: the context snapshot)

        Returns:
            Visible users in snapshot order
        """
        return super().list_visible(self.context.users if entities is None else entities)

    def get_user(self, user_id: str) -> User:
        """
        Get a single user. Everyone may view their own profile.

        Raises:
            NotFoundException: If user doesn't exist or is not visible
        """
        if user_id == self.user.id:
            return self.user
        return self.get_visible(user_id, self.context.users)

    def create_user(self, data: UserCreate) -> User:
        """
        Provision a new admin or employee.

        Args:
            data: New user details

        Returns:
            The new User, ready for the caller to persist

        Raises:
            ForbiddenException: If requester may not create this role
            CreationLimitException: If an admin reached its employee limit
            ValidationException: If the admin assignment or permissions are invalid
        """
        if data.role == Role.DEVELOPER and not self.context.is_developer():
            raise ForbiddenException("create developer accounts")
        if data.role == Role.ADMIN:
            self.ensure_flag("create_admin", "create admins")
        if data.role == Role.EMPLOYEE:
            self.ensure_flag("create_employee", "create employees")

        created_by_admin_id = None
        if data.role == Role.EMPLOYEE:
            created_by_admin_id = self._resolve_employee_admin(data.created_by_admin_id)

        if data.role == Role.DEVELOPER:
            # Developers always carry the full set
            permissions = DEFAULT_DEVELOPER_PERMISSIONS
        else:
            permissions = data.permissions or default_permissions_for(data.role)
            self._ensure_legal_scopes(permissions.model_dump())
            self._ensure_unlocked(data.role, permissions)

        # Only a developer sets an admin's employee limit
        employee_creation_limit = None
        if data.role == Role.ADMIN and self.context.is_developer():
            employee_creation_limit = data.employee_creation_limit

        user = User(
            id=str(uuid.uuid4()),
            name=data.name,
            email=data.email,
            role=data.role,
            position=data.position,
            permissions=permissions,
            created_by_admin_id=created_by_admin_id,
            employee_creation_limit=employee_creation_limit,
        )
        logger.info("User %s provisioned %s %s", self.user.id, user.role.value, user.id)
        return user

    def update_permissions(self, user_id: str, update: PermissionsUpdate) -> User:
        """
        Apply a permission edit to another user.

        Args:
            user_id: User whose permissions change
            update: Fields to change

        Returns:
            Copy of the user carrying the new permissions

        Raises:
            ForbiddenException: If requester may not edit this user
            NotFoundException: If user not found
            ValidationException: If a scope is illegal for its field or a
                locked field is changed
        """
        self.ensure_flag("edit_user_permissions", "edit user permissions")
        target = self._get_target(user_id)
        self._ensure_manages(target, "edit these permissions")

        changes = update.model_dump(exclude_unset=True)
        self._ensure_legal_scopes(changes)
        changes = {field: value for field, value in changes.items() if value is not None}
        if "allowed_service_types" in changes:
            changes["allowed_service_types"] = frozenset(changes["allowed_service_types"])

        permissions = UserPermissions.model_validate(
            {**target.permissions.model_dump(), **changes}
        )
        self._ensure_unlocked(target.role, permissions, only=changes.keys())

        logger.info(
            "User %s changed permissions of %s: %s", self.user.id, target.id, sorted(changes)
        )
        return target.model_copy(update={"permissions": permissions})

    def delete_user(self, user_id: str) -> User:
        """
        Check a user deletion.

        Returns:
            The user to delete

        Raises:
            ForbiddenException: If requester may not delete this user
            NotFoundException: If user not found
        """
        self.ensure_flag("delete_user", "delete users")
        target = self._get_target(user_id)
        self._ensure_manages(target, "delete this user")
        return target

    def _get_target(self, user_id: str) -> User:
        target = self.context.find_user(user_id)
        if target is None:
            raise NotFoundException("User not found")
        return target

    def _ensure_manages(self, target: User, action: str) -> None:
        """
        Developers manage everyone but themselves, admins only their own
        employees, employees nobody.
        """
        if target.id == self.user.id:
            raise ForbiddenException(action)
        if self.context.is_developer():
            return
        if self.context.is_admin() and is_subordinate_of(target.id, self.user.id, self.context.users):
            return
        raise ForbiddenException(action)

    def _ensure_unlocked(
        self, role: Role, permissions: UserPermissions, only: Iterable[str] | None = None
    ) -> None:
        violations = locked_field_violations(role, permissions)
        if only is not None:
            only = set(only)
            violations = [field for field in violations if field in only]
        if violations:
            raise ValidationException(
                f"Cannot change {', '.join(violations)} for a {role.value}"
            )

    def _resolve_employee_admin(self, requested_admin_id: str | None) -> str | None:
        """Admin a new employee will report to."""
        if self.context.is_admin():
            self._ensure_below_limit(self.user)
            return self.user.id

        if self.context.is_developer():
            if not requested_admin_id:
                logger.warning("Developer %s created an employee without an admin", self.user.id)
                return None
            admin = self.context.find_user(requested_admin_id)
            if admin is None or admin.role != Role.ADMIN:
                raise ValidationException(f"Invalid assigned admin: {requested_admin_id}")
            return admin.id

        # Employee holding create_employee: the new hire joins the same team
        admin_id = admin_of(self.user.id, self.context.users)
        if admin_id is not None:
            self._ensure_below_limit(self.context.find_user(admin_id))
        return admin_id

    def _ensure_below_limit(self, admin: User) -> None:
        """
        Raises:
            CreationLimitException: If the admin's team is already full
        """
        limit = admin.employee_creation_limit
        if limit is None:
            return
        current = len(subordinate_employee_ids(admin.id, self.context.users))
        if current >= limit:
            raise CreationLimitException(limit)

    @staticmethod
    def _ensure_legal_scopes(values: dict) -> None:
        """
        Raises:
            ValidationException: If a scope field holds a value it may not take
        """
        for field, value in values.items():
            if field in SCOPE_FIELDS and value is not None and value not in SCOPE_FIELDS[field]:
                raise ValidationException(f"'{value.value}' is not a valid scope for {field}")
