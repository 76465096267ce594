from crm_access.access.evaluator import can_perform
from crm_access.access.hierarchy import audit_hierarchy
from crm_access.access.impersonation import AdminFilterSelection
from crm_access.core.exceptions import ForbiddenException
from crm_access.models.access_context import AccessContext
from crm_access.models.role import Role
from crm_access.models.user import User


class SystemAccessService:
    """System-level operations: data wipes and the developer admin filter"""

    def __init__(self, context: AccessContext):
        self.context = context

    def ensure_can_clear_system_data(self) -> None:
        """
        Raises:
            ForbiddenException: If the requester lacks clear_system_data
        """
        if not can_perform(self.context.user, "clear_system_data"):
            raise ForbiddenException("clear system data")

    def admin_filter_options(self) -> list[User]:
        """
        Admins a developer can filter by.

        Raises:
            ForbiddenException: If requester is not a developer
        """
        if not self.context.is_developer():
            raise ForbiddenException("filter by admin")
        return [user for user in self.context.users if user.role == Role.ADMIN]

    def select_admin_filter(self, selection: AdminFilterSelection, admin_id: str | None) -> None:
        """
        Set (or with None, clear) the session's admin filter.

        Raises:
            ForbiddenException: If requester is not a developer
            ValidationException: If admin_id is not an admin
        """
        if admin_id is None:
            selection.clear()
            return
        selection.select(self.context.user, admin_id, self.context.users)

    def hierarchy_problems(self) -> list[str]:
        """
        Integrity report over the user snapshot (developer only).

        Raises:
            ForbiddenException: If requester is not a developer
        """
        if not self.context.is_developer():
            raise ForbiddenException("audit the user hierarchy")
        return audit_hierarchy(self.context.users)
