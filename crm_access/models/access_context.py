"""Access context for request authorization."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TypeVar

from crm_access.access.evaluator import ScopeContext
from crm_access.access.impersonation import apply_admin_filter, narrow_to_admin
from crm_access.core.exceptions import (
    ForbiddenException,
    UnauthorizedException,
    ValidationException,
)
from crm_access.core.logging_config import report_integrity_issue
from crm_access.models.role import Role
from crm_access.models.user import User

T = TypeVar("T")


@dataclass
class AccessContext:
    """
    Complete context for authorizing one request.

    Built by the API layer after authentication from the current user
    snapshot. Nothing here is cached beyond the lifetime of the request.

    Attributes:
        user: The authenticated User
        users: Snapshot of every user, used for hierarchy resolution
        admin_filter_id: Admin selected by a developer, or None
    """

    user: User
    users: list[User] = field(default_factory=list)
    admin_filter_id: str | None = None

    def __post_init__(self):
        if self.user is None:
            raise UnauthorizedException("Not authenticated")
        self.users = list(self.users)
        if self.admin_filter_id is not None:
            if not self.is_developer():
                raise ForbiddenException("filter by admin")
            target = self.find_user(self.admin_filter_id)
            if target is None or target.role != Role.ADMIN:
                report_integrity_issue(
                    "Admin filter %s of user %s does not name an admin",
                    self.admin_filter_id,
                    self.user.id,
                )
                raise ValidationException(f"{self.admin_filter_id} is not an admin")

    @classmethod
    def from_snapshot(
        cls, user_id: str, users: Iterable[User], admin_filter_id: str | None = None
    ) -> "AccessContext":
        """
        Resolve the authenticated user id against the user snapshot.

        Raises:
            UnauthorizedException: If the user no longer exists
            ForbiddenException: If a non-developer passes an admin filter
            ValidationException: If the admin filter does not name an admin
        """
        users = list(users)
        user = next((candidate for candidate in users if candidate.id == user_id), None)
        if user is None:
            raise UnauthorizedException("Unknown user")
        return cls(user=user, users=users, admin_filter_id=admin_filter_id)

    def scope_context(self) -> ScopeContext:
        """
        Team inputs for SUBORDINATES, computed from the snapshot.

        A developer with an admin filter acts with that admin's team.
        """
        return ScopeContext.for_user(self.user, self.users, self.admin_filter_id)

    def admin_filter_ids(self) -> frozenset[str] | None:
        """Ids selected by the developer admin filter, None if no filter."""
        if self.admin_filter_id is None:
            return None
        return narrow_to_admin(self.admin_filter_id, self.users)

    def apply_admin_filter(self, entities: Iterable[T]) -> list[T]:
        return apply_admin_filter(entities, self.admin_filter_ids())

    def find_user(self, user_id: str) -> User | None:
        return next((user for user in self.users if user.id == user_id), None)

    def can_assign_to(self, assignee: User) -> bool:
        """
        Check whether the requester may hand records to a user.

        Developers may assign to anyone, admins to themselves or their
        employees, employees only to themselves.
        """
        if self.is_developer():
            return True
        if assignee.id == self.user.id:
            return True
        if self.is_admin():
            return assignee.id in self.scope_context().subordinate_ids
        return False

    def is_developer(self) -> bool:
        return self.user.role == Role.DEVELOPER

    def is_admin(self) -> bool:
        return self.user.role == Role.ADMIN

    def is_employee(self) -> bool:
        return self.user.role == Role.EMPLOYEE

    def __repr__(self) -> str:
        return (
            f"<AccessContext(user_id={self.user.id}, role={self.user.role.value}, "
            f"admin_filter_id={self.admin_filter_id})>"
        )
