"""
Developer admin filter.

A developer may pick one admin and see listings narrowed to that
admin's organisation (the admin plus its employees). The selection is
session state held by the caller and passed explicitly into each
listing. It is never stored in the permission model.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TypeVar

from crm_access.access.evaluator import owned_by_any
from crm_access.access.hierarchy import subordinate_employee_ids
from crm_access.core.exceptions import ForbiddenException, ValidationException
from crm_access.models.role import Role
from crm_access.models.user import User

T = TypeVar("T")


def narrow_to_admin(admin_id: str, all_users: Iterable[User]) -> frozenset[str]:
    """Ids relevant when filtering by an admin: the admin and its employees."""
    return frozenset({admin_id}) | subordinate_employee_ids(admin_id, all_users)


def apply_admin_filter(entities: Iterable[T], relevant_user_ids: frozenset[str] | None) -> list[T]:
    """
    Keep entities created by or assigned to a relevant user.

    User entities are kept when they are themselves relevant. With no
    filter (None) the input passes through unchanged.
    """
    if relevant_user_ids is None:
        return list(entities)
    return [entity for entity in entities if owned_by_any(entity, relevant_user_ids)]


@dataclass
class AdminFilterSelection:
    """
    Per-session admin filter chosen by a developer.

    States: no filter selected, or filtered to one admin. select() moves
    to (or between) filtered states, clear() returns to no filter. Call
    clear() on logout.
    """

    admin_id: str | None = None

    @property
    def is_active(self) -> bool:
        return self.admin_id is not None

    def select(self, requester: User, admin_id: str, all_users: Iterable[User]) -> None:
        """
        Filter subsequent listings to one admin.

        Raises:
            ForbiddenException: If requester is not a developer
            ValidationException: If admin_id is not an admin in the snapshot
        """
        if requester.role != Role.DEVELOPER:
            raise ForbiddenException("filter by admin")

        target = next((user for user in all_users if user.id == admin_id), None)
        if target is None or target.role != Role.ADMIN:
            raise ValidationException(f"{admin_id} is not an admin")

        self.admin_id = admin_id

    def clear(self) -> None:
        """Drop the filter."""
        self.admin_id = None
