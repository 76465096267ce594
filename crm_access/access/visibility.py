"""Visibility filtering for listings."""

from collections.abc import Iterable
from typing import TypeVar

from crm_access.access.evaluator import ScopeContext, can_access
from crm_access.core.exceptions import ValidationException
from crm_access.models.scope import Scope
from crm_access.models.user import User

T = TypeVar("T")


def visible_entities(
    user: User,
    scope: Scope | str,
    entities: Iterable[T],
    context: ScopeContext | None = None,
) -> list[T]:
    """
    Reduce a collection to the entities the user may see.

    Single pass applying can_access to each element. Input order is
    preserved and no entity is modified.
    """
    if user is None:
        raise ValidationException("A requesting user is required")
    scope = Scope.coerce(scope)
    return [entity for entity in entities if can_access(user, scope, entity, context)]


def visible_users(
    user: User, all_users: Iterable[User], admin_filter_id: str | None = None
) -> list[User]:
    """
    Users the requester may see under its view_users scope.

    An admin with SUBORDINATES sees itself and its employees. A developer
    with SUBORDINATES sees nobody unless it is impersonating an admin, in
    which case it sees that admin and its employees.
    """
    if user is None:
        raise ValidationException("A requesting user is required")
    all_users = list(all_users)
    context = ScopeContext.for_user(user, all_users, admin_filter_id)
    return visible_entities(user, user.permissions.view_users, all_users, context)
