"""
Scope evaluation: the single allow/deny decision for one
(user, scope, entity) triple.

Rules, applied in order:
1. NONE denies.
2. ALL allows.
3. OWN / CREATED allow when the entity was created by the user.
4. ASSIGNED allows when the entity is assigned to the user.
5. SUBORDINATES allows when the entity was created by, or is assigned
   to, a member of the user's team. An admin's team is itself plus its
   employees. A developer impersonating an admin takes over that admin's
   team. Everyone else has no team.
6. Whatever the scope matched, the entity must pass service-type gating.
   Leads and customers need at least one service type the user is
   allowed; a lead or customer without service types is hidden. Other
   entities are only gated when they carry service types.

User entities have no assignee. For them the creating admin stands in
for the creator, and SUBORDINATES matches the user's own account and
the accounts of its subordinates.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from crm_access.access.hierarchy import subordinate_employee_ids
from crm_access.config import settings
from crm_access.core.exceptions import ValidationException
from crm_access.models.customer import Customer
from crm_access.models.lead import Lead
from crm_access.models.role import Role
from crm_access.models.scope import Scope
from crm_access.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScopeContext:
    """
    Precomputed inputs for SUBORDINATES evaluation.

    Attributes:
        subordinate_ids: Employees reporting to the team's admin
        acting_admin_id: Admin a developer is impersonating, or None
    """

    subordinate_ids: frozenset[str] = field(default_factory=frozenset)
    acting_admin_id: str | None = None

    @classmethod
    def for_user(
        cls, user: User, all_users: Iterable[User], admin_filter_id: str | None = None
    ) -> "ScopeContext":
        """
        Build the context for a requester from the current user snapshot.

        Admins get their own employees. A developer with an admin filter
        gets the filtered admin and its employees. Anyone else gets an
        empty context.
        """
        if user.role == Role.ADMIN:
            return cls(subordinate_ids=subordinate_employee_ids(user.id, all_users))
        if user.role == Role.DEVELOPER and admin_filter_id:
            return cls(
                subordinate_ids=subordinate_employee_ids(admin_filter_id, all_users),
                acting_admin_id=admin_filter_id,
            )
        return cls()


EMPTY_CONTEXT = ScopeContext()


def ownership_of(entity) -> tuple[str | None, str | None]:
    """
    Return (creator, assignee) of an entity.

    Missing attributes read as None and never match anything.
    """
    if isinstance(entity, User):
        return entity.created_by_admin_id, None
    return getattr(entity, "created_by", None), getattr(entity, "assigned_to", None)


def owned_by_any(entity, user_ids: frozenset[str] | set[str]) -> bool:
    """Check whether an entity was created by or is assigned to any of user_ids."""
    if isinstance(entity, User):
        return entity.id in user_ids
    created_by, assigned_to = ownership_of(entity)
    return (created_by is not None and created_by in user_ids) or (
        assigned_to is not None and assigned_to in user_ids
    )


def _team_of(user: User, context: ScopeContext) -> frozenset[str]:
    if user.role == Role.ADMIN:
        return context.subordinate_ids | {user.id}
    if user.role == Role.DEVELOPER and context.acting_admin_id:
        return context.subordinate_ids | {context.acting_admin_id}
    return frozenset()


def passes_service_gate(user: User, entity) -> bool:
    """Check line-of-business gating for an entity that already matched its scope."""
    if isinstance(entity, (Lead, Customer)):
        return user.permissions.allows_service_types(entity.service_types, required=True)
    return user.permissions.allows_service_types(getattr(entity, "service_types", None))


def _scope_matches(user: User, scope: Scope, entity, context: ScopeContext) -> bool:
    if scope == Scope.NONE:
        return False
    if scope == Scope.ALL:
        return True

    created_by, assigned_to = ownership_of(entity)
    if scope in (Scope.OWN, Scope.CREATED):
        return created_by is not None and created_by == user.id
    if scope == Scope.ASSIGNED:
        return assigned_to is not None and assigned_to == user.id
    if scope == Scope.SUBORDINATES:
        return owned_by_any(entity, _team_of(user, context))

    # Unreachable for a coerced Scope, kept as the fail-closed arm
    return False


def can_access(user: User, scope: Scope | str, entity, context: ScopeContext | None = None) -> bool:
    """
    Decide whether a user may act on an entity under a scope.

    Args:
        user: Authenticated requester
        scope: Scope value taken from the requester's permissions
        entity: Lead, customer, communication record or user
        context: Subordinate set for SUBORDINATES; empty when omitted

    Returns:
        True if allowed. Denial is a normal result, never an exception.

    Raises:
        ValidationException: If user or entity is missing
    """
    if user is None:
        raise ValidationException("A requesting user is required")
    if entity is None:
        raise ValidationException("An entity is required")

    scope = Scope.coerce(scope)
    allowed = _scope_matches(user, scope, entity, context or EMPTY_CONTEXT)
    if allowed:
        allowed = passes_service_gate(user, entity)

    if settings.LOG_ACCESS_DECISIONS:
        logger.debug(
            "user=%s scope=%s entity=%s:%s -> %s",
            user.id,
            scope.value,
            type(entity).__name__,
            getattr(entity, "id", None),
            "allow" if allowed else "deny",
        )
    return allowed


def can_perform(user: User, flag: str) -> bool:
    """
    Check a boolean action flag (create actions, recordings, system ops).

    Raises:
        ValidationException: If user is missing
    """
    if user is None:
        raise ValidationException("A requesting user is required")
    return user.permissions.has_flag(flag)
