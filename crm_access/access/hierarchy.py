"""
Organizational hierarchy resolution.

The hierarchy is flat: the developer is the root, admins are peers
under it, and every employee points at the admin that created it via
created_by_admin_id. All functions work on a read-only snapshot of the
user collection and recompute from scratch on every call.
"""

from collections.abc import Iterable

from crm_access.core.logging_config import report_integrity_issue
from crm_access.models.role import Role
from crm_access.models.user import User


def subordinate_employee_ids(admin_id: str | None, all_users: Iterable[User]) -> frozenset[str]:
    """
    Ids of the employees created by an admin.

    An employee whose created_by_admin_id is its own id is invalid data.
    It is reported and treated as having no admin, so it never counts as
    anyone's subordinate (and never as its own).

    Args:
        admin_id: Admin whose team is resolved
        all_users: Snapshot of every user in the tenant

    Returns:
        Set of employee ids, empty when admin_id is empty or unknown
    """
    if not admin_id:
        return frozenset()

    subordinates = set()
    for candidate in all_users:
        if candidate.role != Role.EMPLOYEE or candidate.created_by_admin_id != admin_id:
            continue
        if candidate.id == admin_id:
            report_integrity_issue("User %s lists itself as its creating admin", candidate.id)
            continue
        subordinates.add(candidate.id)
    return frozenset(subordinates)


def is_subordinate_of(candidate_user_id: str, admin_id: str, all_users: Iterable[User]) -> bool:
    """Check whether a user is one of the admin's employees."""
    if candidate_user_id == admin_id:
        return False
    return candidate_user_id in subordinate_employee_ids(admin_id, all_users)


def admin_of(user_id: str, all_users: Iterable[User]) -> str | None:
    """
    Resolve the admin an employee reports to.

    Returns None for admins and the developer, for employees without a
    creating admin, and for broken references (self reference, dangling
    id, id of a non-admin). Broken references are reported.
    """
    by_id = {user.id: user for user in all_users}
    user = by_id.get(user_id)
    if user is None or user.role != Role.EMPLOYEE or not user.created_by_admin_id:
        return None

    admin_id = user.created_by_admin_id
    if admin_id == user.id:
        report_integrity_issue("User %s lists itself as its creating admin", user.id)
        return None

    admin = by_id.get(admin_id)
    if admin is None:
        report_integrity_issue("User %s points at missing admin %s", user.id, admin_id)
        return None
    if admin.role != Role.ADMIN:
        report_integrity_issue(
            "User %s points at %s which is a %s, not an admin", user.id, admin_id, admin.role.value
        )
        return None
    return admin_id


def audit_hierarchy(all_users: Iterable[User]) -> list[str]:
    """
    Report every hierarchy integrity problem in a user snapshot.

    Checks:
    - employee whose creating admin is itself
    - employee whose creating admin does not exist
    - employee whose creating admin is not an admin
    - admin or developer that carries a creating admin

    Returns:
        Human readable problem descriptions (also logged), empty if clean
    """
    users = list(all_users)
    by_id = {user.id: user for user in users}

    problems = []
    for user in users:
        admin_id = user.created_by_admin_id
        if not admin_id:
            continue

        if user.role != Role.EMPLOYEE:
            problems.append(f"{user.role.value} {user.id} has a creating admin ({admin_id})")
        elif admin_id == user.id:
            problems.append(f"employee {user.id} lists itself as its creating admin")
        elif admin_id not in by_id:
            problems.append(f"employee {user.id} points at missing admin {admin_id}")
        elif by_id[admin_id].role != Role.ADMIN:
            problems.append(
                f"employee {user.id} points at {admin_id} which is a {by_id[admin_id].role.value}"
            )

    for problem in problems:
        report_integrity_issue("Hierarchy: %s", problem)
    return problems
