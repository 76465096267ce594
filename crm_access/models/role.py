"""Authorization roles and descriptive job positions."""

from enum import Enum as PyEnum

from crm_access.core.logging_config import report_integrity_issue


class Role(str, PyEnum):
    """
    Authorization role of a CRM user.

    Role Hierarchy (root to leaf):
    1. DEVELOPER - Hierarchy root, sees and manages everything
    2. ADMIN - Peers under the developer tier, manage their own employees
    3. EMPLOYEE - Created by (and reporting to) exactly one admin

    Only these three values participate in authorization. Job titles
    such as relationship manager live in Position.
    """

    DEVELOPER = "developer"
    ADMIN = "admin"
    EMPLOYEE = "employee"

    @classmethod
    def coerce(cls, value: "Role | str | None") -> "Role":
        """
        Map a stored role value onto an authorization role.

        Anything that is not one of the three authorization roles (a
        legacy position label stored as a role, a typo, None) falls back
        to EMPLOYEE, the most restrictive role.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            report_integrity_issue("Unrecognized role %r treated as 'employee'", value)
            return cls.EMPLOYEE


class Position(str, PyEnum):
    """Descriptive job title. Has no effect on authorization."""

    RELATIONSHIP_MANAGER = "relationship_manager"
    OPERATIONS_EXECUTIVE = "operations_executive"
    ACCOUNTANT = "accountant"
    SENIOR_SALES_MANAGER = "senior_sales_manager"
    JUNIOR_SALES_MANAGER = "junior_sales_manager"
    MANAGER = "manager"
    EXECUTIVE = "executive"
