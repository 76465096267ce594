"""Scope and service-type vocabularies used by permission records."""

from enum import Enum as PyEnum

from crm_access.core.logging_config import report_integrity_issue


class Scope(str, PyEnum):
    """
    How much of a collection a permission grants.

    - NONE: nothing
    - OWN / CREATED: records the user created
    - ASSIGNED: records currently assigned to the user
    - SUBORDINATES: for admins, their own records plus their team's
    - ALL: every record (still gated by service type)
    """

    NONE = "none"
    OWN = "own"
    CREATED = "created"
    ASSIGNED = "assigned"
    SUBORDINATES = "subordinates"
    ALL = "all"

    @classmethod
    def coerce(cls, value: "Scope | str | None") -> "Scope":
        """Parse a stored scope value, failing closed to NONE."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.NONE
        try:
            return cls(value)
        except ValueError:
            report_integrity_issue("Unrecognized scope value %r treated as 'none'", value)
            return cls.NONE


class ServiceType(str, PyEnum):
    """Line of business a record belongs to"""

    TRAINING = "training"
    WEALTH = "wealth"
    EQUITY = "equity"
    INSURANCE = "insurance"
    MUTUAL_FUNDS = "mutual_funds"
    PMS = "PMS"
    AIF = "AIF"
    OTHERS = "others"


def coerce_service_types(values) -> frozenset[ServiceType]:
    """Parse stored service types, dropping (and reporting) unknown tags."""
    if values is None:
        return frozenset()
    if isinstance(values, str):
        values = [values]

    parsed = set()
    for value in values:
        try:
            parsed.add(ServiceType(value))
        except ValueError:
            report_integrity_issue("Unrecognized service type %r ignored", value)
    return frozenset(parsed)
