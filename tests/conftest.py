import pytest

from crm_access.access.defaults import (
    DEFAULT_ADMIN_PERMISSIONS,
    DEFAULT_DEVELOPER_PERMISSIONS,
    DEFAULT_EMPLOYEE_PERMISSIONS,
)
from crm_access.models.access_context import AccessContext
from crm_access.models.communication import CommunicationRecord
from crm_access.models.customer import Customer
from crm_access.models.lead import Lead
from crm_access.models.role import Role
from crm_access.models.user import User
from crm_access.services.communication_service import link_contacts

# Organisation used throughout the tests:
#
#   dev (developer)
#   a1 (admin) -- e1 (employee)
#   a2 (admin) -- e2 (employee)


@pytest.fixture
def developer():
    return User(id="dev", name="Dev", role=Role.DEVELOPER, permissions=DEFAULT_DEVELOPER_PERMISSIONS)


@pytest.fixture
def admin_a1():
    return User(
        id="a1",
        name="Admin One",
        role=Role.ADMIN,
        permissions=DEFAULT_ADMIN_PERMISSIONS,
        employee_creation_limit=2,
    )


@pytest.fixture
def admin_a2():
    return User(id="a2", name="Admin Two", role=Role.ADMIN, permissions=DEFAULT_ADMIN_PERMISSIONS)


@pytest.fixture
def employee_e1():
    return User(
        id="e1",
        name="Employee One",
        role=Role.EMPLOYEE,
        permissions=DEFAULT_EMPLOYEE_PERMISSIONS,
        created_by_admin_id="a1",
    )


@pytest.fixture
def employee_e2():
    return User(
        id="e2",
        name="Employee Two",
        role=Role.EMPLOYEE,
        permissions=DEFAULT_EMPLOYEE_PERMISSIONS,
        created_by_admin_id="a2",
    )


@pytest.fixture
def users(developer, admin_a1, admin_a2, employee_e1, employee_e2):
    """Snapshot of every user in the organisation"""
    return [developer, admin_a1, admin_a2, employee_e1, employee_e2]


@pytest.fixture
def leads():
    """Leads spread across both admin teams and service types"""
    return [
        Lead(id="l1", name="Created by e1", created_by="e1", service_types=["training"]),
        Lead(id="l2", name="e2's own", created_by="e2", assigned_to="e2", service_types=["training"]),
        Lead(id="l3", name="Created by a1", created_by="a1", service_types=["wealth"]),
        Lead(id="l4", name="Dev to e1", created_by="dev", assigned_to="e1", service_types=["training"]),
        Lead(id="l5", name="a2's own", created_by="a2", assigned_to="a2", service_types=["equity"]),
        Lead(id="l6", name="Orphan"),
    ]


@pytest.fixture
def customers():
    return [
        Customer(id="c1", created_by="e1", assigned_to="e1", service_types=["training"]),
        Customer(id="c2", created_by="e2", assigned_to="e2", service_types=["wealth"]),
        Customer(id="c3", created_by="a1", assigned_to="e1", service_types=["wealth"]),
        Customer(id="c4", created_by="dev", assigned_to="a2", service_types=["training"]),
    ]


@pytest.fixture
def communications(leads, customers):
    """Communication records with contact ownership already linked"""
    records = [
        CommunicationRecord(id="m1", type="call", created_by="e1", lead_id="l4", recording_url="s3://m1.webm"),
        CommunicationRecord(id="m2", type="email", created_by="e2", customer_id="c2"),
        CommunicationRecord(id="m3", type="call", created_by="a1", lead_id="l3", recording_url="s3://m3.webm"),
        CommunicationRecord(id="m4", type="note", created_by="dev"),
    ]
    return link_contacts(records, leads, customers)


@pytest.fixture
def context_for(users):
    """Factory building an AccessContext for a user id"""

    def _context_for(user_id: str, admin_filter_id: str | None = None) -> AccessContext:
        return AccessContext.from_snapshot(user_id, users, admin_filter_id=admin_filter_id)

    return _context_for


def ids(entities) -> list[str]:
    return [entity.id for entity in entities]
