import pytest

from crm_access.core.exceptions import ForbiddenException
from crm_access.services.customer_service import CustomerAccessService
from tests.conftest import ids


class TestCustomerListing:
    """Tests for customer listings"""

    def test_admin_sees_own_and_team(self, context_for, customers):
        """a1 sees c1 (e1's) and c3 (its own, assigned to e1)"""
        assert ids(CustomerAccessService(context_for("a1")).list_visible(customers)) == ["c1", "c3"]

    def test_other_admin(self, context_for, customers):
        """a2 sees e2's customer and the one assigned to a2 itself"""
        assert ids(CustomerAccessService(context_for("a2")).list_visible(customers)) == ["c2", "c4"]

    def test_employee_service_type_gating(self, context_for, customers):
        """c3 is assigned to e1 but is a wealth customer"""
        assert ids(CustomerAccessService(context_for("e1")).list_visible(customers)) == ["c1"]

    def test_developer_filtered_to_a2(self, context_for, customers):
        service = CustomerAccessService(context_for("dev", admin_filter_id="a2"))

        assert ids(service.list_visible(customers)) == ["c2", "c4"]


class TestRenewals:
    """Tests for renewal management"""

    def test_admin_manages_own_customer(self, context_for, customers):
        CustomerAccessService(context_for("a1")).ensure_can_manage_renewals(customers[2])

    def test_admin_cannot_manage_uneditable_customer(self, context_for, customers):
        with pytest.raises(ForbiddenException):
            CustomerAccessService(context_for("a1")).ensure_can_manage_renewals(customers[0])

    def test_employee_lacks_flag(self, context_for, customers):
        with pytest.raises(ForbiddenException) as exc:
            CustomerAccessService(context_for("e1")).ensure_can_manage_renewals(customers[0])

        assert str(exc.value) == "Not permitted to manage renewals"


class TestConversion:
    """Tests for converting leads to customers"""

    def test_admin_converts_own_lead(self, context_for, leads):
        CustomerAccessService(context_for("a1")).ensure_can_convert(leads[2])

    def test_admin_cannot_convert_uneditable_lead(self, context_for, leads):
        with pytest.raises(ForbiddenException):
            CustomerAccessService(context_for("a1")).ensure_can_convert(leads[0])

    def test_employee_converts_assigned_lead(self, context_for, leads):
        CustomerAccessService(context_for("e1")).ensure_can_convert(leads[3])


class TestCustomerMutations:
    """Tests for customer edit / delete / assign gates"""

    def test_employee_edits_assigned(self, context_for, customers):
        CustomerAccessService(context_for("e1")).ensure_can_edit(customers[0])

    def test_employee_cannot_delete(self, context_for, customers):
        with pytest.raises(ForbiddenException):
            CustomerAccessService(context_for("e1")).ensure_can_delete(customers[0])

    def test_admin_assigns_customer(self, context_for, customers, admin_a1):
        CustomerAccessService(context_for("a1")).ensure_can_assign(customers[2], admin_a1)

    def test_employee_cannot_create_for_others(self, context_for, admin_a1):
        with pytest.raises(ForbiddenException):
            CustomerAccessService(context_for("e1")).ensure_can_create(assignee=admin_a1)
