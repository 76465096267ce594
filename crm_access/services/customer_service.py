from crm_access.models.customer import Customer
from crm_access.models.lead import Lead
from crm_access.models.permissions import Resource
from crm_access.services.base import RecordAccessService
from crm_access.services.lead_service import LeadAccessService


class CustomerAccessService(RecordAccessService[Customer]):
    """Access enforcement for customers, renewals and lead conversion"""

    resource = Resource.CUSTOMERS
    view_scope_field = "view_customers"
    edit_scope_field = "edit_customers"
    delete_scope_field = "delete_customers"
    create_flag = "create_customers"
    assign_flag = "assign_customers"

    def ensure_can_manage_renewals(self, customer: Customer) -> None:
        """
        Check a renewal update on a customer.

        Raises:
            ForbiddenException: If the requester lacks manage_renewals or
                cannot edit the customer
        """
        self.ensure_flag("manage_renewals", "manage renewals")
        self.ensure_can_edit(customer)

    def ensure_can_convert(self, lead: Lead) -> None:
        """
        Check converting a lead into a customer.

        Needs the right to create customers and to edit the lead being
        converted.

        Raises:
            ForbiddenException: If either check fails
        """
        self.ensure_flag(self.create_flag, "create customers")
        LeadAccessService(self.context).ensure_can_edit(lead)
