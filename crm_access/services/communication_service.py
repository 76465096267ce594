from collections.abc import Iterable

from crm_access.core.exceptions import ForbiddenException, ValidationException
from crm_access.models.communication import CommunicationRecord
from crm_access.models.customer import Customer
from crm_access.models.lead import Lead
from crm_access.models.permissions import Resource
from crm_access.services.base import ResourceAccessService
from crm_access.services.customer_service import CustomerAccessService
from crm_access.services.lead_service import LeadAccessService


def link_contacts(
    records: Iterable[CommunicationRecord],
    leads: Iterable[Lead],
    customers: Iterable[Customer],
) -> list[CommunicationRecord]:
    """
    Copy assignee and service types of the linked lead/customer onto records.

    A customer link wins over a lead link. Records whose contact is
    missing keep empty contact fields and then only match on created_by.
    """
    leads_by_id = {lead.id: lead for lead in leads}
    customers_by_id = {customer.id: customer for customer in customers}

    linked = []
    for record in records:
        contact = customers_by_id.get(record.customer_id) or leads_by_id.get(record.lead_id)
        if contact is None:
            linked.append(record)
            continue
        linked.append(
            record.model_copy(
                update={
                    "contact_assigned_to": contact.assigned_to,
                    "contact_service_types": contact.service_types,
                }
            )
        )
    return linked


class CommunicationAccessService(ResourceAccessService[CommunicationRecord]):
    """Access enforcement for communication history and call recordings"""

    resource = Resource.COMMUNICATIONS
    view_scope_field = "view_communications"

    def ensure_can_add(self, lead: Lead | None = None, customer: Customer | None = None) -> None:
        """
        Check logging a new communication against a lead or customer.

        The requester needs add_communications and must be able to see
        the contact the communication is logged against.

        Raises:
            ValidationException: If neither lead nor customer is given
            ForbiddenException: If adding is not permitted
        """
        if lead is None and customer is None:
            raise ValidationException("A communication must be linked to a lead or customer")

        self.ensure_flag("add_communications", "add communications")
        if customer is not None and not CustomerAccessService(self.context).can_view(customer):
            raise ForbiddenException("add communications for this customer")
        if lead is not None and not LeadAccessService(self.context).can_view(lead):
            raise ForbiddenException("add communications for this lead")

    def ensure_can_play_recording(self, record: CommunicationRecord) -> None:
        """
        Raises:
            ForbiddenException: If the requester cannot play this recording
            ValidationException: If the record has no recording
        """
        self.ensure_flag("play_recordings", "play recordings")
        self.ensure_scope(self.view_scope_field, record, "play this recording")
        if not record.has_recording:
            raise ValidationException("Communication has no recording")

    def ensure_can_download_recording(self, record: CommunicationRecord) -> None:
        """
        Raises:
            ForbiddenException: If the requester cannot download this recording
            ValidationException: If the record has no recording
        """
        self.ensure_flag("download_recordings", "download recordings")
        self.ensure_scope(self.view_scope_field, record, "download this recording")
        if not record.has_recording:
            raise ValidationException("Communication has no recording")
