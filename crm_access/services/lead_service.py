from crm_access.models.lead import Lead
from crm_access.models.permissions import Resource
from crm_access.services.base import RecordAccessService


class LeadAccessService(RecordAccessService[Lead]):
    """Access enforcement for leads"""

    resource = Resource.LEADS
    view_scope_field = "view_leads"
    edit_scope_field = "edit_leads"
    delete_scope_field = "delete_leads"
    create_flag = "create_leads"
    assign_flag = "assign_leads"
