from collections.abc import Iterable
from typing import Generic, TypeVar

from crm_access.access.evaluator import can_access, can_perform
from crm_access.access.visibility import visible_entities
from crm_access.config import settings
from crm_access.core.exceptions import ForbiddenException, NotFoundException
from crm_access.models.access_context import AccessContext
from crm_access.models.permissions import Resource
from crm_access.models.scope import Scope
from crm_access.models.user import User

T = TypeVar("T")


class ResourceAccessService(Generic[T]):
    """
    Read-side enforcement for one resource.

    Subclasses name the resource and the scope field that governs
    viewing it.
    """

    resource: Resource
    view_scope_field: str

    def __init__(self, context: AccessContext):
        self.context = context

    @property
    def user(self) -> User:
        return self.context.user

    def scope(self, field: str) -> Scope:
        return self.user.permissions.scope_for(field)

    def list_visible(self, entities: Iterable[T]) -> list[T]:
        """
        Visible subset of a collection for listing.

        Applies the requester's view scope, then the developer admin
        filter when one is selected.
        """
        visible = visible_entities(
            self.user,
            self.scope(self.view_scope_field),
            entities,
            self.context.scope_context(),
        )
        return self.context.apply_admin_filter(visible)

    def can_view(self, entity: T) -> bool:
        return can_access(
            self.user, self.scope(self.view_scope_field), entity, self.context.scope_context()
        )

    def get_visible(self, entity_id: str, entities: Iterable[T]) -> T:
        """
        Fetch one entity the requester may see.

        Raises:
            NotFoundException: If entity doesn't exist, or is not visible
                while UNIFORM_NOT_FOUND is on
            ForbiddenException: If entity is not visible and
                UNIFORM_NOT_FOUND is off
        """
        entity = next((candidate for candidate in entities if candidate.id == entity_id), None)
        if entity is None:
            raise NotFoundException(f"{self.resource.label} not found")

        if not self.can_view(entity):
            if settings.UNIFORM_NOT_FOUND:
                raise NotFoundException(f"{self.resource.label} not found")
            raise ForbiddenException(f"view this {self.resource.label.lower()}")
        return entity

    def ensure_flag(self, flag: str, action: str) -> None:
        """
        Raises:
            ForbiddenException: If the requester lacks the flag
        """
        if not can_perform(self.user, flag):
            raise ForbiddenException(action)

    def ensure_scope(self, field: str, entity: T, action: str) -> None:
        """
        Raises:
            ForbiddenException: If the entity is outside the scope in field
        """
        if not can_access(self.user, self.scope(field), entity, self.context.scope_context()):
            raise ForbiddenException(action)


class RecordAccessService(ResourceAccessService[T]):
    """Create / edit / delete / assign enforcement for leads and customers"""

    edit_scope_field: str
    delete_scope_field: str
    create_flag: str
    assign_flag: str

    def ensure_can_create(self, assignee: User | None = None) -> None:
        """
        Check a create attempt. Create has no target to scope against.

        Handing the new record to someone other than the requester also
        needs the assign flag and an assignee within reach.

        Raises:
            ForbiddenException: If creating (or assigning) is not permitted
        """
        noun = self.resource.value
        self.ensure_flag(self.create_flag, f"create {noun}")
        if assignee is not None and assignee.id != self.user.id:
            self.ensure_flag(self.assign_flag, f"assign {noun}")
            if not self.context.can_assign_to(assignee):
                raise ForbiddenException(f"assign {noun} to this user")

    def ensure_can_edit(self, entity: T) -> None:
        self.ensure_scope(
            self.edit_scope_field, entity, f"edit this {self.resource.label.lower()}"
        )

    def ensure_can_delete(self, entity: T) -> None:
        self.ensure_scope(
            self.delete_scope_field, entity, f"delete this {self.resource.label.lower()}"
        )

    def ensure_can_assign(self, entity: T, assignee: User) -> None:
        """
        Check a reassignment of an existing record.

        Requires the assign flag, edit access to the record, and an
        assignee the requester may hand work to.

        Raises:
            ForbiddenException: If any of the checks fails
        """
        noun = self.resource.value
        self.ensure_flag(self.assign_flag, f"assign {noun}")
        self.ensure_can_edit(entity)
        if not self.context.can_assign_to(assignee):
            raise ForbiddenException(f"assign {noun} to this user")
