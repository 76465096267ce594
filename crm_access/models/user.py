from datetime import datetime, UTC

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from crm_access.models.permissions import UserPermissions
from crm_access.models.role import Position, Role


class User(BaseModel):
    """
    CRM user as seen by the access engine.

    Organizational placement is carried by created_by_admin_id: set on
    employees (the admin who created them), empty on admins and the
    developer. Only role takes part in authorization; position is a job
    title.
    """

    id: str
    name: str = ""
    email: str | None = None
    role: Role = Role.EMPLOYEE
    position: Position | None = None
    permissions: UserPermissions = Field(default_factory=UserPermissions)
    created_by_admin_id: str | None = None
    employee_creation_limit: int | None = None  # None = unlimited (admins only)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_validator("role", mode="before")
    @classmethod
    def _coerce_role(cls, value):
        return Role.coerce(value)

    @property
    def is_developer(self) -> bool:
        return self.role == Role.DEVELOPER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_employee(self) -> bool:
        return self.role == Role.EMPLOYEE

    def __repr__(self) -> str:
        return f"<User(id={self.id}, role={self.role.value})>"
