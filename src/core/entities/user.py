"""User and reference-data entities."""

from datetime import UTC, datetime

from pydantic import BaseModel, Field


class User(BaseModel):
    """Application user. Read-only from the workflow's point of view."""

    id: int
    user_name: str
    email: str
    role_id: int
    role_name: str = ""
    manager_id: int | None = None
    manager_name: str | None = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def has_role(self, roles: tuple[str, ...] | list[str]) -> bool:
        wanted = {r.lower() for r in roles}
        return self.role_name.lower() in wanted


class Category(BaseModel):
    """Expense category."""

    id: int
    name: str
    is_active: bool = True


class StatusInfo(BaseModel):
    """Row of the expense status reference table."""

    id: int
    name: str
