import uuid
from datetime import UTC, datetime
from enum import StrEnum

import sqlalchemy as sa
from pydantic import BaseModel
from pydantic import Field as PydanticField
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(UTC)


class ApprovalStatus(StrEnum):
    """Lifecycle shared by tenants and users awaiting approval."""

    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"


class Entity(BaseModel):
    """Base entity class with auto-generated UUID identifier."""

    id: str = PydanticField(
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique identifier for the entity",
    )

    created_at: datetime = PydanticField(default_factory=utcnow)
    updated_at: datetime = PydanticField(default_factory=utcnow)


class EntityTable(SQLModel, table=False):
    """Base table class with auto-generated UUID identifier and timestamps."""

    id: str = Field(
        primary_key=True,
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique identifier for the entity",
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_type=sa.DateTime(timezone=True),  # type: ignore[call-overload]
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_type=sa.DateTime(timezone=True),  # type: ignore[call-overload]
        sa_column_kwargs={
            "server_default": sa.func.now(),
            "onupdate": sa.func.now(),
        },
    )
