import uuid
from enum import Enum

from sqlalchemy import ForeignKey, SmallInteger, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from confreview.db.base import Base


class RoleName(str, Enum):
    AUTHOR = "author"
    REVIEWER = "reviewer"
    ORG_COMMITTEE = "org_committee"
    ADMIN = "admin"


# Совпадает с сидом в миграции seed roles
ROLE_IDS: dict[str, int] = {
    RoleName.AUTHOR.value: 1,
    RoleName.REVIEWER.value: 2,
    RoleName.ORG_COMMITTEE.value: 3,
    RoleName.ADMIN.value: 4,
}


class Role(Base):
    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(SmallInteger, primary_key=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)


class UserRole(Base):
    __tablename__ = "user_roles"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )

    role_id: Mapped[int] = mapped_column(
        SmallInteger,
        ForeignKey("roles.id", ondelete="RESTRICT"),
        primary_key=True,
    )
