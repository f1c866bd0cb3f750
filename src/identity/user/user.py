"""User record mirrored from the external identity provider.

The primary key is the provider-issued user id, so every inbound identity
event maps onto exactly one row. Rows are only ever written by the identity
synchronizer and are never deleted locally.
"""

from datetime import UTC, date, datetime
from enum import Enum

from sqlalchemy import Boolean, Date, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from shared.database import Base


class UserRole(Enum):
    ADMIN = "ADMIN"
    CUSTOMER = "CUSTOMER"


class Gender(Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def role_for_email(email: str | None, super_admin_email: str | None) -> UserRole:
    """Decide the role of a newly created user.

    Only an exact (case-insensitive, whitespace-trimmed) match with the
    configured super-admin address yields ADMIN.
    """
    if not email or not super_admin_email:
        return UserRole.CUSTOMER
    if email.strip().lower() == super_admin_email.strip().lower():
        return UserRole.ADMIN
    return UserRole.CUSTOMER


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    email: Mapped[str | None] = mapped_column(String(254), index=True)
    first_name: Mapped[str] = mapped_column(String(100), default="")
    last_name: Mapped[str] = mapped_column(String(100), default="")
    image_url: Mapped[str | None] = mapped_column(String(2048))
    is_email_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    role: Mapped[str] = mapped_column(String(20), default=UserRole.CUSTOMER.value)
    gender: Mapped[str | None] = mapped_column(String(10))
    date_of_birth: Mapped[date | None] = mapped_column(Date)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    def __repr__(self) -> str:
        return f"<User {self.id} role={self.role}>"
