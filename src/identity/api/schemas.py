"""Pydantic request/response schemas for the Identity API.

Provider payloads are external contracts (anti-corruption layer): every field
the provider may omit is optional here, and ``to_profile()`` is the only way
their data reaches the synchronizer.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field

from identity.user.sync import IdentityProfile
from identity.user.user import Gender

logger = structlog.get_logger(__name__)


class IdentityEventType(Enum):
    USER_CREATED = "user.created"
    USER_UPDATED = "user.updated"
    USER_DELETED = "user.deleted"


# --- Provider payloads ---


class EmailVerification(BaseModel):
    model_config = ConfigDict(extra="ignore")

    status: str | None = None


class ProviderEmailAddress(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    email_address: str
    verification: EmailVerification | None = None


class ProviderUserData(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "examples": [
                {
                    "id": "user_29w83sxmDNGwOuEthce5gg56FcC",
                    "email_addresses": [
                        {
                            "id": "idn_29w83yL7CwVlJXylYLxcslromF1",
                            "email_address": "jane.doe@example.com",
                            "verification": {"status": "verified"},
                        }
                    ],
                    "primary_email_address_id": "idn_29w83yL7CwVlJXylYLxcslromF1",
                    "first_name": "Jane",
                    "last_name": "Doe",
                    "image_url": "https://img.example.com/jane.png",
                    "gender": "female",
                    "birthday": "1990-03-15",
                }
            ]
        },
    )

    id: str = Field(..., min_length=1, max_length=255)
    email_addresses: list[ProviderEmailAddress] = Field(default_factory=list)
    primary_email_address_id: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    image_url: str | None = None
    gender: str | None = None
    birthday: str | None = None

    def primary_email(self) -> ProviderEmailAddress | None:
        """The address flagged as primary, falling back to the first one listed."""
        if not self.email_addresses:
            return None
        if self.primary_email_address_id:
            for address in self.email_addresses:
                if address.id == self.primary_email_address_id:
                    return address
        return self.email_addresses[0]

    def to_profile(self) -> IdentityProfile:
        primary = self.primary_email()
        return IdentityProfile(
            user_id=self.id,
            email=primary.email_address if primary else None,
            first_name=self.first_name or "",
            last_name=self.last_name or "",
            image_url=self.image_url or None,
            is_email_verified=bool(primary and primary.verification and primary.verification.status == "verified"),
            gender=_parse_gender(self.gender),
            date_of_birth=_parse_birthday(self.birthday, self.id),
        )


class IdentityEvent(BaseModel):
    """Envelope of a provider webhook delivery."""

    model_config = ConfigDict(extra="ignore")

    type: str
    data: dict[str, Any]
    object: str | None = None


def _parse_gender(value: str | None) -> Gender | None:
    if not value:
        return None
    try:
        return Gender(value.strip().upper())
    except ValueError:
        return None


def _parse_birthday(value: str | None, user_id: str) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        logger.warning("Ignoring unparseable birthday", user_id=user_id, birthday=value)
        return None


# --- Response Schemas ---


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str | None
    first_name: str
    last_name: str
    image_url: str | None
    is_email_verified: bool
    role: str
    gender: str | None
    date_of_birth: date | None
    created_at: datetime
    updated_at: datetime


class StatusResponse(BaseModel):
    status: str = "ok"
