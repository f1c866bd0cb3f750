"""User identity synchronization: create-or-update a local user from provider data."""

from dataclasses import dataclass
from datetime import date

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from identity.user.user import Gender, User, role_for_email
from shared.database import unit_of_work

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class IdentityProfile:
    """Normalized identity attributes, already validated at the boundary."""

    user_id: str
    email: str | None = None
    first_name: str = ""
    last_name: str = ""
    image_url: str | None = None
    is_email_verified: bool = False
    gender: Gender | None = None
    date_of_birth: date | None = None


def upsert_user(session: Session, profile: IdentityProfile, super_admin_email: str | None = None) -> User:
    """Create the user if absent, otherwise overwrite its profile fields.

    The role is decided once, at creation. Later changes to the email never
    promote or demote an existing user.
    """
    user = session.get(User, profile.user_id)
    if user is None:
        role = role_for_email(profile.email, super_admin_email)
        user = User(id=profile.user_id, role=role.value)
        session.add(user)
        logger.info("Creating user from identity event", user_id=profile.user_id, role=role.value)
    else:
        logger.info("Updating user from identity event", user_id=profile.user_id)

    user.email = profile.email
    user.first_name = profile.first_name or ""
    user.last_name = profile.last_name or ""
    user.image_url = profile.image_url
    user.is_email_verified = profile.is_email_verified
    user.gender = profile.gender.value if profile.gender else None
    user.date_of_birth = profile.date_of_birth

    session.flush()
    return user


def sync_user(session: Session, profile: IdentityProfile, super_admin_email: str | None = None) -> User:
    """Upsert ``profile`` in its own transaction.

    Two deliveries of the same "created" event can race on the insert; the
    loser hits the primary key, rolls back and replays as an update.
    """
    try:
        with unit_of_work(session):
            return upsert_user(session, profile, super_admin_email)
    except IntegrityError:
        logger.warning("Concurrent user insert detected, retrying as update", user_id=profile.user_id)
        with unit_of_work(session):
            return upsert_user(session, profile, super_admin_email)
