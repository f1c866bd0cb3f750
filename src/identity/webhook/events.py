"""Dispatch of verified identity-provider events."""

import pydantic
import structlog
from protean.exceptions import ValidationError
from sqlalchemy.orm import Session

from identity.api.schemas import IdentityEvent, IdentityEventType, ProviderUserData
from identity.user.sync import sync_user

logger = structlog.get_logger(__name__)


def process_identity_event(session: Session, event: IdentityEvent, super_admin_email: str | None = None) -> str:
    """Apply one verified event and return what happened to it.

    ``user.created`` and ``user.updated`` are the same upsert. ``user.deleted``
    is acknowledged without touching the local record, and unknown event
    types are acknowledged and ignored so the provider stops redelivering.
    """
    try:
        event_type = IdentityEventType(event.type)
    except ValueError:
        logger.info("Ignoring unsupported identity event", event_type=event.type)
        return "ignored"

    if event_type is IdentityEventType.USER_DELETED:
        logger.info("Identity deletion received, local user retained", user_id=event.data.get("id"))
        return "ignored"

    try:
        data = ProviderUserData.model_validate(event.data)
    except pydantic.ValidationError as exc:
        raise ValidationError({"data": [error["msg"] for error in exc.errors()]}) from exc

    sync_user(session, data.to_profile(), super_admin_email)
    return "synced"
