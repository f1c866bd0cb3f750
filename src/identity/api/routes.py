"""FastAPI routes for the Identity domain: provider webhooks and the current user."""

from fastapi import APIRouter, Depends, Request
from protean.exceptions import ObjectNotFoundError, ValidationError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from identity.api.schemas import IdentityEvent, StatusResponse, UserResponse
from identity.auth.guards import require_auth
from identity.user.user import User
from identity.webhook import get_verifier
from identity.webhook.events import process_identity_event
from shared.config import get_settings
from shared.database import get_session
from shared.exceptions import WebhookVerificationError

# ---------------------------------------------------------------------------
# Webhook Router
# ---------------------------------------------------------------------------
webhook_router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@webhook_router.post("/identity", response_model=StatusResponse)
async def identity_webhook(request: Request, session: Session = Depends(get_session)) -> StatusResponse:
    """Receive a signed user event from the identity provider.

    The signature is checked against the raw body before anything is parsed.
    """
    payload = await request.body()
    if not get_verifier().verify_webhook_signature(payload, request.headers):
        raise WebhookVerificationError({"signature": ["Invalid webhook signature"]})

    try:
        event = IdentityEvent.model_validate_json(payload)
    except ValueError as exc:
        raise ValidationError({"payload": ["Malformed identity event"]}) from exc

    outcome = await run_in_threadpool(
        process_identity_event,
        session,
        event,
        get_settings().super_admin_email,
    )
    return StatusResponse(status=outcome)


# ---------------------------------------------------------------------------
# User Router
# ---------------------------------------------------------------------------
user_router = APIRouter(prefix="/users", tags=["users"])


@user_router.get("/me", response_model=UserResponse)
def get_current_user(
    user_id: str = Depends(require_auth),
    session: Session = Depends(get_session),
) -> UserResponse:
    user = session.get(User, user_id)
    if user is None:
        raise ObjectNotFoundError({"user": ["User has not been synchronized yet"]})
    return UserResponse.model_validate(user)
