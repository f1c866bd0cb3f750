"""Webhook verifier factory.

Provides get_verifier() / set_verifier() / reset_verifier() so tests and
alternative deployments can swap the verification adapter.
"""

from identity.webhook.port import WebhookVerifier
from identity.webhook.svix_adapter import SvixWebhookVerifier
from shared.config import get_settings

_current_verifier: WebhookVerifier | None = None


def get_verifier() -> WebhookVerifier:
    """Return the active verifier. Defaults to the Svix scheme with the configured secret."""
    global _current_verifier
    if _current_verifier is None:
        _current_verifier = SvixWebhookVerifier(get_settings().identity_webhook_secret)
    return _current_verifier


def set_verifier(verifier: WebhookVerifier) -> None:
    """Override the active verifier."""
    global _current_verifier
    _current_verifier = verifier


def reset_verifier() -> None:
    """Reset to the default verifier."""
    global _current_verifier
    _current_verifier = None
