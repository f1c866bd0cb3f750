"""Svix webhook verifier.

The identity provider delivers webhooks through Svix: every delivery carries
``svix-id``, ``svix-timestamp`` and ``svix-signature`` headers and is signed
with the ``whsec_...`` endpoint secret. The ``svix`` SDK checks the signature
and the timestamp window; this adapter only turns its verdict into accept or
reject.
"""

from collections.abc import Mapping

import structlog
from svix.webhooks import Webhook, WebhookVerificationError

from identity.webhook.port import WebhookVerifier

logger = structlog.get_logger(__name__)


class SvixWebhookVerifier(WebhookVerifier):
    def __init__(self, secret: str) -> None:
        if not secret:
            raise RuntimeError("Identity webhook signing secret is not configured")
        self._webhook = Webhook(secret)

    def verify_webhook_signature(self, payload: bytes, headers: Mapping[str, str]) -> bool:
        try:
            self._webhook.verify(payload, dict(headers))
        except WebhookVerificationError as exc:
            logger.warning("Webhook rejected", reason=str(exc), svix_id=headers.get("svix-id"))
            return False
        except ValueError:
            # Undecodable body or a signature entry that is not "<version>,<base64>"
            logger.warning("Webhook rejected: malformed delivery", svix_id=headers.get("svix-id"))
            return False
        return True
