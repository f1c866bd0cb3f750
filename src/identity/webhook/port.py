"""Webhook verifier port (abstract interface).

The identity provider signs every webhook delivery. Adapters decide whether a
delivery is authentic; the route only ever sees accept or reject.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping


class WebhookVerifier(ABC):
    """Abstract webhook signature verifier."""

    @abstractmethod
    def verify_webhook_signature(self, payload: bytes, headers: Mapping[str, str]) -> bool:
        """Return True only if ``payload`` was signed by the provider and is fresh."""
        ...
