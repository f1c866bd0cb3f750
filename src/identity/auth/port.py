"""Session verifier port (abstract interface)."""

from abc import ABC, abstractmethod


class SessionVerifier(ABC):
    """Turns a provider-issued session token into a user id."""

    @abstractmethod
    def verify_session_token(self, token: str) -> str:
        """Return the authenticated user id, or raise AuthenticationError."""
        ...
