"""Session verifier factory.

Provides get_session_verifier() / set_session_verifier() /
reset_session_verifier() in the same way as the webhook verifier.
"""

from identity.auth.jwt_adapter import JWTSessionVerifier
from identity.auth.port import SessionVerifier
from shared.config import get_settings

_current_verifier: SessionVerifier | None = None


def get_session_verifier() -> SessionVerifier:
    """Return the active session verifier, built from settings on first use."""
    global _current_verifier
    if _current_verifier is None:
        settings = get_settings()
        _current_verifier = JWTSessionVerifier(
            settings.auth_jwt_key,
            algorithms=settings.auth_jwt_algorithms,
            issuer=settings.auth_jwt_issuer,
        )
    return _current_verifier


def set_session_verifier(verifier: SessionVerifier) -> None:
    """Override the active session verifier."""
    global _current_verifier
    _current_verifier = verifier


def reset_session_verifier() -> None:
    """Reset to the default session verifier."""
    global _current_verifier
    _current_verifier = None
