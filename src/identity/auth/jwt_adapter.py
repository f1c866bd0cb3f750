"""Session verification for provider-issued JWTs."""

import jwt
import structlog

from identity.auth.port import SessionVerifier
from shared.exceptions import AuthenticationError

logger = structlog.get_logger(__name__)


class JWTSessionVerifier(SessionVerifier):
    """Validates signature, expiry and (optionally) issuer; the ``sub`` claim is the user id."""

    def __init__(self, key: str, algorithms: list[str], issuer: str | None = None) -> None:
        if not key:
            raise RuntimeError("Session token verification key is not configured")
        self.key = key
        self.algorithms = algorithms
        self.issuer = issuer

    def verify_session_token(self, token: str) -> str:
        options = {"require": ["exp", "sub"]}
        try:
            if self.issuer:
                claims = jwt.decode(token, self.key, algorithms=self.algorithms, issuer=self.issuer, options=options)
            else:
                claims = jwt.decode(token, self.key, algorithms=self.algorithms, options=options)
        except jwt.PyJWTError as exc:
            logger.info("Session token rejected", reason=str(exc))
            raise AuthenticationError({"authorization": ["Invalid or expired session token"]}) from exc

        return str(claims["sub"])
