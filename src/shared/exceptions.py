"""Storefront-specific exceptions.

Domain code raises ``protean.exceptions`` types directly (``ValidationError``,
``ObjectNotFoundError``, ``InvalidOperationError``). The classes here cover the
cases Protean has no name for. Like every Protean exception they carry a
``messages`` dict of ``{field: [message, ...]}``.
"""

from protean.exceptions import InvalidOperationError, ProteanException, ValidationError


class ConflictError(InvalidOperationError):
    """The request collides with existing state, e.g. a duplicate unique key."""


class PriceMismatchError(ValidationError):
    """A requested line price differs from the current catalog price."""


class AuthenticationError(ProteanException):
    """No valid caller identity could be established."""


class AuthorizationError(ProteanException):
    """The caller is known but lacks the required role."""


class WebhookVerificationError(ValidationError):
    """An inbound webhook failed signature or timestamp verification."""
