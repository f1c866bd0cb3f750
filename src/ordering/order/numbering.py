"""Human-readable order numbers.

Format: ``ORD-<UTC yyyymmddHHMMSS>-<8 hex chars>``. The timestamp keeps
numbers roughly sortable; the random suffix keeps two orders placed in the
same second apart. The ``orders.order_number`` unique constraint is the final
guard.
"""

import secrets
from collections.abc import Callable
from datetime import UTC, datetime

ORDER_NUMBER_PREFIX = "ORD"


def generate_order_number(now: Callable[[], datetime] | None = None) -> str:
    moment = now() if now is not None else datetime.now(UTC)
    return f"{ORDER_NUMBER_PREFIX}-{moment:%Y%m%d%H%M%S}-{secrets.token_hex(4).upper()}"
