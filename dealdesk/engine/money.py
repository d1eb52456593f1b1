"""Fixed-precision money helpers.

Everything upstream accumulates in full Decimal precision; round2 is applied
only where a value is stored on a result.
"""

import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from dealdesk.engine.errors import MalformedDealInputsError

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")


def _coerce(x) -> Decimal | None:
    """Decimal for x, or None when x is not a finite number."""
    if isinstance(x, bool):
        return None
    if isinstance(x, Decimal):
        value = x
    elif isinstance(x, (int, float, str)):
        try:
            value = Decimal(str(x))  # str() keeps float repr, not its binary expansion
        except InvalidOperation:
            return None
    else:
        return None
    return value if value.is_finite() else None


def to_decimal(x, name: str = "value") -> Decimal:
    """Strict coercion for engine inputs."""
    value = _coerce(x)
    if value is None:
        raise MalformedDealInputsError(f"{name} must be a finite number, got {x!r}")
    return value


def round2(x) -> Decimal:
    """Round half-up to cents. Non-finite input yields 0."""
    value = _coerce(x)
    if value is None:
        logger.warning("round2 received non-finite value %r, using 0", x)
        return ZERO.quantize(TWO_PLACES)
    return value.quantize(TWO_PLACES, ROUND_HALF_UP)


def clamp_non_negative(x) -> Decimal:
    value = _coerce(x)
    if value is None:
        logger.warning("clamp_non_negative received non-finite value %r, using 0", x)
        return ZERO
    return value if value >= ZERO else ZERO
