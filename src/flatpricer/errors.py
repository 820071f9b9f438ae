"""Error kinds raised by the pricing and discounting kernels.

Both derive from ``ValueError`` so that callers written against plain
``ValueError`` keep working; the ``field`` attribute names the offending
input.
"""

from __future__ import annotations

__all__ = ["PricingError", "InvalidParameter", "NumericalInstability"]


class PricingError(ValueError):
    """Base class for all valuation failures."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class InvalidParameter(PricingError):
    """An input is outside the domain of the operation."""


class NumericalInstability(PricingError):
    """An intermediate quantity overflowed, became NaN, or failed to converge."""


def require_positive(value: float, field: str) -> None:
    if not value > 0:
        raise InvalidParameter(f"{field} must be positive, got {value}", field)


def require_non_negative(value: float, field: str) -> None:
    if not value >= 0:
        raise InvalidParameter(f"{field} must be non-negative, got {value}", field)


def coerce_enum(enum_cls, value, field: str):
    """Return ``enum_cls(value)``, raising ``InvalidParameter`` for unknown values."""
    try:
        return enum_cls(value)
    except ValueError as exc:
        choices = ", ".join(repr(m.value) for m in enum_cls)
        raise InvalidParameter(
            f"{field} must be one of {choices}, got {value!r}", field
        ) from exc
