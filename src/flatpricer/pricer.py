"""Single pricing entry point for vanilla options.

The numerical method is a plain value object; ``price`` dispatches on its
type together with the contract's exercise style.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from . import barone_adesi_whaley, black_scholes
from .binomial import crr, crr_converged
from .core import OptionContract, OptionSpec, PricingResult
from .errors import InvalidParameter
from .pde import fd_price
from .risk import numerical_greeks

__all__ = [
    "Analytic",
    "Approximation",
    "Lattice",
    "FiniteDifference",
    "PricingMethod",
    "price",
    "price_european",
    "price_american",
    "price_spec",
    "method_from_name",
]


@dataclass(frozen=True)
class Analytic:
    """Closed-form Black-Scholes-Merton (European exercise only)."""


@dataclass(frozen=True)
class Approximation:
    """Barone-Adesi-Whaley quadratic approximation (American exercise only)."""


@dataclass(frozen=True)
class Lattice:
    """Cox-Ross-Rubinstein tree.

    With ``tolerance`` set, the step count doubles from ``steps`` until two
    successive prices agree within it.
    """
    steps: int = 801
    tolerance: Optional[float] = None
    max_steps: int = 12_800

    def __post_init__(self):
        if self.steps <= 0:
            raise InvalidParameter(f"steps must be positive, got {self.steps}", "steps")


@dataclass(frozen=True)
class FiniteDifference:
    """θ-scheme on a log-spot grid (Crank-Nicolson by default)."""
    grid_points: int = 400
    time_steps: int = 400
    theta: float = 0.5


PricingMethod = Union[Analytic, Approximation, Lattice, FiniteDifference]

_BY_NAME = {
    "analytic": Analytic,
    "approximation": Approximation,
    "baw": Approximation,
    "lattice": Lattice,
    "crr": Lattice,
    "fd": FiniteDifference,
    "finite-difference": FiniteDifference,
}


def method_from_name(name: str, **params) -> PricingMethod:
    """Build a method from a short name such as ``"baw"`` or ``"crr"``."""
    try:
        cls = _BY_NAME[name.strip().lower()]
    except KeyError as exc:
        raise InvalidParameter(f"unknown pricing method {name!r}", "method") from exc
    return cls(**params)


def price_spec(
    opt: OptionSpec,
    kind: str,
    method: PricingMethod,
    *,
    american: bool,
) -> PricingResult:
    """Price resolved scalar inputs with *method*."""
    if isinstance(method, Analytic):
        if american:
            raise InvalidParameter(
                "the analytic formula only covers European exercise", "method"
            )
        g = black_scholes.greeks(opt, kind)
        return PricingResult(value=black_scholes.price(opt, kind), method="analytic", **g)

    if isinstance(method, Approximation):
        if not american:
            raise InvalidParameter(
                "the quadratic approximation only covers American exercise", "method"
            )
        value = barone_adesi_whaley.price(opt, kind)
        g = numerical_greeks(barone_adesi_whaley.price, opt, kind)
        return PricingResult(value=value, method="baw", **g)

    if isinstance(method, Lattice):
        steps = method.steps
        if method.tolerance is not None:
            value, steps = crr_converged(
                opt, kind, steps, american=american,
                tolerance=method.tolerance, max_steps=method.max_steps,
            )
        else:
            value = crr(opt, kind, steps, american=american)

        def tree(o, k):
            return crr(o, k, steps, american=american)

        return PricingResult(value=value, method="crr", **numerical_greeks(tree, opt, kind))

    if isinstance(method, FiniteDifference):
        def grid(o, k):
            return fd_price(
                o, k, N_S=method.grid_points, N_t=method.time_steps,
                theta=method.theta, american=american,
            )

        return PricingResult(
            value=grid(opt, kind), method="fd", **numerical_greeks(grid, opt, kind)
        )

    raise InvalidParameter(f"unsupported pricing method {method!r}", "method")


def price_european(
    contract: OptionContract, method: Optional[PricingMethod] = None
) -> PricingResult:
    """Value *contract* as if exercisable only at maturity."""
    return price_spec(
        contract.to_spec(), contract.kind, method or Analytic(), american=False
    )


def price_american(
    contract: OptionContract, method: Optional[PricingMethod] = None
) -> PricingResult:
    """Value *contract* as exercisable at any time up to maturity.

    The earliest exercise date of an ``AmericanExercise`` is not modelled;
    exercise is allowed from the valuation date on.
    """
    return price_spec(
        contract.to_spec(), contract.kind, method or Approximation(), american=True
    )


def price(
    contract: OptionContract, method: Optional[PricingMethod] = None
) -> PricingResult:
    """Price according to the contract's own exercise style."""
    if contract.is_american:
        return price_american(contract, method)
    return price_european(contract, method)
