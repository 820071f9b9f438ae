import numpy as np
from math import exp, sqrt
from typing import Literal
from .core import OptionSpec, CALL, PUT
from .errors import InvalidParameter, NumericalInstability


def _exercise_value(S: np.ndarray, K: float, kind: str) -> np.ndarray:
    if kind == CALL:
        return np.maximum(S - K, 0.0)
    return np.maximum(K - S, 0.0)


def crr(opt: OptionSpec, kind: Literal["call","put"]=CALL, N: int = 500, *, american: bool=False) -> float:
    """Cox-Ross-Rubinstein tree. Supports Euro and American (q handled in p)."""
    if N <= 0:
        raise InvalidParameter("N must be positive.", "steps")
    if kind not in (CALL, PUT):
        raise InvalidParameter("kind must be 'call' or 'put'", "kind")
    if opt.T == 0.0:
        return float(_exercise_value(np.array([opt.S0]), opt.K, kind)[0])
    dt = opt.T / N
    u  = exp(opt.sigma * sqrt(dt))
    d  = 1.0 / u
    if u == d:
        raise NumericalInstability("Degenerate tree: sigma * sqrt(dt) is zero.", "sigma")
    disc = exp(-opt.r * dt)
    p = (exp((opt.r - opt.q) * dt) - d) / (u - d)
    if not (0.0 < p < 1.0):
        raise NumericalInstability(
            "Risk-neutral prob p out of (0,1); try larger N or different params.", "steps"
        )

    # Payoff at maturity
    j = np.arange(N + 1)
    ST = opt.S0 * (u ** j) * (d ** (N - j))
    V = _exercise_value(ST, opt.K, kind)

    # Backward induction
    for k in range(N - 1, -1, -1):
        V = disc * (p * V[1:] + (1.0 - p) * V[:-1])
        if american:
            j = np.arange(k + 1)
            S_k = opt.S0 * (u ** j) * (d ** (k - j))
            V = np.maximum(V, _exercise_value(S_k, opt.K, kind))

    px = float(V[0])
    if not np.isfinite(px):
        raise NumericalInstability(f"tree price evaluated to {px}", "price")
    return px


def crr_converged(
    opt: OptionSpec,
    kind: Literal["call", "put"] = CALL,
    N: int = 500,
    *,
    american: bool = False,
    tolerance: float = 1e-4,
    max_steps: int = 12_800,
) -> tuple[float, int]:
    """Double the step count until two successive prices agree within *tolerance*.

    Returns ``(price, steps)`` for the finer of the two agreeing trees.
    Each price is the average of the ``N`` and ``N + 1`` step trees, which
    removes most of the odd/even oscillation of CRR.
    """
    if not tolerance > 0:
        raise InvalidParameter(f"tolerance must be positive, got {tolerance}", "tolerance")

    def smoothed(n):
        return 0.5 * (crr(opt, kind, n, american=american)
                      + crr(opt, kind, n + 1, american=american))

    prev = smoothed(N)
    n = N
    while 2 * n <= max_steps:
        n *= 2
        cur = smoothed(n)
        if abs(cur - prev) < tolerance:
            return cur, n
        prev = cur
    raise NumericalInstability(
        f"tree did not converge to {tolerance} within {max_steps} steps", "steps"
    )
