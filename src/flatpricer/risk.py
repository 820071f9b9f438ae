"""Bump-and-reprice Greeks.

Pricing methods without closed-form sensitivities (the American
approximation, the tree and the grid) get their Greeks here by central
finite differences on the scalar ``OptionSpec``.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable

from .core import OptionSpec

__all__ = ["numerical_greeks"]

Pricer = Callable[[OptionSpec, str], float]

_ONE_DAY = 1.0 / 365.0


def numerical_greeks(
    pricer_func: Pricer,
    opt: OptionSpec,
    kind: str,
    *,
    spot_bump: float = 0.01,
    vol_bump: float = 1e-3,
    rate_bump: float = 1e-4,
) -> dict[str, float]:
    """Compute Greeks via central finite differences on an arbitrary pricer.

    Parameters
    ----------
    pricer_func : callable
        ``pricer_func(opt, kind) -> float``.
    opt : OptionSpec
    kind : str
        ``"call"`` or ``"put"``.
    spot_bump : float
        Relative bump of the spot.
    vol_bump, rate_bump : float
        Absolute bumps of volatility and rate.

    Returns
    -------
    dict[str, float]
        Keys: ``delta``, ``gamma``, ``vega``, ``theta``, ``rho``.  Theta is
        the value change per year of calendar time, estimated over one day.
    """
    P0 = pricer_func(opt, kind)

    # --- Delta & Gamma (spot bump) ---
    eps_S = spot_bump * opt.S0
    P_up = pricer_func(replace(opt, S0=opt.S0 + eps_S), kind)
    P_dn = pricer_func(replace(opt, S0=opt.S0 - eps_S), kind)
    delta = (P_up - P_dn) / (2.0 * eps_S)
    gamma = (P_up - 2.0 * P0 + P_dn) / (eps_S ** 2)

    # --- Vega (vol bump, one-sided at the zero-vol boundary) ---
    P_vup = pricer_func(replace(opt, sigma=opt.sigma + vol_bump), kind)
    if opt.sigma > vol_bump:
        P_vdn = pricer_func(replace(opt, sigma=opt.sigma - vol_bump), kind)
        vega = (P_vup - P_vdn) / (2.0 * vol_bump)
    else:
        vega = (P_vup - P0) / vol_bump

    # --- Theta (time decay, 1-day bump) ---
    if opt.T > 0.0:
        dt = min(_ONE_DAY, opt.T)
        P_t = pricer_func(replace(opt, T=opt.T - dt), kind)
        theta = (P_t - P0) / dt
    else:
        theta = 0.0

    # --- Rho (rate bump) ---
    P_rup = pricer_func(replace(opt, r=opt.r + rate_bump), kind)
    P_rdn = pricer_func(replace(opt, r=opt.r - rate_bump), kind)
    rho = (P_rup - P_rdn) / (2.0 * rate_bump)

    return {
        "delta": float(delta),
        "gamma": float(gamma),
        "vega": float(vega),
        "theta": float(theta),
        "rho": float(rho),
    }
