import math
from math import log, sqrt, exp
from typing import Literal, Dict, Tuple
from statistics import NormalDist
from .core import OptionSpec, CALL, PUT
from .errors import InvalidParameter, NumericalInstability

_nd = NormalDist()


def _probabilities(opt: OptionSpec) -> Tuple[float, float, float, float, float, float]:
    """Return ``(N(d1), N(d2), N(-d1), N(-d2), n(d1), sigma*sqrt(T))``.

    The put-side probabilities are evaluated directly rather than as
    ``1 - N(d)`` so deep out-of-the-money puts keep their relative precision.
    With no diffusion left (T == 0 or sigma == 0) the terminal price is the
    forward, so the probabilities collapse to the in-the-money indicator
    (one half exactly at the money) and the density term vanishes.
    """
    srt = opt.sigma * sqrt(opt.T)
    if srt == 0.0:
        fwd = opt.S0 * exp((opt.r - opt.q) * opt.T)
        ind = 1.0 if fwd > opt.K else 0.0 if fwd < opt.K else 0.5
        return ind, ind, 1.0 - ind, 1.0 - ind, 0.0, 0.0
    d1 = (log(opt.S0 / opt.K) + (opt.r - opt.q + 0.5 * opt.sigma * opt.sigma) * opt.T) / srt
    d2 = d1 - srt
    n_d1 = math.exp(-0.5 * d1 * d1) / math.sqrt(2 * math.pi)  # pdf
    return _nd.cdf(d1), _nd.cdf(d2), _nd.cdf(-d1), _nd.cdf(-d2), n_d1, srt


def _check_kind(kind: str) -> None:
    if kind not in (CALL, PUT):
        raise InvalidParameter("kind must be 'call' or 'put'", "kind")


def _finite(value: float, what: str) -> float:
    if not math.isfinite(value):
        raise NumericalInstability(f"{what} evaluated to {value}", what)
    return value


def price(opt: OptionSpec, kind: Literal["call", "put"] = CALL) -> float:
    _check_kind(kind)
    N_d1, N_d2, N_md1, N_md2, _, _ = _probabilities(opt)
    disc_r = exp(-opt.r * opt.T)
    disc_q = exp(-opt.q * opt.T)
    if kind == CALL:
        px = disc_q * opt.S0 * N_d1 - disc_r * opt.K * N_d2
    else:
        px = disc_r * opt.K * N_md2 - disc_q * opt.S0 * N_md1
    # rounding can leave a deep out-of-the-money price a hair below zero
    return _finite(max(px, 0.0), "price")


def greeks(opt: OptionSpec, kind: Literal["call", "put"] = CALL) -> Dict[str, float]:
    """Analytic Greeks.

    Vega is dPrice/dSigma (not per 1%), rho is dPrice/dr, theta is the value
    change per year as calendar time passes (i.e. -dPrice/dT).
    """
    _check_kind(kind)
    N_d1, N_d2, N_md1, N_md2, n_d1, srt = _probabilities(opt)
    disc_r = math.exp(-opt.r * opt.T)
    disc_q = math.exp(-opt.q * opt.T)

    # Common
    if srt > 0.0:
        gamma = disc_q * n_d1 / (opt.S0 * srt)
        vega  = opt.S0 * disc_q * n_d1 * math.sqrt(opt.T)
        decay = -opt.S0 * disc_q * n_d1 * opt.sigma / (2 * math.sqrt(opt.T))
    else:
        gamma = vega = decay = 0.0

    if kind == CALL:
        delta = disc_q * N_d1
        theta = (decay
                 - opt.r * opt.K * disc_r * N_d2
                 + opt.q * opt.S0 * disc_q * N_d1)
        rho   = opt.K * opt.T * disc_r * N_d2
    else:
        delta = -disc_q * N_md1
        theta = (decay
                 + opt.r * opt.K * disc_r * N_md2
                 - opt.q * opt.S0 * disc_q * N_md1)
        rho   = -opt.K * opt.T * disc_r * N_md2

    out = {"delta": delta, "gamma": gamma, "vega": vega, "theta": theta, "rho": rho}
    for key, value in out.items():
        _finite(value, key)
    return out
