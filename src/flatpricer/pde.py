"""Finite-difference PDE solver for the Black-Scholes equation.

Implements the θ-scheme (explicit / Crank-Nicolson / fully-implicit) on a
uniform log-spot grid ``x = ln(S)``.  Under this change of variable the
constant-volatility BS PDE becomes

.. math::

    \\frac{\\partial V}{\\partial t}
    + \\frac{\\sigma^2}{2}\\frac{\\partial^2 V}{\\partial x^2}
    + \\left(r - q - \\tfrac{\\sigma^2}{2}\\right)\\frac{\\partial V}{\\partial x}
    - r\\,V = 0

which has **constant coefficients**, yielding a tridiagonal system at each
time step that is solved in O(N) via the Thomas algorithm.  Early exercise
is handled by projecting each time layer onto the intrinsic value.

References
----------
- Duffy, D.J. *Finite Difference Methods in Financial Engineering* (Wiley,
  2006), chapters 7–10.
"""

from __future__ import annotations

import numpy as np
from typing import Literal

from .core import OptionSpec, CALL, PUT
from .errors import InvalidParameter, NumericalInstability

__all__ = ["fd_price"]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _build_grid(
    S0: float,
    T: float,
    sigma: float,
    N_S: int,
    N_t: int,
    S_max_mult: float,
) -> tuple[np.ndarray, float, float]:
    """Build a uniform log-spot grid and return ``(x_grid, dx, dt)``."""
    x_range = S_max_mult * sigma * np.sqrt(T)
    if not x_range > 0:
        raise NumericalInstability(
            "Degenerate grid: sigma * sqrt(T) is zero.", "sigma"
        )
    x_grid = np.linspace(np.log(S0) - x_range, np.log(S0) + x_range, N_S + 1)
    dx = x_grid[1] - x_grid[0]
    dt = T / N_t
    return x_grid, dx, dt


def _thomas_solve(
    a: np.ndarray,
    b: np.ndarray,
    c: np.ndarray,
    d: np.ndarray,
) -> np.ndarray:
    """Solve tridiagonal ``A x = d`` via the Thomas algorithm, O(N).

    ``a`` is the sub-diagonal (``a[0]`` unused), ``b`` the main diagonal,
    ``c`` the super-diagonal (``c[-1]`` unused).
    """
    N = len(b)
    b_ = b.copy()
    d_ = d.copy()
    for i in range(1, N):
        w = a[i] / b_[i - 1]
        b_[i] -= w * c[i - 1]
        d_[i] -= w * d_[i - 1]
    x = np.empty(N)
    x[-1] = d_[-1] / b_[-1]
    for i in range(N - 2, -1, -1):
        x[i] = (d_[i] - c[i] * x[i + 1]) / b_[i]
    return x


def _payoff(x_grid: np.ndarray, K: float, kind: str) -> np.ndarray:
    """Exercise value on the log-spot grid."""
    S = np.exp(x_grid)
    if kind == CALL:
        return np.maximum(S - K, 0.0)
    return np.maximum(K - S, 0.0)


def _fd_solve(
    x_grid: np.ndarray,
    dx: float,
    dt: float,
    N_t: int,
    opt: OptionSpec,
    kind: str,
    theta: float,
    american: bool,
) -> np.ndarray:
    """Backward θ-scheme on the interior of the log-spot grid."""
    N_S = len(x_grid) - 1
    K, r, q, sigma = opt.K, opt.r, opt.q, opt.sigma

    intrinsic = _payoff(x_grid, K, kind)
    V = intrinsic.copy()

    # Constant coefficients of L V_j = alpha (V_{j-1} - 2V_j + V_{j+1})
    #                                  + beta (V_{j+1} - V_{j-1}) - r V_j
    alpha = 0.5 * sigma ** 2 / dx ** 2
    beta = (r - q - 0.5 * sigma ** 2) / (2.0 * dx)
    M = N_S - 1
    a_L = np.full(M, alpha - beta)
    b_L = np.full(M, -2.0 * alpha - r)
    c_L = np.full(M, alpha + beta)

    # LHS matrix: I - theta * dt * L
    a_lhs = -theta * dt * a_L
    b_lhs = 1.0 - theta * dt * b_L
    c_lhs = -theta * dt * c_L
    e = (1.0 - theta) * dt

    S_min = np.exp(x_grid[0])
    S_max = np.exp(x_grid[-1])

    for n in range(N_t - 1, -1, -1):
        tau = (N_t - n) * dt  # time to expiry from current layer

        # --- Dirichlet boundaries ---
        if kind == CALL:
            bc_left = 0.0
            bc_right = max(S_max * np.exp(-q * tau) - K * np.exp(-r * tau), 0.0)
            if american:
                bc_right = max(bc_right, S_max - K)
        else:
            bc_left = max(K * np.exp(-r * tau) - S_min * np.exp(-q * tau), 0.0)
            if american:
                bc_left = max(bc_left, K - S_min)
            bc_right = 0.0

        # RHS: (I + (1-theta)*dt*L) V^{old} for interior points
        rhs = (1.0 + e * b_L) * V[1:N_S]
        rhs[1:] += e * a_L[1:] * V[1:N_S - 1]
        rhs[0] += e * a_L[0] * V[0]
        rhs[:-1] += e * c_L[:-1] * V[2:N_S]
        rhs[-1] += e * c_L[-1] * V[N_S]

        # Boundary terms of the implicit part
        rhs[0] += theta * dt * a_L[0] * bc_left
        rhs[-1] += theta * dt * c_L[-1] * bc_right

        V_new = np.empty(N_S + 1)
        V_new[0] = bc_left
        V_new[1:N_S] = _thomas_solve(a_lhs, b_lhs, c_lhs, rhs)
        V_new[N_S] = bc_right

        if american:
            V_new = np.maximum(V_new, intrinsic)

        V = V_new

    return V


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def fd_price(
    opt: OptionSpec,
    kind: Literal["call", "put"] = CALL,
    *,
    N_S: int = 400,
    N_t: int = 400,
    theta: float = 0.5,
    S_max_mult: float = 5.0,
    american: bool = False,
) -> float:
    """Price a European or American vanilla option via finite differences.

    Parameters
    ----------
    opt : OptionSpec
        Option specification.
    kind : ``"call"`` or ``"put"``
    N_S : int
        Number of spatial intervals.
    N_t : int
        Number of time steps.
    theta : float
        Scheme parameter: 0 = explicit, 0.5 = Crank-Nicolson, 1 = implicit.
    S_max_mult : float
        Grid half-width as a multiple of σ√T.
    american : bool
        Enable early-exercise (default False).

    Returns
    -------
    float
        Option price.
    """
    if kind not in (CALL, PUT):
        raise InvalidParameter("kind must be 'call' or 'put'", "kind")
    if N_S < 3 or N_t < 1:
        raise InvalidParameter(
            f"grid too small: N_S={N_S}, N_t={N_t}", "grid_points"
        )
    if not 0.0 <= theta <= 1.0:
        raise InvalidParameter(f"theta must be in [0, 1], got {theta}", "theta")
    if opt.T == 0.0:
        return float(max(opt.S0 - opt.K, 0.0) if kind == CALL else max(opt.K - opt.S0, 0.0))

    x_grid, dx, dt = _build_grid(opt.S0, opt.T, opt.sigma, N_S, N_t, S_max_mult)
    V = _fd_solve(x_grid, dx, dt, N_t, opt, kind, theta, american)
    px = float(np.interp(np.log(opt.S0), x_grid, V))
    if not np.isfinite(px):
        raise NumericalInstability(f"grid price evaluated to {px}", "price")
    return px
