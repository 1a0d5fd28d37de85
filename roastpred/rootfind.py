"""
Bracketed bisection for monotone scalar functions.
"""

import math
from typing import Any, Callable, Dict


def bisect_root(
    func: Callable[[float], float],
    lo: float,
    hi: float,
    tol: float = 1e-9,
    max_iter: int = 150,
    max_expansions: int = 6,
    growth: float = 2.0,
) -> Dict[str, Any]:
    """
    Find x in [lo, hi] with |func(x)| <= tol by bisection.

    If func(lo) and func(hi) share a sign the bracket is widened
    geometrically about its midpoint, at most max_expansions times. When no
    sign change is ever found the endpoint with the smaller residual is
    returned with converged=False, so the caller always gets a usable value.

    Args:
        func: Continuous function of one variable
        lo: Lower bracket bound
        hi: Upper bracket bound
        tol: Absolute tolerance on the function value
        max_iter: Maximum number of bisection steps
        max_expansions: Maximum number of bracket expansions
        growth: Factor applied to the bracket half-width per expansion

    Returns:
        Dictionary with root, residual, converged, iterations and expansions

    Raises:
        ValueError: If the bracket or the tolerances are invalid
    """
    if not lo < hi:
        raise ValueError(f"Invalid bracket: lo={lo} must be less than hi={hi}")
    if tol <= 0 or max_iter < 1 or max_expansions < 0 or growth <= 1:
        raise ValueError("tol must be > 0, max_iter >= 1, max_expansions >= 0, growth > 1")

    f_lo, f_hi = func(lo), func(hi)
    expansions = 0

    while f_lo * f_hi > 0 and expansions < max_expansions:
        mid = 0.5 * (lo + hi)
        half = 0.5 * (hi - lo) * growth
        lo, hi = mid - half, mid + half
        f_lo, f_hi = func(lo), func(hi)
        expansions += 1

    result: Dict[str, Any] = {
        "root": lo,
        "residual": f_lo,
        "converged": False,
        "iterations": 0,
        "expansions": expansions,
    }

    if abs(f_lo) <= tol:
        result.update(root=lo, residual=f_lo, converged=True)
        return result
    if abs(f_hi) <= tol:
        result.update(root=hi, residual=f_hi, converged=True)
        return result

    if f_lo * f_hi > 0 or math.isnan(f_lo) or math.isnan(f_hi):
        # No sign change: hand back the closer endpoint
        if abs(f_hi) < abs(f_lo):
            result.update(root=hi, residual=f_hi)
        return result

    mid, f_mid = lo, f_lo
    for i in range(1, max_iter + 1):
        mid = 0.5 * (lo + hi)
        f_mid = func(mid)
        result["iterations"] = i
        if abs(f_mid) <= tol:
            result.update(root=mid, residual=f_mid, converged=True)
            return result
        if (f_mid < 0) == (f_lo < 0):
            lo, f_lo = mid, f_mid
        else:
            hi = mid

    result.update(root=mid, residual=f_mid)
    return result
