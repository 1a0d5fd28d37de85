"""
Curve Synthesizer

Turns a RoastParameters snapshot into a 1-second resolution prediction of
bean temperature (BT) and rate of rise (RoR) from the turning point to drop.

The RoR follows a decaying shape from the start RoR to the end RoR. The one
free shape parameter is solved so the mean RoR delivers exactly the
temperature gain between turning point and drop; RoR is then integrated into
BT and the final approach is nudged onto the drop temperature.
"""

import warnings
from typing import Any, Dict, Tuple

import numpy as np
import pandas as pd
from scipy.interpolate import CubicHermiteSpline

from .params import RoastParameters
from .rootfind import bisect_root


SHAPES = ("exponential", "cubic")

# Bisection settings for the exponential decay rate
DECAY_BRACKET = (-10.0, 10.0)
DECAY_TOLERANCE = 1e-9
DECAY_MAX_ITER = 150
DECAY_MAX_EXPANSIONS = 6

# Cubic end-slope split; alpha in [0, 2] keeps the segment monotone
CUBIC_ALPHA_RANGE = (0.0, 2.0)

TAIL_WINDOW = 60          # seconds
TAIL_THRESHOLD = 0.0      # °C


# =============================================================================
# SHAPE FUNCTIONS
# =============================================================================

def exponential_shape(u: np.ndarray, k: float) -> np.ndarray:
    """
    Normalized exponential decay E(u) with E(0) = 1 and E(1) = 0.

    k > 0 falls fast early, k < 0 holds high and falls late, k = 0 is linear.
    Written with expm1 so that large |k| neither overflows nor loses the
    endpoint values.
    """
    u = np.asarray(u, dtype=float)
    if abs(k) < 1e-12:
        return 1.0 - u
    if k > 0:
        return (np.expm1(-k * u) - np.expm1(-k)) / -np.expm1(-k)
    j = -k
    return np.expm1(-j * (1.0 - u)) / np.expm1(-j)


def cubic_shape(u: np.ndarray, alpha: float) -> np.ndarray:
    """
    Monotone cubic Hermite segment from (0, 1) to (1, 0).

    End slopes are -alpha and -(2 - alpha); for alpha in [0, 2] both lie in
    the Fritsch-Carlson monotone region, so E never increases.
    """
    spline = CubicHermiteSpline([0.0, 1.0], [1.0, 0.0], [-alpha, -(2.0 - alpha)])
    return np.clip(spline(np.asarray(u, dtype=float)), 0.0, 1.0)


# =============================================================================
# RATE OF RISE
# =============================================================================

def _solve_exponential(u: np.ndarray, start_ror: float, end_ror: float,
                       target_ror: float) -> Dict[str, Any]:
    span = start_ror - end_ror

    def mean_error(k: float) -> float:
        return float(np.mean(end_ror + span * exponential_shape(u, k))) - target_ror

    result = bisect_root(
        mean_error,
        *DECAY_BRACKET,
        tol=DECAY_TOLERANCE,
        max_iter=DECAY_MAX_ITER,
        max_expansions=DECAY_MAX_EXPANSIONS,
    )
    return {
        "shape_param": float(result["root"]),
        "converged": bool(result["converged"]),
        "iterations": result["iterations"],
    }


def _solve_cubic(u: np.ndarray, start_ror: float, end_ror: float,
                 target_ror: float) -> Dict[str, Any]:
    # The mean is linear in alpha: solve from two evaluations
    span = start_ror - end_ror
    mean0 = end_ror + span * float(np.mean(cubic_shape(u, 0.0)))
    mean1 = end_ror + span * float(np.mean(cubic_shape(u, 1.0)))
    lo, hi = CUBIC_ALPHA_RANGE
    alpha = (target_ror - mean0) / (mean1 - mean0)
    clamped = min(hi, max(lo, alpha))
    achieved = mean0 + clamped * (mean1 - mean0)
    return {
        "shape_param": float(clamped),
        "converged": abs(achieved - target_ror) <= DECAY_TOLERANCE,
        "iterations": 0,
    }


def build_ror_profile(
    horizon: int,
    start_ror: float,
    end_ror: float,
    target_ror: float,
    shape: str = "exponential",
) -> Tuple[np.ndarray, Dict[str, Any]]:
    """
    Build the full-precision RoR series for seconds 0..horizon.

    Args:
        horizon: Number of one-second steps (values below 1 are treated as 1)
        start_ror: RoR at the turning point (°C/min)
        end_ror: RoR at drop (°C/min)
        target_ror: Required mean RoR over the series (°C/min)
        shape: 'exponential' or 'cubic'

    Returns:
        Tuple of (RoR array of length horizon + 1, solve info dict)

    Raises:
        ValueError: If shape is not a known family
    """
    if shape not in SHAPES:
        raise ValueError(f"shape must be one of {SHAPES}, got {shape!r}")

    horizon = max(1, int(horizon))
    u = np.arange(horizon + 1) / horizon
    info: Dict[str, Any] = {"shape": shape, "shape_param": 0.0,
                            "converged": True, "iterations": 0}

    if start_ror == end_ror:
        ror = np.full(horizon + 1, float(start_ror))
        info["converged"] = abs(float(start_ror) - target_ror) <= DECAY_TOLERANCE
    elif horizon < 2:
        # Only the two endpoints exist; there is nothing to shape
        ror = np.array([start_ror, end_ror], dtype=float)
        info["converged"] = abs(float(np.mean(ror)) - target_ror) <= DECAY_TOLERANCE
        if not info["converged"]:
            warnings.warn(
                f"Mean RoR {target_ror:.2f}°C/min is not reachable in a single step; "
                f"tail correction will absorb the gap",
                RuntimeWarning,
            )
    else:
        if shape == "exponential":
            info.update(_solve_exponential(u, start_ror, end_ror, target_ror))
            curve = exponential_shape(u, info["shape_param"])
        else:
            info.update(_solve_cubic(u, start_ror, end_ror, target_ror))
            curve = cubic_shape(u, info["shape_param"])
        ror = end_ror + (start_ror - end_ror) * curve
        if not info["converged"]:
            warnings.warn(
                f"Mean RoR {target_ror:.2f}°C/min is not reachable between "
                f"{start_ror:g} and {end_ror:g}°C/min; tail correction will absorb the gap",
                RuntimeWarning,
            )

    ror = np.clip(ror, 0.0, None)
    # RoR must never increase
    ror = np.minimum.accumulate(ror)
    return ror, info


# =============================================================================
# TEMPERATURE
# =============================================================================

def integrate_ror(ror: np.ndarray, start_temp: float) -> np.ndarray:
    """Forward-accumulate a per-second RoR (°C/min) into temperature."""
    ror = np.asarray(ror, dtype=float)
    bt = np.empty_like(ror)
    bt[0] = start_temp
    bt[1:] = start_temp + np.cumsum(ror[:-1]) / 60.0
    return bt


def apply_tail_correction(
    bt: np.ndarray,
    target_temp: float,
    window: int = TAIL_WINDOW,
    threshold: float = TAIL_THRESHOLD,
) -> Tuple[np.ndarray, float]:
    """
    Pull the end of a temperature series onto target_temp.

    The residual is spread over the last min(window, len - 1) seconds with a
    weight rising linearly from 0 to 1, so the body of the curve is left alone.

    Args:
        bt: Temperature series
        target_temp: Required final temperature
        window: Correction window in seconds
        threshold: Residuals at or below this are left uncorrected; the
            default corrects any non-zero residual so the end lands on target

    Returns:
        Tuple of (corrected copy of bt, residual that was applied)
    """
    bt = np.array(bt, dtype=float)
    residual = float(target_temp - bt[-1])
    if abs(residual) <= threshold:
        return bt, 0.0

    steps = len(bt) - 1
    width = max(1, min(int(window), steps))
    weights = np.zeros(len(bt))
    weights[steps - width:] = np.arange(width + 1) / width
    bt += residual * weights

    # A downward nudge may not make the curve fall
    bt = np.minimum(np.maximum.accumulate(bt), max(target_temp, bt[0]))
    return bt, residual


# =============================================================================
# SYNTHESIS
# =============================================================================

def synthesize(
    params: RoastParameters,
    shape: str = "exponential",
    decimals: int = 1,
    tail_window: int = TAIL_WINDOW,
    tail_threshold: float = TAIL_THRESHOLD,
) -> pd.DataFrame:
    """
    Synthesize the predicted roast curve from turning point to drop.

    Args:
        params: Roast parameter snapshot (see normalize_parameters)
        shape: RoR shape family, 'exponential' or 'cubic'
        decimals: Rounding applied to the bt and ror columns
        tail_window: Seconds over which the final temperature is corrected
        tail_threshold: Final temperature error tolerated without correction

    Returns:
        DataFrame with one row per second: time (s since charge), offset
        (s since TP), bt (°C) and ror (°C/min). Full-precision solve
        diagnostics are stored in DataFrame.attrs.
    """
    horizon = params.horizon
    target_ror = 60.0 * (params.drop_temp - params.turning_point_temp) / horizon

    ror, info = build_ror_profile(
        horizon, params.start_ror, params.end_ror, target_ror, shape=shape
    )
    bt = integrate_ror(ror, params.turning_point_temp)
    bt, residual = apply_tail_correction(
        bt, params.drop_temp, window=tail_window, threshold=tail_threshold
    )

    offsets = np.arange(horizon + 1)
    curve = pd.DataFrame({
        "time": int(round(params.turning_point_time)) + offsets,
        "offset": offsets,
        "bt": np.round(bt, decimals),
        "ror": np.round(ror, decimals),
    })
    curve.attrs.update({
        "shape": info["shape"],
        "shape_param": info["shape_param"],
        "converged": info["converged"],
        "iterations": info["iterations"],
        "target_ror": target_ror,
        "mean_ror": float(np.mean(ror)),
        "tail_residual": residual,
        "params": params.to_dict(),
    })
    return curve
