"""
Phase Segmenter

Locates yellowing and first crack on a synthesized curve and splits the
turning-point-to-drop window into drying, Maillard and development phases.
"""

from typing import Any, Dict, Optional

import numpy as np
import pandas as pd


PHASES = ("drying", "maillard", "development")


def find_crossing_time(curve: pd.DataFrame, target_temp: float, cap_seconds: float) -> Optional[float]:
    """
    Find when the curve first reaches target_temp.

    Scans consecutive points for the first pair whose temperatures bracket the
    target (equality counts) and interpolates linearly between them.

    Args:
        curve: Curve from synthesize() (uses 'offset' and 'bt')
        target_temp: Temperature to locate (°C)
        cap_seconds: Upper clamp for the returned offset

    Returns:
        Seconds since the first curve point, clamped to [0, cap_seconds],
        or None if the curve never reaches the target
    """
    t = curve["offset"].to_numpy(dtype=float)
    bt = curve["bt"].to_numpy(dtype=float)
    if len(bt) < 2:
        return None

    b0, b1 = bt[:-1], bt[1:]
    lo = np.minimum(b0, b1)
    hi = np.maximum(b0, b1)
    hits = np.flatnonzero((lo <= target_temp) & (target_temp <= hi))
    if hits.size == 0:
        return None

    i = hits[0]
    if bt[i + 1] == bt[i]:
        crossing = t[i]
    else:
        frac = (target_temp - bt[i]) / (bt[i + 1] - bt[i])
        crossing = t[i] + frac * (t[i + 1] - t[i])
    return float(min(max(crossing, 0.0), cap_seconds))


def _boundary(curve: pd.DataFrame, target_temp: float, total: int) -> int:
    crossing = find_crossing_time(curve, target_temp, total)
    if crossing is None:
        # Never reached: the boundary sits at whichever end the target lies past
        return 0 if target_temp <= curve["bt"].iloc[0] else total
    return int(round(crossing))


def segment_phases(curve: pd.DataFrame, yellowing_temp: float, first_crack_temp: float) -> Dict[str, Any]:
    """
    Split the curve into drying, Maillard and development phases.

    Phase boundaries are rounded to whole seconds, so the three durations
    always add up to the curve's duration.

    Args:
        curve: Curve from synthesize()
        yellowing_temp: End of drying (°C)
        first_crack_temp: End of Maillard (°C)

    Returns:
        Dictionary with boundary offsets and clock times, per-phase durations
        (s), percentages, temperature rises (°C), rates (°C/min) and the
        development ratio
    """
    total = int(curve["offset"].iloc[-1])
    start_clock = int(curve["time"].iloc[0])
    bt = curve["bt"].to_numpy(dtype=float)

    yellowing = _boundary(curve, yellowing_temp, total)
    first_crack = max(_boundary(curve, first_crack_temp, total), yellowing)

    bounds = {
        "drying": (0, yellowing),
        "maillard": (yellowing, first_crack),
        "development": (first_crack, total),
    }

    result: Dict[str, Any] = {
        "total_time": total,
        "yellowing_offset": yellowing,
        "first_crack_offset": first_crack,
        "yellowing_time": start_clock + yellowing,
        "first_crack_time": start_clock + first_crack,
    }
    for phase in PHASES:
        start, end = bounds[phase]
        seconds = end - start
        rise = float(bt[end] - bt[start])
        result[f"{phase}_time"] = seconds
        result[f"{phase}_pct"] = seconds / total * 100 if total else 0.0
        result[f"{phase}_temp_rise"] = round(rise, 1)
        result[f"{phase}_rate"] = round(rise / seconds * 60, 1) if seconds else np.nan

    result["dev_ratio"] = result["development_pct"]
    return result


def summarize_curve(curve: pd.DataFrame) -> Dict[str, Any]:
    """Headline numbers for a synthesized curve."""
    if curve.empty:
        return {"duration": 0}

    return {
        "start_time": int(curve["time"].iloc[0]),
        "end_time": int(curve["time"].iloc[-1]),
        "duration": int(curve["offset"].iloc[-1]),
        "temp_gain": round(float(curve["bt"].iloc[-1] - curve["bt"].iloc[0]), 2),
        "ror_drift": round(float(curve["ror"].iloc[-1] - curve["ror"].iloc[0]), 2),
        "peak_ror": float(curve["ror"].max()),
        "final_bt": float(curve["bt"].iloc[-1]),
    }
