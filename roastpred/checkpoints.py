"""
Checkpoint Sampler

Projects the dense curve onto a 30 s or 60 s grid for the target table.
"""

import pandas as pd


INTERVALS = (30, 60)

# Divisors converting °C/min into the display unit
ROR_UNITS = {
    "min": 1.0,   # °C/min
    "30s": 2.0,   # °C/30s
}


def format_mmss(seconds: float) -> str:
    """Format seconds as m:ss."""
    seconds = int(seconds)
    return f"{seconds // 60}:{seconds % 60:02d}"


def sample_checkpoints(curve: pd.DataFrame, interval: int = 30, ror_unit: str = "min") -> pd.DataFrame:
    """
    Keep the curve points that fall on a multiple of the interval.

    Pure filter on the roast clock ('time' column); nothing is interpolated,
    so when the drop time is off the grid the last row is simply absent.

    Args:
        curve: Curve from synthesize()
        interval: Grid spacing in seconds
        ror_unit: 'min' for °C/min or '30s' for °C/30s

    Returns:
        DataFrame with time, label (m:ss), bt and ror in the requested unit

    Raises:
        ValueError: If interval is not positive or ror_unit is unknown
    """
    if interval <= 0:
        raise ValueError(f"interval must be positive, got {interval}")
    if ror_unit not in ROR_UNITS:
        raise ValueError(f"ror_unit must be one of {tuple(ROR_UNITS)}, got {ror_unit!r}")

    rows = curve[curve["time"] % interval == 0]
    table = pd.DataFrame({
        "time": rows["time"].to_numpy(),
        "label": [format_mmss(t) for t in rows["time"]],
        "bt": rows["bt"].to_numpy(),
        "ror": (rows["ror"] / ROR_UNITS[ror_unit]).round(1).to_numpy(),
    })
    table.attrs["ror_unit"] = ror_unit
    table.attrs["interval"] = interval
    return table
