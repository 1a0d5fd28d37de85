"""
Actual-Reading Overlay

Keeps the temperatures a user logs by hand during a roast so they can be
laid over the prediction. Readings have no influence on synthesis.
"""

import math
from typing import Any, Iterable, List, Optional, Tuple

import numpy as np
import pandas as pd


def _as_float(value: Any) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


class ActualReadings:
    """
    Time-sorted (seconds since charge, °C) readings.

    With align_interval set, each new reading is clamped into the roast
    window and snapped down to the checkpoint grid, replacing any reading
    already logged at that grid time.
    """

    def __init__(
        self,
        readings: Iterable[Tuple[float, float]] = (),
        align_interval: Optional[int] = None,
        window: Optional[Tuple[float, float]] = None,
    ):
        self.align_interval = align_interval
        self.window = window
        self._readings: List[Tuple[float, float]] = []
        for time, temp in readings:
            self.add(time, temp)

    def __len__(self) -> int:
        return len(self._readings)

    def __iter__(self):
        return iter(self._readings)

    @property
    def readings(self) -> List[Tuple[float, float]]:
        return list(self._readings)

    def _align(self, time: float) -> float:
        if self.window is not None:
            lo, hi = self.window
            time = min(max(time, lo), hi)
        if self.align_interval:
            time = time - (time % self.align_interval)
        return time

    def add(self, time: Any, temp: Any) -> bool:
        """
        Record a reading.

        Returns:
            False if either value is missing or not finite (nothing is
            recorded), True otherwise
        """
        t = _as_float(time)
        value = _as_float(temp)
        if t is None or value is None:
            return False

        t = self._align(t)
        if self.align_interval:
            self._readings = [r for r in self._readings if r[0] != t]
        self._readings.append((t, value))
        self._readings.sort(key=lambda r: r[0])
        return True

    def remove(self, time: float) -> None:
        self._readings = [r for r in self._readings if r[0] != time]

    def clear(self) -> None:
        self._readings.clear()

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self._readings, columns=["time", "temp"])

    def compare(self, curve: pd.DataFrame) -> pd.DataFrame:
        """
        Put each reading next to the predicted temperature at the same time.

        Args:
            curve: Curve from synthesize()

        Returns:
            DataFrame with time, temp, predicted and deviation (temp - predicted).
            Readings outside the curve's time range get NaN predictions.
        """
        frame = self.to_frame()
        if frame.empty:
            return frame.assign(predicted=[], deviation=[])

        times = curve["time"].to_numpy(dtype=float)
        predicted = np.interp(frame["time"], times, curve["bt"].to_numpy(dtype=float),
                              left=np.nan, right=np.nan)
        frame["predicted"] = np.round(predicted, 1)
        frame["deviation"] = np.round(frame["temp"] - predicted, 1)
        return frame
