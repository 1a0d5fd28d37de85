"""
Roast parameter snapshot and auto-correction.

A RoastParameters instance is the frozen set of checkpoints the synthesizer
works from. Bad input is never rejected: normalize_parameters() clamps the
values into a plottable order and returns a note for every change it made.
"""

import math
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, List, Mapping, Tuple


# Minimum gap kept between ordered checkpoint temperatures (°C)
MIN_TEMP_GAP = 1.0


@dataclass(frozen=True)
class RoastParameters:
    turning_point_time: float = 60      # s since charge
    turning_point_temp: float = 100.0   # °C
    total_time: float = 450             # s since charge (drop)
    first_crack_temp: float = 188.0     # °C
    drop_temp: float = 204.0            # °C
    yellowing_temp: float = 150.0       # °C
    start_ror: float = 20.0             # °C/min at TP
    end_ror: float = 10.0               # °C/min at drop

    @property
    def horizon(self) -> int:
        """Modeling horizon in whole seconds, never less than one step."""
        return max(1, int(round(self.total_time - self.turning_point_time)))

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RoastParameters":
        """
        Build parameters from a mapping, ignoring unknown keys.

        Missing keys fall back to the defaults. Values are coerced to float
        where possible; anything that does not convert is kept as NaN so that
        normalize_parameters() can report and replace it.
        """
        known = {f.name for f in fields(cls)}
        values: Dict[str, float] = {}
        for key, value in data.items():
            if key not in known:
                continue
            try:
                values[key] = float(value)
            except (TypeError, ValueError):
                values[key] = math.nan
        return cls(**values)


DEFAULT_PARAMETERS = RoastParameters()


def normalize_parameters(params: RoastParameters) -> Tuple[RoastParameters, List[str]]:
    """
    Clamp roast parameters into a well-ordered, plottable set.

    Corrections are applied bottom-up, each one raising the lower-priority
    value to respect the one below it:
    TP temp < yellowing < first crack <= drop.

    Args:
        params: Parameters as entered by the user

    Returns:
        Tuple of (corrected parameters, list of human-readable notes)
    """
    notes: List[str] = []
    values = params.to_dict()

    for name, value in values.items():
        if not math.isfinite(value):
            default = getattr(DEFAULT_PARAMETERS, name)
            notes.append(f"{name} was not a number; using default {default:g}")
            values[name] = default

    # The curve is sampled once per second
    for name, label in (("turning_point_time", "Turning point time"), ("total_time", "Total time")):
        whole = float(round(values[name]))
        if whole != values[name]:
            notes.append(f"{label} {values[name]:g}s rounded to {whole:g}s")
            values[name] = whole

    if values["turning_point_time"] < 0:
        notes.append(
            f"Turning point time {values['turning_point_time']:g}s is negative; set to 0s"
        )
        values["turning_point_time"] = 0.0

    if values["total_time"] < values["turning_point_time"] + 1:
        fixed = values["turning_point_time"] + 1
        notes.append(
            f"Total time {values['total_time']:g}s is not after the turning point; "
            f"raised to {fixed:g}s"
        )
        values["total_time"] = fixed

    for name, label in (("start_ror", "Start ROR"), ("end_ror", "End ROR")):
        if values[name] < 0:
            notes.append(f"{label} {values[name]:g}°C/min is negative; set to 0")
            values[name] = 0.0

    if values["start_ror"] < values["end_ror"]:
        notes.append(
            f"Start ROR {values['start_ror']:g}°C/min is below end ROR "
            f"{values['end_ror']:g}°C/min; raised to {values['end_ror']:g}°C/min"
        )
        values["start_ror"] = values["end_ror"]

    if values["yellowing_temp"] < values["turning_point_temp"] + MIN_TEMP_GAP:
        fixed = values["turning_point_temp"] + MIN_TEMP_GAP
        notes.append(
            f"Yellowing {values['yellowing_temp']:g}°C is not above the turning point "
            f"{values['turning_point_temp']:g}°C; raised to {fixed:g}°C"
        )
        values["yellowing_temp"] = fixed

    if values["first_crack_temp"] < values["yellowing_temp"] + MIN_TEMP_GAP:
        fixed = values["yellowing_temp"] + MIN_TEMP_GAP
        notes.append(
            f"First crack {values['first_crack_temp']:g}°C is not above yellowing "
            f"{values['yellowing_temp']:g}°C; raised to {fixed:g}°C"
        )
        values["first_crack_temp"] = fixed

    if values["drop_temp"] < values["first_crack_temp"]:
        notes.append(
            f"Drop {values['drop_temp']:g}°C is below first crack "
            f"{values['first_crack_temp']:g}°C; raised to {values['first_crack_temp']:g}°C"
        )
        values["drop_temp"] = values["first_crack_temp"]

    return replace(params, **values), notes
