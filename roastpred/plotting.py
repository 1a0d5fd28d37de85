"""
Plotting for predicted roast curves.
"""

from typing import Any, Dict, Optional

import matplotlib.pyplot as plt
import pandas as pd
from matplotlib.ticker import FuncFormatter, MultipleLocator

from .overlay import ActualReadings


BT_COLOR = "#f59e0b"      # Orange
ROR_COLOR = "#60a5fa"     # Blue
ACTUAL_COLOR = "#ef4444"  # Red


def plot_prediction(
    curve: pd.DataFrame,
    actuals: Optional[ActualReadings] = None,
    phases: Optional[Dict[str, Any]] = None,
    title: Optional[str] = None,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """
    Plot predicted BT and RoR with logged readings as unconnected dots.

    Args:
        curve: Curve from synthesize()
        actuals: Optional logged readings to overlay on the BT axis
        phases: Optional result of segment_phases() for boundary markers
        title: Optional title for the plot
        save_path: Optional path to save the plot; shown on screen otherwise

    Returns:
        The matplotlib figure
    """
    time = curve["time"].to_numpy()
    bt = curve["bt"].to_numpy()
    ror = curve["ror"].to_numpy()

    fig, ax1 = plt.subplots(figsize=(12, 6))
    ax1.plot(time, bt, color=BT_COLOR, linewidth=2, label="Predicted BT")

    if actuals is not None and len(actuals):
        frame = actuals.to_frame()
        ax1.scatter(frame["time"], frame["temp"], color=ACTUAL_COLOR, zorder=5, label="Actual BT")

    if phases:
        for key, name in (("yellowing_time", "YELLOW"), ("first_crack_time", "FC")):
            x_evt = phases[key]
            y_evt = bt[min(phases[key] - int(time[0]), len(bt) - 1)]
            ax1.axvline(x_evt, color="lightgray", linestyle=":", zorder=1)
            ax1.text(x_evt, y_evt + 5,
                     f"{name}\n{int(x_evt // 60)}:{int(x_evt % 60):02d}\n{y_evt:.1f}°C",
                     ha="center", va="bottom")

    ax2 = ax1.twinx()
    ax2.plot(time, ror, color=ROR_COLOR, linewidth=2, linestyle="--", label="Predicted RoR (°C/min)")
    ax2.set_ylabel("Rate of Rise (°C/min)")
    ax2.set_ylim(0, max(24, float(ror.max()) + 4))

    ax1.set_ylim(min(bt[0] - 10, 80), max(bt[-1] + 12, 210))

    # Dynamic x-ticks every ~30s
    span = int(time[-1] - time[0])
    max_ticks = 10
    interval = max(30, ((span + max_ticks * 30 - 1) // (max_ticks * 30)) * 30)
    ax1.xaxis.set_major_locator(MultipleLocator(interval))
    ax1.xaxis.set_major_formatter(
        FuncFormatter(lambda x, pos: f"{int(x // 60)}:{int(x % 60):02d}")
    )
    ax1.set_xlabel("Time since Charge (mm:ss)")
    ax1.set_ylabel("Temperature (°C)")

    h1, l1 = ax1.get_legend_handles_labels()
    h2, l2 = ax2.get_legend_handles_labels()
    ax1.legend(h1 + h2, l1 + l2, loc="upper left")

    ax1.grid(False)
    ax2.grid(False)

    if title:
        plt.title(title)

    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
        plt.close(fig)
    else:
        plt.show()

    return fig
