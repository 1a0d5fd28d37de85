#!/usr/bin/env python3
"""
Roast Predictor - Command Line Entry Point

Predicts a roast curve from turning point, first crack, drop and yellowing
checkpoints, prints the checkpoint table and phase split, and optionally
overlays logged readings, plots, exports and saves sessions.

Version: 0.1.0
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from roastpred import (
    DEFAULT_PARAMETERS,
    ActualReadings,
    RoastParameters,
    RoastSession,
    SessionStore,
    SessionStoreError,
    normalize_parameters,
    sample_checkpoints,
    segment_phases,
    summarize_curve,
    synthesize,
)
from roastpred.checkpoints import INTERVALS, ROR_UNITS, format_mmss
from roastpred.sessions import DEFAULT_STORE_DIR
from roastpred.synthesizer import SHAPES


# Command line flag -> RoastParameters field
PARAM_FLAGS = {
    "tp_time": "turning_point_time",
    "tp_temp": "turning_point_temp",
    "total_time": "total_time",
    "fc_temp": "first_crack_temp",
    "drop_temp": "drop_temp",
    "yellowing_temp": "yellowing_temp",
    "start_ror": "start_ror",
    "end_ror": "end_ror",
}


def parse_actual(text: str) -> Tuple[str, str]:
    """Split a TIME:TEMP pair; validation happens when the reading is added."""
    time, _, temp = text.partition(":")
    return time, temp


# =============================================================================
# PREDICTION PIPELINE
# =============================================================================

def predict_roast(params: RoastParameters, options: Dict[str, Any]) -> Dict[str, Any]:
    """
    Complete prediction pipeline.

    Args:
        params: Roast parameters as entered
        options: Display and output options

    Returns:
        Dictionary with the applied parameters, correction notes, curve,
        checkpoint table, phases, summary and reading comparison
    """
    print("=" * 60)
    print("ROAST CURVE PREDICTION")
    print("=" * 60)

    # Step 1: Freeze and correct parameters
    print("\n1. Checking parameters...")
    applied, notes = normalize_parameters(params)
    if notes:
        for note in notes:
            print(f"  ! {note}")
    else:
        print("✓ Parameters in order")

    # Step 2: Synthesize
    print("\n2. Synthesizing curve...")
    curve = synthesize(applied, shape=options.get("shape", "exponential"))
    summary = summarize_curve(curve)
    print(f"✓ {len(curve)} points, {format_mmss(summary['start_time'])} → {format_mmss(summary['end_time'])}")
    print(f"  - Temperature gain: {summary['temp_gain']:.2f}°C")
    print(f"  - RoR drift: {summary['ror_drift']:.2f}°C/min")
    if not curve.attrs["converged"]:
        print("  - Shape could not match the required mean RoR; drop reached by tail correction")

    # Step 3: Phases
    print("\n3. Roast phases...")
    phases = segment_phases(curve, applied.yellowing_temp, applied.first_crack_temp)
    for phase in ("drying", "maillard", "development"):
        print(f"  {phase.capitalize():<12} {format_mmss(phases[f'{phase}_time']):>6}"
              f"  {phases[f'{phase}_pct']:5.1f}%")

    # Step 4: Checkpoint table
    interval = options.get("interval", 30)
    ror_unit = options.get("ror_unit", "min")
    table = sample_checkpoints(curve, interval=interval, ror_unit=ror_unit)
    unit_label = "°C/min" if ror_unit == "min" else "°C/30s"
    print(f"\n4. Targets every {interval} seconds")
    print(f"  {'Time':>6}  {'BT (°C)':>8}  {'RoR (' + unit_label + ')':>14}")
    for _, row in table.iterrows():
        print(f"  {row['label']:>6}  {row['bt']:8.1f}  {row['ror']:14.1f}")

    # Step 5: Logged readings
    actuals = ActualReadings(
        align_interval=interval if options.get("align") else None,
        window=(applied.turning_point_time, applied.total_time) if options.get("align") else None,
    )
    for time, temp in options.get("actuals", []):
        if not actuals.add(time, temp):
            print(f"  ! Ignored reading {time}:{temp}")
    comparison = actuals.compare(curve)
    if len(actuals):
        print("\n5. Actual vs predicted")
        for _, row in comparison.iterrows():
            print(f"  {format_mmss(row['time']):>6}  actual {row['temp']:6.1f}  "
                  f"predicted {row['predicted']:6.1f}  Δ {row['deviation']:+.1f}")

    # Step 6: Export
    if options.get("export_csv"):
        output_file = options["export_csv"]
        curve.to_csv(output_file, index=False)
        print(f"\n✓ Curve exported to {output_file}")

    # Step 7: Plot
    if options.get("plot") or options.get("save_plot"):
        from roastpred.plotting import plot_prediction

        try:
            plot_prediction(curve, actuals=actuals, phases=phases,
                            title="Predicted Roast Curve", save_path=options.get("save_plot"))
            if options.get("save_plot"):
                print(f"✓ Plot saved to {options['save_plot']}")
        except (OSError, ValueError) as e:
            print(f"ERROR generating plot: {e}")

    return {
        "params": applied,
        "notes": notes,
        "curve": curve,
        "table": table,
        "phases": phases,
        "summary": summary,
        "actuals": actuals,
        "comparison": comparison,
    }


# =============================================================================
# SESSION COMMANDS
# =============================================================================

def list_sessions(store: SessionStore) -> int:
    try:
        sessions = store.list()
    except SessionStoreError as e:
        print(f"ERROR: {e}")
        return 1

    if not sessions:
        print("No saved sessions.")
        return 0
    for session in sessions:
        print(f"  {session.id}  {session.updated_at}  {session.name}")
    return 0


def delete_session(store: SessionStore, session_id: str) -> int:
    try:
        store.delete(session_id)
    except SessionStoreError as e:
        print(f"ERROR: {e}")
        return 1
    print(f"✓ Deleted session {session_id}")
    return 0


def build_parameters(args: argparse.Namespace, base: RoastParameters) -> RoastParameters:
    """Overlay any parameter flags given on the command line onto base."""
    values = base.to_dict()
    for flag, name in PARAM_FLAGS.items():
        value = getattr(args, flag)
        if value is not None:
            values[name] = value
    return RoastParameters.from_dict(values)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Predict a coffee roast BT / RoR curve from roast checkpoints",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                                   # Default 60s/100°C → 450s/204°C
  python main.py --total-time 540 --drop-temp 210  # Longer, darker roast
  python main.py --actual 180:140.5 --actual 240:156 --align
  python main.py --save-plot curve.png --export-csv curve.csv
  python main.py --save-session "Ethiopia light"
  python main.py --list-sessions
        """
    )

    group = parser.add_argument_group("roast parameters")
    group.add_argument("--tp-time", type=float, help=f"Turning point time in seconds (default: {DEFAULT_PARAMETERS.turning_point_time:g})")
    group.add_argument("--tp-temp", type=float, help=f"Turning point temperature °C (default: {DEFAULT_PARAMETERS.turning_point_temp:g})")
    group.add_argument("--total-time", type=float, help=f"Drop time in seconds (default: {DEFAULT_PARAMETERS.total_time:g})")
    group.add_argument("--fc-temp", type=float, help=f"First crack temperature °C (default: {DEFAULT_PARAMETERS.first_crack_temp:g})")
    group.add_argument("--drop-temp", type=float, help=f"Drop temperature °C (default: {DEFAULT_PARAMETERS.drop_temp:g})")
    group.add_argument("--yellowing-temp", type=float, help=f"Yellowing temperature °C (default: {DEFAULT_PARAMETERS.yellowing_temp:g})")
    group.add_argument("--start-ror", type=float, help=f"RoR at turning point °C/min (default: {DEFAULT_PARAMETERS.start_ror:g})")
    group.add_argument("--end-ror", type=float, help=f"RoR at drop °C/min (default: {DEFAULT_PARAMETERS.end_ror:g})")

    parser.add_argument("--shape", choices=SHAPES, default="exponential", help="RoR shape family (default: exponential)")
    parser.add_argument("--interval", type=int, choices=INTERVALS, help="Checkpoint interval in seconds (default: loaded session's, else 30)")
    parser.add_argument("--ror-unit", choices=tuple(ROR_UNITS), help="RoR display unit (default: loaded session's, else min)")

    parser.add_argument("--actual", action="append", type=parse_actual, default=[], metavar="TIME:TEMP",
                        help="Logged reading, seconds since charge and °C (repeatable)")
    parser.add_argument("--align", action="store_true", help="Snap logged readings onto the checkpoint grid")

    parser.add_argument("--plot", action="store_true", help="Display the curve")
    parser.add_argument("--save-plot", metavar="PATH", help="Save the curve plot to PATH")
    parser.add_argument("--export-csv", metavar="PATH", help="Export the dense curve to CSV")

    parser.add_argument("--store", metavar="DIR", default=str(DEFAULT_STORE_DIR),
                        help=f"Session storage directory (default: {DEFAULT_STORE_DIR})")
    parser.add_argument("--save-session", metavar="NAME", help="Save parameters and readings as a named session")
    parser.add_argument("--load-session", metavar="ID", help="Start from a saved session")
    parser.add_argument("--list-sessions", action="store_true", help="List saved sessions and exit")
    parser.add_argument("--delete-session", metavar="ID", help="Delete a saved session and exit")

    args = parser.parse_args(argv)
    store = SessionStore(Path(args.store))

    if args.list_sessions:
        sys.exit(list_sessions(store))
    if args.delete_session:
        sys.exit(delete_session(store, args.delete_session))

    base = DEFAULT_PARAMETERS
    actuals = list(args.actual)
    session = None
    if args.load_session:
        try:
            session = store.load(args.load_session)
        except SessionStoreError as e:
            print(f"ERROR: {e}")
            session = None
        if session is None:
            print(f"ERROR: Session '{args.load_session}' not found")
            sys.exit(1)
        base = session.params
        actuals = list(session.actuals) + actuals
        print(f"Loaded session '{session.name}'")

    # Flags win over the loaded session's display settings
    interval = args.interval or (session.interval_seconds if session else 30)
    ror_unit = args.ror_unit or (session.ror_unit if session else "min")

    options = {
        "shape": args.shape,
        "interval": interval,
        "ror_unit": ror_unit,
        "actuals": actuals,
        "align": args.align,
        "plot": args.plot,
        "save_plot": args.save_plot,
        "export_csv": args.export_csv,
    }

    try:
        result = predict_roast(build_parameters(args, base), options)
    except KeyboardInterrupt:
        print("\n\nPrediction interrupted by user.")
        sys.exit(1)

    if args.save_session:
        session = RoastSession(
            name=args.save_session,
            params=result["params"],
            actuals=result["actuals"].readings,
            interval_seconds=interval,
            ror_unit=ror_unit,
        )
        try:
            session_id = store.save(session)
            print(f"\n✓ Saved session '{args.save_session}' ({session_id})")
        except SessionStoreError as e:
            # The prediction above is still valid
            print(f"\nERROR saving session: {e}")
            sys.exit(2)


if __name__ == "__main__":
    main()
