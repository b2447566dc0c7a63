"""
timeline_runner.py
==================
Battery SOC Timeline — Console Runner

Feeds raw command-line strings into a TimelineSession the same way a form
would, then:
    1. Parses the fields and the mode (``--mode`` or ``--query``)
    2. Projects the timeline
    3. Prints the timeline report
    4. Plots SOC vs elapsed time

Usage:
    python timeline_runner.py --capacity 15 --load 1000 --soc 55
    python timeline_runner.py --capacity 10 --load 2000 --soc 42 --query "mode=charge"
"""

from __future__ import annotations

import argparse
import logging
import math
import sys

import matplotlib.pyplot as plt
import matplotlib.ticker as mticker

from soc_timeline.config import (
    DEFAULT_CAPACITY_KWH,
    DEFAULT_LOAD_W,
    DEFAULT_SOC_PERCENT,
    DEFAULT_VOLTAGE_V,
    MODE_CHARGE,
    MODES,
    TimelineConfig,
)
from soc_timeline.display import band_color, hours_caption, timeline_title
from soc_timeline.projection import TimelineResult
from soc_timeline.session import TimelineSession, mode_to_query

logger = logging.getLogger("timeline_runner")

PLOT_OUTPUT_FILE: str = "battery_timeline.png"


# ---------------------------------------------------------------------------
# Step 1: Arguments and logging
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Project battery SOC checkpoints over time.")
    # numeric fields stay strings; the session parses them
    p.add_argument("--capacity", default=f"{DEFAULT_CAPACITY_KWH:g}", help="battery capacity [kWh]")
    p.add_argument("--voltage", default=f"{DEFAULT_VOLTAGE_V:g}", help="battery voltage [V]")
    p.add_argument("--load", default=f"{DEFAULT_LOAD_W:g}", help="load or charging power [W]")
    p.add_argument("--soc", default=f"{DEFAULT_SOC_PERCENT:g}", help="current state of charge [%%]")
    p.add_argument("--mode", choices=MODES, default=None, help="overrides the mode from --query")
    p.add_argument("--query", default="", help='URL query string, e.g. "mode=charge"')
    p.add_argument("--output", default=PLOT_OUTPUT_FILE, help="plot file to write")
    p.add_argument("--no-plot", action="store_true", help="skip the plot")
    p.add_argument("--verbose", "-v", action="store_true", help="debug logging")
    return p


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# Step 2: Session run
# ---------------------------------------------------------------------------

def run_session(args: argparse.Namespace, config: TimelineConfig | None = None) -> tuple[TimelineSession, TimelineResult]:
    """Load the parsed arguments into a session and project once."""
    session = TimelineSession(config=config, query=args.query)
    for name in ("capacity", "voltage", "load", "soc"):
        session.set_field(name, getattr(args, name))
    if args.mode is not None:
        session.set_mode(args.mode)
    return session, session.calculate()


# ---------------------------------------------------------------------------
# Step 3: Console report
# ---------------------------------------------------------------------------

def print_timeline_report(session: TimelineSession, result: TimelineResult) -> None:
    """Print the input summary followed by the checkpoint table."""

    sep = "─" * 60
    values = session.values

    print(f"\n{'═' * 60}")
    print(f"  BATTERY {timeline_title(session.mode).upper()}")
    print(f"{'═' * 60}")
    print(f"    Capacity                    :  {values['capacity']:7.2f} kWh")
    print(f"    Voltage                     :  {values['voltage']:7.2f} V")
    print(f"    {'Charging power' if session.mode == MODE_CHARGE else 'Load':<28}:  {values['load']:7.1f} W")
    amps = session.current_amps
    if amps is not None:
        print(f"    Current at voltage          :  {amps:7.2f} A")
    print(f"    Current SOC                 :  {values['soc']:7.1f} %")
    print(f"    Safety window               :  {session.config.safety_min}% – {session.config.safety_max}%")
    print(sep)

    if not result.ok:
        print(f"  ✘ {session.error}")
        print(f"{'═' * 60}\n")
        return

    print(f"  {'SOC':>5}   {'Time':<6}   Elapsed")
    print(sep)
    for cp in result.checkpoints:
        print(f"  {cp.percent:>4}%   {cp.time_label:<6}   {hours_caption(session.mode, cp.hours_label)}")
    print(f"{'═' * 60}\n")


# ---------------------------------------------------------------------------
# Step 4: Plot — SOC vs elapsed time
# ---------------------------------------------------------------------------

def plot_timeline(
    result: TimelineResult,
    config: TimelineConfig,
    output: str = PLOT_OUTPUT_FILE,
    show: bool = True,
) -> None:
    """Render and save the checkpoints as SOC over elapsed hours."""

    points = [cp for cp in result.checkpoints if math.isfinite(cp.hours)]
    if not points:
        logger.warning("No finite checkpoints to plot")
        return

    hours    = [cp.hours for cp in points]
    percents = [cp.percent for cp in points]
    colors   = [band_color(cp.percent) for cp in points]

    fig, ax = plt.subplots(figsize=(10, 5))
    fig.suptitle(
        f"Battery {timeline_title(result.mode)}\n"
        f"Anchored at {result.generated_at:%Y-%m-%d %H:%M}  |  Linear SOC model",
        fontsize=12, fontweight="bold",
    )

    ax.plot(hours, percents, color="#2196F3", linewidth=2, label="Projected SOC")
    ax.scatter(hours, percents, c=colors, s=60, zorder=3)
    for cp in points:
        ax.annotate(cp.time_label, (cp.hours, cp.percent),
                    textcoords="offset points", xytext=(6, 6), fontsize=8)

    bound = config.safety_max if result.mode == MODE_CHARGE else config.safety_min
    ax.axhline(bound, color="#F44336", linewidth=1.2, linestyle="--",
               label=f"Safety bound ({bound}%)")

    ax.set_xlabel("Elapsed Time [hours]", fontsize=11)
    ax.set_ylabel("State of Charge [%]", fontsize=11)
    ax.set_ylim(0, 110)
    ax.yaxis.set_major_formatter(mticker.PercentFormatter(xmax=100))
    ax.legend(fontsize=9, loc="best")
    ax.grid(True, linestyle="--", alpha=0.5)

    plt.tight_layout()
    plt.savefig(output, dpi=150, bbox_inches="tight")
    print(f"  [plot] Saved → {output}")
    if show:
        plt.show()
    plt.close(fig)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    session, result = run_session(args)
    print_timeline_report(session, result)
    logger.debug("Shareable query: %s", mode_to_query(session.mode, session.query_string) or "<default>")

    if not result.ok:
        return 1
    if not args.no_plot:
        plot_timeline(result, session.config, output=args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
