"""
Break Timer Simulator — drives the timer, driver and statistics ledger with
scripted activity so you can watch breaks come due and clear without waiting
in real time or touching a keyboard.

Usage:
    python scripts/simulate.py                       # default: cycle all scenarios
    python scripts/simulate.py --scenario desk_day   # specific scenario
    python scripts/simulate.py --micro 60 --rest 600 # custom intervals
    python scripts/simulate.py --speed 0             # no delay between lines
"""

from __future__ import annotations

import argparse
import time
from typing import Iterator

from rsi_assistant.driver import BreakDriver
from rsi_assistant.idle.sources import ScriptedIdleSource
from rsi_assistant.stats.ledger import StatsStore
from rsi_assistant.timer.models import BreakConfig, TimerStatus
from rsi_assistant.timer.service import TimerService


# ---------------------------------------------------------------------------
# Scenario generators — each yields (description, pattern) pairs where the
# pattern has one character per second: 'a' active, '.' idle
# ---------------------------------------------------------------------------

def scenario_steady_typing(cfg: BreakConfig) -> Iterator[tuple[str, str]]:
    """Uninterrupted activity straight past the micro-break interval."""
    yield "Steady typing until the micro-break is due", "a" * (cfg.microbreak_interval + 5)


def scenario_short_blips(cfg: BreakConfig) -> Iterator[tuple[str, str]]:
    """Pauses shorter than the micro-break duration do not count as breaks."""
    blip = "." * max(cfg.microbreak_duration - 1, 0)
    for i in range(4):
        yield f"Working [{i+1}/4]", "a" * (cfg.microbreak_interval // 4)
        yield f"Brief pause [{i+1}/4] ({len(blip)}s)", blip


def scenario_natural_break(cfg: BreakConfig) -> Iterator[tuple[str, str]]:
    """The user steps away on their own before being prompted."""
    yield "Working most of the interval", "a" * max(cfg.microbreak_interval - 10, 1)
    yield "Stretching without a prompt", "." * cfg.microbreak_duration
    yield "Back to work", "a" * 20


def scenario_desk_day(cfg: BreakConfig) -> Iterator[tuple[str, str]]:
    """Long session with prompted micro-breaks and one proper rest break."""
    micro_cycle = "a" * (cfg.microbreak_interval + 3) + "." * cfg.microbreak_duration
    cycles = max(cfg.rest_interval // max(len(micro_cycle), 1), 1)
    for i in range(cycles):
        yield f"Micro cycle [{i+1}/{cycles}]", micro_cycle
    yield "Working until the rest break is due", "a" * (cfg.microbreak_interval + 3)
    yield "Rest break", "." * cfg.rest_duration


SCENARIOS = {
    "steady_typing": scenario_steady_typing,
    "short_blips": scenario_short_blips,
    "natural_break": scenario_natural_break,
    "desk_day": scenario_desk_day,
}

CYCLE = ["steady_typing", "short_blips", "natural_break", "desk_day"]


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------

def _bar(active: int, target: int, width: int = 20) -> str:
    filled = width if target == 0 else min(int(active / target * width), width)
    return "█" * filled + "░" * (width - filled)


def _line(status: TimerStatus) -> str:
    micro = "!" if status.micro_is_overdue else " "
    rest = "!" if status.rest_is_overdue else " "
    return (
        f"micro [{_bar(status.micro_active, status.micro_target)}]{micro} "
        f"rest [{_bar(status.rest_active, status.rest_target)}]{rest} "
        f"idle {status.current_idle:4d}s  used {status.daily_usage:5d}s"
    )


def _overlay_client(stats: StatsStore, timer: TimerService):
    """Reports a prompted break as taken once idling clears it, as the overlay UI does."""
    was_overdue = {"micro": False, "rest": False}

    def on_status(status: TimerStatus) -> None:
        for category, overdue, active in (
            ("micro", status.micro_is_overdue, status.micro_active),
            ("rest", status.rest_is_overdue, status.rest_active),
        ):
            if was_overdue[category] and active == 0:
                stats.record_break_taken(category)
                timer.reset_break(category)
            was_overdue[category] = overdue

    return on_status


def run_scenario(name: str, cfg: BreakConfig, speed: float) -> None:
    timer = TimerService(cfg)
    stats = StatsStore()

    print(f"\n{'─' * 72}")
    print(f"  SCENARIO: {name.upper().replace('_', ' ')}")
    print(f"{'─' * 72}")

    source = ScriptedIdleSource([])
    driver = BreakDriver(timer, stats, source, idle_threshold_s=0)
    driver.register_listener(_overlay_client(stats, timer))
    status = timer.get_status()

    for description, pattern in SCENARIOS[name](cfg):
        source.extend_pattern(pattern)
        while not source.exhausted:
            status = driver.step()
        print(f"  {_line(status)}  {description}")
        if speed > 0:
            time.sleep(0.5 / speed)

    today = stats.get_or_create_today()
    print(
        f"  → prompts micro={today.micro_prompts} rest={today.rest_prompts}  "
        f"taken micro={today.micro_prompted_taken}+{today.micro_natural_taken} natural  "
        f"rest={today.rest_prompted_taken}+{today.rest_natural_taken} natural  "
        f"overdue {today.overdue_seconds}s"
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="RSI break timer simulator")
    parser.add_argument(
        "--scenario",
        choices=list(SCENARIOS.keys()) + ["cycle"],
        default="cycle",
        help="Which scenario to run (default: cycle through all)",
    )
    parser.add_argument("--micro", type=int, default=180, help="Micro-break interval (s)")
    parser.add_argument("--micro-duration", type=int, default=30, help="Micro-break length (s)")
    parser.add_argument("--rest", type=int, default=2700, help="Rest-break interval (s)")
    parser.add_argument("--rest-duration", type=int, default=600, help="Rest-break length (s)")
    parser.add_argument("--speed", type=float, default=1.0, help="Output speed multiplier; 0 = no delay")
    args = parser.parse_args()

    cfg = BreakConfig(
        microbreak_interval=args.micro,
        microbreak_duration=args.micro_duration,
        rest_interval=args.rest,
        rest_duration=args.rest_duration,
    )
    sequence = CYCLE if args.scenario == "cycle" else [args.scenario]
    for name in sequence:
        run_scenario(name, cfg, args.speed)

    print("\n[✓] Simulation complete.")


if __name__ == "__main__":
    main()
