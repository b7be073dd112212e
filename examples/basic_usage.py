#!/usr/bin/env python3
"""
Basic Usage Example - Event Countdown Service

This script runs a simulated event against a temporary database with a
manually advanced clock. It shows how to:
- Build the service from configuration
- Configure the event and a planned lunch pause
- Start, pause and resume the countdown
- Let the scheduler apply the planned pause
- Read the audit log

Run: python examples/basic_usage.py
"""

import tempfile
from dataclasses import replace
from pathlib import Path

from countdown_app.config.defaults import StorageParams, get_default_config
from countdown_app.data.parsers import format_duration
from countdown_app.engine import CountdownService, build_service
from countdown_app.logging.config import configure_logging
from countdown_app.state.timeline import status_label
from countdown_app.utils.time import FixedClock, format_instant


def print_countdown(service: CountdownService) -> None:
    """Print what a display would show right now."""
    record = service.get_current_state()
    remaining = service.compute_time_remaining(record)

    print(f"  [{format_instant(service.clock.now())}] {status_label(record)}")
    print(f"    Remaining: {remaining.hours:02d}:{remaining.minutes:02d}:{remaining.seconds:02d}"
          f"  Progress: {remaining.progress_pct:.1f}%"
          f"  Paused total: {format_duration(record.total_paused_ms)}")


def main():
    """Main demo function."""
    configure_logging(level="WARNING")

    print("⏱  Event Countdown Service - Basic Usage Demo")
    print("=" * 60)

    with tempfile.TemporaryDirectory() as temp_dir:
        config = replace(get_default_config(),
                         storage=StorageParams(db_path=str(Path(temp_dir) / "demo.db")))
        clock = FixedClock()
        service = build_service(config, clock)

        print("1. Configuring the event...")
        service.apply_command("update", {
            "eventName": "Bashaway 2025",
            "duration": "6h",
            "message": "Hack on!",
            "scheduledPauses": [
                {"id": "lunch", "reason": "Lunch", "startOffset": "3h", "duration": "30m"},
            ],
        })
        print_countdown(service)

        print("\n2. Starting the countdown...")
        service.apply_command("start", performed_by="demo")
        clock.advance(90 * 60 * 1000)
        print_countdown(service)

        print("\n3. Pausing for a technical issue...")
        service.apply_command("pause", {"reason": "Technical issue"}, performed_by="demo")
        clock.advance(10 * 60 * 1000)
        print_countdown(service)
        service.apply_command("resume", performed_by="demo")

        print("\n4. Letting the scheduler handle lunch...")
        clock.advance(90 * 60 * 1000)
        result = service.tick()
        if result is not None:
            print(f"   Scheduler applied: {result.action} ({result.reason})")
        print_countdown(service)

        clock.advance(30 * 60 * 1000)
        result = service.tick()
        if result is not None:
            print(f"   Scheduler applied: {result.action}")
        print_countdown(service)

        print("\n5. Ending the event...")
        clock.advance(3 * 60 * 60 * 1000)
        service.apply_command("end", performed_by="demo")
        print_countdown(service)

        print("\n6. Audit log (newest first):")
        for entry in service.get_logs():
            reason = f" - {entry.reason}" if entry.reason else ""
            print(f"   {format_instant(entry.timestamp)} {entry.action:<7} "
                  f"by {entry.performed_by} ({entry.source.value}){reason}")

    print("\n✅ Demo complete")


if __name__ == "__main__":
    main()
