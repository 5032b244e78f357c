#!/usr/bin/env python3
"""
Run the background jobs once, outside any scheduler.

Usage:
    # Fire due reminders
    python -m scripts.run_jobs --job reminders

    # Weather risk pass over all active plants
    python -m scripts.run_jobs --job weather

    # Both
    python -m scripts.run_jobs --job all

Exit codes:
    0 - Success
    1 - Some items failed (the rest were processed)
    2 - A job was aborted (e.g. missing OPENWEATHER_API_KEY)
"""

import argparse
import asyncio
import json
import os
import sys

# Make the package importable when run from scripts/ or repo root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from plantbuddy.core.config import get_settings
from plantbuddy.core.database import Database
from plantbuddy.core.logging_config import configure_logging
from plantbuddy.reminders.rescheduler import process_due_reminders
from plantbuddy.weather.evaluator import check_weather_risks

JOBS = {
    "reminders": process_due_reminders,
    "weather": check_weather_risks,
}


async def run(job_names: list[str]) -> int:
    await Database.connect()
    exit_code = 0
    try:
        for name in job_names:
            report = await JOBS[name]()
            print(json.dumps(report.summary(), default=str))
            if report.aborted_reason:
                exit_code = 2
            elif report.failed and exit_code == 0:
                exit_code = 1
    finally:
        await Database.disconnect()
    return exit_code


def main() -> int:
    parser = argparse.ArgumentParser(description="Run PlantBuddy background jobs once")
    parser.add_argument("--job", choices=[*JOBS, "all"], required=True)
    args = parser.parse_args()

    configure_logging(get_settings().LOG_LEVEL)
    job_names = list(JOBS) if args.job == "all" else [args.job]
    return asyncio.run(run(job_names))


if __name__ == "__main__":
    sys.exit(main())
