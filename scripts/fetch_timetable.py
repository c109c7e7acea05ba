"""Fetch faculties, courses or a group's week from timetable.tusur.ru.

Standalone CLI around TimetableService with a process-local cache.
Outputs JSON (camelCase, the same shape the cache stores) or a table.

Run with: python scripts/fetch_timetable.py faculties
Courses:  python scripts/fetch_timetable.py courses fsu
Week:     python scripts/fetch_timetable.py week fsu 425-m
Date:     python scripts/fetch_timetable.py week fsu 425-m --date 2026-10-19
Table:    python scripts/fetch_timetable.py week fsu 425-m --table

Exit codes:
  0 = success (JSON or table on stdout)
  1 = error (message on stderr)
"""

import argparse
import asyncio
import json
import os
import sys
from datetime import date

from dotenv import load_dotenv

load_dotenv()

# Add src/ to path so the script runs from a plain checkout
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from tusur_timetable import InMemoryCache, TimetableService, get_config  # noqa: E402
from tusur_timetable.logging import get_logger, setup_logging  # noqa: E402
from tusur_timetable.models import WeekSchedule  # noqa: E402
from tusur_timetable.rooms import parse_room  # noqa: E402
from tusur_timetable.weeks import monday_of_week, week_number  # noqa: E402

log = get_logger("fetch_timetable")


def _parse_args() -> argparse.Namespace:
    """Parse CLI arguments using argparse."""
    parser = argparse.ArgumentParser(
        description="Fetch timetable data from timetable.tusur.ru as JSON or table.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit structured JSON logs on stderr.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("faculties", help="List faculties.")

    courses = commands.add_parser("courses", help="List courses and groups of a faculty.")
    courses.add_argument("faculty", help="Faculty slug, e.g. fsu.")

    week = commands.add_parser("week", help="Show one week of a group's lessons.")
    week.add_argument("faculty", help="Faculty slug, e.g. fsu.")
    week.add_argument("group", help="Group slug, e.g. 425-m.")
    week.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Any date of the wanted week, YYYY-MM-DD (default: today).",
    )
    week.add_argument(
        "--table",
        action="store_true",
        help="Output a human-readable table instead of JSON.",
    )
    return parser.parse_args()


def _format_table(schedule: WeekSchedule) -> str:
    """Format a week as a human-readable table.

    Columns: Day | Time | Type | Subject | Room | Building | Teacher
    """
    headers = ["Day", "Time", "Type", "Subject", "Room", "Building", "Teacher"]

    rows = []
    for day in schedule.days:
        if day.special_day is not None:
            rows.append([day.day_name, "", day.special_day.type, day.special_day.name, "", "", ""])
        for lesson in day.lessons:
            building = parse_room(lesson.room).building
            rows.append(
                [
                    day.day_name,
                    f"{lesson.time}-{lesson.time_end}",
                    lesson.type,
                    lesson.subject,
                    lesson.room,
                    building.name if building else "",
                    lesson.instructor,
                ]
            )

    if not rows:
        return "(no lessons this week)"

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    header_line = " | ".join(h.ljust(widths[i]) for i, h in enumerate(headers))
    separator = "-+-".join("-" * w for w in widths)
    row_lines = [
        " | ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)) for row in rows
    ]
    return "\n".join([header_line, separator, *row_lines])


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


async def main(args: argparse.Namespace) -> None:
    async with TimetableService(InMemoryCache()) as service:
        if args.command == "faculties":
            faculties = await service.fetch_faculties()
            _print_json([f.to_cache() for f in faculties])

        elif args.command == "courses":
            courses = await service.fetch_faculty_courses(args.faculty)
            _print_json([c.to_cache() for c in courses])

        else:
            monday = monday_of_week(args.date or date.today())
            log.info(
                "fetching_week",
                url=service.build_timetable_url(args.faculty, args.group),
                week_start=monday.isoformat(),
                week_number=week_number(monday),
            )
            schedule = await service.fetch_week_schedule(args.faculty, args.group, monday)
            if args.table:
                print(_format_table(schedule))
            else:
                _print_json({**schedule.to_cache(), "weekStart": monday.isoformat()})


if __name__ == "__main__":
    args = _parse_args()
    config = get_config()
    setup_logging(json_output=args.json_logs or config.log_json, log_level=config.log_level)
    try:
        asyncio.run(main(args))
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)
