"""
Command line interface for LinguaSync.

Usage:
    python -m linguasync modules
    python -m linguasync status
    python -m linguasync goal 7
    python -m linguasync reset --yes
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from linguasync.app import LinguaSync, create_app
from linguasync.config import Settings, configure_logging


logger = logging.getLogger(__name__)


def cmd_modules(app: LinguaSync) -> int:
    for summary in app.navigator.get_module_summaries():
        mark = "✓" if summary.is_completed else " "
        print(
            f"[{mark}] {summary.title} ({summary.language}, {summary.difficulty}) - "
            f"{summary.completed_lessons}/{summary.total_lessons} lessons, "
            f"{summary.completed_quizzes}/{summary.total_quizzes} quizzes, "
            f"{summary.progress * 100:.0f}%"
        )
    return 0


def cmd_status(app: LinguaSync) -> int:
    stats = app.ledger.get_stats()
    print(f"Lessons completed:  {stats['lessons_completed']}")
    print(f"Quizzes completed:  {stats['quizzes_completed']}")
    print(f"Modules completed:  {stats['modules_completed']}")
    print(f"Time spent:         {stats['total_time_minutes']} min "
          f"(avg {stats['average_minutes_per_lesson']} min/lesson)")
    print(f"Streak:             {stats['current_streak']} days (longest {stats['longest_streak']})")
    print(f"Weekly goal:        {stats['weekly_progress']}/{stats['weekly_goal']} "
          f"({stats['weekly_percent']}%)")
    print(f"Badges:             {stats['badges']}")
    for badge in app.ledger.progress.badges_earned:
        print(f"  - {badge.name}: {badge.description}")
    print()
    print(app.ledger.get_motivational_message())
    return 0


def cmd_goal(app: LinguaSync, goal: int) -> int:
    app.ledger.set_weekly_goal(goal)
    print(f"Weekly goal set to {goal} lessons")
    return 0


def cmd_reset(app: LinguaSync, confirmed: bool) -> int:
    if not confirmed:
        print("Refusing to reset without --yes", file=sys.stderr)
        return 1
    app.ledger.reset_all_data()
    print("All progress and preferences were reset")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linguasync",
        description="Inspect and manage LinguaSync learner progress",
    )
    parser.add_argument(
        "--home",
        type=Path,
        default=None,
        help="Data directory (default: $LINGUASYNC_HOME or ~/.linguasync)"
    )
    parser.add_argument(
        "--content",
        type=Path,
        default=None,
        help="YAML content catalog (default: bundled sample)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("modules", help="List modules with progress")
    subparsers.add_parser("status", help="Show learner statistics")
    goal = subparsers.add_parser("goal", help="Set the weekly lesson goal")
    goal.add_argument("lessons", type=int)
    reset = subparsers.add_parser("reset", help="Reset all progress and preferences")
    reset.add_argument("--yes", action="store_true", help="Confirm the reset")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = Settings.from_env()
    overrides = {}
    if args.home is not None:
        overrides["home"] = args.home
    if args.content is not None:
        overrides["content_path"] = args.content
    if overrides:
        settings = settings.model_copy(update=overrides)
    configure_logging(settings.log_level)

    app = create_app(settings)
    logger.debug(f"Running command: {args.command}")

    if args.command == "modules":
        return cmd_modules(app)
    if args.command == "status":
        return cmd_status(app)
    if args.command == "goal":
        return cmd_goal(app, args.lessons)
    return cmd_reset(app, args.yes)


if __name__ == "__main__":
    sys.exit(main())
