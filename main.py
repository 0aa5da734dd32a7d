#!/usr/bin/env python3
"""
Facebook Activity Cleaner - Main entry point.

Removes Activity Log entries one at a time (delete, unlike, remove tag) until
no more items are found.
"""

import argparse
import json
import signal
import sys
from pathlib import Path
from typing import Any, Dict, Optional

# Add project root to path for imports
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

# Load environment variables
from dotenv import load_dotenv  # noqa: E402

load_dotenv()

from config import settings  # noqa: E402
from src.auth.browser_manager import BrowserManager  # noqa: E402
from src.controller.run_controller import RunController  # noqa: E402
from src.deletion.element_locator import ElementLocator  # noqa: E402
from src.deletion.errors import PersistenceError  # noqa: E402
from src.driver.playwright_driver import PlaywrightPageDriver  # noqa: E402
from src.traversal.url_builder import URLBuilder  # noqa: E402
from src.utils.exporter import export_deleted_activities  # noqa: E402
from src.utils.logging import setup_logging  # noqa: E402
from src.utils.state_manager import StateManager  # noqa: E402
from src.utils.statistics import StatisticsReporter  # noqa: E402

# Controller reached by the signal handlers
controller: Optional[RunController] = None


def parse_arguments(argv=None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="Remove Facebook Activity Log entries one by one.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # First run: sign in by hand and save the session
  python main.py --manual-login

  # Remove likes and reactions only, starting from fresh statistics
  python main.py --activity-type likes --reset-stats

  # Show saved statistics, print a report, or export the deletion log
  python main.py --status
  python main.py --report
  python main.py --export

Signals:
  SIGINT/SIGTERM stop the run after the current step; SIGUSR1 pauses/resumes.
        """,
    )

    parser.add_argument(
        "--activity-type",
        choices=sorted(settings.ACTIVITY_TYPES),
        default=None,
        help=f"Activity Log filter (default: ACTIVITY_TYPE env or saved settings, currently {settings.ACTIVITY_TYPE})",
    )
    parser.add_argument("--batch-size", type=int, default=None, help="Attempts between forced saves")
    parser.add_argument(
        "--max-retries", type=int, default=None, help="Confirmation retries per item"
    )
    parser.add_argument(
        "--max-refreshes", type=int, default=None, help="Page reloads before giving up"
    )
    parser.add_argument("--reset-stats", action="store_true", help="Start from zeroed statistics")
    parser.add_argument("--headless", action="store_true", default=None, help="Run headless")
    parser.add_argument(
        "--manual-login",
        action="store_true",
        help="Sign in by hand in the browser window and save the session first",
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--scan", action="store_true", help="Report what the page exposes and exit")
    mode.add_argument("--status", action="store_true", help="Print saved run status and exit")
    mode.add_argument("--export", action="store_true", help="Export the deletion log and exit")
    mode.add_argument("--report", action="store_true", help="Print a text report and exit")
    mode.add_argument(
        "--clear-state",
        action="store_true",
        help="Delete saved settings, statistics and the deletion log, then exit",
    )

    args = parser.parse_args(argv)

    if args.batch_size is not None and args.batch_size < 1:
        parser.error("--batch-size must be at least 1")
    for name in ("max_retries", "max_refreshes"):
        value = getattr(args, name)
        if value is not None and value < 0:
            parser.error(f"--{name.replace('_', '-')} cannot be negative")

    return args


def build_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Collect settings given on the command line (or via ACTIVITY_TYPE)."""
    overrides: Dict[str, Any] = {}
    activity_type = args.activity_type or (
        settings.ACTIVITY_TYPE if settings.ACTIVITY_TYPE in settings.ACTIVITY_TYPES else None
    )
    if activity_type:
        overrides["activity_type"] = activity_type
    if args.batch_size is not None:
        overrides["batch_size"] = args.batch_size
    if args.max_retries is not None:
        overrides["max_action_retries"] = args.max_retries
    if args.max_refreshes is not None:
        overrides["max_page_refreshes"] = args.max_refreshes
    return overrides


def signal_handler(signum, frame):
    """Stop cooperatively: the loop exits after the step in progress."""
    if controller is not None:
        controller.request_stop()


def pause_handler(signum, frame):
    if controller is not None:
        controller.request_toggle_pause()


def show_status(store: StateManager) -> int:
    status = {
        "state": store.get_run_state().value,
        "stats": store.get_stats().to_dict(),
        "summary": store.get_run_summary().to_dict(),
        "deleted_records": len(store.get_deletion_records()),
    }
    print(json.dumps(status, indent=2))
    return 0


def run_scan(page_driver: PlaywrightPageDriver, activity_type: str) -> int:
    page_driver.navigate(URLBuilder().build_activity_log_url(activity_type))
    page_driver.wait_for(settings.PAGE_RELOAD_WAIT_MS)
    print(json.dumps(ElementLocator(page_driver).scan(), indent=2))
    return 0


def run_cleaner(args: argparse.Namespace) -> int:
    """
    Execute the selected command.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    global controller

    logger = setup_logging()
    store = StateManager(Path(settings.CLEANER_STATE_PATH))

    if args.status:
        return show_status(store)

    if args.export:
        path = export_deleted_activities(store)
        print(f"Exported to {path}")
        return 0

    if args.report:
        print(StatisticsReporter().generate_report(store.get_stats(), store.get_run_summary()))
        return 0

    if args.clear_state:
        store.clear_state()
        print(f"Cleared {store.state_path}")
        return 0

    overrides = build_overrides(args)

    logger.info("=" * 60)
    logger.info("Facebook Activity Cleaner")
    logger.info("=" * 60)

    browser_manager = BrowserManager()
    try:
        page = browser_manager.open(headless=args.headless, manual_login=args.manual_login)
        page_driver = PlaywrightPageDriver(page)

        if args.scan:
            activity_type = overrides.get("activity_type", store.get_settings().activity_type)
            return run_scan(page_driver, activity_type)

        controller = RunController(page_driver, store)
        if controller.unclean_shutdown:
            logger.warning("Resuming after an unclean shutdown; saved statistics are kept")

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)
        if hasattr(signal, "SIGUSR1"):
            signal.signal(signal.SIGUSR1, pause_handler)

        ok, message = controller.start(
            settings=overrides or None, reset_stats=args.reset_stats
        )
        logger.info(message)
        if not ok:
            return 1

        if controller.stop_reason in ("action_blocked", "navigation_failed"):
            return 1
        return 0

    except FileNotFoundError as e:
        logger.error("=" * 60)
        logger.error("ERROR: Saved session not found")
        logger.error("=" * 60)
        logger.error(str(e))
        logger.error("")
        logger.error("Please run: python main.py --manual-login")
        return 1

    except ValueError as e:
        logger.error("=" * 60)
        logger.error("ERROR: Session validation failed")
        logger.error("=" * 60)
        logger.error(str(e))
        return 1

    except PersistenceError as e:
        logger.error("=" * 60)
        logger.error("ERROR: Could not save progress")
        logger.error("=" * 60)
        logger.error(str(e))
        return 1

    except Exception as e:
        logger.error("=" * 60)
        logger.error("ERROR: Unexpected error during cleanup")
        logger.error("=" * 60)
        logger.error(f"Error: {e}", exc_info=True)
        return 1

    finally:
        browser_manager.cleanup()
        logger.info("Browser session closed")


def main(argv=None):
    """
    Main entry point for the activity cleaner.

    Parses command-line arguments and runs the selected command.
    """
    try:
        args = parse_arguments(argv)
        return run_cleaner(args)
    except KeyboardInterrupt:
        logger = setup_logging()
        logger.warning("\nInterrupted by user")
        return 0


if __name__ == "__main__":
    sys.exit(main())
