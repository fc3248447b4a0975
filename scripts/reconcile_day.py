"""Run the absence sweep by hand, e.g. after the scheduler was down.

Usage: python scripts/reconcile_day.py [YYYY-MM-DD]   (defaults to today)
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.attendance_tracker.attendance_tracker.common.datetime_utils import parse_iso_date
from src.attendance_tracker.attendance_tracker.common.logging_utils import configure_logging
from src.attendance_tracker.attendance_tracker.container import build_container


def main(argv: list[str]) -> int:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(db_config=dict(settings.DB_CONFIG))
    day = parse_iso_date(argv[0]) if argv else container.clock.today()

    result = container.reconciler.reconcile_day(day)
    print(f"OK: {day} created={result.created} skipped={result.skipped} failed={result.failed}")
    return 1 if result.failed else 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
