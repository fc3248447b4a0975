"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; the attendance rules live in the services.
"""

import importlib
import secrets

from config import get_settings_module

from src.attendance_tracker.attendance_tracker.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    raw = secrets.token_urlsafe(16)
    container.attendance_service.issue_token(1, raw)
    record = container.attendance_service.resolve_scan(raw)
    print(record)
    print(container.report_service.compute_my_percentage(1))


if __name__ == "__main__":
    main()
