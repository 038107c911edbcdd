"""Example: use the service layer directly (no Flask).

Controllers are thin; the rules live in the services.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.school_attendance.school_attendance.container import build_container
from src.school_attendance.school_attendance.core.exceptions import DayOffError


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(data_dir=settings.DATA_DIR)

    try:
        container.attendance_service.mark_class_day(date(2024, 5, 18), {"s1": "H"})
    except DayOffError as e:
        print(e)

    saved = container.attendance_service.mark_class_day(date(2024, 5, 20), {"s1": "H", "s2": "S"}, class_id="1")
    print(f"{saved} records saved")

    report = container.report_service.monthly_report(year=2024, month=5, class_id="1")
    print(f"Kehadiran kelas 1: {report.percentage}%")


if __name__ == "__main__":
    main()
