"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

# Fixed storage key of the local snapshot document.
SNAPSHOT_KEY = "absensi_app_data"

CLASS_LIST = ("1", "2", "3", "4", "5", "6")
ALL_CLASSES = "ALL"
GRADUATE = "LULUS"

UNKNOWN_ACADEMIC_YEAR = "Unknown"

# Remote collection names (one sheet per collection).
COL_STUDENTS = "Students"
COL_TEACHERS = "Teachers"
COL_ATTENDANCE = "Attendance"
COL_ALUMNI = "Alumni"
COL_HOLIDAYS = "Holidays"
COL_ACADEMIC_YEARS = "AcademicYears"
COL_HEADMASTER = "Headmaster"

REMOTE_COLLECTIONS = (
    COL_STUDENTS,
    COL_TEACHERS,
    COL_ATTENDANCE,
    COL_ALUMNI,
    COL_HOLIDAYS,
    COL_ACADEMIC_YEARS,
    COL_HEADMASTER,
)

WEEKEND_REASON = "weekend"
SCHOOL_NAME = "SD Negeri 5 Bilato"
