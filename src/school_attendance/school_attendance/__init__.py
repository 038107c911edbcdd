"""School Attendance package.

Local-first record keeping for daily student attendance (absensi harian),
organised by feature modules (students, staff, academic, attendance, ...)
around a single in-memory store, a JSON snapshot on disk and a full-snapshot
backup channel to a spreadsheet web-app.
"""
