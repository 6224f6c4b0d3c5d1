"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Label shown when a student's class/dormitory no longer resolves
UNKNOWN_GROUP_LABEL = "N/A"
# Sub-dimension label for absences without a course
UNSPECIFIED_LABEL = "Unspecified"

DEFAULT_TOP_N = 3
WEEKLY_WINDOW_DAYS = 7
ACTIVITY_WINDOW_DAYS = 14
RECENT_ACTIVITY_HOURS = 24
# Upper bound for dashboard windows passed as query args
MAX_WINDOW_DAYS = 366

DEFAULT_ACADEMIC_YEAR = "2025-2026"
DEFAULT_SEMESTER = 1
DEFAULT_FETCH_WORKERS = 6
