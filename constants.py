# Calendar
# Week windows are always Monday-first; index 0 = Monday ... 6 = Sunday.
WEEKDAY_NAMES = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']
WEEKEND_DAY_NAMES = {'Saturday', 'Sunday'}
DAYS_PER_WEEK = len(WEEKDAY_NAMES)

# Entity defaults
# A shift template without a priority weight (or with weight 0) counts as 50.
DEFAULT_SHIFT_PRIORITY = 50
# Unpaid break subtracted from every shift of a role, in minutes.
DEFAULT_BREAK_MINUTES = 60
# Target shifts per week when weekly or daily hours are missing.
DEFAULT_SHIFTS_PER_WEEK = 5
DEFAULT_WEEKLY_HOURS = 40
DEFAULT_DAILY_MAX_HOURS = 8

# Generation parameters
# Upper bound on top-up passes run after the main assignment sweep.
GAP_FILL_MAX_PASSES = 5
# Minimum slots per operating day for a template whose role has workers.
MIN_SLOTS_PER_OPERATING_DAY = 1

# Attendance
# Clock-ins up to this many minutes after the nominal start are 'correct';
# anything later is 'late'.
LATE_THRESHOLD_MINUTES = 15
STATUS_ON_TIME = 'on-time'
STATUS_CORRECT = 'correct'
STATUS_LATE = 'late'
ATTENDANCE_STATUSES = [STATUS_ON_TIME, STATUS_CORRECT, STATUS_LATE]

# Coverage gap reasons (see constraint_diagnostics.py)
GAP_ROLE_WITHOUT_WORKERS = 'role_without_workers'
GAP_WEEKEND_NOT_ALLOWED = 'weekend_not_allowed'
GAP_NO_WORKERS_AVAILABLE = 'no_workers_available'
GAP_UNDER_QUOTA = 'under_quota'
GAP_OVER_QUOTA = 'over_quota'
