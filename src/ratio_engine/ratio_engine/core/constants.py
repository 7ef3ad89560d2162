"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Applied to a room with nobody checked in.
EMPTY_ROOM_RATIO = 15

HOURS_DECIMALS = 2
RATIO_DECIMALS = 2

DEFAULT_HISTORY_DAYS = 30
DEFAULT_STAFF_SCOPE = "center"
