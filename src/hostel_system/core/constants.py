"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_ROOM_CAPACITY = 2
DEFAULT_ALLOTTEE_NAME = "New Allottee"
DEFAULT_HISTORY_LIMIT = 30
HOSTEL_LABEL_FORMAT = "Block {block}"
ADMIN_EMAIL_HEADER = "X-Admin-Email"
