"""
Constants for the 30-minute day grid.
"""

SLOT_MINUTES = 30
SLOTS_PER_DAY = 48
MINUTES_PER_DAY = 24 * 60

# End-of-day boundary; valid only as an end time
END_OF_DAY = "24:00"

# Durations offered by the confirmation surface
MAX_OFFERED_DURATION = 360

# Slot the grid scrolls to when there is nothing better (06:00)
DEFAULT_SCROLL_SLOT = 12

NOTES_MAX_LENGTH = 1000

# Slot states
FREE = "free"
OCCUPIED_START = "start"
OCCUPIED_CONTINUATION = "continuation"
