"""
Daily Activity Planner scheduling core

Slot arithmetic, overlap checking, the day grid and the drag/drop placement flow.
Nothing here touches storage or HTTP, so both the server and the client use it.
"""

from .core.time_slot import (
    TimeSlot, slot_index, time_of, span, end_time, max_duration, current_slot_index,
    generate_time_slots, duration_options,
)
from .core.grid import DayGrid, Free, OccupiedStart, OccupiedContinuation, build_grid, scroll_target_slot
from .core.constants import SLOTS_PER_DAY, SLOT_MINUTES, FREE, OCCUPIED_START, OCCUPIED_CONTINUATION
from .constraints.overlap import has_overlap, find_conflicts, intervals_overlap
from .constraints.session_rules import validate_session_fields
from .placement.flow import PlacementFlow, PlacementState, DropOutcome, ConfirmationSurface, SurfaceMode
from .utils.patch import SessionFields, SessionPatch, apply_patch, UNSET

__version__ = "1.0.0"
