"""
Drag/drop placement flow for the day grid.

Idle -> Dragging(activity) -> drop -> Idle. A drop on a free slot opens the
confirmation surface in create mode; clicking a placed session opens it in edit
mode. Nothing is persisted until the surface is submitted, and a failed submit
leaves the surface open with the error attached.
"""

import enum
import logging
from typing import Any, Iterable, List, Optional

from ...errors import SchedulingError, OverlapError, NotFoundError, ValidationError, ApiUnavailableError, ApiError
from ..constraints.overlap import has_overlap
from ..constraints.session_rules import validate_session_fields
from ..core.constants import NOTES_MAX_LENGTH, SLOT_MINUTES
from ..core.grid import DayGrid
from ..core.interval import field
from ..core.time_slot import time_of, end_time, duration_options
from ..utils.patch import SessionFields, SessionPatch

logger = logging.getLogger(__name__)

OVERLAP_MESSAGE = "This time slot overlaps with an existing session. Please choose a different duration."
SAVE_FAILED_MESSAGE = "Failed to save session. Please try again."
DELETE_FAILED_MESSAGE = "Failed to delete session. Please try again."
UNAVAILABLE_MESSAGE = "The scheduling service is unavailable. Please try again."
STALE_MESSAGE = "This session no longer exists. The day has been refreshed."


class PlacementState(str, enum.Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


class DropOutcome(str, enum.Enum):
    DROPPED_ON_FREE = "dropped_on_free"
    DROPPED_ON_OCCUPIED = "dropped_on_occupied"
    DROPPED_OUTSIDE = "dropped_outside"


class SurfaceMode(str, enum.Enum):
    CREATE = "create"
    EDIT = "edit"


class CreateIntent:
    """What a valid drop proposes: this activity, on this date, at this slot."""

    def __init__(self, activity: Any, date: str, start_time: str):
        self.activity = activity
        self.activity_id = field(activity, "id")
        self.date = date
        self.start_time = start_time

    def __repr__(self):
        return f"CreateIntent(activity={self.activity_id}, {self.date} {self.start_time})"


class ConfirmationSurface:
    """Editable duration + notes form shown before any create/update/delete."""

    def __init__(self, mode: SurfaceMode, date: str, start_time: str, activity_id: int,
                 activity_name: str = "", category_color: str = "",
                 duration_minutes: int = SLOT_MINUTES, notes: str = "", session: Any = None):
        self.mode = mode
        self.date = date
        self.start_time = start_time
        self.activity_id = activity_id
        self.activity_name = activity_name
        self.category_color = category_color
        self.duration_minutes = duration_minutes
        self.notes = notes
        self.session = session
        self.error: Optional[str] = None
        self.submitting = False

    @classmethod
    def for_create(cls, intent: CreateIntent) -> "ConfirmationSurface":
        return cls(
            SurfaceMode.CREATE,
            date=intent.date,
            start_time=intent.start_time,
            activity_id=intent.activity_id,
            activity_name=field(intent.activity, "name", ""),
            category_color=field(intent.activity, "category_color", ""),
        )

    @classmethod
    def for_edit(cls, session: Any) -> "ConfirmationSurface":
        return cls(
            SurfaceMode.EDIT,
            date=field(session, "date"),
            start_time=field(session, "start_time"),
            activity_id=field(session, "activity_id"),
            activity_name=field(session, "activity_name", ""),
            category_color=field(session, "category_color", ""),
            duration_minutes=field(session, "duration_minutes"),
            notes=field(session, "notes") or "",
            session=session,
        )

    @property
    def session_id(self) -> Optional[int]:
        return field(self.session, "id") if self.session is not None else None

    @property
    def duration_options(self) -> List[int]:
        return duration_options(self.start_time)

    @property
    def end_time_preview(self) -> str:
        return end_time(self.start_time, self.duration_minutes)

    def set_duration(self, duration_minutes: int):
        if duration_minutes not in self.duration_options:
            raise ValidationError(
                f"{duration_minutes} minutes is not available from {self.start_time}",
                field="duration_minutes",
            )
        self.duration_minutes = duration_minutes

    def set_notes(self, notes: str):
        if len(notes) > NOTES_MAX_LENGTH:
            raise ValidationError(f"Notes must be at most {NOTES_MAX_LENGTH} characters", field="notes")
        self.notes = notes

    def candidate(self) -> SessionFields:
        """The session this form would write, with the end time computed from the duration."""
        return SessionFields(
            activity_id=self.activity_id,
            date=self.date,
            start_time=self.start_time,
            end_time=end_time(self.start_time, self.duration_minutes),
            duration_minutes=self.duration_minutes,
            notes=self.notes or None,
        )

    def __repr__(self):
        return f"ConfirmationSurface({self.mode.value}, {self.date} {self.start_time}, {self.duration_minutes}m)"


class SubmitResult:
    def __init__(self, ok: bool, session: Any = None, error: Optional[Exception] = None, needs_refresh: bool = False):
        self.ok = ok
        self.session = session
        self.error = error
        self.needs_refresh = needs_refresh

    def __repr__(self):
        return f"SubmitResult(ok={self.ok}, error={self.error!r}, needs_refresh={self.needs_refresh})"


class PlacementFlow:
    """
    Interaction state for one day grid, independent of any rendering.

    `api` passed to submit/delete needs create_session(payload),
    update_session(id, patch) and delete_session(id).
    """

    def __init__(self):
        self.state = PlacementState.IDLE
        self.dragging: Any = None
        self.surface: Optional[ConfirmationSurface] = None

    # ================================
    # DRAG & DROP
    # ================================

    def pick_up(self, activity: Any):
        """Start dragging an activity (with its category name/color for the preview)."""
        if self.state == PlacementState.DRAGGING:
            logger.debug(f"Replacing dragged activity {field(self.dragging, 'id')} with {field(activity, 'id')}")
        self.state = PlacementState.DRAGGING
        self.dragging = activity

    def cancel_drag(self):
        self.state = PlacementState.IDLE
        self.dragging = None

    def drop(self, grid: DayGrid, index: Optional[int]) -> DropOutcome:
        """
        Drop the dragged activity on slot `index` (None means outside the grid).
        Only a free slot opens the create surface; every outcome returns to Idle.
        """
        activity = self.dragging
        self.cancel_drag()

        if activity is None or index is None or not 0 <= index < len(grid):
            return DropOutcome.DROPPED_OUTSIDE
        if not grid.is_droppable(index):
            return DropOutcome.DROPPED_ON_OCCUPIED

        intent = CreateIntent(activity, grid.date, time_of(index))
        self.surface = ConfirmationSurface.for_create(intent)
        logger.debug(f"Drop proposed {intent!r}")
        return DropOutcome.DROPPED_ON_FREE

    # ================================
    # CONFIRMATION SURFACE
    # ================================

    def click_session(self, session: Any) -> ConfirmationSurface:
        """Open the surface in edit mode for an already placed session. Always available."""
        self.surface = ConfirmationSurface.for_edit(session)
        return self.surface

    def close_surface(self):
        self.surface = None

    def submit(self, api: Any, existing_sessions: Iterable[Any]) -> SubmitResult:
        """
        Validate the form, reject a local overlap, then create or update through the API.
        On any failure the surface stays open with `error` set.
        """
        surface = self._require_surface()
        surface.error = None
        surface.submitting = True
        try:
            candidate = surface.candidate()
        except ValueError as e:
            return self._fail(ValidationError(str(e), field="duration_minutes"), str(e))

        try:
            validate_session_fields(candidate)

            exclude_id = surface.session_id if surface.mode == SurfaceMode.EDIT else None
            if has_overlap(existing_sessions, candidate, exclude_id=exclude_id):
                raise OverlapError()

            if surface.mode == SurfaceMode.CREATE:
                saved = api.create_session(candidate.as_dict())
            else:
                patch = SessionPatch(
                    duration_minutes=candidate.duration_minutes,
                    end_time=candidate.end_time,
                    notes=candidate.notes,
                )
                saved = api.update_session(surface.session_id, patch.provided())
        except OverlapError as e:
            return self._fail(e, OVERLAP_MESSAGE)
        except NotFoundError as e:
            return self._fail(e, STALE_MESSAGE, needs_refresh=True)
        except SchedulingError as e:
            return self._fail(e, e.message)
        except ApiUnavailableError as e:
            return self._fail(e, UNAVAILABLE_MESSAGE)
        except ApiError as e:
            return self._fail(e, SAVE_FAILED_MESSAGE)

        self.surface = None
        return SubmitResult(True, session=saved)

    def delete(self, api: Any) -> SubmitResult:
        """Delete the session open in edit mode. No overlap check is needed."""
        surface = self._require_surface()
        if surface.mode != SurfaceMode.EDIT:
            raise ValueError("Only a placed session can be deleted")
        surface.error = None
        surface.submitting = True
        try:
            api.delete_session(surface.session_id)
        except NotFoundError as e:
            return self._fail(e, STALE_MESSAGE, needs_refresh=True)
        except ApiUnavailableError as e:
            return self._fail(e, UNAVAILABLE_MESSAGE)
        except (SchedulingError, ApiError) as e:
            return self._fail(e, DELETE_FAILED_MESSAGE)

        self.surface = None
        return SubmitResult(True)

    def _require_surface(self) -> ConfirmationSurface:
        if self.surface is None:
            raise ValueError("No confirmation surface is open")
        return self.surface

    def _fail(self, error: Exception, message: str, needs_refresh: bool = False) -> SubmitResult:
        logger.warning(f"Session {self.surface.mode.value} rejected: {error}")
        self.surface.error = message
        self.surface.submitting = False
        return SubmitResult(False, error=error, needs_refresh=needs_refresh)
