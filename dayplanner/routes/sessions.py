"""Sessions API: list by date or range, get, create, update and delete."""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Body, Request, Response, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import User
from ..schemas import SessionOut, SessionCreate, SessionUpdate
from ..auth import get_current_user
from ..services.session_service import SessionService
from ..scheduling.utils.patch import SessionFields, SessionPatch

router = APIRouter(tags=["sessions"])


def get_session_service(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> SessionService:
    return SessionService(db, current_user.id, request.app.state.day_locks)


@router.get("", response_model=List[SessionOut])
def list_sessions(
    service: SessionService = Depends(get_session_service),
    date: Optional[str] = Query(None, description="Single day, YYYY-MM-DD"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
):
    """Sessions ordered by date and start time; `date` wins over a range."""
    if date:
        return service.list_for_date(date)
    if start_date and end_date:
        return service.list_for_range(start_date, end_date)
    return service.list_all()


@router.get("/{session_id}", response_model=SessionOut)
def get_session(session_id: int, service: SessionService = Depends(get_session_service)):
    return service.get(session_id)


@router.post("", response_model=SessionOut, status_code=status.HTTP_201_CREATED)
def create_session(
    service: SessionService = Depends(get_session_service),
    session_in: SessionCreate = Body(...),
):
    return service.create(SessionFields(**session_in.model_dump()))


@router.put("/{session_id}", response_model=SessionOut)
def update_session(
    session_id: int,
    service: SessionService = Depends(get_session_service),
    session_in: SessionUpdate = Body(...),
):
    # Only fields present in the body; an explicit null notes clears them
    patch = SessionPatch(**session_in.model_dump(exclude_unset=True))
    return service.update(session_id, patch)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(session_id: int, service: SessionService = Depends(get_session_service)):
    service.delete(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
