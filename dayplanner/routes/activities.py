import logging
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload
from typing import List, Optional

from ..database import get_db
from ..models import Activity, Category, ScheduledSession, User
from ..schemas import ActivityCreate, ActivityUpdate, ActivityOut
from ..auth import get_current_user
from ..errors import NotFoundError, InvalidReferenceError, ReferentialGuardError, ValidationError

router = APIRouter(tags=["activities"])
logger = logging.getLogger(__name__)


def _visible(db: Session, current_user: User):
    return (
        db.query(Activity)
        .options(joinedload(Activity.category))
        .filter(or_(Activity.user_id == current_user.id, Activity.user_id.is_(None)))
    )


def _get_activity(db: Session, current_user: User, activity_id: int) -> Activity:
    activity = _visible(db, current_user).filter(Activity.id == activity_id).first()
    if not activity:
        raise NotFoundError("Activity not found")
    return activity


def _check_category(db: Session, current_user: User, category_id: int):
    category = db.query(Category.id).filter(
        Category.id == category_id,
        or_(Category.user_id == current_user.id, Category.user_id.is_(None)),
    ).first()
    if not category:
        raise InvalidReferenceError("Category does not exist", field="category_id")


@router.get("", response_model=List[ActivityOut])
def list_activities(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    category_id: Optional[int] = Query(None),
):
    query = _visible(db, current_user).join(Activity.category)
    if category_id is not None:
        query = query.filter(Activity.category_id == category_id)
    return query.order_by(Category.name, Activity.name).all()


@router.get("/{activity_id}", response_model=ActivityOut)
def read_activity(activity_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _get_activity(db, current_user, activity_id)


@router.post("", response_model=ActivityOut, status_code=status.HTTP_201_CREATED)
def create_activity(activity: ActivityCreate, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    _check_category(db, current_user, activity.category_id)
    db_activity = Activity(
        name=activity.name,
        description=activity.description,
        category_id=activity.category_id,
        user_id=current_user.id,
    )
    db.add(db_activity)
    db.commit()
    logger.info(f"Created activity {db_activity.id} '{db_activity.name}' in category {db_activity.category_id}")
    return _get_activity(db, current_user, db_activity.id)


@router.put("/{activity_id}", response_model=ActivityOut)
def update_activity(activity_id: int, activity_update: ActivityUpdate, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    activity = _get_activity(db, current_user, activity_id)
    changes = activity_update.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationError("No fields to update")
    if activity_update.category_id is not None:
        _check_category(db, current_user, activity_update.category_id)
        activity.category_id = activity_update.category_id
    if activity_update.name is not None:
        activity.name = activity_update.name
    if "description" in changes:
        activity.description = activity_update.description
    db.commit()
    db.expire(activity)
    logger.info(f"Updated activity {activity_id}")
    return _get_activity(db, current_user, activity_id)


@router.delete("/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_activity(activity_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    activity = _get_activity(db, current_user, activity_id)
    session_count = db.query(ScheduledSession).filter(ScheduledSession.activity_id == activity_id).count()
    if session_count > 0:
        logger.warning(f"Refused to delete activity {activity_id}: {session_count} sessions")
        raise ReferentialGuardError(
            f"Cannot delete activity with existing sessions. This activity has {session_count} session(s)",
            dependent_count=session_count,
        )
    db.delete(activity)
    db.commit()
    logger.info(f"Deleted activity {activity_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
