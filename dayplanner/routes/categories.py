import logging
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List

from ..database import get_db
from ..models import Category, Activity, User
from ..schemas import CategoryCreate, CategoryUpdate, CategoryOut
from ..auth import get_current_user
from ..errors import NotFoundError, DuplicateNameError, ReferentialGuardError, ValidationError

router = APIRouter(tags=["categories"])
logger = logging.getLogger(__name__)


def _visible(db: Session, current_user: User):
    return db.query(Category).filter(or_(Category.user_id == current_user.id, Category.user_id.is_(None)))


def _get_category(db: Session, current_user: User, category_id: int) -> Category:
    category = _visible(db, current_user).filter(Category.id == category_id).first()
    if not category:
        raise NotFoundError("Category not found")
    return category


def _name_taken(db: Session, current_user: User, name: str, exclude_id: int = None) -> bool:
    query = db.query(Category.id).filter(Category.user_id == current_user.id, Category.name == name)
    if exclude_id is not None:
        query = query.filter(Category.id != exclude_id)
    return query.first() is not None


@router.get("", response_model=List[CategoryOut])
def list_categories(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _visible(db, current_user).order_by(Category.name).all()


@router.get("/{category_id}", response_model=CategoryOut)
def read_category(category_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _get_category(db, current_user, category_id)


@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(category: CategoryCreate, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    if _name_taken(db, current_user, category.name):
        raise DuplicateNameError("Category name already exists")
    db_category = Category(name=category.name, color=category.color, user_id=current_user.id)
    db.add(db_category)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent create of the same name
        db.rollback()
        raise DuplicateNameError("Category name already exists")
    db.refresh(db_category)
    logger.info(f"Created category {db_category.id} '{db_category.name}'")
    return db_category


@router.put("/{category_id}", response_model=CategoryOut)
def update_category(category_id: int, category_update: CategoryUpdate, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    category = _get_category(db, current_user, category_id)
    changes = category_update.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationError("No fields to update")
    if category_update.name is not None:
        if _name_taken(db, current_user, category_update.name, exclude_id=category_id):
            raise DuplicateNameError("Category name already exists")
        category.name = category_update.name
    if category_update.color is not None:
        category.color = category_update.color
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateNameError("Category name already exists")
    db.refresh(category)
    logger.info(f"Updated category {category_id}")
    return category


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(category_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    category = _get_category(db, current_user, category_id)
    activity_count = db.query(Activity).filter(Activity.category_id == category_id).count()
    if activity_count > 0:
        logger.warning(f"Refused to delete category {category_id}: {activity_count} activities")
        raise ReferentialGuardError(
            f"Cannot delete category with existing activities. This category has {activity_count} activity(ies)",
            dependent_count=activity_count,
        )
    db.delete(category)
    db.commit()
    logger.info(f"Deleted category {category_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
