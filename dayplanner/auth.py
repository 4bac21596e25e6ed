"""
Owner resolution.

The planner has a single implicit owner (DEFAULT_OWNER_ID). Every row is still
stamped with its owner so the data model stays multi-owner shaped.
"""

import logging
from fastapi import Depends
from sqlalchemy.orm import Session

from .config import DEFAULT_OWNER_ID, DEFAULT_OWNER_NAME
from .database import get_db
from .models import User

logger = logging.getLogger(__name__)


def ensure_default_owner(db: Session) -> User:
    """Create the default owner row if it is missing."""
    user = db.get(User, DEFAULT_OWNER_ID)
    if user is None:
        user = User(id=DEFAULT_OWNER_ID, username=DEFAULT_OWNER_NAME)
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info(f"Created default owner {user.id} ({user.username})")
    return user


def get_current_user(db: Session = Depends(get_db)) -> User:
    """Get the owner every request acts as"""
    return ensure_default_owner(db)
