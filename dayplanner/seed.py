"""
Default categories for a fresh planner.

Run directly with: python -m dayplanner.seed
"""

import logging
from sqlalchemy.orm import Session

from .models import Category

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    {"name": "Work", "color": "#3b82f6"},
    {"name": "Personal", "color": "#8b5cf6"},
    {"name": "Health", "color": "#10b981"},
    {"name": "Learning", "color": "#f59e0b"},
    {"name": "Exercise", "color": "#14b8a6"},
    {"name": "Social", "color": "#ec4899"},
    {"name": "Hobbies", "color": "#f97316"},
    {"name": "Chores", "color": "#84cc16"},
]


def seed_default_categories(db: Session, owner_id: int) -> int:
    """Insert the default categories unless the owner already has some. Returns how many were added."""
    existing = db.query(Category).filter(Category.user_id == owner_id).count()
    if existing > 0:
        logger.info(f"Owner {owner_id} already has {existing} categories, skipping seed")
        return 0

    for category in DEFAULT_CATEGORIES:
        db.add(Category(name=category["name"], color=category["color"], user_id=owner_id))
    db.commit()
    logger.info(f"Seeded {len(DEFAULT_CATEGORIES)} default categories for owner {owner_id}")
    return len(DEFAULT_CATEGORIES)


def main():
    from .auth import ensure_default_owner
    from .config import DATABASE_URL, DEFAULT_OWNER_ID, configure_logging
    from .database import Base, make_engine, make_session_factory, session_scope

    configure_logging()
    engine = make_engine(DATABASE_URL)
    Base.metadata.create_all(bind=engine)
    with session_scope(make_session_factory(engine)) as db:
        ensure_default_owner(db)
        added = seed_default_categories(db, DEFAULT_OWNER_ID)
    print(f"✅ Seeded {added} categories into {DATABASE_URL}")


if __name__ == "__main__":
    main()
