from sqlalchemy import String, Integer, ForeignKey, DateTime, UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime
from typing import Optional
from .database import Base

# Models


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    username: Mapped[str] = mapped_column(String, unique=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)

    # Relationships
    categories = relationship("Category", back_populates="owner")
    activities = relationship("Activity", back_populates="owner")
    sessions = relationship("ScheduledSession", back_populates="owner")


class Category(Base):
    __tablename__ = "categories"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_category_owner_name"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True, index=True)
    name: Mapped[str] = mapped_column(String(100))
    color: Mapped[str] = mapped_column(String(7))  # "#RRGGBB"

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, onupdate=datetime.now)

    owner = relationship("User", back_populates="categories")
    activities = relationship("Activity", back_populates="category")


class Activity(Base):
    __tablename__ = "activities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True, index=True)
    # No cascade: deleting a category with activities is refused
    category_id: Mapped[int] = mapped_column(ForeignKey("categories.id"), index=True)
    name: Mapped[str] = mapped_column(String(200))
    description: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, onupdate=datetime.now)

    owner = relationship("User", back_populates="activities")
    category = relationship("Category", back_populates="activities")
    sessions = relationship("ScheduledSession", back_populates="activity")

    @property
    def category_name(self) -> str:
        return self.category.name

    @property
    def category_color(self) -> str:
        return self.category.color


class ScheduledSession(Base):
    """A timed block of an activity on one date. Times are "HH:MM", dates "YYYY-MM-DD"."""

    __tablename__ = "sessions"
    __table_args__ = (Index("ix_sessions_owner_date", "user_id", "date", "start_time"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    activity_id: Mapped[int] = mapped_column(ForeignKey("activities.id"), index=True)

    date: Mapped[str] = mapped_column(String(10))
    start_time: Mapped[str] = mapped_column(String(5))
    end_time: Mapped[str] = mapped_column(String(5))
    duration_minutes: Mapped[int] = mapped_column(Integer)
    notes: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, onupdate=datetime.now)

    owner = relationship("User", back_populates="sessions")
    activity = relationship("Activity", back_populates="sessions")

    # Enriched read-only fields for API responses
    @property
    def activity_name(self) -> str:
        return self.activity.name

    @property
    def activity_description(self) -> Optional[str]:
        return self.activity.description

    @property
    def category_id(self) -> int:
        return self.activity.category_id

    @property
    def category_name(self) -> str:
        return self.activity.category.name

    @property
    def category_color(self) -> str:
        return self.activity.category.color
