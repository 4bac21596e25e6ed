"""
Aggregate analytics over one owner's sessions.
"""

from typing import List, Optional

from sqlalchemy import func, distinct
from sqlalchemy.orm import Session

from ..models import Activity, Category, ScheduledSession
from ..schemas import ActivityHours, CategoryHours, DailyStats, AnalyticsSummary, MostUsedActivity, MostUsedCategory
from .session_service import require_date


def _hours(minutes) -> float:
    return round((minutes or 0) / 60.0, 2)


class AnalyticsService:
    def __init__(self, db: Session, owner_id: int, start_date: Optional[str] = None, end_date: Optional[str] = None):
        self.db = db
        self.owner_id = owner_id
        self.start_date = require_date(start_date, "startDate") if start_date else None
        self.end_date = require_date(end_date, "endDate") if end_date else None

    def _filtered(self, query):
        query = query.filter(ScheduledSession.user_id == self.owner_id)
        if self.start_date:
            query = query.filter(ScheduledSession.date >= self.start_date)
        if self.end_date:
            query = query.filter(ScheduledSession.date <= self.end_date)
        return query

    def activity_hours(self) -> List[ActivityHours]:
        total = func.sum(ScheduledSession.duration_minutes)
        rows = self._filtered(
            self.db.query(
                Activity.id,
                Activity.name,
                Category.name,
                Category.color,
                total.label("total_minutes"),
                func.count(ScheduledSession.id),
            )
            .select_from(ScheduledSession)
            .join(Activity, ScheduledSession.activity_id == Activity.id)
            .join(Category, Activity.category_id == Category.id)
        ).group_by(Activity.id, Activity.name, Category.name, Category.color).order_by(total.desc(), Activity.name).all()

        return [
            ActivityHours(
                activity_id=activity_id,
                activity_name=activity_name,
                category_name=category_name,
                category_color=category_color,
                total_minutes=minutes or 0,
                total_hours=_hours(minutes),
                session_count=count,
            )
            for activity_id, activity_name, category_name, category_color, minutes, count in rows
        ]

    def category_hours(self) -> List[CategoryHours]:
        total = func.sum(ScheduledSession.duration_minutes)
        rows = self._filtered(
            self.db.query(
                Category.id,
                Category.name,
                Category.color,
                total.label("total_minutes"),
                func.count(ScheduledSession.id),
            )
            .select_from(ScheduledSession)
            .join(Activity, ScheduledSession.activity_id == Activity.id)
            .join(Category, Activity.category_id == Category.id)
        ).group_by(Category.id, Category.name, Category.color).order_by(total.desc(), Category.name).all()

        return [
            CategoryHours(
                category_id=category_id,
                category_name=name,
                category_color=color,
                total_minutes=minutes or 0,
                total_hours=_hours(minutes),
                session_count=count,
            )
            for category_id, name, color, minutes, count in rows
        ]

    def daily_stats(self) -> List[DailyStats]:
        rows = self._filtered(
            self.db.query(
                ScheduledSession.date,
                func.sum(ScheduledSession.duration_minutes),
                func.count(ScheduledSession.id),
            )
        ).group_by(ScheduledSession.date).order_by(ScheduledSession.date).all()

        return [
            DailyStats(date=day, total_minutes=minutes or 0, total_hours=_hours(minutes), session_count=count)
            for day, minutes, count in rows
        ]

    def summary(self) -> AnalyticsSummary:
        count, minutes, avg_minutes, days = self._filtered(
            self.db.query(
                func.count(ScheduledSession.id),
                func.sum(ScheduledSession.duration_minutes),
                func.avg(ScheduledSession.duration_minutes),
                func.count(distinct(ScheduledSession.date)),
            )
        ).one()

        total_hours = _hours(minutes)
        sessions_per = func.count(ScheduledSession.id)

        top_activity = self._filtered(
            self.db.query(Activity.name, sessions_per)
            .select_from(ScheduledSession)
            .join(Activity, ScheduledSession.activity_id == Activity.id)
        ).group_by(Activity.id, Activity.name).order_by(sessions_per.desc(), Activity.name).first()

        top_category = self._filtered(
            self.db.query(Category.name, Category.color, sessions_per)
            .select_from(ScheduledSession)
            .join(Activity, ScheduledSession.activity_id == Activity.id)
            .join(Category, Activity.category_id == Category.id)
        ).group_by(Category.id, Category.name, Category.color).order_by(sessions_per.desc(), Category.name).first()

        return AnalyticsSummary(
            total_sessions=count or 0,
            total_minutes=minutes or 0,
            total_hours=total_hours,
            avg_hours_per_session=_hours(avg_minutes),
            avg_hours_per_day=round(total_hours / days, 2) if days else 0,
            days_with_sessions=days or 0,
            most_used_activity=MostUsedActivity(activity_name=top_activity[0], session_count=top_activity[1]) if top_activity else None,
            most_used_category=MostUsedCategory(
                category_name=top_category[0], category_color=top_category[1], session_count=top_category[2]
            ) if top_category else None,
        )
