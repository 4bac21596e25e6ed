"""Analytics API: hours per activity and category, daily stats and a summary."""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import User
from ..schemas import ActivityHours, CategoryHours, DailyStats, AnalyticsSummary
from ..auth import get_current_user
from ..services.analytics_service import AnalyticsService

router = APIRouter(tags=["analytics"])


def get_analytics(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    start_date: Optional[str] = Query(None, alias="startDate", description="Inclusive, YYYY-MM-DD"),
    end_date: Optional[str] = Query(None, alias="endDate", description="Inclusive, YYYY-MM-DD"),
) -> AnalyticsService:
    return AnalyticsService(db, current_user.id, start_date, end_date)


@router.get("/activity-hours", response_model=List[ActivityHours])
def activity_hours(analytics: AnalyticsService = Depends(get_analytics)):
    return analytics.activity_hours()


@router.get("/category-hours", response_model=List[CategoryHours])
def category_hours(analytics: AnalyticsService = Depends(get_analytics)):
    return analytics.category_hours()


@router.get("/daily-stats", response_model=List[DailyStats])
def daily_stats(analytics: AnalyticsService = Depends(get_analytics)):
    return analytics.daily_stats()


@router.get("/summary", response_model=AnalyticsSummary)
def summary(analytics: AnalyticsService = Depends(get_analytics)):
    return analytics.summary()
