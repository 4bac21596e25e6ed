from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List

TIME_PATTERN = r"^([01]\d|2[0-3]):(00|30)$"
END_TIME_PATTERN = r"^(([01]\d|2[0-3]):(00|30)|24:00)$"
DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
COLOR_PATTERN = r"^#[0-9a-fA-F]{6}$"

# ----------------- Category Schemas ---------------------


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    color: str = Field(..., pattern=COLOR_PATTERN)


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    color: Optional[str] = Field(None, pattern=COLOR_PATTERN)


class CategoryOut(BaseModel):
    id: int
    name: str
    color: str
    user_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

# ----------------- Activity Schemas ---------------------


class ActivityCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    category_id: int = Field(..., gt=0)


class ActivityUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    category_id: Optional[int] = Field(None, gt=0)


class ActivityOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    category_id: int
    user_id: Optional[int] = None
    category_name: str
    category_color: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

# ----------------- Session Schemas ---------------------


class SessionCreate(BaseModel):
    activity_id: int = Field(..., gt=0)
    date: str = Field(..., pattern=DATE_PATTERN)
    start_time: str = Field(..., pattern=TIME_PATTERN)
    end_time: str = Field(..., pattern=END_TIME_PATTERN)
    duration_minutes: int = Field(..., gt=0, multiple_of=30)
    notes: Optional[str] = Field(None, max_length=1000)


class SessionUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied."""
    activity_id: Optional[int] = Field(None, gt=0)
    date: Optional[str] = Field(None, pattern=DATE_PATTERN)
    start_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(None, pattern=END_TIME_PATTERN)
    duration_minutes: Optional[int] = Field(None, gt=0, multiple_of=30)
    notes: Optional[str] = Field(None, max_length=1000)


class SessionOut(BaseModel):
    id: int
    activity_id: int
    date: str
    start_time: str
    end_time: str
    duration_minutes: int
    notes: Optional[str] = None
    user_id: int
    created_at: datetime
    updated_at: datetime

    # Joined from the activity and its category
    activity_name: str
    activity_description: Optional[str] = None
    category_id: int
    category_name: str
    category_color: str

    class Config:
        from_attributes = True

# ----------------- Day Grid Schemas ---------------------


class SlotOut(BaseModel):
    index: int
    time: str
    label: str
    state: str  # "free" | "start" | "continuation"
    span: Optional[int] = None
    session: Optional[SessionOut] = None
    session_id: Optional[int] = None

    class Config:
        from_attributes = True


class DayGridOut(BaseModel):
    date: str
    slots: List[SlotOut]
    scroll_to_slot: int
    session_count: int

# ----------------- Analytics Schemas ---------------------


class ActivityHours(BaseModel):
    activity_id: int
    activity_name: str
    category_name: str
    category_color: str
    total_minutes: int
    total_hours: float
    session_count: int


class CategoryHours(BaseModel):
    category_id: int
    category_name: str
    category_color: str
    total_minutes: int
    total_hours: float
    session_count: int


class DailyStats(BaseModel):
    date: str
    total_minutes: int
    total_hours: float
    session_count: int


class MostUsedActivity(BaseModel):
    activity_name: str
    session_count: int


class MostUsedCategory(BaseModel):
    category_name: str
    category_color: str
    session_count: int


class AnalyticsSummary(BaseModel):
    total_sessions: int
    total_hours: float
    total_minutes: int
    avg_hours_per_session: float
    avg_hours_per_day: float
    days_with_sessions: int
    most_used_activity: Optional[MostUsedActivity] = None
    most_used_category: Optional[MostUsedCategory] = None
