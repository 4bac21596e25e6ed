from .api_client import SchedulingApiClient
from .planner import DayPlanner
