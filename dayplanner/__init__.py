"""Daily Activity Planner: day-grid session scheduling backend and client."""

__version__ = "1.0.0"
