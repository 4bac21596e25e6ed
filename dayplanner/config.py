"""
Environment configuration for the Daily Activity Planner.

Values come from the process environment, optionally loaded from a .env file.
"""

import logging
import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./dayplanner.db")

# Single implicit owner; there is no login
DEFAULT_OWNER_ID = int(os.getenv("DEFAULT_OWNER_ID", "1"))
DEFAULT_OWNER_NAME = os.getenv("DEFAULT_OWNER_NAME", "default")

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
API_TIMEOUT_SECONDS = float(os.getenv("API_TIMEOUT_SECONDS", "10"))

SEED_DEFAULT_CATEGORIES = os.getenv("SEED_DEFAULT_CATEGORIES", "true").lower() in ("1", "true", "yes")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def configure_logging(level: str = LOG_LEVEL):
    """Install a basic root handler once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        )
    root.setLevel(level)
