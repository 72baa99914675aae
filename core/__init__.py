"""
Core business logic - framework-agnostic.
Used by the web API and the storage scripts.
"""

# Database (SQLAlchemy)
from .database import Database, is_configured

# Configuration
from .config import StorageConfigError, get_storage_settings

# Course records
from .types import Chapter, Course, Purchase, Quiz

# Quiz attempts and course progress
from .attempts import AttemptPlan, AttemptsExhaustedError, start_attempt
from .course_progress import calculate_progress, get_course_progress

__all__ = [
    # Database
    "Database",
    "is_configured",
    # Configuration
    "StorageConfigError",
    "get_storage_settings",
    # Course records
    "Chapter",
    "Course",
    "Purchase",
    "Quiz",
    # Quiz attempts and course progress
    "AttemptPlan",
    "AttemptsExhaustedError",
    "start_attempt",
    "calculate_progress",
    "get_course_progress",
]
