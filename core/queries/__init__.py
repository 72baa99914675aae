"""Query layer for database operations using SQLAlchemy Core."""

from .content import (
    get_best_percentages,
    get_chapter_detail,
    get_completed_chapter_ids,
    list_published_chapters,
    list_published_quizzes,
)
from .courses import (
    get_active_purchase,
    get_course,
    get_published_course,
    get_user_study_type,
)

__all__ = [
    # Courses
    "get_course",
    "get_published_course",
    "get_active_purchase",
    "get_user_study_type",
    # Content
    "list_published_chapters",
    "list_published_quizzes",
    "get_best_percentages",
    "get_completed_chapter_ids",
    "get_chapter_detail",
]
