"""
Content access gate.

- catalog: merge chapters and quizzes into one ordered sequence
- evaluator: course-level access and enrollment signals
- locks: per-item sequential lock decisions
- gate: the single entry point used by the web API
"""

from .catalog import ContentCatalogBuilder, merge_catalog
from .evaluator import AccessEvaluator
from .gate import CourseContent, load_course_content
from .locks import PASSING_PERCENTAGE, SequentialLockEngine
from .study_types import is_study_type_allowed, study_type_matches
from ..types import CatalogItem, Chapter, Course, Purchase, Quiz, QuizResult
from .types import AccessState, EvaluatedItem, Learner, LockDecision, LockRule

__all__ = [
    "ContentCatalogBuilder",
    "merge_catalog",
    "AccessEvaluator",
    "CourseContent",
    "load_course_content",
    "PASSING_PERCENTAGE",
    "SequentialLockEngine",
    "is_study_type_allowed",
    "study_type_matches",
    "AccessState",
    "CatalogItem",
    "Chapter",
    "Course",
    "EvaluatedItem",
    "Learner",
    "LockDecision",
    "LockRule",
    "Purchase",
    "Quiz",
    "QuizResult",
]
