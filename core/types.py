# core/types.py
"""Typed course records shared by the query layer and the access gate.

Query functions decode database rows into these dataclasses at the boundary,
so catalog building and lock evaluation never see raw row mappings.

Catalog items (Chapter | Quiz) expose `kind` ("chapter" or "quiz"), which is
what the API reports as `type`.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Union

ContentKind = Literal["chapter", "quiz"]


@dataclass(frozen=True)
class Course:
    """A course as seen by the access gate."""

    id: str
    title: str
    price: float
    is_published: bool = True


@dataclass(frozen=True)
class Purchase:
    """An enrollment record for (user, course)."""

    id: str
    user_id: str
    course_id: str
    status: str
    created_at: datetime | None = None


@dataclass(frozen=True)
class Chapter:
    """A chapter in a course's content sequence."""

    id: str
    course_id: str
    title: str
    position: int
    is_free: bool = False
    is_published: bool = True
    study_types: tuple[str, ...] = ()  # empty = open to every study type
    require_passing_quiz: bool = False
    required_quiz_id: str | None = None

    @property
    def kind(self) -> ContentKind:
        return "chapter"


@dataclass(frozen=True)
class Quiz:
    """A quiz in a course's content sequence."""

    id: str
    course_id: str
    title: str
    position: int
    is_published: bool = True
    max_attempts: int = 1

    @property
    def kind(self) -> ContentKind:
        return "quiz"


# Type alias for catalog entries
CatalogItem = Union[Chapter, Quiz]


@dataclass(frozen=True)
class QuizResult:
    """One submitted quiz attempt."""

    student_id: str
    quiz_id: str
    percentage: float
    submitted_at: datetime | None = None

