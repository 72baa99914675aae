# core/access/types.py
"""Access and lock decision records for the content access gate."""

import enum
from dataclasses import dataclass, field
from typing import Mapping

from ..types import CatalogItem


@dataclass(frozen=True)
class AccessState:
    """Course-level access signals for one learner.

    has_access: the learner may see course content (free course or active purchase)
    has_enrollment_record: an active purchase row exists (free courses included)
    """

    has_access: bool
    has_enrollment_record: bool


class LockRule(str, enum.Enum):
    """Which rule produced a lock."""

    COURSE_ACCESS = "course_access"
    STUDY_TYPE = "study_type"
    REQUIRED_QUIZ = "required_quiz"
    PRECEDING_QUIZ = "preceding_quiz"


@dataclass(frozen=True)
class LockDecision:
    is_locked: bool
    lock_reason: str | None = None
    rule: LockRule | None = None


UNLOCKED = LockDecision(is_locked=False)


@dataclass(frozen=True)
class Learner:
    """Everything the lock engine needs to know about the learner."""

    user_id: str | None
    has_access: bool
    study_type: str | None = None
    # quiz_id -> best percentage across all of the learner's results
    best_percentages: Mapping[str, float] = field(default_factory=dict)

    def best_percentage(self, quiz_id: str) -> float | None:
        return self.best_percentages.get(quiz_id)


@dataclass(frozen=True)
class EvaluatedItem:
    """A catalog item with its lock decision."""

    item: CatalogItem
    decision: LockDecision

    @property
    def is_locked(self) -> bool:
        return self.decision.is_locked
