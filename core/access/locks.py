# core/access/locks.py
"""Sequential content locking.

Walks a course's merged catalog left to right and decides, for every item,
whether the learner may open it. Rules, first match wins:

1. No course access and the item is not a free chapter -> course access required.
2. Chapter restricted to study types the learner's study type does not match.
3. Chapter that requires passing a specific quiz the learner has not passed.
4. The nearest preceding quiz in the sequence has not been passed
   (only checked for learners with course access).

"Passed" means a best percentage of at least PASSING_PERCENTAGE across all
of the learner's results for that quiz. Only the nearest preceding quiz
matters, not every earlier one.

Nothing is persisted: decisions are recomputed on every call.
"""

from .study_types import is_study_type_allowed
from ..types import CatalogItem, Chapter, Quiz
from .types import UNLOCKED, EvaluatedItem, Learner, LockDecision, LockRule

PASSING_PERCENTAGE = 50

COURSE_ACCESS_REQUIRED = "يجب شراء الكورس أولاً"
STUDY_TYPE_MISMATCH = "هذا المحتوى غير متاح لنوع الدراسة الخاص بك"
REQUIRED_QUIZ_NOT_PASSED = (
    f"يجب اجتياز الاختبار المطلوب بنسبة {PASSING_PERCENTAGE}% على الأقل"
)


def preceding_quiz_reason(quiz_title: str) -> str:
    return (
        f'يجب اجتياز الاختبار "{quiz_title}" '
        f"بنسبة {PASSING_PERCENTAGE}% على الأقل أولاً"
    )


def _locked(rule: LockRule, reason: str) -> LockDecision:
    return LockDecision(is_locked=True, lock_reason=reason, rule=rule)


class SequentialLockEngine:
    """Evaluates lock state for one learner over one course catalog."""

    def __init__(self, learner: Learner):
        self.learner = learner

    def has_passed(self, quiz_id: str) -> bool:
        best = self.learner.best_percentage(quiz_id)
        return best is not None and best >= PASSING_PERCENTAGE

    def evaluate_item(
        self, item: CatalogItem, preceding_quiz: Quiz | None
    ) -> LockDecision:
        """Decide one item, given the nearest quiz before it (if any)."""
        learner = self.learner
        is_chapter = isinstance(item, Chapter)

        if not learner.has_access and not (is_chapter and item.is_free):
            return _locked(LockRule.COURSE_ACCESS, COURSE_ACCESS_REQUIRED)

        if is_chapter:
            if not is_study_type_allowed(item.study_types, learner.study_type):
                return _locked(LockRule.STUDY_TYPE, STUDY_TYPE_MISMATCH)

            if item.require_passing_quiz and item.required_quiz_id:
                if not learner.has_access:
                    return _locked(LockRule.REQUIRED_QUIZ, COURSE_ACCESS_REQUIRED)
                if not self.has_passed(item.required_quiz_id):
                    return _locked(LockRule.REQUIRED_QUIZ, REQUIRED_QUIZ_NOT_PASSED)

        if learner.has_access and preceding_quiz is not None:
            if not self.has_passed(preceding_quiz.id):
                return _locked(
                    LockRule.PRECEDING_QUIZ, preceding_quiz_reason(preceding_quiz.title)
                )

        return UNLOCKED

    def evaluate(self, catalog: list[CatalogItem]) -> list[EvaluatedItem]:
        """Decide every item of the catalog in a single pass."""
        evaluated = []
        preceding_quiz: Quiz | None = None

        for item in catalog:
            evaluated.append(EvaluatedItem(item, self.evaluate_item(item, preceding_quiz)))
            if isinstance(item, Quiz):
                preceding_quiz = item

        return evaluated

    def is_accessible(self, entry: EvaluatedItem) -> bool:
        """Whether "start learning" navigation may land on this item."""
        decision = entry.decision

        if isinstance(entry.item, Quiz):
            return not decision.is_locked and self.learner.has_access

        if not decision.is_locked and self.learner.has_access:
            return True

        # Free previews only yield to study type and required quiz rules
        return entry.item.is_free and decision.rule not in (
            LockRule.STUDY_TYPE,
            LockRule.REQUIRED_QUIZ,
        )

    def first_accessible(self, catalog: list[CatalogItem]) -> CatalogItem | None:
        """Get the first item in catalog order the learner may open."""
        for entry in self.evaluate(catalog):
            if self.is_accessible(entry):
                return entry.item
        return None
