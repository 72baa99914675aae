"""Tests for the sequential lock engine (pure, no database)."""

from core.access.catalog import merge_catalog
from core.access.locks import (
    COURSE_ACCESS_REQUIRED,
    REQUIRED_QUIZ_NOT_PASSED,
    STUDY_TYPE_MISMATCH,
    SequentialLockEngine,
)
from core.access.types import Learner, LockRule
from core.types import Chapter, Quiz


def _chapter(id, position, **kwargs):
    return Chapter(id=id, course_id="c1", title=f"Chapter {id}", position=position, **kwargs)


def _quiz(id, position, title=None):
    return Quiz(id=id, course_id="c1", title=title or f"Quiz {id}", position=position)


def _learner(has_access=True, study_type=None, **best):
    return Learner(
        user_id="u1", has_access=has_access, study_type=study_type, best_percentages=best
    )


def _sample_catalog():
    """[Chapter A (free), Quiz Q1, Chapter B]"""
    return merge_catalog(
        [_chapter("A", 1, is_free=True), _chapter("B", 3)],
        [_quiz("Q1", 2, title="Basics check")],
    )


def _locks(engine, catalog):
    return {entry.item.id: entry.decision for entry in engine.evaluate(catalog)}


# =====================================================
# Preceding quiz
# =====================================================


class TestPrecedingQuiz:
    def test_passed_quiz_unlocks_everything(self):
        engine = SequentialLockEngine(_learner(Q1=60))

        locks = _locks(engine, _sample_catalog())

        assert not any(decision.is_locked for decision in locks.values())

    def test_failed_quiz_locks_following_chapter(self):
        engine = SequentialLockEngine(_learner(Q1=40))

        locks = _locks(engine, _sample_catalog())

        assert not locks["A"].is_locked
        assert not locks["Q1"].is_locked
        assert locks["B"].is_locked
        assert locks["B"].rule == LockRule.PRECEDING_QUIZ
        assert "Basics check" in locks["B"].lock_reason
        assert "50%" in locks["B"].lock_reason

    def test_quiz_never_taken_counts_as_not_passed(self):
        engine = SequentialLockEngine(_learner())

        locks = _locks(engine, _sample_catalog())

        assert locks["B"].is_locked

    def test_exactly_fifty_percent_passes(self):
        engine = SequentialLockEngine(_learner(Q1=50))

        assert not _locks(engine, _sample_catalog())["B"].is_locked

    def test_only_nearest_quiz_matters(self):
        """A failed earlier quiz does not lock items after a later passed quiz."""
        catalog = merge_catalog(
            [_chapter("A", 1), _chapter("B", 3), _chapter("C", 5)],
            [_quiz("Q1", 2), _quiz("Q2", 4)],
        )
        engine = SequentialLockEngine(_learner(Q1=10, Q2=90))

        locks = _locks(engine, catalog)

        assert locks["B"].is_locked
        assert locks["Q2"].is_locked
        assert not locks["C"].is_locked

    def test_quiz_is_locked_by_previous_quiz(self):
        catalog = merge_catalog([], [_quiz("Q1", 1), _quiz("Q2", 2)])
        engine = SequentialLockEngine(_learner(Q1=30))

        locks = _locks(engine, catalog)

        assert not locks["Q1"].is_locked
        assert locks["Q2"].rule == LockRule.PRECEDING_QUIZ


# =====================================================
# Course access
# =====================================================


class TestCourseAccess:
    def test_without_access_only_free_chapters_open(self):
        engine = SequentialLockEngine(_learner(has_access=False))

        locks = _locks(engine, _sample_catalog())

        assert not locks["A"].is_locked
        assert locks["Q1"].lock_reason == COURSE_ACCESS_REQUIRED
        assert locks["B"].lock_reason == COURSE_ACCESS_REQUIRED

    def test_free_chapter_after_failed_quiz_is_open_without_access(self):
        """Preceding-quiz rule only applies to learners with course access."""
        catalog = merge_catalog(
            [_chapter("A", 1), _chapter("F", 3, is_free=True)], [_quiz("Q1", 2)]
        )
        engine = SequentialLockEngine(_learner(has_access=False))

        assert not _locks(engine, catalog)["F"].is_locked


# =====================================================
# Study type and required quiz
# =====================================================


class TestChapterRestrictions:
    def test_study_type_mismatch_locks_chapter(self):
        catalog = [_chapter("A", 1, study_types=("سنتر",))]
        engine = SequentialLockEngine(_learner(study_type="أون لاين"))

        decision = _locks(engine, catalog)["A"]

        assert decision.lock_reason == STUDY_TYPE_MISMATCH
        assert decision.rule == LockRule.STUDY_TYPE

    def test_study_type_match_by_marker(self):
        catalog = [_chapter("A", 1, study_types=("طلاب أون لاين 2025",))]
        engine = SequentialLockEngine(_learner(study_type=" أون لاين "))

        assert not _locks(engine, catalog)["A"].is_locked

    def test_learner_without_study_type_is_not_restricted(self):
        catalog = [_chapter("A", 1, study_types=("سنتر",))]
        engine = SequentialLockEngine(_learner(study_type=None))

        assert not _locks(engine, catalog)["A"].is_locked

    def test_required_quiz_locks_regardless_of_position(self):
        """A chapter before its required quiz is still locked until it is passed."""
        catalog = merge_catalog(
            [_chapter("A", 1, require_passing_quiz=True, required_quiz_id="Q2")],
            [_quiz("Q2", 5)],
        )
        engine = SequentialLockEngine(_learner())

        decision = _locks(engine, catalog)["A"]

        assert decision.lock_reason == REQUIRED_QUIZ_NOT_PASSED
        assert decision.rule == LockRule.REQUIRED_QUIZ

    def test_required_quiz_passed_unlocks(self):
        catalog = [_chapter("A", 1, require_passing_quiz=True, required_quiz_id="Q2")]
        engine = SequentialLockEngine(_learner(Q2=75))

        assert not _locks(engine, catalog)["A"].is_locked

    def test_required_quiz_flag_without_quiz_id_is_ignored(self):
        catalog = [_chapter("A", 1, require_passing_quiz=True, required_quiz_id=None)]
        engine = SequentialLockEngine(_learner())

        assert not _locks(engine, catalog)["A"].is_locked

    def test_free_chapter_requiring_quiz_without_access(self):
        catalog = [
            _chapter("A", 1, is_free=True, require_passing_quiz=True, required_quiz_id="Q2")
        ]
        engine = SequentialLockEngine(_learner(has_access=False))

        decision = _locks(engine, catalog)["A"]

        assert decision.lock_reason == COURSE_ACCESS_REQUIRED
        assert decision.rule == LockRule.REQUIRED_QUIZ


# =====================================================
# Determinism and first accessible item
# =====================================================


class TestEvaluation:
    def test_repeated_evaluation_is_identical(self):
        engine = SequentialLockEngine(_learner(Q1=40))
        catalog = _sample_catalog()

        assert engine.evaluate(catalog) == engine.evaluate(catalog)

    def test_first_accessible_skips_locked_items(self):
        catalog = merge_catalog(
            [_chapter("A", 1, study_types=("سنتر",)), _chapter("B", 2)], []
        )
        engine = SequentialLockEngine(_learner(study_type="أونلاين"))

        assert engine.first_accessible(catalog).id == "B"

    def test_first_accessible_without_access_is_free_chapter(self):
        catalog = merge_catalog(
            [_chapter("A", 1), _chapter("F", 3, is_free=True)], [_quiz("Q1", 2)]
        )
        engine = SequentialLockEngine(_learner(has_access=False))

        assert engine.first_accessible(catalog).id == "F"

    def test_first_accessible_none_when_everything_locked(self):
        catalog = merge_catalog([_chapter("A", 1)], [_quiz("Q1", 2)])
        engine = SequentialLockEngine(_learner(has_access=False))

        assert engine.first_accessible(catalog) is None

    def test_first_accessible_can_be_quiz(self):
        catalog = merge_catalog([_chapter("A", 2, study_types=("سنتر",))], [_quiz("Q1", 1)])
        engine = SequentialLockEngine(_learner(study_type="أون لاين"))

        first = engine.first_accessible(catalog)

        assert first.kind == "quiz"
        assert first.id == "Q1"
