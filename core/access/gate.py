"""Single entry point for evaluating a learner's view of a course.

Every route that needs lock state (content list, first content, chapter
detail, quiz start) goes through load_course_content, so the rules live in
exactly one place.
"""

from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncConnection

from ..queries.content import get_best_percentages, get_completed_chapter_ids
from ..queries.courses import get_user_study_type
from .catalog import ContentCatalogBuilder, find_index
from .evaluator import AccessEvaluator
from .locks import SequentialLockEngine
from ..types import CatalogItem, Chapter, Course
from .types import AccessState, EvaluatedItem, Learner


@dataclass
class CourseContent:
    """A course's catalog as evaluated for one learner."""

    course: Course
    access: AccessState
    learner: Learner
    engine: SequentialLockEngine
    items: list[EvaluatedItem]
    completed_chapter_ids: set[str] = field(default_factory=set)

    @property
    def catalog(self) -> list[CatalogItem]:
        return [entry.item for entry in self.items]

    def find(self, item_id: str, kind: str) -> tuple[int, EvaluatedItem] | None:
        index = find_index(self.catalog, item_id, kind)
        if index is None:
            return None
        return index, self.items[index]

    def first_accessible(self) -> CatalogItem | None:
        for entry in self.items:
            if self.engine.is_accessible(entry):
                return entry.item
        return None


def _quiz_ids_to_check(catalog: list[CatalogItem]) -> list[str]:
    """Quizzes in the sequence plus quizzes required by chapters."""
    quiz_ids = {item.id for item in catalog if item.kind == "quiz"}
    quiz_ids.update(
        item.required_quiz_id
        for item in catalog
        if isinstance(item, Chapter) and item.required_quiz_id
    )
    return sorted(quiz_ids)


async def load_course_content(
    conn: AsyncConnection, course: Course, user_id: str | None
) -> CourseContent:
    """Build the catalog for a course and evaluate every item for the learner."""
    access = await AccessEvaluator(conn).resolve(course, user_id)
    catalog = await ContentCatalogBuilder(conn).build(course.id)

    best_percentages: dict[str, float] = {}
    study_type = None
    completed: set[str] = set()

    # Learner data only matters once the learner can see the course
    if user_id is not None and access.has_access:
        best_percentages = await get_best_percentages(
            conn, user_id, _quiz_ids_to_check(catalog)
        )
        study_type = await get_user_study_type(conn, user_id)
        completed = await get_completed_chapter_ids(
            conn, user_id, [item.id for item in catalog if item.kind == "chapter"]
        )

    learner = Learner(
        user_id=user_id,
        has_access=access.has_access,
        study_type=study_type,
        best_percentages=best_percentages,
    )
    engine = SequentialLockEngine(learner)

    return CourseContent(
        course=course,
        access=access,
        learner=learner,
        engine=engine,
        items=engine.evaluate(catalog),
        completed_chapter_ids=completed,
    )
