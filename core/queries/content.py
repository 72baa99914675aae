"""Queries for course content: chapters, quizzes and the learner's results."""

from dataclasses import dataclass, field

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncConnection

from ..types import Chapter, Quiz
from ..tables import attachments, chapters, quiz_results, quizzes, user_progress


@dataclass(frozen=True)
class Attachment:
    id: str
    name: str
    url: str
    position: int


@dataclass(frozen=True)
class ChapterDetail:
    """Full chapter record as returned to a learner."""

    chapter: Chapter
    description: str | None
    video_url: str | None
    attachments: list[Attachment] = field(default_factory=list)


def _to_chapter(row) -> Chapter:
    return Chapter(
        id=row["id"],
        course_id=row["course_id"],
        title=row["title"],
        position=row["position"],
        is_free=bool(row["is_free"]),
        is_published=bool(row["is_published"]),
        study_types=tuple(row["study_types"] or ()),
        require_passing_quiz=bool(row["require_passing_quiz"]),
        required_quiz_id=row["required_quiz_id"],
    )


def _to_quiz(row) -> Quiz:
    return Quiz(
        id=row["id"],
        course_id=row["course_id"],
        title=row["title"],
        position=row["position"],
        is_published=bool(row["is_published"]),
        max_attempts=row["max_attempts"],
    )


async def list_published_chapters(
    conn: AsyncConnection, course_id: str
) -> list[Chapter]:
    """Get a course's published chapters in position order."""
    result = await conn.execute(
        select(chapters)
        .where(
            and_(chapters.c.course_id == course_id, chapters.c.is_published.is_(True))
        )
        .order_by(chapters.c.position, chapters.c.id)
    )
    return [_to_chapter(row) for row in result.mappings()]


async def list_published_quizzes(conn: AsyncConnection, course_id: str) -> list[Quiz]:
    """Get a course's published quizzes in position order."""
    result = await conn.execute(
        select(quizzes)
        .where(
            and_(quizzes.c.course_id == course_id, quizzes.c.is_published.is_(True))
        )
        .order_by(quizzes.c.position, quizzes.c.id)
    )
    return [_to_quiz(row) for row in result.mappings()]


async def get_published_quiz(
    conn: AsyncConnection, course_id: str, quiz_id: str
) -> Quiz | None:
    result = await conn.execute(
        select(quizzes).where(
            and_(
                quizzes.c.id == quiz_id,
                quizzes.c.course_id == course_id,
                quizzes.c.is_published.is_(True),
            )
        )
    )
    row = result.mappings().first()
    return _to_quiz(row) if row else None


async def get_best_percentages(
    conn: AsyncConnection, student_id: str, quiz_ids: list[str]
) -> dict[str, float]:
    """
    Get the learner's best percentage per quiz.

    Quizzes the learner never submitted are absent from the result.
    """
    if not quiz_ids:
        return {}

    result = await conn.execute(
        select(
            quiz_results.c.quiz_id,
            func.max(quiz_results.c.percentage).label("best_percentage"),
        )
        .where(
            and_(
                quiz_results.c.student_id == student_id,
                quiz_results.c.quiz_id.in_(quiz_ids),
            )
        )
        .group_by(quiz_results.c.quiz_id)
    )
    return {row.quiz_id: float(row.best_percentage) for row in result}


async def get_completed_chapter_ids(
    conn: AsyncConnection, user_id: str, chapter_ids: list[str]
) -> set[str]:
    """Get which of the given chapters the user has completed."""
    if not chapter_ids:
        return set()

    result = await conn.execute(
        select(user_progress.c.chapter_id).where(
            and_(
                user_progress.c.user_id == user_id,
                user_progress.c.chapter_id.in_(chapter_ids),
                user_progress.c.is_completed.is_(True),
            )
        )
    )
    return {row.chapter_id for row in result}


async def get_chapter_detail(
    conn: AsyncConnection, course_id: str, chapter_id: str
) -> ChapterDetail | None:
    """Get a chapter of a course with its attachments (in position order)."""
    result = await conn.execute(
        select(chapters).where(
            and_(chapters.c.id == chapter_id, chapters.c.course_id == course_id)
        )
    )
    row = result.mappings().first()
    if not row:
        return None

    attachment_result = await conn.execute(
        select(attachments)
        .where(attachments.c.chapter_id == chapter_id)
        .order_by(attachments.c.position, attachments.c.id)
    )

    return ChapterDetail(
        chapter=_to_chapter(row),
        description=row["description"],
        video_url=row["video_url"],
        attachments=[
            Attachment(
                id=a["id"],
                name=a["name"],
                url=a["url"],
                position=a["position"],
            )
            for a in attachment_result.mappings()
        ],
    )
