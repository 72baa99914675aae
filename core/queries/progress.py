"""Queries for course completion progress."""

from datetime import datetime

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncConnection

from ..tables import chapters, quiz_results, quizzes, user_progress


async def count_published_content(conn: AsyncConnection, course_id: str) -> int:
    """Count published chapters plus published quizzes in a course."""
    chapter_count = await conn.execute(
        select(func.count(chapters.c.id)).where(
            and_(chapters.c.course_id == course_id, chapters.c.is_published.is_(True))
        )
    )
    quiz_count = await conn.execute(
        select(func.count(quizzes.c.id)).where(
            and_(quizzes.c.course_id == course_id, quizzes.c.is_published.is_(True))
        )
    )
    return chapter_count.scalar_one() + quiz_count.scalar_one()


async def count_completed_chapters(
    conn: AsyncConnection,
    user_id: str,
    course_id: str,
    since: datetime | None = None,
) -> int:
    """Count chapters of the course the user completed (optionally since a date)."""
    conditions = [
        user_progress.c.user_id == user_id,
        user_progress.c.is_completed.is_(True),
        chapters.c.course_id == course_id,
    ]
    if since is not None:
        conditions.append(user_progress.c.created_at >= since)

    result = await conn.execute(
        select(func.count(user_progress.c.id))
        .select_from(user_progress.join(chapters, chapters.c.id == user_progress.c.chapter_id))
        .where(and_(*conditions))
    )
    return result.scalar_one()


async def count_taken_quizzes(
    conn: AsyncConnection,
    user_id: str,
    course_id: str,
    since: datetime | None = None,
) -> int:
    """Count distinct published quizzes of the course the user submitted at least once."""
    conditions = [
        quiz_results.c.student_id == user_id,
        quizzes.c.course_id == course_id,
        quizzes.c.is_published.is_(True),
    ]
    if since is not None:
        conditions.append(quiz_results.c.created_at >= since)

    result = await conn.execute(
        select(func.count(func.distinct(quiz_results.c.quiz_id)))
        .select_from(quiz_results.join(quizzes, quizzes.c.id == quiz_results.c.quiz_id))
        .where(and_(*conditions))
    )
    return result.scalar_one()
