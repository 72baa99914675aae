"""Queries for quiz questions, attempts and per-student attempt settings."""

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import and_, delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncConnection

from ..enums import QuestionType
from ..tables import (
    quiz_attempts,
    quiz_questions,
    quiz_results,
    quiz_student_settings,
    quizzes,
    users,
)


@dataclass(frozen=True)
class QuizQuestion:
    """A question as shown to a student (no correct answer)."""

    id: str
    text: str
    type: str
    options: str | None
    points: int
    image_url: str | None
    position: int


@dataclass(frozen=True)
class QuizAttempt:
    student_id: str
    quiz_id: str
    started_at: datetime | None
    completed_at: datetime | None


@dataclass(frozen=True)
class StudentSetting:
    student_id: str
    quiz_id: str
    max_attempts: int
    full_name: str | None
    phone_number: str | None
    created_at: datetime | None


async def quiz_exists(conn: AsyncConnection, quiz_id: str) -> bool:
    result = await conn.execute(select(quizzes.c.id).where(quizzes.c.id == quiz_id))
    return result.first() is not None


async def list_questions(conn: AsyncConnection, quiz_id: str) -> list[QuizQuestion]:
    """Get a quiz's questions in position order, without correct answers."""
    result = await conn.execute(
        select(
            quiz_questions.c.id,
            quiz_questions.c.text,
            quiz_questions.c.type,
            quiz_questions.c.options,
            quiz_questions.c.points,
            quiz_questions.c.image_url,
            quiz_questions.c.position,
        )
        .where(quiz_questions.c.quiz_id == quiz_id)
        .order_by(quiz_questions.c.position)
    )
    return [
        QuizQuestion(
            id=row["id"],
            text=row["text"],
            type=QuestionType(row["type"]).value,
            options=row["options"],
            points=row["points"],
            image_url=row["image_url"],
            position=row["position"],
        )
        for row in result.mappings()
    ]


async def count_submitted_results(
    conn: AsyncConnection, student_id: str, quiz_id: str
) -> int:
    result = await conn.execute(
        select(func.count(quiz_results.c.id)).where(
            and_(
                quiz_results.c.student_id == student_id,
                quiz_results.c.quiz_id == quiz_id,
            )
        )
    )
    return result.scalar_one()


async def get_attempt(
    conn: AsyncConnection, student_id: str, quiz_id: str
) -> QuizAttempt | None:
    result = await conn.execute(
        select(quiz_attempts).where(
            and_(
                quiz_attempts.c.student_id == student_id,
                quiz_attempts.c.quiz_id == quiz_id,
            )
        )
    )
    row = result.mappings().first()
    if not row:
        return None
    return QuizAttempt(
        student_id=row["student_id"],
        quiz_id=row["quiz_id"],
        started_at=row["started_at"],
        completed_at=row["completed_at"],
    )


async def replace_attempt(conn: AsyncConnection, student_id: str, quiz_id: str) -> None:
    """Drop any existing attempt row and open a fresh one."""
    await conn.execute(
        delete(quiz_attempts).where(
            and_(
                quiz_attempts.c.student_id == student_id,
                quiz_attempts.c.quiz_id == quiz_id,
            )
        )
    )
    await conn.execute(
        insert(quiz_attempts).values(student_id=student_id, quiz_id=quiz_id)
    )


async def get_student_max_attempts(
    conn: AsyncConnection, student_id: str, quiz_id: str
) -> int | None:
    """Get the per-student max attempts override, if any."""
    result = await conn.execute(
        select(quiz_student_settings.c.max_attempts).where(
            and_(
                quiz_student_settings.c.student_id == student_id,
                quiz_student_settings.c.quiz_id == quiz_id,
            )
        )
    )
    row = result.first()
    return row.max_attempts if row else None


async def list_student_settings(
    conn: AsyncConnection, quiz_id: str
) -> list[StudentSetting]:
    """Get all per-student overrides for a quiz, newest first."""
    result = await conn.execute(
        select(
            quiz_student_settings.c.student_id,
            quiz_student_settings.c.quiz_id,
            quiz_student_settings.c.max_attempts,
            quiz_student_settings.c.created_at,
            users.c.full_name,
            users.c.phone_number,
        )
        .join(users, users.c.id == quiz_student_settings.c.student_id)
        .where(quiz_student_settings.c.quiz_id == quiz_id)
        .order_by(quiz_student_settings.c.created_at.desc(), quiz_student_settings.c.id.desc())
    )
    return [
        StudentSetting(
            student_id=row["student_id"],
            quiz_id=row["quiz_id"],
            max_attempts=row["max_attempts"],
            full_name=row["full_name"],
            phone_number=row["phone_number"],
            created_at=row["created_at"],
        )
        for row in result.mappings()
    ]


async def upsert_student_setting(
    conn: AsyncConnection, student_id: str, quiz_id: str, max_attempts: int
) -> None:
    """Create or update a per-student max attempts override."""
    result = await conn.execute(
        update(quiz_student_settings)
        .where(
            and_(
                quiz_student_settings.c.student_id == student_id,
                quiz_student_settings.c.quiz_id == quiz_id,
            )
        )
        .values(max_attempts=max_attempts)
    )
    if result.rowcount == 0:
        await conn.execute(
            insert(quiz_student_settings).values(
                student_id=student_id, quiz_id=quiz_id, max_attempts=max_attempts
            )
        )


async def delete_student_setting(
    conn: AsyncConnection, student_id: str, quiz_id: str
) -> bool:
    """Remove a per-student override. Returns False if none existed."""
    result = await conn.execute(
        delete(quiz_student_settings).where(
            and_(
                quiz_student_settings.c.student_id == student_id,
                quiz_student_settings.c.quiz_id == quiz_id,
            )
        )
    )
    return result.rowcount > 0
