# web_api/routes/quizzes.py
"""Quiz API routes.

Endpoints:
- GET /api/courses/{course_id}/quizzes/{quiz_id} - Start (or restart) a quiz attempt
- GET /api/quizzes/{quiz_id}/student-settings - List per-student attempt overrides
- POST /api/quizzes/{quiz_id}/student-settings - Create or update an override
- DELETE /api/quizzes/{quiz_id}/student-settings?studentId= - Remove an override
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncConnection

from core.access import load_course_content
from core.attempts import AttemptsExhaustedError, start_attempt
from core.enums import UserRole
from core.queries.content import get_published_quiz
from core.queries.courses import get_user_role
from core.queries.quizzes import (
    delete_student_setting,
    list_questions,
    list_student_settings,
    quiz_exists,
    upsert_student_setting,
)
from web_api.auth import get_current_user
from web_api.dependencies import get_connection, get_transaction
from web_api.routes.courses import locked_response, require_published_course

logger = logging.getLogger(__name__)

router = APIRouter(tags=["quizzes"])

STAFF_ROLES = {UserRole.TEACHER.value, UserRole.ADMIN.value}


class StudentSettingRequest(BaseModel):
    studentId: str | None = None
    maxAttempts: int | None = None


async def require_staff(conn: AsyncConnection, user: dict) -> None:
    role = await get_user_role(conn, user["sub"])
    if role not in STAFF_ROLES:
        raise HTTPException(status_code=403, detail="Forbidden")


async def require_quiz(conn: AsyncConnection, quiz_id: str) -> None:
    if not await quiz_exists(conn, quiz_id):
        raise HTTPException(status_code=404, detail="Quiz not found")


@router.get("/api/courses/{course_id}/quizzes/{quiz_id}")
async def start_quiz(
    course_id: str,
    quiz_id: str,
    user: dict = Depends(get_current_user),
    conn: AsyncConnection = Depends(get_transaction),
):
    """
    Start an attempt at a quiz and return its questions (without answers).

    Requires an enrollment record even for free courses. The quiz must also
    be unlocked in the course sequence and have attempts left.
    """
    user_id = user["sub"]
    course = await require_published_course(conn, course_id)
    content = await load_course_content(conn, course, user_id)

    if not content.access.has_enrollment_record:
        raise HTTPException(status_code=403, detail="Course access required")

    quiz = await get_published_quiz(conn, course_id, quiz_id)
    found = content.find(quiz_id, "quiz")
    if quiz is None or found is None:
        raise HTTPException(status_code=404, detail="Quiz not found")

    _, entry = found
    if entry.is_locked:
        return locked_response(entry.decision.lock_reason)

    try:
        plan = await start_attempt(conn, user_id, quiz)
    except AttemptsExhaustedError as e:
        raise HTTPException(status_code=400, detail=str(e))

    questions = await list_questions(conn, quiz_id)

    return {
        "id": quiz.id,
        "courseId": quiz.course_id,
        "title": quiz.title,
        "position": quiz.position,
        "questions": [
            {
                "id": q.id,
                "text": q.text,
                "type": q.type,
                "options": q.options,
                "points": q.points,
                "imageUrl": q.image_url,
            }
            for q in questions
        ],
        "currentAttempt": plan.current_attempt,
        "maxAttempts": plan.max_attempts,
        "previousAttempts": plan.previous_attempts,
        "isRetry": plan.is_retry,
        "retryReason": plan.retry_reason,
        "remainingAttempts": plan.remaining_attempts,
    }


@router.get("/api/quizzes/{quiz_id}/student-settings")
async def get_student_settings(
    quiz_id: str,
    user: dict = Depends(get_current_user),
    conn: AsyncConnection = Depends(get_connection),
):
    await require_staff(conn, user)
    await require_quiz(conn, quiz_id)

    settings = await list_student_settings(conn, quiz_id)
    return [
        {
            "studentId": s.student_id,
            "quizId": s.quiz_id,
            "maxAttempts": s.max_attempts,
            "createdAt": s.created_at.isoformat() if s.created_at else None,
            "user": {
                "id": s.student_id,
                "fullName": s.full_name,
                "phoneNumber": s.phone_number,
            },
        }
        for s in settings
    ]


@router.post("/api/quizzes/{quiz_id}/student-settings")
async def save_student_setting(
    quiz_id: str,
    request: StudentSettingRequest,
    user: dict = Depends(get_current_user),
    conn: AsyncConnection = Depends(get_transaction),
):
    await require_staff(conn, user)

    if not request.studentId or request.maxAttempts is None or request.maxAttempts < 1:
        raise HTTPException(status_code=400, detail="Invalid request data")

    await require_quiz(conn, quiz_id)
    await upsert_student_setting(conn, request.studentId, quiz_id, request.maxAttempts)

    logger.info(
        f"Set max attempts of quiz {quiz_id} to {request.maxAttempts} "
        f"for student {request.studentId}"
    )
    return {
        "studentId": request.studentId,
        "quizId": quiz_id,
        "maxAttempts": request.maxAttempts,
    }


@router.delete("/api/quizzes/{quiz_id}/student-settings")
async def remove_student_setting(
    quiz_id: str,
    student_id: str | None = Query(None, alias="studentId"),
    user: dict = Depends(get_current_user),
    conn: AsyncConnection = Depends(get_transaction),
):
    """Remove an override so the student falls back to the quiz's max attempts."""
    await require_staff(conn, user)

    if not student_id:
        raise HTTPException(status_code=400, detail="Student ID required")

    await require_quiz(conn, quiz_id)
    if not await delete_student_setting(conn, student_id, quiz_id):
        raise HTTPException(status_code=404, detail="Student settings not found")

    return {"success": True}
