# web_api/routes/courses.py
"""Course content API routes.

Endpoints:
- GET /api/courses/{course_id}/access - Course access for the current user
- GET /api/courses/{course_id}/content - Ordered chapters and quizzes with lock state
- GET /api/courses/{course_id}/first-content - Where "start learning" should land
- GET /api/courses/{course_id}/chapters/{chapter_id} - Chapter detail with navigation
- GET /api/courses/{course_id}/progress - Completion percentage
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncConnection

from core.access import CourseContent, EvaluatedItem, load_course_content
from core.access.catalog import neighbours
from core.types import Chapter, Course
from core.course_progress import get_course_progress
from core.queries import get_chapter_detail, get_published_course
from web_api.auth import get_current_user, get_optional_user
from web_api.dependencies import get_connection

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/courses", tags=["courses"])


def locked_response(reason: str | None) -> JSONResponse:
    return JSONResponse(status_code=403, content={"error": reason, "isLocked": True})


async def require_published_course(conn: AsyncConnection, course_id: str) -> Course:
    course = await get_published_course(conn, course_id)
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")
    return course


def serialize_content_item(content: CourseContent, entry: EvaluatedItem) -> dict:
    """Serialize one catalog entry for the course sidebar."""
    item = entry.item
    data = {
        "id": item.id,
        "type": item.kind,
        "title": item.title,
        "position": item.position,
        "isLocked": entry.decision.is_locked,
        "lockReason": entry.decision.lock_reason,
    }
    if isinstance(item, Chapter):
        data["isFree"] = item.is_free
        data["isCompleted"] = item.id in content.completed_chapter_ids
    else:
        data["maxAttempts"] = item.max_attempts
        data["bestPercentage"] = content.learner.best_percentage(item.id)
    return data


@router.get("/{course_id}/access")
async def get_course_access(
    course_id: str,
    user: dict = Depends(get_current_user),
    conn: AsyncConnection = Depends(get_connection),
):
    """Report whether the user may see the course and holds an enrollment record."""
    course = await require_published_course(conn, course_id)
    content = await load_course_content(conn, course, user["sub"])
    return {
        "hasAccess": content.access.has_access,
        "hasPurchase": content.access.has_enrollment_record,
    }


@router.get("/{course_id}/content")
async def get_course_content(
    course_id: str,
    user: dict | None = Depends(get_optional_user),
    conn: AsyncConnection = Depends(get_connection),
):
    """
    Get the course's published chapters and quizzes in learning order.

    Anonymous visitors get the same list with every non-free item locked.
    """
    course = await require_published_course(conn, course_id)
    content = await load_course_content(conn, course, user["sub"] if user else None)
    return [serialize_content_item(content, entry) for entry in content.items]


@router.get("/{course_id}/first-content")
async def get_first_content(
    course_id: str,
    user: dict = Depends(get_current_user),
    conn: AsyncConnection = Depends(get_connection),
):
    course = await require_published_course(conn, course_id)
    content = await load_course_content(conn, course, user["sub"])

    first = content.first_accessible()
    if first is None:
        return {"id": None, "type": None}
    return {"id": first.id, "type": first.kind}


@router.get("/{course_id}/chapters/{chapter_id}")
async def get_chapter(
    course_id: str,
    chapter_id: str,
    user: dict = Depends(get_current_user),
    conn: AsyncConnection = Depends(get_connection),
):
    """
    Get a chapter with its attachments and previous/next navigation.

    Returns 403 {"error", "isLocked"} when the chapter is locked for the user.
    """
    course = await require_published_course(conn, course_id)

    detail = await get_chapter_detail(conn, course_id, chapter_id)
    if not detail or not detail.chapter.is_published:
        raise HTTPException(status_code=404, detail="Chapter not found")

    content = await load_course_content(conn, course, user["sub"])
    found = content.find(chapter_id, "chapter")
    if found is None:
        raise HTTPException(status_code=404, detail="Chapter not found")

    index, entry = found
    if entry.is_locked:
        return locked_response(entry.decision.lock_reason)

    previous_item, next_item = neighbours(content.catalog, index)
    chapter = detail.chapter

    return {
        "id": chapter.id,
        "courseId": chapter.course_id,
        "title": chapter.title,
        "description": detail.description,
        "videoUrl": detail.video_url,
        "position": chapter.position,
        "isFree": chapter.is_free,
        "studyTypes": list(chapter.study_types),
        "attachments": [
            {
                "id": attachment.id,
                "name": attachment.name,
                "url": attachment.url,
                "position": attachment.position,
            }
            for attachment in detail.attachments
        ],
        "isCompleted": chapter.id in content.completed_chapter_ids,
        "nextChapterId": next_item.id if next_item else None,
        "previousChapterId": previous_item.id if previous_item else None,
        "nextContentType": next_item.kind if next_item else None,
        "previousContentType": previous_item.kind if previous_item else None,
    }


@router.get("/{course_id}/progress")
async def get_progress(
    course_id: str,
    user: dict = Depends(get_current_user),
    conn: AsyncConnection = Depends(get_connection),
):
    progress = await get_course_progress(conn, user["sub"], course_id)
    return {"progress": progress}
