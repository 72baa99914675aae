"""Course completion percentage for a learner."""

from sqlalchemy.ext.asyncio import AsyncConnection

from .queries.courses import get_active_purchase
from .queries.progress import (
    count_completed_chapters,
    count_published_content,
    count_taken_quizzes,
)


def calculate_progress(completed: int, total: int) -> int:
    """Percentage of content done, rounded half up. 0 for an empty course."""
    if total <= 0:
        return 0
    return (completed * 200 + total) // (total * 2)


async def get_course_progress(
    conn: AsyncConnection, user_id: str, course_id: str
) -> int:
    """
    Completed chapters plus quizzes taken at least once, over all published
    content. When the learner has an active purchase, only progress recorded
    since the purchase counts (a re-bought course starts from zero).
    """
    total = await count_published_content(conn, course_id)
    if total == 0:
        return 0

    purchase = await get_active_purchase(conn, user_id, course_id)
    since = purchase.created_at if purchase else None

    chapters_done = await count_completed_chapters(conn, user_id, course_id, since)
    quizzes_taken = await count_taken_quizzes(conn, user_id, course_id, since)
    return calculate_progress(chapters_done + quizzes_taken, total)
