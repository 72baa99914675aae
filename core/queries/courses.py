"""Queries for courses, enrollment records and learner profiles."""

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncConnection

from ..types import Course, Purchase
from ..enums import PurchaseStatus, UserRole
from ..tables import courses, purchases, users


def _to_course(row) -> Course:
    return Course(
        id=row["id"],
        title=row["title"],
        price=float(row["price"] or 0),
        is_published=bool(row["is_published"]),
    )


async def get_course(conn: AsyncConnection, course_id: str) -> Course | None:
    """Get a course by id, published or not."""
    result = await conn.execute(select(courses).where(courses.c.id == course_id))
    row = result.mappings().first()
    return _to_course(row) if row else None


async def get_published_course(
    conn: AsyncConnection, course_id: str
) -> Course | None:
    """Get a course by id only if it is published."""
    result = await conn.execute(
        select(courses).where(
            and_(courses.c.id == course_id, courses.c.is_published.is_(True))
        )
    )
    row = result.mappings().first()
    return _to_course(row) if row else None


async def get_active_purchase(
    conn: AsyncConnection, user_id: str, course_id: str
) -> Purchase | None:
    """Get the user's ACTIVE purchase (enrollment record) for a course."""
    result = await conn.execute(
        select(purchases).where(
            and_(
                purchases.c.user_id == user_id,
                purchases.c.course_id == course_id,
                purchases.c.status == PurchaseStatus.ACTIVE,
            )
        )
    )
    row = result.mappings().first()
    if not row:
        return None

    return Purchase(
        id=row["id"],
        user_id=row["user_id"],
        course_id=row["course_id"],
        status=PurchaseStatus(row["status"]).value,
        created_at=row["created_at"],
    )


async def get_user_study_type(conn: AsyncConnection, user_id: str) -> str | None:
    """Get the learner's study type label, or None if unset."""
    result = await conn.execute(
        select(users.c.study_type).where(users.c.id == user_id)
    )
    row = result.first()
    return row.study_type if row and row.study_type else None


async def get_user_role(conn: AsyncConnection, user_id: str) -> str | None:
    """Get the user's role as stored in the database."""
    result = await conn.execute(select(users.c.role).where(users.c.id == user_id))
    row = result.first()
    return UserRole(row.role).value if row else None
