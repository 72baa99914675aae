"""Course-level access: may this learner see the course's content at all?"""

from sqlalchemy.ext.asyncio import AsyncConnection

from ..queries.courses import get_active_purchase
from ..types import Course, Purchase
from .types import AccessState


class AccessEvaluator:
    """
    Decides course access from the course price and the learner's purchase.

    `evaluate` is a pure predicate. `resolve` looks the purchase up through
    the injected connection and reports access and enrollment separately:
    a free course is accessible before any enrollment record exists, a paid
    course is not.
    """

    def __init__(self, conn: AsyncConnection):
        self.conn = conn

    @staticmethod
    def evaluate(course: Course, active_purchase: Purchase | None) -> bool:
        return course.price == 0 or active_purchase is not None

    async def resolve(self, course: Course, user_id: str | None) -> AccessState:
        if user_id is None:
            return AccessState(has_access=False, has_enrollment_record=False)

        purchase = await get_active_purchase(self.conn, user_id, course.id)
        return AccessState(
            has_access=self.evaluate(course, purchase),
            has_enrollment_record=purchase is not None,
        )
