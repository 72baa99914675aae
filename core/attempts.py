"""
Quiz attempt accounting.

An attempt counts once it is started: attempts used are the submitted
results plus one for an attempt row that was opened but never completed.
The effective limit is the per-student override when a teacher set one,
otherwise the quiz's own max_attempts.
"""

import logging
from dataclasses import dataclass
from typing import Literal

from sqlalchemy.ext.asyncio import AsyncConnection

from .types import Quiz
from .queries.quizzes import (
    QuizAttempt,
    count_submitted_results,
    get_attempt,
    get_student_max_attempts,
    replace_attempt,
)

logger = logging.getLogger(__name__)

RetryReason = Literal["submitted", "completed", "incomplete"]


class AttemptsExhaustedError(Exception):
    """The student has no attempts left for this quiz."""


@dataclass(frozen=True)
class AttemptPlan:
    """What starting a quiz now means for the student."""

    current_attempt: int
    max_attempts: int
    previous_attempts: int
    is_retry: bool
    retry_reason: RetryReason | None
    remaining_attempts: int


def effective_max_attempts(quiz_max_attempts: int, override: int | None) -> int:
    return override if override is not None else quiz_max_attempts


def plan_attempt(
    max_attempts: int, submitted: int, attempt: QuizAttempt | None
) -> AttemptPlan:
    """
    Decide whether a new attempt may start.

    Raises:
        AttemptsExhaustedError: If the attempts used already reach max_attempts
    """
    has_incomplete = attempt is not None and attempt.completed_at is None
    used = submitted + (1 if has_incomplete else 0)

    if used >= max_attempts:
        if has_incomplete:
            raise AttemptsExhaustedError(
                "Maximum attempts reached for this quiz. "
                "You have an incomplete attempt that counts as an attempt."
            )
        raise AttemptsExhaustedError("Maximum attempts reached for this quiz")

    retry_reason: RetryReason | None = None
    if attempt is not None:
        if has_incomplete:
            retry_reason = "incomplete"
        elif submitted > 0:
            retry_reason = "submitted"
        else:
            retry_reason = "completed"

    current = submitted + 1
    return AttemptPlan(
        current_attempt=current,
        max_attempts=max_attempts,
        previous_attempts=submitted,
        is_retry=retry_reason is not None,
        retry_reason=retry_reason,
        remaining_attempts=max(0, max_attempts - current),
    )


async def start_attempt(
    conn: AsyncConnection, student_id: str, quiz: Quiz
) -> AttemptPlan:
    """
    Open a fresh attempt row for the student, replacing any previous one.

    Raises:
        AttemptsExhaustedError: If no attempts are left (nothing is written)
    """
    override = await get_student_max_attempts(conn, student_id, quiz.id)
    max_attempts = effective_max_attempts(quiz.max_attempts, override)
    submitted = await count_submitted_results(conn, student_id, quiz.id)
    attempt = await get_attempt(conn, student_id, quiz.id)

    plan = plan_attempt(max_attempts, submitted, attempt)
    await replace_attempt(conn, student_id, quiz.id)

    logger.info(
        f"Started attempt {plan.current_attempt}/{plan.max_attempts} "
        f"of quiz {quiz.id} for {student_id} (retry: {plan.retry_reason})"
    )
    return plan
