# web_api/tests/test_quizzes_api.py
"""Tests for quiz attempt and per-student settings endpoints."""

import pytest

from core.access.locks import preceding_quiz_reason
from core.enums import PurchaseStatus, UserRole

QUIZ_URL = "/api/courses/course-1/quizzes/q2"
SETTINGS_URL = "/api/quizzes/q1/student-settings"


async def seed_quiz_course(seeding, purchase_status=PurchaseStatus.ACTIVE):
    """q1 -> ch1 -> q2 in a paid course, with two questions on q2."""
    async with seeding() as seed:
        await seed.user()
        await seed.user("teacher", role=UserRole.TEACHER)
        await seed.course(price=150)
        await seed.quiz("q1", 1, title="Placement")
        await seed.chapter("ch1", 2)
        await seed.quiz("q2", 3, max_attempts=2)
        await seed.question("q2", 2, text="second")
        await seed.question("q2", 1, text="first")
        if purchase_status is not None:
            await seed.purchase(status=purchase_status)


class TestStartQuiz:
    @pytest.mark.asyncio
    async def test_requires_session(self, client):
        response = await client.get(QUIZ_URL)

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_requires_enrollment_record(self, client, seeding, login):
        await seed_quiz_course(seeding, purchase_status=None)
        login()

        response = await client.get(QUIZ_URL)

        assert response.status_code == 403
        assert response.json()["detail"] == "Course access required"

    @pytest.mark.asyncio
    async def test_locked_behind_preceding_quiz(self, client, seeding, login):
        await seed_quiz_course(seeding)
        login()

        response = await client.get(QUIZ_URL)

        assert response.status_code == 403
        assert response.json() == {
            "error": preceding_quiz_reason("Placement"),
            "isLocked": True,
        }

    @pytest.mark.asyncio
    async def test_starts_first_attempt_without_answers(self, client, seeding, login):
        await seed_quiz_course(seeding)
        async with seeding() as seed:
            await seed.result("q1", 70)
        login()

        response = await client.get(QUIZ_URL)

        assert response.status_code == 200
        data = response.json()
        assert [q["text"] for q in data["questions"]] == ["first", "second"]
        assert all("correctAnswer" not in q for q in data["questions"])
        assert data["currentAttempt"] == 1
        assert data["maxAttempts"] == 2
        assert data["remainingAttempts"] == 1
        assert data["isRetry"] is False

    @pytest.mark.asyncio
    async def test_reopening_counts_incomplete_attempt(self, client, seeding, login):
        await seed_quiz_course(seeding)
        async with seeding() as seed:
            await seed.result("q1", 70)
        login()

        await client.get(QUIZ_URL)
        second = await client.get(QUIZ_URL)

        assert second.status_code == 200
        assert second.json()["isRetry"] is True
        assert second.json()["retryReason"] == "incomplete"
        assert second.json()["currentAttempt"] == 1

    @pytest.mark.asyncio
    async def test_exhausted_attempts_rejected(self, client, seeding, login):
        await seed_quiz_course(seeding)
        async with seeding() as seed:
            await seed.result("q1", 70)
            await seed.result("q2", 20)
            await seed.result("q2", 30)
        login()

        response = await client.get(QUIZ_URL)

        assert response.status_code == 400
        assert response.json()["detail"] == "Maximum attempts reached for this quiz"

    @pytest.mark.asyncio
    async def test_unknown_quiz_not_found(self, client, seeding, login):
        await seed_quiz_course(seeding)
        login()

        response = await client.get("/api/courses/course-1/quizzes/missing")

        assert response.status_code == 404


class TestStudentSettings:
    @pytest.mark.asyncio
    async def test_students_are_forbidden(self, client, seeding, login):
        await seed_quiz_course(seeding)
        login("user-1")

        response = await client.get(SETTINGS_URL)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_teacher_manages_overrides(self, client, seeding, login):
        await seed_quiz_course(seeding)
        login("teacher")

        created = await client.post(
            SETTINGS_URL, json={"studentId": "user-1", "maxAttempts": 3}
        )
        listed = await client.get(SETTINGS_URL)
        deleted = await client.delete(SETTINGS_URL, params={"studentId": "user-1"})
        deleted_again = await client.delete(SETTINGS_URL, params={"studentId": "user-1"})

        assert created.json() == {"studentId": "user-1", "quizId": "q1", "maxAttempts": 3}
        assert [(s["studentId"], s["maxAttempts"]) for s in listed.json()] == [
            ("user-1", 3)
        ]
        assert listed.json()[0]["user"]["fullName"] == "User user-1"
        assert deleted.json() == {"success": True}
        assert deleted_again.status_code == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"maxAttempts": 3},
            {"studentId": "user-1"},
            {"studentId": "user-1", "maxAttempts": 0},
        ],
    )
    async def test_invalid_override_rejected(self, client, seeding, login, body):
        await seed_quiz_course(seeding)
        login("teacher")

        response = await client.post(SETTINGS_URL, json=body)

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid request data"

    @pytest.mark.asyncio
    async def test_delete_requires_student_id(self, client, seeding, login):
        await seed_quiz_course(seeding)
        login("teacher")

        response = await client.delete(SETTINGS_URL)

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_quiz_not_found(self, client, seeding, login):
        await seed_quiz_course(seeding)
        login("teacher")

        response = await client.get("/api/quizzes/missing/student-settings")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_override_lets_student_retry(self, client, seeding, login):
        await seed_quiz_course(seeding)
        async with seeding() as seed:
            await seed.result("q1", 70)
            await seed.result("q2", 20)
            await seed.result("q2", 30)
        login("teacher")
        await client.post(
            "/api/quizzes/q2/student-settings",
            json={"studentId": "user-1", "maxAttempts": 3},
        )
        login("user-1")

        response = await client.get(QUIZ_URL)

        assert response.status_code == 200
        assert response.json()["currentAttempt"] == 3
        assert response.json()["retryReason"] is None
