"""Root pytest configuration.

Provides an in-memory SQLite database (aiosqlite) with the full schema and a
small seeding helper, shared by the query, core and web API tests.
"""

import os
import uuid
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from sqlalchemy import insert
from sqlalchemy.pool import StaticPool

# Load environment variables before tests run
_root = Path(__file__).parent
load_dotenv(_root / ".env")
load_dotenv(_root / ".env.local", override=True)

os.environ.setdefault("JWT_SECRET", "test-secret-key-for-session-tokens-0123456789")

from core.database import Database
from core.enums import PurchaseStatus, QuestionType, UserRole
from core.storage import ObjectStore
from core.tables import (
    attachments,
    chapters,
    courses,
    purchases,
    quiz_attempts,
    quiz_questions,
    quiz_results,
    quiz_student_settings,
    quizzes,
    user_progress,
    users,
)


class Seeder:
    """Inserts rows with sensible defaults. Every helper returns the row id."""

    def __init__(self, conn):
        self.conn = conn

    async def user(self, id="user-1", role=UserRole.USER, study_type=None, full_name=None):
        await self.conn.execute(
            insert(users).values(
                id=id,
                role=role,
                study_type=study_type,
                full_name=full_name or f"User {id}",
                phone_number="01000000000",
            )
        )
        return id

    async def course(self, id="course-1", price=0, is_published=True, title="Algebra"):
        await self.conn.execute(
            insert(courses).values(
                id=id, title=title, price=price, is_published=is_published
            )
        )
        return id

    async def purchase(
        self,
        user_id="user-1",
        course_id="course-1",
        status=PurchaseStatus.ACTIVE,
        created_at=None,
    ):
        id = str(uuid.uuid4())
        values = dict(id=id, user_id=user_id, course_id=course_id, status=status)
        if created_at is not None:
            values["created_at"] = created_at
        await self.conn.execute(insert(purchases).values(**values))
        return id

    async def chapter(
        self,
        id,
        position,
        course_id="course-1",
        is_free=False,
        is_published=True,
        study_types=None,
        required_quiz_id=None,
        title=None,
        **extra,
    ):
        await self.conn.execute(
            insert(chapters).values(
                id=id,
                course_id=course_id,
                title=title or f"Chapter {id}",
                position=position,
                is_free=is_free,
                is_published=is_published,
                study_types=study_types,
                require_passing_quiz=required_quiz_id is not None,
                required_quiz_id=required_quiz_id,
                **extra,
            )
        )
        return id

    async def quiz(
        self,
        id,
        position,
        course_id="course-1",
        is_published=True,
        max_attempts=1,
        title=None,
    ):
        await self.conn.execute(
            insert(quizzes).values(
                id=id,
                course_id=course_id,
                title=title or f"Quiz {id}",
                position=position,
                is_published=is_published,
                max_attempts=max_attempts,
            )
        )
        return id

    async def question(self, quiz_id, position, text="2 + 2 = ?", correct_answer="4"):
        id = str(uuid.uuid4())
        await self.conn.execute(
            insert(quiz_questions).values(
                id=id,
                quiz_id=quiz_id,
                text=text,
                type=QuestionType.SHORT_ANSWER,
                correct_answer=correct_answer,
                points=1,
                position=position,
            )
        )
        return id

    async def result(self, quiz_id, percentage, student_id="user-1", created_at=None):
        id = str(uuid.uuid4())
        values = dict(
            id=id,
            student_id=student_id,
            quiz_id=quiz_id,
            score=percentage,
            total_points=100,
            percentage=percentage,
        )
        if created_at is not None:
            values["created_at"] = created_at
            values["submitted_at"] = created_at
        await self.conn.execute(insert(quiz_results).values(**values))
        return id

    async def attempt(self, quiz_id, student_id="user-1", completed_at=None):
        await self.conn.execute(
            insert(quiz_attempts).values(
                student_id=student_id,
                quiz_id=quiz_id,
                started_at=datetime(2026, 1, 1, 10, 0),
                completed_at=completed_at,
            )
        )

    async def student_setting(self, quiz_id, max_attempts, student_id="user-1"):
        await self.conn.execute(
            insert(quiz_student_settings).values(
                student_id=student_id, quiz_id=quiz_id, max_attempts=max_attempts
            )
        )

    async def progress(self, chapter_id, user_id="user-1", created_at=None):
        values = dict(user_id=user_id, chapter_id=chapter_id, is_completed=True)
        if created_at is not None:
            values["created_at"] = created_at
        await self.conn.execute(insert(user_progress).values(**values))

    async def attachment(self, chapter_id, name, position):
        id = str(uuid.uuid4())
        await self.conn.execute(
            insert(attachments).values(
                id=id,
                chapter_id=chapter_id,
                name=name,
                url=f"https://cdn.example.com/{name}",
                position=position,
            )
        )
        return id


@pytest_asyncio.fixture
async def database():
    """Fresh in-memory database with every table created."""
    db = Database(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await db.create_all()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def db_conn(database):
    """A connection whose changes are committed when the test finishes."""
    async with database.transaction() as conn:
        yield conn


@pytest_asyncio.fixture
async def seed(db_conn):
    return Seeder(db_conn)


@pytest.fixture
def seeding(database):
    """
    Seed inside a committed transaction of its own.

    For tests that issue requests afterwards: the in-memory database has a
    single shared connection, so rows must be committed before the app opens
    its own connection.
    """

    @asynccontextmanager
    async def _seeding():
        async with database.transaction() as conn:
            yield Seeder(conn)

    return _seeding


class FakeObjectStore(ObjectStore):
    """ObjectStore double that records calls instead of talking to S3."""

    def __init__(self, fail_on_part=None, fail_on_put=False):
        super().__init__(None, "test-bucket", "https://cdn.example.com/")
        self.fail_on_part = fail_on_part
        self.fail_on_put = fail_on_put
        self.calls = []

    async def put_object(self, key, body, content_type):
        if self.fail_on_put:
            raise RuntimeError("put failed")
        self.calls.append(("put", key, len(body), content_type))

    async def create_multipart_upload(self, key, content_type):
        self.calls.append(("create", key, content_type))
        return "upload-1"

    async def upload_part(self, key, upload_id, part_number, body):
        if part_number == self.fail_on_part:
            raise RuntimeError(f"part {part_number} failed")
        self.calls.append(("part", part_number, len(body)))
        return f"etag-{part_number}"

    async def complete_multipart_upload(self, key, upload_id, parts):
        self.calls.append(("complete", upload_id, [p["PartNumber"] for p in parts]))

    async def abort_multipart_upload(self, key, upload_id):
        self.calls.append(("abort", upload_id))

    def call_names(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def fake_store():
    return FakeObjectStore()
