"""SQLAlchemy Core table definitions for the database schema."""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    UniqueConstraint,
    func,
)

from .enums import purchase_status_enum, question_type_enum, user_role_enum

# Naming convention for constraints
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}
metadata = MetaData(naming_convention=convention)


# =====================================================
# 1. USERS
# =====================================================
users = Table(
    "users",
    metadata,
    Column("id", Text, primary_key=True),
    Column("full_name", Text),
    Column("phone_number", Text),
    Column("role", user_role_enum, nullable=False, server_default="USER"),
    Column("study_type", Text),  # e.g. "أون لاين" / "سنتر"; NULL = not set
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), server_default=func.now()),
)


# =====================================================
# 2. COURSES
# =====================================================
courses = Table(
    "courses",
    metadata,
    Column("id", Text, primary_key=True),
    Column("user_id", Text, ForeignKey("users.id", ondelete="SET NULL")),
    Column("title", Text, nullable=False),
    Column("description", Text),
    Column("image_url", Text),
    Column("price", Float, nullable=False, server_default="0"),
    Column("is_published", Boolean, nullable=False, server_default="0"),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), server_default=func.now()),
)


# =====================================================
# 3. PURCHASES
# The enrollment record: one row per (user, course), free courses included
# =====================================================
purchases = Table(
    "purchases",
    metadata,
    Column("id", Text, primary_key=True),
    Column(
        "user_id",
        Text,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "course_id",
        Text,
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("status", purchase_status_enum, nullable=False, server_default="ACTIVE"),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    UniqueConstraint("user_id", "course_id", name="uq_purchases_user_course"),
    Index("idx_purchases_course_id", "course_id"),
)


# =====================================================
# 4. QUIZZES
# =====================================================
quizzes = Table(
    "quizzes",
    metadata,
    Column("id", Text, primary_key=True),
    Column(
        "course_id",
        Text,
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("title", Text, nullable=False),
    Column("description", Text),
    Column("position", Integer, nullable=False),
    Column("is_published", Boolean, nullable=False, server_default="0"),
    Column("max_attempts", Integer, nullable=False, server_default="1"),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    Index("idx_quizzes_course_id", "course_id"),
)


# =====================================================
# 5. CHAPTERS
# =====================================================
chapters = Table(
    "chapters",
    metadata,
    Column("id", Text, primary_key=True),
    Column(
        "course_id",
        Text,
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("title", Text, nullable=False),
    Column("description", Text),
    Column("video_url", Text),
    Column("position", Integer, nullable=False),
    Column("is_published", Boolean, nullable=False, server_default="0"),
    Column("is_free", Boolean, nullable=False, server_default="0"),
    Column("study_types", JSON),  # list of labels; NULL or [] = all study types
    Column("require_passing_quiz", Boolean, nullable=False, server_default="0"),
    Column(
        "required_quiz_id",
        Text,
        ForeignKey("quizzes.id", ondelete="SET NULL"),
    ),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    Index("idx_chapters_course_id", "course_id"),
)


# =====================================================
# 6. ATTACHMENTS
# =====================================================
attachments = Table(
    "attachments",
    metadata,
    Column("id", Text, primary_key=True),
    Column(
        "chapter_id",
        Text,
        ForeignKey("chapters.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("name", Text, nullable=False),
    Column("url", Text, nullable=False),
    Column("position", Integer, nullable=False, server_default="0"),
    Index("idx_attachments_chapter_id", "chapter_id"),
)


# =====================================================
# 7. QUIZ QUESTIONS
# =====================================================
quiz_questions = Table(
    "quiz_questions",
    metadata,
    Column("id", Text, primary_key=True),
    Column(
        "quiz_id",
        Text,
        ForeignKey("quizzes.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("text", Text, nullable=False),
    Column("type", question_type_enum, nullable=False),
    Column("options", Text),  # serialized option list for MULTIPLE_CHOICE
    Column("correct_answer", Text),
    Column("points", Integer, nullable=False, server_default="1"),
    Column("image_url", Text),
    Column("position", Integer, nullable=False),
    Index("idx_quiz_questions_quiz_id", "quiz_id"),
)


# =====================================================
# 8. QUIZ RESULTS
# One row per submitted attempt, never updated
# =====================================================
quiz_results = Table(
    "quiz_results",
    metadata,
    Column("id", Text, primary_key=True),
    Column(
        "student_id",
        Text,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "quiz_id",
        Text,
        ForeignKey("quizzes.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("score", Float, nullable=False, server_default="0"),
    Column("total_points", Float, nullable=False, server_default="0"),
    Column("percentage", Float, nullable=False),
    Column("attempt_number", Integer, nullable=False, server_default="1"),
    Column("submitted_at", DateTime(timezone=True), server_default=func.now()),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    Index("idx_quiz_results_student_quiz", "student_id", "quiz_id"),
)


# =====================================================
# 9. QUIZ ATTEMPTS
# The attempt currently in progress (at most one per student and quiz)
# =====================================================
quiz_attempts = Table(
    "quiz_attempts",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "student_id",
        Text,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "quiz_id",
        Text,
        ForeignKey("quizzes.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("started_at", DateTime(timezone=True), server_default=func.now()),
    Column("completed_at", DateTime(timezone=True)),
    UniqueConstraint("student_id", "quiz_id", name="uq_quiz_attempts_student_quiz"),
)


# =====================================================
# 10. QUIZ STUDENT SETTINGS
# Per-student override of quizzes.max_attempts
# =====================================================
quiz_student_settings = Table(
    "quiz_student_settings",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "student_id",
        Text,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "quiz_id",
        Text,
        ForeignKey("quizzes.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("max_attempts", Integer, nullable=False),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    UniqueConstraint(
        "student_id", "quiz_id", name="uq_quiz_student_settings_student_quiz"
    ),
)


# =====================================================
# 11. USER PROGRESS
# =====================================================
user_progress = Table(
    "user_progress",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "user_id",
        Text,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "chapter_id",
        Text,
        ForeignKey("chapters.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("is_completed", Boolean, nullable=False, server_default="0"),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    UniqueConstraint("user_id", "chapter_id", name="uq_user_progress_user_chapter"),
)
