"""SQLAlchemy enum definitions for the database schema."""

import enum

from sqlalchemy import Enum as SQLEnum


# =====================================================
# Python Enum Classes
# =====================================================


class UserRole(str, enum.Enum):
    USER = "USER"
    TEACHER = "TEACHER"
    ADMIN = "ADMIN"


class PurchaseStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    PENDING = "PENDING"
    REFUNDED = "REFUNDED"
    CANCELLED = "CANCELLED"


class QuestionType(str, enum.Enum):
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    TRUE_FALSE = "TRUE_FALSE"
    SHORT_ANSWER = "SHORT_ANSWER"


# =====================================================
# SQLAlchemy Enum Types
# Stored as constrained strings so the schema runs on PostgreSQL and SQLite
# =====================================================

user_role_enum = SQLEnum(UserRole, name="user_role", native_enum=False, length=16)
purchase_status_enum = SQLEnum(
    PurchaseStatus, name="purchase_status", native_enum=False, length=16
)
question_type_enum = SQLEnum(
    QuestionType, name="question_type", native_enum=False, length=32
)
