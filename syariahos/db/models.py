"""SQLAlchemy ORM models for users, tasks, reference material and auditing."""

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    JSON, Boolean, ForeignKey, Index, Integer, Numeric, String, Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from syariahos.db.base import Base
from syariahos.db.enums import Role, Theme
from syariahos.db.types import utcnow


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, nullable=False
    )


# =============================================================================
# Users & Auth
# =============================================================================

class User(TimestampMixin, Base):
    """
    Application user with sharia-finance preferences.

    Deleting a user removes everything they own: tasks (and their history),
    categories, directory items, tokens and activity logs.
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), default=Role.USER.value, nullable=False
    )
    theme: Mapped[str] = mapped_column(
        String(20), default=Theme.LIGHT.value, nullable=False
    )
    profile_picture: Mapped[str | None] = mapped_column(Text, nullable=True)
    zakat_rate: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    preferred_akad: Mapped[str | None] = mapped_column(String(100), nullable=True)
    calculation_method: Mapped[str | None] = mapped_column(String(20), nullable=True)

    # Relationships
    tasks: Mapped[list["Task"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    categories: Mapped[list["Category"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Category.id",
    )
    directory_items: Mapped[list["DirectoryItem"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    auth_tokens: Mapped[list["AuthToken"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    activity_logs: Mapped[list["ActivityLog"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value


class AuthToken(Base):
    """
    Issued bearer tokens.

    JWTs are stateless, so a SHA256 hash of each token is stored to make
    logout (revocation) possible.
    """
    __tablename__ = "auth_tokens"
    __table_args__ = (
        Index("idx_auth_tokens_user_id", "user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    token_hash: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(nullable=False)
    last_used_at: Mapped[datetime | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    user: Mapped["User"] = relationship(back_populates="auth_tokens")


class Category(TimestampMixin, Base):
    """Task category label owned by a user."""
    __tablename__ = "categories"
    __table_args__ = (
        Index("idx_categories_user_id", "user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    user: Mapped["User"] = relationship(back_populates="categories")


# =============================================================================
# Tasks
# =============================================================================

class Task(TimestampMixin, Base):
    """
    A trackable commitment.

    Binary tasks toggle between done/not done. Has-limit tasks accumulate
    current_value towards target_value (e.g. "save Rp 5.000.000").
    Recurring tasks are returned to their baseline by the reset sweep.
    """
    __tablename__ = "tasks"
    __table_args__ = (
        Index("idx_tasks_user_category", "user_id", "category"),
        Index("idx_tasks_user_cycle", "user_id", "reset_cycle"),
        Index("idx_tasks_cycle_reset", "reset_cycle", "last_reset_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    text: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    progress: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    has_limit: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    current_value: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    target_value: Mapped[int | None] = mapped_column(Integer, nullable=True)
    unit: Mapped[str | None] = mapped_column(String(50), nullable=True)
    reset_cycle: Mapped[str | None] = mapped_column(String(20), nullable=True)
    per_check_enabled: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    increment_value: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    last_reset_at: Mapped[datetime | None] = mapped_column(nullable=True)

    user: Mapped["User"] = relationship(back_populates="tasks")
    history: Mapped[list["TaskHistory"]] = relationship(
        back_populates="task",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TaskHistory.id",
    )


class TaskHistory(TimestampMixin, Base):
    """One progress event for a task (append-only except for corrections)."""
    __tablename__ = "task_histories"
    __table_args__ = (
        Index("idx_task_histories_task_ts", "task_id", "timestamp"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    task_id: Mapped[int] = mapped_column(
        ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False
    )
    value: Mapped[int] = mapped_column(Integer, nullable=False)
    note: Mapped[str | None] = mapped_column(String(500), nullable=True)
    timestamp: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    task: Mapped["Task"] = relationship(back_populates="history")


# =============================================================================
# Audit
# =============================================================================

class ActivityLog(Base):
    """
    Append-only audit trail of actor + action + optional subject.

    subject_type holds a SubjectType value; metadata is free-form JSON.
    """
    __tablename__ = "activity_logs"
    __table_args__ = (
        Index("idx_activity_logs_action", "action"),
        Index("idx_activity_logs_user_created", "user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=True
    )
    action: Mapped[str] = mapped_column(String(100), nullable=False)
    subject_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    subject_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    # "metadata" is reserved on declarative classes
    details: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata", JSON, nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    user: Mapped["User | None"] = relationship(back_populates="activity_logs")


# =============================================================================
# Reference material
# =============================================================================

class DirectoryItem(TimestampMixin, Base):
    """
    Node in a user's tree of Islamic reference material.

    Folders hold children; items carry content ({dalil, source, explanation}).
    Deleting a node deletes its subtree.
    """
    __tablename__ = "directory_items"
    __table_args__ = (
        Index("idx_directory_items_user_parent", "user_id", "parent_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    parent_id: Mapped[int | None] = mapped_column(
        ForeignKey("directory_items.id", ondelete="CASCADE"), nullable=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    content: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    user: Mapped["User"] = relationship(back_populates="directory_items")
    parent: Mapped["DirectoryItem | None"] = relationship(
        back_populates="children", remote_side="DirectoryItem.id"
    )
    children: Mapped[list["DirectoryItem"]] = relationship(
        back_populates="parent", cascade="all, delete-orphan", passive_deletes=True
    )


class Tool(TimestampMixin, Base):
    """Catalog entry for a sharia-compliant business tool."""
    __tablename__ = "tools"
    __table_args__ = (
        Index("idx_tools_category", "category"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    inputs: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    outputs: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    benefits: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    sharia_basis: Mapped[str | None] = mapped_column(Text, nullable=True)
    link: Mapped[str | None] = mapped_column(String(500), nullable=True)
    related_directory_ids: Mapped[list[int] | None] = mapped_column(JSON, nullable=True)
    related_dalil_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    related_dalil_source: Mapped[str | None] = mapped_column(String(500), nullable=True)
    sources: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)
