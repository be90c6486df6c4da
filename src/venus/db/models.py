"""SQLAlchemy ORM models — single source of truth for the database schema.

Learn: Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Types are kept portable (JSON, String UUIDs) so the same models run on
SQLite (default, tests) and PostgreSQL.

Ownership: every Project and Image row carries owner_id, set once from the
authenticated account at creation time and never updated.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_uuid() -> str:
    return str(uuid.uuid4())


def default_project_content() -> dict:
    """Empty drawing scene."""
    return {"elements": [], "appState": {"collaborators": []}, "files": {}}


class User(Base):
    """An account. Owns projects and images.

    Learn: integer ids. They end up in the token as both `uid` (int)
    and `sub` (string).
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    projects: Mapped[list["Project"]] = relationship(back_populates="owner")
    images: Mapped[list["Image"]] = relationship(back_populates="owner")


class Project(Base):
    """A drawing document. `content` is the scene JSON, stored as-is."""

    __tablename__ = "projects"
    __table_args__ = (
        Index("idx_projects_owner_created", "owner_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[dict] = mapped_column(
        JSON, nullable=False, default=default_project_content
    )
    owner_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    owner: Mapped["User"] = relationship(back_populates="projects")


class Image(Base):
    """An uploaded image. The bytes live on disk under upload_dir/filename.

    Learn: project_id is optional and is NOT a foreign key. Images can
    outlive the project that referenced them (the drawing client only
    uses it as a hint).
    """

    __tablename__ = "images"
    __table_args__ = (
        Index("idx_images_owner_created", "owner_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    original_name: Mapped[str] = mapped_column(String(255), nullable=False)
    mime_type: Mapped[str] = mapped_column(String(100), nullable=False)
    size: Mapped[int] = mapped_column(Integer, nullable=False)
    width: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    height: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    project_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    owner_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    owner: Mapped["User"] = relationship(back_populates="images")
