"""SQLAlchemy ORM models for the application."""
from __future__ import annotations

import datetime as dt

from sqlalchemy import Boolean, DateTime, Integer, String, Text, func
from sqlalchemy.dialects.sqlite import JSON
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base


class TimestampMixin:
    """Mixin providing created/updated timestamps."""

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=func.now(), nullable=False
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=func.now(), onupdate=func.now(), nullable=False
    )


class AnalysisRecord(TimestampMixin, Base):
    __tablename__ = "analysis_records"

    # AUTOINCREMENT keeps SQLite from reusing the IDs of deleted rows.
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    page_title: Mapped[str] = mapped_column(Text, nullable=False)
    html_version: Mapped[str] = mapped_column(String(64), nullable=False)
    heading_counts: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    external_link_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    internal_link_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    inaccessible_link_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_login: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
