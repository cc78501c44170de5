"""Project, project settings, tracked keyword and competitor models."""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from seo_monitor.database import Base

if TYPE_CHECKING:
    from seo_monitor.models.monitoring import ContentGap, Report, SerpChange
    from seo_monitor.models.user import User


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Project(Base):
    """A monitored website owned by a user."""

    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    website_url: Mapped[str] = mapped_column(String(2048), nullable=False)
    status: Mapped[str] = mapped_column(String(50), default="active", nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    user: Mapped["User"] = relationship("User", back_populates="projects")
    settings: Mapped[Optional["ProjectSettings"]] = relationship(
        back_populates="project", cascade="all, delete-orphan", uselist=False
    )
    keywords: Mapped[list["Keyword"]] = relationship(
        back_populates="project", cascade="all, delete-orphan"
    )
    competitors: Mapped[list["Competitor"]] = relationship(
        back_populates="project", cascade="all, delete-orphan"
    )
    serp_changes: Mapped[list["SerpChange"]] = relationship(
        "SerpChange", back_populates="project", cascade="all, delete-orphan"
    )
    content_gaps: Mapped[list["ContentGap"]] = relationship(
        "ContentGap", back_populates="project", cascade="all, delete-orphan"
    )
    reports: Mapped[list["Report"]] = relationship(
        "Report", back_populates="project", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Project id={self.id} name={self.name!r} url={self.website_url!r}>"


class ProjectSettings(Base):
    """Monitoring cadence and alert preferences, one row per project."""

    __tablename__ = "project_settings"

    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True
    )
    monitoring_frequency: Mapped[str] = mapped_column(String(50), default="weekly", nullable=False)
    alert_rank_drop_threshold: Mapped[int] = mapped_column(Integer, default=3, nullable=False)
    alert_on_competitor_changes: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    alert_on_new_content_gaps: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    project: Mapped["Project"] = relationship(back_populates="settings")

    def __repr__(self) -> str:
        return (
            f"<ProjectSettings project_id={self.project_id} "
            f"freq={self.monitoring_frequency!r} drop={self.alert_rank_drop_threshold}>"
        )


class Keyword(Base):
    """A search term tracked for a project."""

    __tablename__ = "keywords"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    keyword: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    location: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    device: Mapped[str] = mapped_column(String(20), default="desktop", nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    project: Mapped["Project"] = relationship(back_populates="keywords")

    def __repr__(self) -> str:
        return f"<Keyword id={self.id} kw={self.keyword!r} device={self.device!r}>"


class Competitor(Base):
    """A competing website monitored alongside a project."""

    __tablename__ = "competitors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    url: Mapped[str] = mapped_column(String(2048), nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    project: Mapped["Project"] = relationship(back_populates="competitors")

    def __repr__(self) -> str:
        return f"<Competitor id={self.id} url={self.url!r}>"
