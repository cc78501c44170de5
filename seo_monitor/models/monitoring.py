"""SERP change, content gap and report models produced by the monitoring jobs."""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from seo_monitor.database import Base

if TYPE_CHECKING:
    from seo_monitor.models.project import Keyword, Project


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SerpChange(Base):
    """A detected movement of a keyword in the search results."""

    __tablename__ = "serp_changes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    keyword_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("keywords.id", ondelete="SET NULL"), nullable=True, index=True
    )
    url: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)
    change_type: Mapped[str] = mapped_column(String(50), nullable=False)
    position_before: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    position_after: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    position_change: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    detected_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, index=True
    )

    project: Mapped["Project"] = relationship("Project", back_populates="serp_changes")
    keyword: Mapped[Optional["Keyword"]] = relationship("Keyword")

    def __repr__(self) -> str:
        return (
            f"<SerpChange id={self.id} type={self.change_type!r} "
            f"{self.position_before}->{self.position_after}>"
        )


class ContentGap(Base):
    """A topic competitors cover that the project does not."""

    __tablename__ = "content_gaps"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    suggested_topic: Mapped[str] = mapped_column(String(500), nullable=False)
    priority_score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    reasoning: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(50), default="new", nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    project: Mapped["Project"] = relationship("Project", back_populates="content_gaps")

    def __repr__(self) -> str:
        return f"<ContentGap id={self.id} topic={self.suggested_topic!r}>"


class Report(Base):
    """A generated PDF report for a project."""

    __tablename__ = "reports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    report_type: Mapped[str] = mapped_column(String(50), nullable=False)
    pdf_url: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)
    generated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    project: Mapped["Project"] = relationship("Project", back_populates="reports")

    def __repr__(self) -> str:
        return f"<Report id={self.id} type={self.report_type!r}>"
