"""Read-side helpers for the projects overview and project detail pages."""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from seo_monitor.store import RecordStore

logger = logging.getLogger(__name__)

RECENT_CHANGES_LIMIT = 20


@dataclass(frozen=True)
class ProjectStats:
    keywords: int = 0
    competitors: int = 0
    changes: int = 0


@dataclass
class ProjectDetail:
    """A project with its keywords, competitors and most recent SERP changes."""

    project: dict[str, Any]
    keywords: list[dict[str, Any]] = field(default_factory=list)
    competitors: list[dict[str, Any]] = field(default_factory=list)
    changes: list[dict[str, Any]] = field(default_factory=list)

    @property
    def rank_ups(self) -> int:
        return sum(1 for c in self.changes if c["change_type"] == "rank_up")

    @property
    def rank_downs(self) -> int:
        return sum(1 for c in self.changes if c["change_type"] == "rank_down")

    @property
    def stats(self) -> ProjectStats:
        return ProjectStats(
            keywords=len(self.keywords),
            competitors=len(self.competitors),
            changes=len(self.changes),
        )


def position_delta(change: dict[str, Any]) -> int:
    """Positions gained (positive) or lost (negative) by a SERP change."""
    return (change.get("position_before") or 0) - (change.get("position_after") or 0)


def list_projects(store: RecordStore, user_id: Optional[int] = None) -> list[dict[str, Any]]:
    """Projects newest first, limited to ``user_id`` when given."""
    filters = {"user_id": user_id} if user_id is not None else None
    return store.select("projects", filters, order_by="created_at", descending=True)


def project_stats(store: RecordStore, project_id: int) -> ProjectStats:
    """Keyword, competitor and SERP-change counts for one project card."""
    where = {"project_id": project_id}
    return ProjectStats(
        keywords=store.count("keywords", where),
        competitors=store.count("competitors", where),
        changes=store.count("serp_changes", where),
    )


def load_project_detail(
    store: RecordStore, project_id: int, user_id: Optional[int] = None
) -> ProjectDetail:
    """Load everything the project detail page shows.

    With ``user_id`` set, only that user's project is visible.  Raises
    :class:`~seo_monitor.store.RecordNotFound` if the project is gone or
    belongs to someone else.
    """
    lookup = {"id": project_id}
    if user_id is not None:
        lookup["user_id"] = user_id
    project = store.select_one("projects", lookup)
    where = {"project_id": project_id}
    keywords = store.select("keywords", where, order_by="created_at", descending=True)
    competitors = store.select("competitors", where, order_by="created_at", descending=True)
    changes = store.select(
        "serp_changes", where,
        order_by="detected_at", descending=True, limit=RECENT_CHANGES_LIMIT,
    )

    keyword_text = {k["id"]: k["keyword"] for k in keywords}
    for change in changes:
        change["keyword"] = keyword_text.get(change["keyword_id"], "")

    logger.debug(
        "Loaded project %s: %d keywords, %d competitors, %d changes",
        project_id, len(keywords), len(competitors), len(changes),
    )
    return ProjectDetail(
        project=project, keywords=keywords, competitors=competitors, changes=changes
    )
