"""SQLAlchemy ORM models; import every model so Base.metadata is populated."""

from seo_monitor.models.user import User
from seo_monitor.models.project import (
    Project,
    ProjectSettings,
    Keyword,
    Competitor,
)
from seo_monitor.models.monitoring import (
    SerpChange,
    ContentGap,
    Report,
)

__all__ = [
    "User",
    "Project",
    "ProjectSettings",
    "Keyword",
    "Competitor",
    "SerpChange",
    "ContentGap",
    "Report",
]
