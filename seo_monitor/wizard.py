"""Project-creation wizard: a six-step form and its dependent write sequence.

The wizard walks the user through project info, keywords, competitors,
monitoring frequency, alert settings and a final review.  ``submit()``
then writes the project and its related rows one collection at a time::

    projects -> project_settings -> keywords -> competitors

Each write is its own store transaction.  A failure stops the sequence
where it is; rows committed by earlier steps stay in place, and
submitting again creates a new project.
"""

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Optional

from seo_monitor.auth import AuthError, AuthService
from seo_monitor.store import RecordStore, StoreError
from seo_monitor.utils.helpers import extract_hostname

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Failed to create project"

DEFAULT_LOCATION = "United States"
DEFAULT_DEVICE = "desktop"
DEVICES = ("desktop", "mobile", "tablet")

# value -> (label, description)
FREQUENCIES = {
    "weekly": ("Weekly", "Every Monday, recommended"),
    "twice_weekly": ("Twice Weekly", "Monday & Thursday"),
    "daily": ("Daily", "Every day, uses more API credits"),
}

MIN_ALERT_THRESHOLD = 1
MAX_ALERT_THRESHOLD = 10


class WizardError(Exception):
    """The wizard was driven in a way its controls do not allow."""


class WizardStep(IntEnum):
    PROJECT_INFO = 1
    KEYWORDS = 2
    COMPETITORS = 3
    FREQUENCY = 4
    ALERTS = 5
    REVIEW = 6

    @property
    def title(self) -> str:
        return STEP_TITLES[self]


STEP_TITLES = {
    WizardStep.PROJECT_INFO: "Project Info",
    WizardStep.KEYWORDS: "Keywords",
    WizardStep.COMPETITORS: "Competitors",
    WizardStep.FREQUENCY: "Frequency",
    WizardStep.ALERTS: "Alerts",
    WizardStep.REVIEW: "Review",
}


@dataclass
class KeywordEntry:
    keyword: str = ""
    location: str = DEFAULT_LOCATION
    device: str = DEFAULT_DEVICE


@dataclass
class CompetitorEntry:
    url: str = ""
    name: str = ""


@dataclass
class WizardData:
    """Everything the user has typed into the wizard so far."""

    name: str = ""
    website_url: str = ""
    keywords: list[KeywordEntry] = field(
        default_factory=lambda: [KeywordEntry() for _ in range(3)]
    )
    competitors: list[CompetitorEntry] = field(
        default_factory=lambda: [CompetitorEntry() for _ in range(3)]
    )
    frequency: str = "weekly"
    alert_threshold: int = 3
    alert_on_competitor_changes: bool = True
    alert_on_new_content_gaps: bool = True

    def filled_keywords(self) -> list[KeywordEntry]:
        return [k for k in self.keywords if k.keyword.strip()]

    def filled_competitors(self) -> list[CompetitorEntry]:
        return [c for c in self.competitors if c.url.strip()]


@dataclass
class SubmissionResult:
    """Outcome of one ``submit()`` call.

    ``completed_steps`` names the collections that were committed, in
    order, so a failed submission still reports the partial state it left.
    """

    ok: bool
    project: Optional[dict[str, Any]] = None
    error: str = ""
    completed_steps: list[str] = field(default_factory=list)
    redirect_to: Optional[str] = None


class ProjectWizard:
    """State machine behind the "New Project" form.

    Usage::

        wizard = ProjectWizard(store, auth)
        wizard.data.name = "Acme"
        wizard.data.website_url = "https://acme.com"
        wizard.next()
        ...
        result = wizard.submit()
    """

    def __init__(
        self,
        store: RecordStore,
        auth: AuthService,
        data: Optional[WizardData] = None,
    ):
        self._store = store
        self._auth = auth
        self.step = WizardStep.PROJECT_INFO
        self.data = data or WizardData()
        self.saving = False
        self.error = ""

    @classmethod
    def from_config(
        cls, store: RecordStore, auth: AuthService, config: dict[str, Any]
    ) -> "ProjectWizard":
        """Build a wizard whose blank slots follow the ``wizard`` config section."""
        cfg = config.get("wizard", {})
        location = cfg.get("default_location", DEFAULT_LOCATION)
        device = cfg.get("default_device", DEFAULT_DEVICE)
        data = WizardData(
            keywords=[
                KeywordEntry(location=location, device=device)
                for _ in range(cfg.get("keyword_slots", 3))
            ],
            competitors=[CompetitorEntry() for _ in range(cfg.get("competitor_slots", 3))],
        )
        return cls(store, auth, data=data)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def can_proceed(self) -> bool:
        """Whether the current step is complete enough to move on."""
        if self.step == WizardStep.PROJECT_INFO:
            return bool(self.data.name.strip() and self.data.website_url.strip())
        if self.step == WizardStep.KEYWORDS:
            return any(k.keyword.strip() for k in self.data.keywords)
        if self.step == WizardStep.COMPETITORS:
            return any(c.url.strip() for c in self.data.competitors)
        return True

    def can_go_back(self) -> bool:
        return self.step > WizardStep.PROJECT_INFO

    def can_submit(self) -> bool:
        return self.step == WizardStep.REVIEW and not self.saving

    def next(self) -> bool:
        """Advance one step.  Returns False when blocked or already on review."""
        if self.step == WizardStep.REVIEW or not self.can_proceed():
            return False
        self.step = WizardStep(self.step + 1)
        return True

    def back(self) -> bool:
        if not self.can_go_back():
            return False
        self.step = WizardStep(self.step - 1)
        return True

    # ------------------------------------------------------------------
    # Form edits
    # ------------------------------------------------------------------

    def set_keyword(self, index: int, field_name: str, value: str) -> None:
        if field_name not in ("keyword", "location", "device"):
            raise WizardError(f"Unknown keyword field '{field_name}'")
        if field_name == "device" and value not in DEVICES:
            raise WizardError(f"Device must be one of {', '.join(DEVICES)}")
        entry = self._slot(self.data.keywords, index, "keyword")
        setattr(entry, field_name, value)

    def set_competitor(self, index: int, field_name: str, value: str) -> None:
        if field_name not in ("url", "name"):
            raise WizardError(f"Unknown competitor field '{field_name}'")
        entry = self._slot(self.data.competitors, index, "competitor")
        setattr(entry, field_name, value)

    def set_frequency(self, value: str) -> None:
        if value not in FREQUENCIES:
            raise WizardError(f"Unknown monitoring frequency '{value}'")
        self.data.frequency = value

    def set_alert_threshold(self, value: int) -> None:
        if not MIN_ALERT_THRESHOLD <= value <= MAX_ALERT_THRESHOLD:
            raise WizardError(
                f"Alert threshold must be between {MIN_ALERT_THRESHOLD} and {MAX_ALERT_THRESHOLD}"
            )
        self.data.alert_threshold = int(value)

    @staticmethod
    def _slot(entries: list, index: int, label: str):
        if not 0 <= index < len(entries):
            raise WizardError(f"No {label} slot {index + 1}")
        return entries[index]

    def review(self) -> dict[str, Any]:
        """Summary shown on the review step."""
        data = self.data
        return {
            "name": data.name,
            "website": data.website_url,
            "frequency": data.frequency.replace("_", " "),
            "alert_at": f"{data.alert_threshold}+ position drop",
            "keywords": data.filled_keywords(),
            "competitors": data.filled_competitors(),
        }

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def submit(self) -> SubmissionResult:
        """Run the create-project write sequence.

        Never raises for store or auth failures: the message lands in
        ``self.error`` and in the returned result, and the wizard stays on
        the review step.
        """
        if not self.can_submit():
            raise WizardError("Create Project is only available on the review step")

        self.saving = True
        self.error = ""
        completed: list[str] = []
        try:
            project = self._write_sequence(completed)
        except (StoreError, AuthError) as exc:
            return self._fail(str(exc) or GENERIC_ERROR, completed)
        except Exception as exc:
            logger.exception("Unexpected error while creating project")
            return self._fail(str(exc) or GENERIC_ERROR, completed)

        self.saving = False
        logger.info("Project %s created (%s)", project["id"], ", ".join(completed))
        return SubmissionResult(
            ok=True, project=project, completed_steps=completed, redirect_to="dashboard"
        )

    def _fail(self, message: str, completed: list[str]) -> SubmissionResult:
        logger.error(
            "Project creation stopped after %s: %s",
            ", ".join(completed) or "no writes", message,
        )
        self.error = message
        self.saving = False
        return SubmissionResult(ok=False, error=message, completed_steps=completed)

    def _write_sequence(self, completed: list[str]) -> dict[str, Any]:
        user = self._auth.get_user()
        if user is None:
            raise AuthError("Not authenticated")
        data = self.data

        [project] = self._store.insert("projects", {
            "user_id": user.id,
            "name": data.name,
            "website_url": data.website_url,
            "status": "active",
        })
        completed.append("projects")
        logger.info("Created project %s for user %s", project["id"], user.id)

        self._store.insert("project_settings", {
            "project_id": project["id"],
            "monitoring_frequency": data.frequency,
            "alert_rank_drop_threshold": data.alert_threshold,
            "alert_on_competitor_changes": data.alert_on_competitor_changes,
            "alert_on_new_content_gaps": data.alert_on_new_content_gaps,
        })
        completed.append("project_settings")
        logger.info("Saved settings for project %s", project["id"])

        keywords = data.filled_keywords()
        if keywords:
            self._store.insert("keywords", [
                {
                    "project_id": project["id"],
                    "keyword": k.keyword,
                    "location": k.location,
                    "device": k.device,
                }
                for k in keywords
            ])
            completed.append("keywords")
            logger.info("Added %d keyword(s) to project %s", len(keywords), project["id"])

        competitors = data.filled_competitors()
        if competitors:
            self._store.insert("competitors", [
                {
                    "project_id": project["id"],
                    "url": c.url,
                    "name": c.name.strip() or extract_hostname(c.url),
                }
                for c in competitors
            ])
            completed.append("competitors")
            logger.info(
                "Added %d competitor(s) to project %s", len(competitors), project["id"]
            )

        return project
