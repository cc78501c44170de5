"""Projects overview, one card per project with keyword/competitor/change counts."""

import logging

import streamlit as st

from seo_monitor.dashboard_data import list_projects, project_stats
from seo_monitor.store import StoreError
from seo_monitor.utils.helpers import format_date, pluralize
from services import get_auth, get_store, navigate

logger = logging.getLogger(__name__)

CARDS_PER_ROW = 3


def render_projects_page():
    """Main entry point for the projects overview page."""
    store = get_store()
    user = get_auth().get_user()

    try:
        projects = list_projects(store, user_id=user.id)
    except StoreError as exc:
        logger.error("Failed to load projects: %s", exc)
        st.error("Could not load your projects.")
        projects = []

    header, action = st.columns([4, 1])
    with header:
        st.title("Your Projects")
        st.caption(pluralize(len(projects), "project") + " monitored")
    with action:
        if st.button("➕ New Project", key="btn_new_project", type="primary", use_container_width=True):
            st.session_state.pop("wizard", None)
            navigate("new_project")

    if not projects:
        st.info(
            "👋 Create your first project to start monitoring rankings, "
            "competitors, and content gaps."
        )
        if st.button("Create First Project", key="btn_first_project"):
            navigate("new_project")
        return

    for start in range(0, len(projects), CARDS_PER_ROW):
        columns = st.columns(CARDS_PER_ROW)
        for column, project in zip(columns, projects[start:start + CARDS_PER_ROW]):
            with column:
                _render_project_card(store, project)


def _render_project_card(store, project: dict):
    try:
        stats = project_stats(store, project["id"])
    except StoreError as exc:
        logger.warning("Stats unavailable for project %s: %s", project["id"], exc)
        stats = None

    with st.container(border=True):
        st.markdown(f"#### {project['name']}")
        st.caption(project["website_url"])
        badge = "🟢" if project["status"] == "active" else "⚪"
        st.markdown(f"{badge} {project['status']}")

        c1, c2, c3 = st.columns(3)
        c1.metric("Keywords", stats.keywords if stats else "--")
        c2.metric("Competitors", stats.competitors if stats else "--")
        c3.metric("Changes", stats.changes if stats else "--")

        st.caption(format_date(project["created_at"]))
        if st.button("View details →", key=f"view_{project['id']}", use_container_width=True):
            navigate("project", project_id=project["id"])
