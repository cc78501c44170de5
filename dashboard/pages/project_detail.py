"""Project detail: overview, keywords, competitors and rank-change tabs."""

import logging
from typing import Optional

import pandas as pd
import streamlit as st

from seo_monitor.dashboard_data import ProjectDetail, load_project_detail, position_delta
from seo_monitor.store import RecordNotFound, StoreError
from seo_monitor.utils.helpers import format_date
from services import get_auth, get_store, navigate

logger = logging.getLogger(__name__)

PREVIEW_ROWS = 4
CHANGES_PREVIEW_ROWS = 8


def render_project_detail_page(project_id: Optional[int]):
    """Main entry point for the project detail page."""
    if project_id is None:
        navigate("dashboard")
        return

    try:
        user = get_auth().get_user()
        detail = load_project_detail(get_store(), project_id, user_id=user.id)
    except (RecordNotFound, StoreError) as exc:
        logger.warning("Project %s unavailable: %s", project_id, exc)
        navigate("dashboard")
        return

    if st.button("← All Projects", key="btn_back_projects"):
        navigate("dashboard")

    _render_header(detail)

    if detail.changes:
        up, down = st.columns(2)
        up.success(f"📈 **{detail.rank_ups}** keywords moved up")
        down.warning(f"📉 **{detail.rank_downs}** keywords moved down")

    tabs = st.tabs([
        "Overview",
        f"Keywords ({len(detail.keywords)})",
        f"Competitors ({len(detail.competitors)})",
        f"Changes ({len(detail.changes)})",
    ])
    with tabs[0]:
        _render_overview_tab(detail)
    with tabs[1]:
        _render_keywords_table(detail.keywords)
    with tabs[2]:
        _render_competitors_table(detail.competitors)
    with tabs[3]:
        _render_changes_table(detail.changes)


def _render_header(detail: ProjectDetail):
    project = detail.project
    info, stats_col = st.columns([3, 2])
    with info:
        st.title(project["name"])
        st.caption(
            f"{project['status']} · Created {format_date(project['created_at'], long=True)}"
        )
        st.markdown(f"🌐 [{project['website_url']}]({project['website_url']})")
    with stats_col:
        stats = detail.stats
        c1, c2, c3 = st.columns(3)
        c1.metric("Keywords", stats.keywords)
        c2.metric("Competitors", stats.competitors)
        c3.metric("Changes", stats.changes)


# ------------------------------------------------------------------
# Tabs
# ------------------------------------------------------------------

def _render_overview_tab(detail: ProjectDetail):
    left, right = st.columns(2)
    with left:
        st.markdown("#### Keywords")
        _render_keywords_table(detail.keywords[:PREVIEW_ROWS])
        if len(detail.keywords) > PREVIEW_ROWS:
            st.caption(f"+{len(detail.keywords) - PREVIEW_ROWS} more")
    with right:
        st.markdown("#### Competitors")
        _render_competitors_table(detail.competitors[:PREVIEW_ROWS])
        if len(detail.competitors) > PREVIEW_ROWS:
            st.caption(f"+{len(detail.competitors) - PREVIEW_ROWS} more")

    st.markdown("#### Recent Changes")
    _render_changes_table(detail.changes[:CHANGES_PREVIEW_ROWS])


def _render_keywords_table(keywords: list[dict]):
    if not keywords:
        st.info("No keywords tracked yet")
        return
    df = pd.DataFrame([
        {
            "Keyword": k["keyword"],
            "Location": k["location"] or "",
            "Device": k["device"],
            "Added": format_date(k["created_at"]),
        }
        for k in keywords
    ])
    st.dataframe(df, use_container_width=True, hide_index=True)


def _render_competitors_table(competitors: list[dict]):
    if not competitors:
        st.info("No competitors tracked yet")
        return
    df = pd.DataFrame([
        {
            "Name": c["name"] or c["url"],
            "URL": c["url"],
            "Added": format_date(c["created_at"]),
        }
        for c in competitors
    ])
    st.dataframe(
        df,
        use_container_width=True,
        hide_index=True,
        column_config={"URL": st.column_config.LinkColumn("URL")},
    )


def _render_changes_table(changes: list[dict]):
    if not changes:
        st.info("No rank changes detected yet. Changes appear after the first monitoring run.")
        return
    df = pd.DataFrame([
        {
            "Keyword": c["keyword"],
            "Before": c["position_before"],
            "After": c["position_after"],
            "Change": position_delta(c),
            "Type": c["change_type"],
            "Detected": format_date(c["detected_at"]),
        }
        for c in changes
    ])
    st.dataframe(df, use_container_width=True, hide_index=True)
