"""New Project: six-step creation wizard page."""

import logging

import streamlit as st

from seo_monitor.utils.validators import validate_competitor_url, validate_url
from seo_monitor.wizard import (
    DEVICES,
    FREQUENCIES,
    MAX_ALERT_THRESHOLD,
    MIN_ALERT_THRESHOLD,
    ProjectWizard,
    WizardStep,
)
from services import get_auth, get_config, get_store, navigate

logger = logging.getLogger(__name__)


def _get_wizard() -> ProjectWizard:
    """Lazy-initialize the wizard in session state."""
    if "wizard" not in st.session_state:
        st.session_state.wizard = ProjectWizard.from_config(get_store(), get_auth(), get_config())
    return st.session_state.wizard


def render_new_project_page():
    """Main entry point for the New Project page."""
    wizard = _get_wizard()
    step = wizard.step

    st.progress(int(step) / len(WizardStep))
    st.caption(f"Step {int(step)} of {len(WizardStep)} — **{step.title}**")

    renderers = {
        WizardStep.PROJECT_INFO: _render_project_info,
        WizardStep.KEYWORDS: _render_keywords,
        WizardStep.COMPETITORS: _render_competitors,
        WizardStep.FREQUENCY: _render_frequency,
        WizardStep.ALERTS: _render_alerts,
        WizardStep.REVIEW: _render_review,
    }
    renderers[step](wizard)

    st.markdown("---")
    _render_navigation(wizard)


# ------------------------------------------------------------------
# Steps
# ------------------------------------------------------------------

def _render_project_info(wizard: ProjectWizard):
    st.subheader("Create Project")
    st.caption("Name your project and add your website.")
    data = wizard.data
    data.name = st.text_input("Project Name", value=data.name, placeholder="e.g. My SEO Campaign")
    data.website_url = st.text_input(
        "Website URL", value=data.website_url, placeholder="https://example.com"
    )
    if data.website_url.strip():
        ok, message = validate_url(data.website_url)
        if not ok:
            st.caption("⚠️ " + message)


def _render_keywords(wizard: ProjectWizard):
    st.subheader("Add Keywords")
    st.caption(f"Add up to {len(wizard.data.keywords)} keywords to track in search results.")
    for i, entry in enumerate(wizard.data.keywords):
        with st.container(border=True):
            st.markdown(f"**Keyword {i + 1}**")
            wizard.set_keyword(i, "keyword", st.text_input(
                "Keyword", value=entry.keyword, key=f"wiz_kw_{i}",
                placeholder="e.g. best seo tools", label_visibility="collapsed",
            ))
            col1, col2 = st.columns(2)
            with col1:
                wizard.set_keyword(i, "location", st.text_input(
                    "Location", value=entry.location, key=f"wiz_kw_loc_{i}",
                ))
            with col2:
                wizard.set_keyword(i, "device", st.selectbox(
                    "Device", DEVICES, index=DEVICES.index(entry.device),
                    key=f"wiz_kw_dev_{i}", format_func=str.title,
                ))


def _render_competitors(wizard: ProjectWizard):
    st.subheader("Add Competitors")
    st.caption("Add 3–5 competitor URLs to monitor.")
    for i, entry in enumerate(wizard.data.competitors):
        with st.container(border=True):
            st.markdown(f"**Competitor {i + 1}**")
            wizard.set_competitor(i, "url", st.text_input(
                "URL", value=entry.url, key=f"wiz_comp_url_{i}",
                placeholder="https://competitor.com",
            ))
            if entry.url.strip():
                ok, message = validate_competitor_url(entry.url)
                if not ok:
                    st.caption("⚠️ " + message)
            wizard.set_competitor(i, "name", st.text_input(
                "Name (optional)", value=entry.name, key=f"wiz_comp_name_{i}",
            ))


def _render_frequency(wizard: ProjectWizard):
    st.subheader("Monitoring Frequency")
    st.caption("How often should automations run?")
    options = list(FREQUENCIES)
    choice = st.radio(
        "Frequency", options,
        index=options.index(wizard.data.frequency),
        format_func=lambda v: f"{FREQUENCIES[v][0]} — {FREQUENCIES[v][1]}",
        key="wiz_frequency", label_visibility="collapsed",
    )
    wizard.set_frequency(choice)


def _render_alerts(wizard: ProjectWizard):
    st.subheader("Alert Settings")
    st.caption("Choose when to receive notifications.")
    data = wizard.data
    wizard.set_alert_threshold(st.slider(
        "Alert if rank drops by N+ positions",
        min_value=MIN_ALERT_THRESHOLD, max_value=MAX_ALERT_THRESHOLD,
        value=data.alert_threshold, key="wiz_threshold",
        help="1 is very sensitive, 10 alerts on major drops only.",
    ))
    data.alert_on_competitor_changes = st.checkbox(
        "Alert on competitor page changes",
        value=data.alert_on_competitor_changes, key="wiz_alert_comp",
    )
    data.alert_on_new_content_gaps = st.checkbox(
        "Alert when new content gaps are found",
        value=data.alert_on_new_content_gaps, key="wiz_alert_gaps",
    )


def _render_review(wizard: ProjectWizard):
    st.subheader("Review & Create")
    st.caption("Everything look correct?")
    summary = wizard.review()

    with st.container(border=True):
        st.markdown("**Project**")
        st.markdown(
            f"- Name: {summary['name']}\n"
            f"- Website: {summary['website']}\n"
            f"- Frequency: {summary['frequency']}\n"
            f"- Alert at: {summary['alert_at']}"
        )
    with st.container(border=True):
        st.markdown(f"**Keywords ({len(summary['keywords'])})**")
        for i, k in enumerate(summary["keywords"], 1):
            st.markdown(f"- #{i}: {k.keyword} · {k.location} · {k.device}")
    with st.container(border=True):
        st.markdown(f"**Competitors ({len(summary['competitors'])})**")
        for i, c in enumerate(summary["competitors"], 1):
            st.markdown(f"- {c.name or f'#{i}'}: {c.url}")

    if wizard.error:
        st.error(wizard.error)


# ------------------------------------------------------------------
# Navigation
# ------------------------------------------------------------------

def _render_navigation(wizard: ProjectWizard):
    left, _, right = st.columns([1, 3, 1])
    with left:
        if st.button("← Back", key="wiz_back", disabled=not wizard.can_go_back(),
                     use_container_width=True):
            wizard.back()
            st.rerun()
    with right:
        if wizard.step < WizardStep.REVIEW:
            if st.button("Next →", key="wiz_next", type="primary",
                         disabled=not wizard.can_proceed(), use_container_width=True):
                wizard.next()
                st.rerun()
        elif st.button("🚀 Create Project", key="wiz_create", type="primary",
                       disabled=not wizard.can_submit(), use_container_width=True):
            with st.spinner("Creating..."):
                result = wizard.submit()
            if result.ok:
                st.session_state.pop("wizard", None)
                navigate("dashboard")
            else:
                st.rerun()
