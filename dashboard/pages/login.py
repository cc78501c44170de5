"""Sign in / sign up page."""

import logging

import streamlit as st

from seo_monitor.auth import AuthError
from services import get_auth, navigate

logger = logging.getLogger(__name__)


def render_login_page():
    """Email/password form with a Sign In / Sign Up toggle."""
    _, center, _ = st.columns([1, 2, 1])
    with center:
        st.title("📈 SEO Monitor")

        mode = st.radio(
            "Mode", ["Sign In", "Sign Up"],
            horizontal=True, label_visibility="collapsed", key="auth_mode",
        )
        is_sign_up = mode == "Sign Up"
        st.caption("Create your account" if is_sign_up else "Sign in to your dashboard")

        with st.form("auth_form"):
            email = st.text_input("Email address", placeholder="you@example.com")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button(
                "Create Account" if is_sign_up else "Sign In",
                type="primary",
                use_container_width=True,
            )

        if not submitted:
            return

        auth = get_auth()
        try:
            if is_sign_up:
                auth.sign_up(email, password)
                st.success("Account created. You can sign in now.")
            else:
                auth.sign_in_with_password(email, password)
                navigate("dashboard")
        except AuthError as exc:
            st.error(str(exc))
