"""SEO Monitor Dashboard

Main Streamlit application with session-state page routing.
Run with: streamlit run dashboard/app.py
"""

import logging
import streamlit as st
import sys
from pathlib import Path

# Add project root and dashboard dir to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
sys.path.insert(0, str(Path(__file__).parent))

from services import get_auth, navigate

logger = logging.getLogger(__name__)

# Page config
st.set_page_config(
    page_title="SEO Monitor",
    page_icon="📈",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS
st.markdown("""
<style>
    [data-testid="stSidebar"] {
        background: linear-gradient(180deg, #0f172a 0%, #1e293b 100%);
    }
    [data-testid="stSidebar"] * {
        color: #e2e8f0 !important;
    }
    .main .block-container { padding-top: 2rem; }
</style>
""", unsafe_allow_html=True)


def main():
    if "current_page" not in st.session_state:
        st.session_state.current_page = "dashboard"
        st.session_state.page_params = {}

    auth = get_auth()
    user = auth.get_user()
    if user is None:
        from pages.login import render_login_page
        render_login_page()
        return

    with st.sidebar:
        st.markdown("### 📈 SEO Monitor")
        st.caption(user.email)
        st.markdown("---")
        if st.button(
            "🏠  All Projects",
            key="nav_dashboard",
            type="primary" if st.session_state.current_page == "dashboard" else "secondary",
            use_container_width=True,
        ):
            navigate("dashboard")
        if st.button(
            "➕  New Project",
            key="nav_new_project",
            type="primary" if st.session_state.current_page == "new_project" else "secondary",
            use_container_width=True,
        ):
            st.session_state.pop("wizard", None)
            navigate("new_project")
        st.markdown("---")
        if st.button("🚪  Sign out", key="nav_sign_out", use_container_width=True):
            auth.sign_out()
            st.session_state.pop("wizard", None)
            navigate("dashboard")

    # Main content area: route to pages
    page = st.session_state.current_page
    params = st.session_state.get("page_params", {})

    if page == "new_project":
        from pages.new_project import render_new_project_page
        render_new_project_page()
    elif page == "project":
        from pages.project_detail import render_project_detail_page
        render_project_detail_page(params.get("project_id"))
    else:
        from pages.projects import render_projects_page
        render_projects_page()


if __name__ == "__main__":
    main()
