"""Shared Streamlit resources: config, record store, auth state and routing."""

import logging
import sys
from pathlib import Path

import streamlit as st

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from seo_monitor.auth import AuthService
from seo_monitor.config import load_config
from seo_monitor.database import init_db
from seo_monitor.store import RecordStore


@st.cache_resource
def get_config() -> dict:
    """Load configuration and initialise the database once per server."""
    config = load_config(
        config_path=str(project_root / "config" / "settings.yaml"),
        env_path=str(project_root / ".env"),
    )
    logging.basicConfig(
        level=config["app"]["log_level"],
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    init_db(database_url=config["database"]["url"], echo=config["database"]["echo"])
    return config


@st.cache_resource
def get_store() -> RecordStore:
    get_config()
    return RecordStore()


def get_auth() -> AuthService:
    """Per-browser-session auth state."""
    if "auth" not in st.session_state:
        st.session_state.auth = AuthService(
            get_store(),
            min_password_length=get_config()["auth"]["min_password_length"],
        )
    return st.session_state.auth


def navigate(page: str, **params) -> None:
    """Switch page and rerun the script."""
    st.session_state.current_page = page
    st.session_state.page_params = params
    st.rerun()
