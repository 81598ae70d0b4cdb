"""
Condominium Administration Panel
Main Streamlit Application: admin and board management over the condominium API
"""
import streamlit as st
from datetime import datetime

# Import services and engines
from services.backend import Backend
from services.errors import SessionExpiredError
from engine.auth_session import AuthSession
from engine.building_scope import BuildingScope

# Import UI components
from ui.login import render_login
from ui.sidebar import render_sidebar
from ui.dashboard import render_dashboard, render_building_summary_bar
from ui.buildings import render_buildings_page
from ui.unit_view import render_units_page
from ui.users import render_users_page
from ui.billing import render_billing_page
from ui.payments import render_payments_page

# Import config
from config import settings
from utils.logging_config import logger

# Page configuration
st.set_page_config(
    page_title=settings.APP_TITLE,
    page_icon=settings.APP_ICON,
    layout="wide",
    initial_sidebar_state="expanded",
)


# ---------------------------------------------------------------------------
# Session state helpers
# ---------------------------------------------------------------------------

def initialize_session_state():
    """Initialize session state variables."""
    if "backend" not in st.session_state:
        st.session_state.backend = Backend.create()
    backend = st.session_state.backend

    defaults = {
        "auth_session": AuthSession(backend.auth),
        "building_scope": BuildingScope(backend.buildings),
        "scope_user_id": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def sync_building_scope(scope: BuildingScope, user):
    """Reload the available buildings whenever the signed-in user changes"""
    user_id = user.id if user else None
    if st.session_state.scope_user_id != user_id:
        scope.load(user)
        st.session_state.scope_user_id = user_id


def sign_out(auth_session: AuthSession, scope: BuildingScope):
    auth_session.logout()
    scope.load(None)
    st.session_state.scope_user_id = None
    st.session_state.pop("open_payment_id", None)


# ---------------------------------------------------------------------------
# Page routing
# ---------------------------------------------------------------------------

def render_page(page: str, backend: Backend, permissions, building_id):
    if page == "dashboard":
        render_dashboard(backend, permissions, building_id)
        return

    if building_id and page != "buildings":
        render_building_summary_bar(backend, building_id)
        st.markdown("---")

    if page == "buildings":
        render_buildings_page(backend, permissions)
    elif page == "units":
        render_units_page(backend, permissions, building_id)
    elif page == "users":
        render_users_page(backend, permissions, building_id)
    elif page == "billing":
        render_billing_page(backend, permissions, building_id)
    elif page == "payments":
        render_payments_page(backend, permissions, building_id)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main():
    initialize_session_state()

    backend: Backend = st.session_state.backend
    auth_session: AuthSession = st.session_state.auth_session
    scope: BuildingScope = st.session_state.building_scope

    with st.spinner("Loading session…"):
        auth_session.restore()

    if not auth_session.is_authenticated:
        if render_login(auth_session):
            st.rerun()
        return

    user = auth_session.user
    sync_building_scope(scope, user)

    nav = render_sidebar(scope, user)
    if nav["logout"]:
        logger.info(f"User {user.email} signed out")
        sign_out(auth_session, scope)
        st.rerun()

    try:
        render_page(nav["page"], backend, nav["permissions"], scope.selected_building_id)
    except SessionExpiredError as e:
        logger.warning(f"Session expired: {e}")
        sign_out(auth_session, scope)
        st.rerun()

    st.markdown("---")
    st.caption(f"{settings.APP_TITLE} | {datetime.now().strftime('%Y-%m-%d %H:%M')}")


if __name__ == "__main__":
    main()
