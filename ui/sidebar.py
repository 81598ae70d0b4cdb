"""
Sidebar: building selector, navigation and session controls
"""
import streamlit as st

from config import settings
from engine.building_scope import BuildingScope
from engine.permissions import Permissions
from models.entities import User
from utils.helpers import format_user_role

PAGES = {
    "dashboard": "📊 Dashboard",
    "buildings": "🏢 Buildings",
    "units": "🚪 Units",
    "users": "👥 Users",
    "billing": "🧾 Billing",
    "payments": "💳 Payments",
}


def visible_pages(permissions: Permissions) -> list:
    """Pages the current user can open for the selected building"""
    pages = ["dashboard"]
    if permissions.can_manage_buildings:
        pages.append("buildings")
    if permissions.can_manage_building():
        pages.append("units")
    if permissions.can_manage_users():
        pages.append("users")
    if permissions.can_manage_building():
        pages.append("billing")
    if permissions.can_approve_payments():
        pages.append("payments")
    return pages


def render_sidebar(scope: BuildingScope, user: User) -> dict:
    """
    Render the sidebar
    Returns: dict with the selected page, the permissions for the active
    building and whether logout was requested
    """
    st.sidebar.title(f"{settings.APP_ICON} {settings.APP_TITLE}")

    # Building selector
    if scope.available_buildings:
        st.sidebar.subheader("🏢 Building")
        options = [b.id for b in scope.available_buildings]
        names = {b.id: b.name or settings.UNKNOWN_BUILDING_NAME for b in scope.available_buildings}
        current = scope.selected_building_id
        choice = st.sidebar.selectbox(
            "Active building",
            options=options,
            index=options.index(current) if current in options else 0,
            format_func=lambda building_id: names[building_id],
        )
        if choice != scope.selected_building_id:
            scope.select(choice)

    permissions = Permissions.from_scope(user, scope)

    st.sidebar.caption(f"{permissions.display_name} · {format_user_role(permissions.role)}")
    if not scope.available_buildings and not permissions.is_super_admin:
        st.sidebar.warning("You are not a board member of any building.")

    st.sidebar.markdown("---")

    pages = visible_pages(permissions)
    page = st.sidebar.radio(
        "Navigate",
        options=pages,
        format_func=lambda p: PAGES[p],
    )

    st.sidebar.markdown("---")
    logout = st.sidebar.button("🚪 Log out", use_container_width=True)

    return {
        "page": page,
        "permissions": permissions,
        "logout": logout,
    }
