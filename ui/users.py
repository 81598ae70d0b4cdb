"""
Users page: residents and board members of the selected building
"""
import streamlit as st
from typing import List, Optional

from config import settings
from engine.aggregations import filter_users, users_df
from engine.permissions import Permissions
from models.entities import Unit, User
from models.schemas import AssignUnitForm, UserCreateForm, UserEditForm
from services.backend import Backend
from services.errors import ApiError
from services.users_service import unit_assignment_payload
from ui.feedback import notify_error, notify_success, show_form_errors
from utils.concurrency import run_parallel
from utils.helpers import format_building_role, format_user_role
from utils.validations import validate_form


def render_users_page(backend: Backend, permissions: Permissions, building_id: Optional[str]):
    st.header("👥 Users")

    if not building_id:
        st.info("Select a building in the sidebar.")
        return

    if not permissions.can_manage_users(building_id):
        st.error("You do not have access to this building")
        return

    col1, col2 = st.columns(2)
    with col1:
        role = st.selectbox("Role", options=["all"] + settings.USER_ROLES,
                            format_func=lambda r: "All roles" if r == "all" else format_user_role(r))
    with col2:
        status = st.selectbox("Status", options=["all"] + settings.USER_STATUSES,
                              format_func=lambda s: "All statuses" if s == "all" else s.capitalize())

    try:
        users, units = run_parallel(
            lambda: backend.users.get_users(
                building_id=building_id,
                role=None if role == "all" else role,
                status=None if status == "all" else status,
            ),
            lambda: backend.units.get_units(building_id),
        )
    except ApiError as e:
        notify_error("Failed to fetch users", e)
        return

    search = st.text_input("🔎 Search users", placeholder="Name, email or unit…")
    visible = filter_users(users, search)

    df = users_df(visible)
    if df.empty:
        st.info("No users found.")
    else:
        df['role'] = df['role'].apply(format_user_role)
        st.dataframe(df.drop(columns=['id']), hide_index=True, use_container_width=True)

    pending = [u for u in visible if u.status == "pending"]
    if pending:
        render_pending_approvals(backend, pending)

    with st.expander("➕ New user"):
        render_create_user_form(backend, building_id, units)

    if not visible:
        return

    st.markdown("---")
    by_id = {u.id: u for u in visible}
    user_id = st.selectbox(
        "✏️ Manage user",
        options=list(by_id.keys()),
        format_func=lambda uid: f"{by_id[uid].name or by_id[uid].email} ({by_id[uid].email})",
    )
    user = by_id[user_id]

    edit_tab, units_tab = st.tabs(["Profile", "Units"])
    with edit_tab:
        render_edit_user_form(backend, user)
        with st.expander("🗑️ Delete user"):
            st.warning(f"Deleting **{user.email}** cannot be undone.")
            if st.button("Delete", type="primary", key=f"delete_user_{user.id}"):
                try:
                    backend.users.delete_user(user.id)
                    notify_success(f"User {user.email} deleted")
                    st.rerun()
                except ApiError as e:
                    notify_error("Failed to delete user", e)
    with units_tab:
        render_user_units(backend, user, units)


def render_pending_approvals(backend: Backend, pending: List[User]):
    st.subheader(f"⏳ Pending approval ({len(pending)})")
    for user in pending:
        col1, col2, col3 = st.columns([3, 1, 1])
        with col1:
            st.write(f"**{user.name or user.email}** · {user.email}")
        with col2:
            if st.button("Approve", key=f"approve_user_{user.id}", type="primary"):
                try:
                    backend.users.approve_user(user.id)
                    notify_success(f"User {user.email} approved")
                    st.rerun()
                except ApiError as e:
                    notify_error("Failed to approve user", e)
        with col3:
            if st.button("Reject", key=f"reject_user_{user.id}"):
                try:
                    backend.users.reject_user(user.id)
                    notify_success(f"User {user.email} rejected")
                    st.rerun()
                except ApiError as e:
                    notify_error("Failed to reject user", e)


def render_create_user_form(backend: Backend, building_id: str, units: List[Unit]):
    unit_names = {u.id: u.name for u in units}
    with st.form(key=f"create_user_{building_id}"):
        col1, col2 = st.columns(2)
        with col1:
            name = st.text_input("Name")
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
        with col2:
            phone = st.text_input("Phone")
            role = st.selectbox("Role", options=settings.USER_ROLES, format_func=format_user_role)
            status = st.selectbox("Status", options=settings.USER_STATUSES, index=1,
                                  format_func=str.capitalize)
        unit_id = st.selectbox("Unit", options=[""] + list(unit_names.keys()),
                               format_func=lambda uid: unit_names.get(uid, "No unit"))
        submitted = st.form_submit_button("Create user", type="primary")

    if not submitted:
        return

    form, errors = validate_form(UserCreateForm, {
        "name": name,
        "email": email,
        "password": password,
        "phone": phone,
        "building_id": building_id,
        "unit_id": unit_id,
        "role": role,
        "status": status,
    })
    if errors:
        show_form_errors(errors)
        return

    try:
        _, assign_error = backend.users.create_user_with_unit(
            form.model_dump(exclude={"unit_id"}, exclude_none=True), form.unit_id,
        )
    except ApiError as e:
        notify_error("Failed to create user", e)
        return

    if assign_error is not None:
        # The user exists; keep the form visible with the assignment failure
        notify_error(f"User {form.email} created, but the unit could not be assigned", assign_error)
        return
    notify_success(f"User {form.email} created")
    st.rerun()


def render_edit_user_form(backend: Backend, user: User):
    roles = settings.USER_ROLES
    statuses = settings.USER_STATUSES
    with st.form(key=f"edit_user_{user.id}"):
        col1, col2 = st.columns(2)
        with col1:
            name = st.text_input("Name", value=user.name)
            email = st.text_input("Email", value=user.email)
            password = st.text_input("New password", type="password", help="Leave blank to keep the current one")
        with col2:
            phone = st.text_input("Phone", value=user.phone or "")
            role = st.selectbox("Role", options=roles, format_func=format_user_role,
                                index=roles.index(user.role) if user.role in roles else 0)
            status = st.selectbox("Status", options=statuses, format_func=str.capitalize,
                                  index=statuses.index(user.status) if user.status in statuses else 1)
        submitted = st.form_submit_button("Save", type="primary")

    if not submitted:
        return

    form, errors = validate_form(UserEditForm, {
        "name": name,
        "email": email,
        "password": password,
        "phone": phone,
        "role": role,
        "status": status,
    })
    if errors:
        show_form_errors(errors)
        return

    try:
        backend.users.update_user(user.id, form.model_dump(exclude_none=True))
        notify_success(f"User {form.email} updated")
        st.rerun()
    except ApiError as e:
        notify_error("Failed to update user", e)


def render_user_units(backend: Backend, user: User, units: List[Unit]):
    """Unit memberships with their per-building role"""
    try:
        memberships = backend.users.get_user_units(user.id)
    except ApiError as e:
        notify_error("Failed to fetch user units", e)
        return

    unit_names = {u.id: u.name for u in units}

    if not memberships:
        st.info("No units assigned.")
    for membership in memberships:
        col1, col2, col3 = st.columns([3, 2, 1])
        with col1:
            primary = " ⭐" if membership.is_primary else ""
            name = membership.unit_name or unit_names.get(membership.unit_id) or membership.unit_id
            building = f" · {membership.building_name}" if membership.building_name else ""
            st.write(f"**{name}**{primary}{building}")
        with col2:
            st.write(format_building_role(membership.building_role))
        with col3:
            if st.button("Remove", key=f"remove_unit_{user.id}_{membership.unit_id}"):
                try:
                    backend.users.remove_unit(user.id, membership.unit_id)
                    notify_success("Unit removed")
                    st.rerun()
                except ApiError as e:
                    notify_error("Failed to remove unit", e)

    if not units:
        return

    with st.form(key=f"assign_unit_{user.id}"):
        st.write("**Assign unit**")
        col1, col2 = st.columns(2)
        with col1:
            unit_id = st.selectbox("Unit", options=list(unit_names.keys()),
                                   format_func=lambda uid: unit_names[uid])
        with col2:
            building_role = st.selectbox("Role in building", options=settings.BUILDING_ROLES,
                                         format_func=format_building_role)
        col1, col2 = st.columns(2)
        with col1:
            assign = st.form_submit_button("Assign", type="primary")
        with col2:
            change_role = st.form_submit_button("Change role")

    if not (assign or change_role):
        return

    form, errors = validate_form(AssignUnitForm, {"unit_id": unit_id, "building_role": building_role})
    if errors:
        show_form_errors(errors)
        return

    try:
        if assign:
            payload = unit_assignment_payload(memberships, form.unit_id, form.building_role)
        else:
            if not any(m.unit_id == form.unit_id for m in memberships):
                st.error("The user is not assigned to this unit")
                return
            payload = {"unit_id": form.unit_id, "building_role": form.building_role}
    except ValueError as e:
        st.error(str(e))
        return

    try:
        backend.users.assign_or_update_unit(user.id, payload)
        notify_success("Unit assignment saved")
        st.rerun()
    except ApiError as e:
        notify_error("Failed to assign unit", e)
