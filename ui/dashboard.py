"""
Dashboard view: KPI cards, charts and searchable tables
"""
import streamlit as st
from typing import Optional

from engine.aggregations import (
    load_dashboard_data,
    load_building_summary,
    filter_users,
    filter_payments,
    filter_invoices,
    users_df,
    payments_df,
    invoices_df,
)
from engine.permissions import Permissions
from services.backend import Backend
from services.errors import ApiError
from ui.charts import render_revenue_trend, render_invoice_status_chart
from ui.feedback import notify_error
from utils.helpers import format_currency


def render_building_summary_bar(backend: Backend, building_id: str):
    """Compact header with the building's debt and pending payments"""
    try:
        summary = load_building_summary(backend, building_id)
    except ApiError as e:
        notify_error("Failed to fetch building stats", e)
        return

    col1, col2, col3 = st.columns([2, 1, 1])
    with col1:
        st.markdown(f"### 🏢 {summary.building.name if summary.building else ''}")
        if summary.building and summary.building.address:
            st.caption(summary.building.address)
    with col2:
        st.metric("💸 Total Debt", format_currency(summary.total_debt))
    with col3:
        st.metric("⏳ Pending Payments", summary.pending_payments)


def render_dashboard(backend: Backend, permissions: Permissions, building_id: Optional[str] = None):
    """
    Render the dashboard.
    Admins may switch to a system-wide view; everyone else is scoped to a building.
    """
    global_view = False
    if permissions.is_super_admin:
        global_view = st.toggle("🌐 Global overview", value=building_id is None)

    effective_building_id = None if global_view else (building_id or permissions.building_id)

    if effective_building_id and not permissions.is_board_in_building(effective_building_id):
        st.error("You do not have access to this building")
        return

    if effective_building_id:
        st.header(permissions.building_name or "Building Dashboard")
        st.caption("Building Management Overview")
    else:
        st.header("Global Dashboard")
        st.caption("System-wide Administration" if permissions.is_super_admin else "Account Overview")

    with st.spinner("Loading dashboard…"):
        try:
            data = load_dashboard_data(backend, effective_building_id, permissions.is_super_admin)
        except ApiError as e:
            notify_error("Failed to fetch dashboard data", e)
            return

    stats = data.stats

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        if not effective_building_id and permissions.is_super_admin:
            st.metric("🏢 Total Buildings", stats.total_buildings, help="Active buildings")
        else:
            st.metric("🧾 Pending Invoices", stats.pending_invoices)
    with col2:
        st.metric("👥 Users", stats.total_users, help="Registered residents and board members")
    with col3:
        st.metric(
            "⏳ Pending Payments",
            stats.pending_payments,
            delta=f"{stats.approved_payments} approved",
            delta_color="off",
        )
    with col4:
        st.metric("💰 Collected", format_currency(stats.total_revenue), help="Sum of approved payments")

    st.metric("💸 Outstanding Debt", format_currency(stats.total_debt), help="Unpaid balance of pending invoices")

    st.markdown("---")

    col1, col2 = st.columns(2)
    with col1:
        render_revenue_trend(data.payments)
    with col2:
        render_invoice_status_chart(data.invoices)

    st.markdown("---")

    users_tab, payments_tab, invoices_tab = st.tabs(["👥 Users", "💳 Payments", "🧾 Invoices"])

    with users_tab:
        search = st.text_input("🔎 Search users", placeholder="Name, email or unit…", key="dash_search_users")
        df = users_df(filter_users(data.users, search))
        if df.empty:
            st.info("No users found.")
        else:
            st.dataframe(df.drop(columns=['id']), hide_index=True, use_container_width=True)

    with payments_tab:
        search = st.text_input("🔎 Search payments", placeholder="Amount, method, period or resident…",
                               key="dash_search_payments")
        df = payments_df(filter_payments(data.payments, search))
        if df.empty:
            st.info("No payments found.")
        else:
            df['amount'] = df['amount'].apply(format_currency)
            st.dataframe(df.drop(columns=['id']), hide_index=True, use_container_width=True)

    with invoices_tab:
        search = st.text_input("🔎 Search invoices", placeholder="Number, resident or unit…",
                               key="dash_search_invoices")
        df = invoices_df(filter_invoices(data.invoices, search))
        if df.empty:
            st.info("No invoices found.")
        else:
            for col in ['amount', 'paid', 'outstanding']:
                df[col] = df[col].apply(format_currency)
            st.dataframe(df.drop(columns=['id']), hide_index=True, use_container_width=True)
