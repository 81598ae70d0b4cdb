"""
Units page: unit list with search and unit drilldown
"""
import streamlit as st

from engine.aggregations import (
    approved_revenue,
    load_unit_detail,
    solvency_rate,
    units_df,
    users_df,
    payments_df,
    invoices_df,
)
from engine.permissions import Permissions
from services.backend import Backend
from services.errors import ApiError
from ui.buildings import render_create_unit_form, render_batch_unit_wizard
from ui.charts import render_debt_by_unit
from ui.feedback import notify_error
from utils.concurrency import run_parallel
from utils.helpers import format_currency, format_percentage


def render_units_page(backend: Backend, permissions: Permissions, building_id: str):
    """
    Render the unit table for a building with search, then the drilldown
    """
    st.header("🚪 Units")

    if not building_id:
        st.info("Select a building in the sidebar.")
        return

    if not permissions.can_manage_building(building_id):
        st.error("You do not have access to this building")
        return

    try:
        units, invoices = run_parallel(
            lambda: backend.units.get_units(building_id),
            lambda: backend.billing.get_invoices(building_id=building_id, status="PENDING"),
        )
    except ApiError as e:
        notify_error("Failed to fetch units", e)
        return

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Total Units", len(units))
    with col2:
        st.metric("Total Aliquot", f"{sum(u.aliquot for u in units):.2f}%")
    with col3:
        st.metric("Solvency", format_percentage(solvency_rate(units, invoices)),
                  help="Units with no outstanding balance")

    search = st.text_input("🔎 Search units", placeholder="Enter unit name or floor...")

    df = units_df(units, invoices)
    if not df.empty and search:
        search_lower = search.lower()
        df = df[
            df['name'].astype(str).str.lower().str.contains(search_lower, regex=False) |
            df['floor'].astype(str).str.lower().str.contains(search_lower, regex=False)
        ]

    if df.empty:
        st.info("No units found.")
    else:
        display_df = df.drop(columns=['id']).copy()
        display_df['debt'] = display_df['debt'].apply(format_currency)
        st.dataframe(display_df, hide_index=True, use_container_width=True)

    with st.expander("➕ Add unit"):
        render_create_unit_form(backend, building_id)
    with st.expander("🧱 Generate units in batch"):
        render_batch_unit_wizard(backend, building_id)

    render_debt_by_unit(units, invoices)

    if not units:
        return

    st.markdown("---")
    by_id = {u.id: u for u in units}
    unit_id = st.selectbox(
        "🔍 Unit details",
        options=list(by_id.keys()),
        format_func=lambda uid: f"{by_id[uid].name} (floor {by_id[uid].floor})",
    )
    render_unit_detail(backend, building_id, unit_id)


def render_unit_detail(backend: Backend, building_id: str, unit_id: str):
    """Residents, payments, invoices and authoritative balance of one unit"""
    try:
        detail = load_unit_detail(backend, building_id, unit_id)
    except ApiError as e:
        notify_error("Failed to load unit details", e)
        return
    unit = detail.unit

    st.subheader(f"Unit {unit.name}")
    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Floor", unit.floor or "--")
        st.metric("Aliquot", f"{unit.aliquot:.4f}%")
    with col2:
        st.metric("💰 Total Paid", format_currency(approved_revenue(detail.payments)))
    with col3:
        st.metric("💸 Pending Debt", format_currency(detail.pending_debt),
                  help="Authoritative balance" if detail.balance is not None else "Computed from pending invoices")

    residents_tab, payments_tab, invoices_tab = st.tabs(["👥 Residents", "💳 Payments", "🧾 Invoices"])
    with residents_tab:
        df = users_df(detail.residents)
        if df.empty:
            st.info("No residents assigned.")
        else:
            st.dataframe(df.drop(columns=['id']), hide_index=True, use_container_width=True)
    with payments_tab:
        df = payments_df(detail.payments)
        if df.empty:
            st.info("No payments recorded.")
        else:
            df['amount'] = df['amount'].apply(format_currency)
            st.dataframe(df.drop(columns=['id']), hide_index=True, use_container_width=True)
    with invoices_tab:
        df = invoices_df(detail.invoices)
        if df.empty:
            st.info("No invoices issued.")
        else:
            for col in ['amount', 'paid', 'outstanding']:
                df[col] = df[col].apply(format_currency)
            st.dataframe(df.drop(columns=['id']), hide_index=True, use_container_width=True)
