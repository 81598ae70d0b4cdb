"""
Billing page: invoices, debt loading and invoice reconciliation
"""
import streamlit as st
from datetime import date
from typing import List, Optional

from config import settings
from engine.aggregations import filter_invoices, invoices_df, total_debt
from engine.permissions import Permissions
from engine.reconciliation import (
    invoice_display_id,
    load_invoice_detail,
    load_payment_detail,
    progress_bar_value,
)
from models.entities import Unit
from models.schemas import InvoiceForm
from services.backend import Backend
from services.errors import ApiError
from ui.feedback import notify_error, notify_success, show_form_errors
from utils.helpers import (
    format_currency,
    format_date,
    format_payment_method,
    format_percentage,
    format_period,
    is_overdue,
)
from utils.validations import validate_form


def render_billing_page(backend: Backend, permissions: Permissions, building_id: Optional[str]):
    st.header("🧾 Billing")

    if not building_id:
        st.info("Select a building in the sidebar.")
        return

    if not permissions.can_manage_building(building_id):
        st.error("You do not have access to this building")
        return

    col1, col2, col3 = st.columns(3)
    with col1:
        status = st.selectbox("Status", options=["all"] + settings.INVOICE_STATUSES)
    with col2:
        year = st.number_input("Year", min_value=2000, max_value=2100, value=date.today().year, step=1)
    with col3:
        month = st.selectbox("Month", options=[0] + list(range(1, 13)),
                             format_func=lambda m: "All" if m == 0 else date(2000, m, 1).strftime("%B"))

    try:
        invoices = backend.billing.get_invoices(
            building_id=building_id,
            status=None if status == "all" else status,
            year=int(year),
            month=month or None,
        )
        units = backend.units.get_units(building_id)
    except ApiError as e:
        notify_error("Failed to fetch invoices", e)
        return

    st.metric("💸 Outstanding", format_currency(total_debt(invoices)))

    search = st.text_input("🔎 Search invoices", placeholder="Number, resident or unit…")
    visible = filter_invoices(invoices, search)

    df = invoices_df(visible)
    if df.empty:
        st.info("No invoices found.")
    else:
        for col in ['amount', 'paid', 'outstanding']:
            df[col] = df[col].apply(format_currency)
        st.dataframe(df.drop(columns=['id']), hide_index=True, use_container_width=True)

    with st.expander("➕ Load debt (new invoice)"):
        render_invoice_form(backend, units)

    if visible:
        st.markdown("---")
        by_id = {i.id: i for i in visible}
        invoice_id = st.selectbox(
            "🔍 Invoice details",
            options=list(by_id.keys()),
            format_func=lambda iid: f"#{invoice_display_id(by_id[iid])} · {format_period(by_id[iid].period)} · "
                                    f"{by_id[iid].unit_name or '--'}",
        )
        unit_names = {u.id: u.name for u in units}
        render_invoice_details(backend, invoice_id, permissions.building_name, unit_names)


def render_invoice_form(backend: Backend, units: List[Unit], initial_unit_id: Optional[str] = None):
    if not units:
        st.info("Create units before loading debts.")
        return

    by_id = {u.id: u for u in units}
    options = list(by_id.keys())
    with st.form(key="invoice_form"):
        unit_id = st.selectbox(
            "Unit",
            options=options,
            index=options.index(initial_unit_id) if initial_unit_id in options else 0,
            format_func=lambda uid: by_id[uid].name,
        )
        amount = st.number_input("Amount", min_value=0.0, step=1.0)
        period = st.text_input("Period (YYYY-MM)", value=date.today().strftime(settings.PERIOD_FORMAT))
        description = st.text_input("Description", placeholder="Monthly maintenance fee")
        due_date = st.date_input("Due date", value=None)
        submitted = st.form_submit_button("Create invoice", type="primary")

    if not submitted:
        return

    form, errors = validate_form(InvoiceForm, {
        "unit_id": unit_id,
        "amount": amount,
        "period": period,
        "description": description,
        "due_date": due_date,
    })
    if errors:
        show_form_errors(errors)
        return

    try:
        backend.billing.load_debt(form.model_dump(mode="json", exclude_none=True))
        notify_success("Invoice created successfully")
        st.rerun()
    except ApiError as e:
        notify_error("Failed to create invoice", e)


def render_invoice_details(
    backend: Backend,
    invoice_id: str,
    building_name: Optional[str] = None,
    unit_names: Optional[dict] = None,
):
    """
    Invoice header with payment progress, then the payments that funded it.
    Each payment can be drilled into to see its full allocation spread.
    """
    try:
        detail = load_invoice_detail(backend.billing, invoice_id)
    except ApiError as e:
        notify_error("Failed to load invoice details", e)
        return

    invoice = detail.invoice
    unit_name = invoice.unit_name or (unit_names or {}).get(invoice.unit_id) or "--"

    col1, col2 = st.columns([2, 1])
    with col1:
        badge = " ✅ PAID" if invoice.is_paid else ""
        st.markdown(f"#### Invoice #{invoice_display_id(invoice)}{badge}")
        st.caption(f"{format_period(invoice.period)} · 🏢 {building_name or 'Building details N/A'} · Unit {unit_name}")
    with col2:
        st.metric("Total Amount", format_currency(invoice.amount))

    st.progress(
        progress_bar_value(invoice),
        text=f"Payment progress: {format_currency(invoice.paid_amount)} / {format_currency(invoice.amount)}"
             f" ({format_percentage(detail.progress)})",
    )

    col1, col2, col3 = st.columns(3)
    with col1:
        st.write(f"**Issued:** {format_date(invoice.issue_date)}")
    with col2:
        due = format_date(invoice.due_date)
        if is_overdue(invoice.due_date, invoice.is_paid):
            st.markdown(f"**Due:** :red[{due} (overdue)]")
        else:
            st.write(f"**Due:** {due}")
    with col3:
        st.write(f"**Status:** {invoice.status}")

    st.caption(invoice.description or "Monthly maintenance fee for condominium services and common areas management.")

    st.markdown("##### 💳 Associated Payments")
    if not detail.payments:
        st.info("No payments recorded yet.")
        return

    check = detail.allocation_check
    if not check.is_consistent:
        st.warning(
            f"Allocations add up to {format_currency(check.allocated_total)} but the invoice shows "
            f"{format_currency(check.paid_amount)} paid."
        )

    for p in detail.payments:
        col1, col2 = st.columns([4, 1])
        with col1:
            st.write(
                f"**{format_currency(p.allocated_amount)}** of {format_currency(p.amount)} · "
                f"{format_payment_method(p.method)} · {format_date(p.allocated_at or p.payment_date)}"
            )
        with col2:
            if st.button("Details", key=f"payment_detail_{invoice_id}_{p.id}"):
                st.session_state["open_payment_id"] = p.id

    open_payment_id = st.session_state.get("open_payment_id")
    if open_payment_id in {p.id for p in detail.payments}:
        with st.container(border=True):
            st.markdown("##### Transaction Details")
            render_payment_detail(backend, open_payment_id, invoice_id)


def render_payment_detail(backend: Backend, payment_id: str, current_invoice_id: Optional[str] = None):
    """Full payment with every allocation; the current invoice is highlighted"""
    detail = load_payment_detail(backend.payments, backend.billing, payment_id, current_invoice_id)

    if detail.payment is None:
        notify_error(detail.error or "Could not load payment details")
        return

    payment = detail.payment
    col1, col2 = st.columns(2)
    with col1:
        st.metric("Total Payment", format_currency(payment.amount))
    with col2:
        st.write(f"**Date:** {format_date(payment.payment_date)}")
        st.write(f"**Method:** {format_payment_method(payment.method)}")
        if payment.reference:
            st.write(f"**Reference:** {payment.reference}")

    st.markdown("**Allocations**")
    if detail.is_partial:
        st.caption(f"⚠️ {detail.error}")
    elif not detail.allocations:
        st.caption("No detailed allocations found.")
    for alloc in detail.allocations:
        name = alloc.receipt_number or alloc.number or alloc.invoice_id[:8]
        current = " · **Current**" if alloc.is_current else ""
        line = f"Invoice #{name} ({format_period(alloc.period)}){current}: {format_currency(alloc.allocated_amount)}"
        if alloc.is_current:
            st.success(line)
        else:
            st.write(line)

    if payment.proof_url:
        st.link_button("👁️ View Full Proof", payment.proof_url)
