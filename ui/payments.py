"""
Payments page: review, approval and registration
"""
import streamlit as st
from datetime import date
from typing import List, Optional

from config import settings
from engine.aggregations import filter_payments, payments_df
from engine.permissions import Permissions
from engine.reconciliation import load_payment_detail, periods_to_approve
from models.entities import Payment, Unit
from models.schemas import PaymentForm, PaymentReviewForm
from services.backend import Backend
from services.errors import ApiError
from ui.feedback import notify_error, notify_success, show_form_errors
from utils.helpers import format_currency, format_date, format_payment_method, format_period
from utils.validations import validate_form, validate_period, validate_year


def render_payments_page(backend: Backend, permissions: Permissions, building_id: Optional[str]):
    st.header("💳 Payments")
    st.caption("Review and manage payments for this building")

    if not building_id:
        st.info("Select a building in the sidebar.")
        return

    if not permissions.can_approve_payments(building_id):
        st.error("You do not have access to this building")
        return

    try:
        units = backend.units.get_units(building_id)
    except ApiError as e:
        notify_error("Failed to fetch units", e)
        units = []
    unit_names = {u.id: u.name for u in units}

    # Filters
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        unit_id = st.selectbox("Unit", options=["all"] + list(unit_names.keys()),
                               format_func=lambda uid: "All units" if uid == "all" else unit_names[uid])
    with col2:
        status = st.selectbox("Status", options=["all"] + settings.PAYMENT_STATUSES)
    with col3:
        year = st.text_input("Year", value=str(date.today().year))
    with col4:
        period = st.text_input("Period (YYYY-MM)", value="")

    if year and not validate_year(year):
        st.error("Year must have four digits.")
        return
    if period and not validate_period(period):
        st.error("Period must be in YYYY-MM format.")
        return

    try:
        payments = backend.payments.get_payments(
            building_id=building_id,
            unit_id=None if unit_id == "all" else unit_id,
            status=None if status == "all" else status,
            year=year or None,
            period=period or None,
        )
    except ApiError as e:
        notify_error("Failed to fetch payments", e)
        payments = []

    search = st.text_input("🔎 Search payments", placeholder="Amount, method, period or resident…")
    visible = filter_payments(payments, search)

    df = payments_df(visible)
    if df.empty:
        st.info("No payments found.")
    else:
        df['amount'] = df['amount'].apply(format_currency)
        df['method'] = df['method'].apply(format_payment_method)
        df['date'] = df['date'].apply(format_date)
        st.dataframe(df.drop(columns=['id']), hide_index=True, use_container_width=True)

    with st.expander("➕ Register payment"):
        render_payment_form(backend, building_id, units)

    pending = [p for p in visible if p.status == "PENDING"]
    if pending:
        st.markdown("---")
        render_review_panel(backend, pending)


def render_review_panel(backend: Backend, pending: List[Payment]):
    """Approve (optionally only some periods) or reject a pending payment"""
    st.subheader("📋 Review pending payment")

    by_id = {p.id: p for p in pending}
    payment_id = st.selectbox(
        "Payment",
        options=list(by_id.keys()),
        format_func=lambda pid: f"{by_id[pid].user_name or 'Resident'} · {format_currency(by_id[pid].amount)} · "
                                f"{format_date(by_id[pid].payment_date)}",
    )

    detail = load_payment_detail(backend.payments, backend.billing, payment_id)
    if detail.payment is None:
        notify_error(detail.error or "Could not load payment details")
        return

    payment = detail.payment
    col1, col2 = st.columns(2)
    with col1:
        st.metric("Amount", format_currency(payment.amount))
        st.write(f"**Method:** {format_payment_method(payment.method)}")
        if payment.bank:
            st.write(f"**Bank:** {payment.bank}")
        if payment.reference:
            st.write(f"**Reference:** {payment.reference}")
    with col2:
        st.write("**Allocations**")
        if detail.is_partial:
            st.caption(f"⚠️ {detail.error}")
        elif not detail.allocations:
            st.caption("Not allocated yet.")
        for alloc in detail.allocations:
            st.write(f"• {format_period(alloc.period)}: {format_currency(alloc.allocated_amount)}")
        if payment.proof_url:
            st.link_button("👁️ View proof", payment.proof_url)

    available = list(payment.periods)
    with st.form(key=f"review_{payment.id}"):
        selected = st.multiselect(
            "Periods to approve",
            options=available,
            default=available,
            format_func=format_period,
            disabled=not available,
        )
        notes = st.text_area("Notes")
        col1, col2 = st.columns(2)
        with col1:
            approve = st.form_submit_button("✅ Approve", type="primary", use_container_width=True)
        with col2:
            reject = st.form_submit_button("❌ Reject", use_container_width=True)

    if not (approve or reject):
        return

    form, errors = validate_form(PaymentReviewForm, {
        "status": "APPROVED" if approve else "REJECTED",
        "notes": notes or None,
        "approved_periods": periods_to_approve(available, selected) if approve else None,
    })
    if errors:
        show_form_errors(errors)
        return

    if approve and available and not selected:
        st.error("Select at least one period to approve.")
        return

    try:
        if approve:
            backend.payments.approve_payment(payment.id, form.notes, form.approved_periods)
            notify_success("Payment approved successfully")
        else:
            backend.payments.reject_payment(payment.id, form.notes)
            notify_success("Payment rejected")
        st.rerun()
    except ApiError as e:
        notify_error("Failed to update payment", e)


def render_payment_form(backend: Backend, building_id: str, units: List[Unit]):
    if not units:
        st.info("This building has no units yet.")
        return

    by_id = {u.id: u for u in units}
    with st.form(key="payment_form"):
        unit_id = st.selectbox("Unit", options=list(by_id.keys()), format_func=lambda uid: by_id[uid].name)
        col1, col2 = st.columns(2)
        with col1:
            amount = st.number_input("Amount", min_value=0.0, step=1.0)
            method = st.selectbox("Method", options=settings.PAYMENT_METHODS, index=1,
                                  format_func=format_payment_method)
        with col2:
            payment_date = st.date_input("Payment date", value=date.today())
            reference = st.text_input("Reference")
        notes = st.text_area("Notes")
        proof = st.file_uploader("Proof of payment", type=["png", "jpg", "jpeg", "pdf"])
        submitted = st.form_submit_button("Register payment", type="primary")

    if not submitted:
        return

    form, errors = validate_form(PaymentForm, {
        "building_id": building_id,
        "unit_id": unit_id,
        "amount": amount,
        "payment_date": payment_date,
        "method": method,
        "reference": reference,
        "notes": notes,
    })
    if errors:
        show_form_errors(errors)
        return

    proof_file = (proof.name, proof.getvalue(), proof.type) if proof else None
    try:
        backend.payments.create_payment(form.model_dump(mode="json"), proof_file)
        notify_success("Payment registered successfully")
        st.rerun()
    except ApiError as e:
        notify_error("Failed to register payment", e)
