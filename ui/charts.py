"""
Billing charts
"""
import streamlit as st
import plotly.graph_objects as go
import plotly.express as px
from typing import List
import pandas as pd

from engine.aggregations import revenue_by_period, debt_by_unit
from models.entities import Invoice, Payment, Unit


def render_revenue_trend(payments: List[Payment]):
    """Approved payments per month"""
    st.subheader("📈 Collected per Month")

    df = revenue_by_period(payments)
    if df.empty:
        st.info("No approved payments yet.")
        return

    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=df['period'],
        y=df['amount'],
        name='Approved',
        marker_color='#2ca02c',
        hovertemplate='%{x}<br>Collected: $%{y:,.2f}<extra></extra>'
    ))
    fig.update_layout(
        xaxis_title="Month",
        yaxis_title="Amount ($)",
        height=350,
        margin=dict(l=10, r=10, t=30, b=10),
    )
    st.plotly_chart(fig, use_container_width=True)


def render_invoice_status_chart(invoices: List[Invoice]):
    """Invoice count by status"""
    st.subheader("🧾 Invoices by Status")

    if not invoices:
        st.info("No invoices issued.")
        return

    df = pd.DataFrame({'status': [i.status for i in invoices]})
    counts = df['status'].value_counts().reset_index()
    counts.columns = ['status', 'count']

    fig = px.pie(
        counts,
        names='status',
        values='count',
        color='status',
        color_discrete_map={'PAID': '#2ca02c', 'PENDING': '#ff7f0e', 'CANCELLED': '#7f7f7f'},
        hole=0.4,
    )
    fig.update_layout(height=350, margin=dict(l=10, r=10, t=30, b=10))
    st.plotly_chart(fig, use_container_width=True)


def render_debt_by_unit(units: List[Unit], invoices: List[Invoice], top: int = 15):
    """Units with the largest outstanding balance"""
    st.subheader("🏠 Debt by Unit")

    debts = debt_by_unit(invoices)
    names = {u.id: u.name for u in units}
    rows = [
        {'unit': names.get(unit_id, unit_id[:8]), 'debt': debt}
        for unit_id, debt in debts.items() if debt > 0
    ]
    if not rows:
        st.success("✅ Every unit is up to date.")
        return

    df = pd.DataFrame(rows).sort_values('debt', ascending=False).head(top)
    fig = px.bar(df, x='unit', y='debt', color_discrete_sequence=['#d62728'])
    fig.update_layout(xaxis_title="Unit", yaxis_title="Outstanding ($)", height=350,
                      margin=dict(l=10, r=10, t=30, b=10))
    st.plotly_chart(fig, use_container_width=True)
