"""
Buildings administration and units tab
"""
import streamlit as st
from typing import Optional

from engine.aggregations import buildings_df
from engine.permissions import Permissions
from models.entities import Building
from models.schemas import BuildingForm, UnitForm, BatchUnitForm
from services.backend import Backend
from services.errors import ApiError
from ui.feedback import notify_error, notify_success, show_form_errors
from utils.helpers import format_currency
from utils.validations import validate_form


def render_buildings_page(backend: Backend, permissions: Permissions):
    """Super admin list of every building with create/edit/delete"""
    st.header("🏢 Buildings")

    if not permissions.can_manage_buildings:
        st.error("Only administrators can manage buildings.")
        return

    try:
        buildings = backend.buildings.get_buildings()
    except ApiError as e:
        notify_error("Failed to fetch buildings", e)
        buildings = []

    df = buildings_df(buildings)
    if df.empty:
        st.info("No buildings registered yet.")
    else:
        df['monthly_fee'] = df['monthly_fee'].apply(lambda v: format_currency(v) if v else "--")
        st.dataframe(df.drop(columns=['id']), hide_index=True, use_container_width=True)

    with st.expander("➕ New building", expanded=not buildings):
        render_building_form(backend, None)

    if not buildings:
        return

    st.markdown("---")
    st.subheader("Edit building")
    by_id = {b.id: b for b in buildings}
    selected_id = st.selectbox(
        "Building",
        options=list(by_id.keys()),
        format_func=lambda building_id: by_id[building_id].name,
        key="edit_building_id",
    )
    building = by_id[selected_id]
    render_building_form(backend, building)

    with st.expander("🗑️ Delete building"):
        st.warning(f"Deleting **{building.name}** cannot be undone.")
        confirm = st.text_input("Type the building name to confirm", key=f"delete_confirm_{building.id}")
        if st.button("Delete", type="primary", disabled=confirm != building.name, key=f"delete_{building.id}"):
            try:
                backend.buildings.delete_building(building.id)
                notify_success(f"Building {building.name} deleted")
                st.rerun()
            except ApiError as e:
                notify_error("Failed to delete building", e)


def render_building_form(backend: Backend, building: Optional[Building]):
    """Create when building is None, edit otherwise"""
    key = f"building_form_{building.id if building else 'new'}"
    with st.form(key=key):
        name = st.text_input("Name", value=building.name if building else "")
        address = st.text_input("Address", value=building.address if building else "")
        rif = st.text_input("RIF (tax id)", value=(building.rif or "") if building else "")
        col1, col2 = st.columns(2)
        with col1:
            total_units = st.number_input(
                "Total units", min_value=0, step=1,
                value=int(building.total_units or 0) if building else 0,
            )
        with col2:
            monthly_fee = st.number_input(
                "Monthly fee", min_value=0.0, step=1.0,
                value=float(building.monthly_fee or 0) if building else 0.0,
            )
        submitted = st.form_submit_button("Save" if building else "Create", type="primary")

    if not submitted:
        return

    form, errors = validate_form(BuildingForm, {
        "name": name,
        "address": address,
        "rif": rif,
        "total_units": total_units or None,
        "monthly_fee": monthly_fee or None,
    })
    if errors:
        show_form_errors(errors)
        return

    payload = form.model_dump(exclude_none=True)
    try:
        if building:
            backend.buildings.update_building(building.id, payload)
            notify_success("Building updated")
        else:
            backend.buildings.create_building(payload)
            notify_success("Building created")
        st.rerun()
    except ApiError as e:
        notify_error("Failed to save building", e)


def render_create_unit_form(backend: Backend, building_id: str):
    with st.form(key=f"create_unit_{building_id}"):
        col1, col2, col3 = st.columns(3)
        with col1:
            name = st.text_input("Unit name", placeholder="e.g. 1-A")
        with col2:
            floor = st.text_input("Floor", placeholder="e.g. 1")
        with col3:
            aliquot = st.number_input("Aliquot (%)", min_value=0.0, step=0.01, format="%.4f")
        submitted = st.form_submit_button("Create unit", type="primary")

    if not submitted:
        return

    form, errors = validate_form(UnitForm, {"name": name, "floor": floor, "aliquot": aliquot})
    if errors:
        show_form_errors(errors)
        return

    try:
        backend.units.create_unit(building_id, form.model_dump(exclude_none=True))
        notify_success(f"Unit {form.name} created")
        st.rerun()
    except ApiError as e:
        notify_error("Failed to create unit", e)


def render_batch_unit_wizard(backend: Backend, building_id: str):
    """Generate floors x labels units in one request"""
    with st.form(key=f"batch_units_{building_id}"):
        col1, col2, col3 = st.columns(3)
        with col1:
            floors_count = st.number_input("Number of floors", min_value=0, step=1)
        with col2:
            unit_labels = st.text_input("Units per floor", placeholder="A, B, C")
        with col3:
            aliquot = st.number_input("Default aliquot (%)", min_value=0.0, step=0.01, format="%.4f")
        preview = st.form_submit_button("Preview")
        generate = st.form_submit_button("Generate units", type="primary")

    if not (preview or generate):
        return

    form, errors = validate_form(BatchUnitForm, {
        "floors_count": floors_count,
        "unit_labels": unit_labels,
        "aliquot": aliquot,
    })
    if errors:
        show_form_errors(errors)
        return

    labels = form.units_per_floor
    st.info(
        f"This will create {form.preview_count} units: "
        f"{form.floors[0]}-{labels[0]} to {form.floors[-1]}-{labels[-1]}"
    )

    if generate:
        try:
            backend.units.batch_create_units(building_id, form.payload())
            notify_success(f"Successfully generated {form.preview_count} units")
            st.rerun()
        except ApiError as e:
            notify_error("Failed to generate units. Some might already exist", e)
