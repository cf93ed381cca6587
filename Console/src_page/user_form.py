from __future__ import annotations

import streamlit as st
from streamlit_extras.stylable_container import stylable_container

from access import AccessCatalog
from forms import UserFormController, stage_user_payload
from utils import discard, get_api, get_or_create, navigate, notify
from validation import UserField


STAGED_NOTICE = "User data validated (saving is not enabled yet)"


def _build_controller() -> UserFormController:
    api = get_api()
    # Catalog is fetched once per form session and never refreshed
    catalog = get_or_create("access_catalog", lambda: AccessCatalog.load(api))
    submit_user = api.create_user if api.cfg.enable_user_create else stage_user_payload
    record = st.session_state.get("user_form_record")
    if record is not None:
        return UserFormController.for_record(record, catalog, submit_user, notify=notify)
    return UserFormController(catalog, submit_user, notify=notify)


def _widget_key(name: UserField) -> str:
    return f"user_form_{name.name.lower()}"


def _on_change(controller: UserFormController, name: UserField) -> None:
    controller.set_field(name, st.session_state[_widget_key(name)])


def _text_field(controller: UserFormController, name: UserField, label: str, **kwargs) -> None:
    key = _widget_key(name)
    if key not in st.session_state:
        st.session_state[key] = controller.draft.get(name) or ""
    st.text_input(label, key=key, on_change=_on_change, args=(controller, name), **kwargs)
    error = controller.error_for(name)
    if error:
        st.error(error)


def _on_level_change(controller: UserFormController) -> None:
    level = st.session_state[_widget_key(UserField.ACCESS_LEVEL)]
    controller.set_field(UserField.ACCESS_LEVEL, level.id if level else "")


def _on_active_change(controller: UserFormController) -> None:
    active = st.session_state[_widget_key(UserField.ACTIVE)]
    controller.set_field(UserField.ACTIVE, "1" if active else "0")


def _render_user_data(controller: UserFormController) -> None:
    st.markdown("<h3>User Data</h3>", unsafe_allow_html=True)
    c1, c2, c3 = st.columns(3)
    with c1:
        _text_field(controller, UserField.NAME, "Name *")
    with c2:
        _text_field(controller, UserField.EMAIL, "E-mail *")
    with c3:
        levels = controller.catalog.levels
        current = next((lv for lv in levels if lv.id == controller.draft.access_level_id), None)
        st.selectbox(
            "Access level *",
            options=levels,
            index=levels.index(current) if current else None,
            format_func=lambda lv: lv.label,
            placeholder="Select...",
            key=_widget_key(UserField.ACCESS_LEVEL),
            on_change=_on_level_change,
            args=(controller,),
        )
        error = controller.error_for(UserField.ACCESS_LEVEL)
        if error:
            st.error(error)

    c4, c5, c6 = st.columns(3)
    with c4:
        _text_field(controller, UserField.PHONE, "Phone", placeholder="(99) 99999-9999")
    with c5:
        _text_field(controller, UserField.PASSWORD, "Password", type="password")
    with c6:
        active_key = _widget_key(UserField.ACTIVE)
        if active_key not in st.session_state:
            st.session_state[active_key] = controller.draft.active == "1"
        st.toggle("Active", key=active_key, on_change=_on_active_change, args=(controller,))


def _render_access(controller: UserFormController) -> None:
    head, switch = st.columns([3, 1])
    with head:
        st.markdown("<h3>Screen Access</h3>", unsafe_allow_html=True)
    with switch:
        # Switch state mirrors the derived predicate on every run
        st.session_state["user_form_all_access"] = controller.all_selected
        st.toggle("Select all", key="user_form_all_access", on_change=controller.toggle_all_access)

    if not controller.catalog.screens:
        st.caption("No screens available.")
        return

    for screen in controller.catalog.screens:
        key = f"user_form_access_{screen.id}"
        st.session_state[key] = controller.is_granted(screen.id)
        with stylable_container(key=f"access_row_{screen.id}", css_styles="""
            {
                border-bottom: 1px solid #e2e8f0;
                padding: 6px 0;
            }
        """):
            label_col, toggle_col = st.columns([4, 1])
            with label_col:
                st.markdown(f"**{screen.label}**")
                st.caption(f"Allow access to the {screen.label.lower()} screen")
            with toggle_col:
                st.toggle(
                    screen.label,
                    key=key,
                    label_visibility="collapsed",
                    on_change=controller.toggle_access,
                    args=(screen.id,),
                )


def _leave_form() -> None:
    discard("user_form", "user_form_record")
    for key in [k for k in st.session_state.keys() if str(k).startswith("user_form_")]:
        discard(key)


def scene_user_form():
    controller: UserFormController = get_or_create("user_form", _build_controller)

    title = "Edit User" if controller.is_editing_existing else "New User"
    st.markdown(
        f"<div class='panel'><h2 style='margin:0'>{title}</h2>"
        "<p style='color:#64748b;margin:0'>Fill in the user data below</p></div>",
        unsafe_allow_html=True,
    )

    _render_user_data(controller)
    st.markdown("---")
    _render_access(controller)
    st.markdown("---")

    _, cancel_col, save_col = st.columns([4, 1, 1])
    with cancel_col:
        if st.button("Cancel", use_container_width=True, key="user_form_cancel_btn"):
            _leave_form()
            navigate("users")
    with save_col:
        save = st.button(
            "Save User",
            type="primary",
            use_container_width=True,
            disabled=controller.is_submitting,
            key="user_form_save_btn",
        )

    if save:
        if not controller.submit():
            st.rerun()
        elif get_api().cfg.enable_user_create:
            _leave_form()
            st.session_state.pop("user_list", None)
            navigate("users")
        else:
            notify("info", STAGED_NOTICE)
            st.rerun()
