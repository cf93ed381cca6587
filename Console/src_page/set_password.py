from __future__ import annotations

import streamlit as st

from forms import PasswordResetController
from utils import get_api, get_query_param, navigate, notify
from validation import PasswordField


def _controller_for(token: str) -> PasswordResetController:
    # A new link means a new form
    controller = st.session_state.get("password_form")
    if controller is None or controller.token != token:
        controller = PasswordResetController(
            token,
            get_api().set_password,
            notify=notify,
            navigate=navigate,
        )
        st.session_state["password_form"] = controller
    return controller


def _password_input(controller: PasswordResetController, name: PasswordField, label: str, reveal_key: str) -> None:
    key = f"password_form_{name.name.lower()}"
    shown = st.session_state.get(reveal_key, False)
    st.text_input(
        label,
        type="default" if shown else "password",
        placeholder="••••••••",
        key=key,
        on_change=lambda: controller.set_field(name, st.session_state[key]),
    )
    st.checkbox("Show", key=reveal_key)
    error = controller.error_for(name)
    if error:
        st.error(error)


def _hide_sidebar_navigation() -> None:
    """The password page is public; the console navigation is not shown."""
    st.markdown("""
    <style>
        [data-testid="stSidebar"] {
            display: none !important;
        }
        [data-testid="collapsedControl"] {
            display: none !important;
        }
    </style>
    """, unsafe_allow_html=True)


def scene_set_password():
    token = get_query_param("token") or ""
    controller = _controller_for(token)
    if not controller.check_token():
        return

    _hide_sidebar_navigation()

    _, center, _ = st.columns([1, 2, 1])
    with center:
        st.markdown("""
        <div style='text-align:center;margin-bottom:1.5rem;'>
            <h2 style='margin-bottom:0.25rem;'>Set a new password</h2>
            <p style='color:#64748b;'>Create your password to access the platform</p>
        </div>
        """, unsafe_allow_html=True)

        _password_input(controller, PasswordField.PASSWORD, "New password *", "password_form_show_password")

        for label, ok in controller.checklist:
            color = "#16a34a" if ok else "#64748b"
            mark = "✔" if ok else "○"
            st.markdown(
                f"<div style='color:{color};font-size:0.9rem;'>{mark} {label}</div>",
                unsafe_allow_html=True,
            )

        _password_input(controller, PasswordField.CONFIRMATION, "Confirm password *", "password_form_show_confirmation")

        if st.button(
            "Set password",
            type="primary",
            use_container_width=True,
            disabled=controller.is_submitting,
            key="password_form_submit_btn",
        ):
            if not controller.submit():
                st.rerun()
