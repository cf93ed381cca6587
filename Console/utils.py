from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Tuple

import streamlit as st

from api import ConsoleApi


# =============================================================================
# ROUTES
# =============================================================================

SCENES: Dict[str, str] = {
    "users": "Users",
    "user_form": "New User",
    "set_password": "Set Password",
}
MENU_SCENES = ["users", "user_form"]
MENU_ICONS = ["people-fill", "person-plus-fill"]

_NOTICE_ICONS = {"success": "✅", "error": "❌", "info": "ℹ️"}


def get_query_param(name: str, default: Optional[str] = None) -> Optional[str]:
    return st.query_params.get(name, default)


def get_api() -> ConsoleApi:
    """One backend client per browser session."""
    if "console_api" not in st.session_state:
        st.session_state["console_api"] = ConsoleApi()
    return st.session_state["console_api"]


def get_or_create(key: str, factory: Callable[[], Any]) -> Any:
    if key not in st.session_state:
        st.session_state[key] = factory()
    return st.session_state[key]


def discard(*keys: str) -> None:
    for key in keys:
        st.session_state.pop(key, None)


# =============================================================================
# NOTIFICATIONS & NAVIGATION
# =============================================================================

def notify(level: str, message: str) -> None:
    """
    Queue a toast for the next render.

    Toasts raised right before a rerun or page switch would be lost, so they
    are held in session state and flushed by ``flush_notices``.
    """
    pending: List[Tuple[str, str]] = st.session_state.setdefault("pending_notices", [])
    pending.append((level, message))


def flush_notices() -> None:
    pending = st.session_state.pop("pending_notices", [])
    for level, message in pending:
        st.toast(message, icon=_NOTICE_ICONS.get(level, "ℹ️"))


def navigate(route: str) -> None:
    """Leave the current scene. ``home`` lands on the user list."""
    st.session_state["active_scene"] = "users" if route == "home" else route
    st.switch_page("Home.py")
