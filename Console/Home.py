"""
Platform Admin Console - Main Application
=========================================

Entry point for the user administration console. It includes:
- User list with edit and delete actions
- User form with access level and per-screen access selection
- Password definition page reached through a tokenized link

Navigation:
1. The sidebar menu switches between the user list and the user form
2. Pages under pages/ render a single scene through ``render_scene_page``
3. The password page is reached from e-mailed links (``?token=...``)
"""

from __future__ import annotations

import logging
from typing import Callable

import streamlit as st
from streamlit_option_menu import option_menu

from api import configured_log_level
from utils import MENU_ICONS, MENU_SCENES, SCENES, discard, flush_notices

from src_page.user_list import scene_users
from src_page.user_form import scene_user_form
from src_page.set_password import scene_set_password


logging.basicConfig(
    level=configured_log_level(),
    format="%(levelname)s: %(message)s",
)


def _inject_styles() -> None:
    st.markdown("""
    <style>
        .panel {
            background: #ffffff;
            border: 1px solid #e2e8f0;
            border-radius: 12px;
            padding: 20px 24px;
            margin: 8px 0 16px 0;
            box-shadow: 0 1px 2px rgba(0,0,0,0.05);
        }
        .panel h2, .panel h3 {
            color: #0f172a;
        }
        div[data-testid="stHorizontalBlock"] {
            align-items: center;
        }
    </style>
    """, unsafe_allow_html=True)


def _scene_runner(scene_key: str) -> Callable[[], None]:
    runners = {
        "users": scene_users,
        "user_form": scene_user_form,
        "set_password": scene_set_password,
    }
    return runners.get(scene_key, scene_users)


def _sidebar_menu() -> str:
    """Render the sidebar menu and return the selected scene key."""
    active = st.session_state.get("active_scene", MENU_SCENES[0])
    if active not in MENU_SCENES:
        active = MENU_SCENES[0]

    with st.sidebar:
        selected_label = option_menu(
            "Admin Console",
            [SCENES[key] for key in MENU_SCENES],
            icons=MENU_ICONS,
            default_index=MENU_SCENES.index(active),
        )

    selected = next(key for key in MENU_SCENES if SCENES[key] == selected_label)
    if selected != active and selected == "user_form":
        # Opening the form from the menu always starts a blank user
        discard("user_form", "user_form_record")
    st.session_state["active_scene"] = selected
    return selected


def render_scene_page(scene_key: str) -> None:
    """Render a single scene (used by the scripts under pages/)."""
    st.set_page_config(page_title=f"{SCENES.get(scene_key, 'Users')} - Admin Console", page_icon="🛡️", layout="wide")
    _inject_styles()
    flush_notices()
    _scene_runner(scene_key)()


def render_console() -> None:
    """Main console entry point."""
    st.set_page_config(page_title="Admin Console", page_icon="🛡️", layout="wide")
    _inject_styles()
    flush_notices()

    scene_key = _sidebar_menu()
    _scene_runner(scene_key)()


if __name__ == "__main__":
    render_console()
