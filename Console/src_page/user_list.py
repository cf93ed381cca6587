import streamlit as st

from users import UserListController, users_to_frame
from utils import discard, get_api, navigate


def _list_controller() -> UserListController:
    if "user_list" not in st.session_state:
        controller = UserListController(get_api())
        with st.spinner("Loading users..."):
            controller.load()
        st.session_state["user_list"] = controller
    return st.session_state["user_list"]


def scene_users():
    controller = _list_controller()

    head, action = st.columns([3, 1])
    with head:
        st.markdown(
            "<div class='panel'><h2 style='margin:0'>Users</h2>"
            "<p style='color:#64748b;margin:0'>Manage the platform users</p></div>",
            unsafe_allow_html=True,
        )
    with action:
        if st.button("New User", type="primary", use_container_width=True, key="users_new_btn"):
            discard("user_form", "user_form_record")
            navigate("user_form")
        if st.button("Refresh", use_container_width=True, key="users_refresh_btn"):
            with st.spinner("Loading users..."):
                controller.load()

    if not controller.users:
        st.markdown(
            "<div style='padding:2rem;text-align:center;color:#64748b;font-size:1.1rem;'>"
            "No users registered</div>",
            unsafe_allow_html=True,
        )
        return

    st.dataframe(users_to_frame(controller.users), hide_index=True, use_container_width=True)

    st.markdown("---")
    st.subheader("Manage user")
    options = {f"{u.name} <{u.email}>": u.id for u in controller.users}
    selected = st.selectbox("User", options=list(options.keys()), key="users_manage_select")
    if not selected:
        return

    user_id = options[selected]
    c1, c2, _ = st.columns([1, 1, 4])
    with c1:
        if st.button("Edit", use_container_width=True, key="users_edit_btn"):
            discard("user_form")
            st.session_state["user_form_record"] = controller.find(user_id)
            navigate("user_form")
    with c2:
        if st.button("Delete", use_container_width=True, key="users_delete_btn"):
            controller.delete(user_id)
            st.rerun()
