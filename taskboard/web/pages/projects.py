# projects.py

import streamlit as st
import client
from components import apply_custom_styles, draw_task_card, format_ms, require_user, run_notifications, task_heading, user_label

st.set_page_config(page_title="Projects", page_icon="📁", layout="wide")
apply_custom_styles()

user = require_user(role="admin")
run_notifications(user)
team_id = user.get("team_id")

st.title("Projects")

with st.form("new_project", clear_on_submit=True):
    c1, c2 = st.columns([4, 1])
    name = c1.text_input("Project name", label_visibility="collapsed", placeholder="새 프로젝트 이름")
    if c2.form_submit_button("➕ Create", type="primary", use_container_width=True) and name.strip():
        if client.create_project(name.strip(), team_id):
            st.rerun()

projects = client.get_projects(team_id)
members = client.get_team_members(team_id)

if not projects:
    st.info("프로젝트가 없습니다.")
    st.stop()

project_names = {p["id"]: p["name"] for p in projects}
selected_id = st.query_params.get("project")
selected_id = int(selected_id) if selected_id and int(selected_id) in project_names else projects[0]["id"]

c_list, c_detail = st.columns([1, 2], gap="large")
with c_list:
    for project in projects:
        label = f"📁 {project['name']}"
        if st.button(label, key=f"project_{project['id']}", use_container_width=True,
                     type="primary" if project["id"] == selected_id else "secondary"):
            st.query_params["project"] = str(project["id"])
            st.rerun()
        st.caption(f"Created {format_ms(project['created_at'])}")

with c_detail:
    project = client.get_project(selected_id)
    if not project:
        st.warning("프로젝트를 찾을 수 없습니다.")
        st.stop()

    h1, h2 = st.columns([3, 1])
    h1.subheader(project["name"])
    if h2.button("🗑️ Delete project", use_container_width=True):
        st.session_state["confirm_delete"] = project["id"]
    if st.session_state.get("confirm_delete") == project["id"]:
        st.warning("프로젝트와 모든 작업이 삭제됩니다.")
        if st.button("Confirm delete", type="primary"):
            if client.delete_project(project["id"]):
                st.session_state.pop("confirm_delete", None)
                st.query_params.clear()
                st.rerun()

    tasks = client.get_tasks_by_project(project["id"])
    if not tasks:
        st.info("이 프로젝트에 작업이 없습니다.")
    for task in tasks:
        with st.expander(task_heading(task, user_label(task.get("assigned_user")))):
            draw_task_card(task, user, members, can_assign=True, can_delete=True)
