# admin_board.py

import streamlit as st
from datetime import datetime, timedelta
import client
from components import apply_custom_styles, draw_task_card, require_user, run_notifications, task_heading, user_label

st.set_page_config(page_title="Admin Board", page_icon="👑", layout="wide")
apply_custom_styles()

user = require_user(role="admin")
run_notifications(user)
team_id = user.get("team_id")

st.title("Admin Board")

projects = client.get_projects(team_id)
members = client.get_team_members(team_id)
project_names = {p["id"]: p["name"] for p in projects}
members_by_id = {m["id"]: m for m in members}

# --- 새 작업 ---
with st.expander("➕ New Task", expanded=False):
    if not projects:
        st.warning("먼저 프로젝트를 만드세요.")
    else:
        with st.form("new_task", clear_on_submit=True):
            title = st.text_input("Title")
            project_id = st.selectbox("Project", options=list(project_names), format_func=project_names.get)
            assignees = st.multiselect(
                "Assignees", options=list(members_by_id),
                format_func=lambda uid: user_label(members_by_id.get(uid)),
            )
            images = st.file_uploader("Images", type=["png", "jpg", "jpeg", "gif"], accept_multiple_files=True)
            if st.form_submit_button("Create", type="primary"):
                if not title.strip():
                    st.error("제목을 입력하세요.")
                else:
                    storage_ids = []
                    for image in images or []:
                        storage_id = client.upload_image(image.getvalue(), image.type)
                        if storage_id:
                            storage_ids.append(storage_id)
                    created = client.create_task({
                        "title": title.strip(),
                        "project_id": project_id,
                        "assignees": assignees,
                        "created_by": user["id"],
                        "images": storage_ids or None,
                    })
                    if created:
                        st.toast("작업 생성 완료", icon="✅")
                        st.rerun()

# --- 필터 ---
c1, c2, c3 = st.columns(3)
with c1:
    project_filter = st.selectbox(
        "Project", options=[None] + list(project_names),
        format_func=lambda pid: "All projects" if pid is None else project_names[pid],
    )
with c2:
    assignee_filter = st.selectbox(
        "Assignee", options=[None] + list(members_by_id),
        format_func=lambda uid: "All members" if uid is None else user_label(members_by_id.get(uid)),
    )
with c3:
    date_filter = st.selectbox("Created", ["All time", "Last 7 days", "Last 30 days"])

date_from = None
if date_filter != "All time":
    days = 7 if date_filter == "Last 7 days" else 30
    today = datetime.now().replace(hour=0, minute=0, second=0, microsecond=0)
    date_from = int((today - timedelta(days=days)).timestamp() * 1000)

tasks = client.get_all_tasks_for_admin(
    team_id,
    project_id=project_filter,
    assigned_to=assignee_filter,
    date_from=date_from,
)

st.markdown("---")

col_pending, col_done = st.columns(2, gap="medium")
for column, status, label in ((col_pending, "pending", "Pending"), (col_done, "done", "Done")):
    with column:
        column_tasks = [t for t in tasks if t["status"] == status]
        st.subheader(f"{label} ({len(column_tasks)})")
        for task in column_tasks:
            project = task.get("project") or {}
            with st.expander(task_heading(task, project.get("name"))):
                st.caption(f"Created by {user_label(task.get('created_by_user'))}")
                draw_task_card(task, user, members, can_assign=True, can_delete=True)
