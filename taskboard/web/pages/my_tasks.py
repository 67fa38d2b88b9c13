# my_tasks.py

import streamlit as st
from datetime import datetime, timedelta, time
import client
from components import apply_custom_styles, draw_task_card, require_user, run_notifications, task_heading

st.set_page_config(page_title="My Tasks", page_icon="📋", layout="wide")
apply_custom_styles()

user = require_user()
run_notifications(user)

st.title("My Tasks")

DAY_MS = 86400000


def _ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def date_range(preset: str, custom_from=None, custom_to=None):
    """ 기간 프리셋 -> (date_from, date_to). 끝 날짜는 하루를 더해 그날 전체를 포함합니다. """
    now = datetime.now()
    today = datetime.combine(now.date(), time.min)
    if preset == "Today":
        return _ms(today), _ms(now) + DAY_MS
    if preset == "Last 7 days":
        return _ms(today - timedelta(days=7)), _ms(now) + DAY_MS
    if preset == "Last month":
        return _ms(today - timedelta(days=30)), _ms(now) + DAY_MS
    if preset == "Custom":
        date_from = _ms(datetime.combine(custom_from, time.min)) if custom_from else None
        date_to = _ms(datetime.combine(custom_to, time.min)) + DAY_MS if custom_to else None
        return date_from, date_to
    return None, None

# --- 필터 ---
c1, c2, c3 = st.columns([2, 1, 1])
with c1:
    search = st.text_input("🔍 Search", placeholder="작업 제목 또는 프로젝트 이름")
with c2:
    projects = client.get_projects(user.get("team_id"))
    project_names = {p["id"]: p["name"] for p in projects}
    project_filter = st.selectbox(
        "Project", options=[None] + list(project_names),
        format_func=lambda pid: "All projects" if pid is None else project_names[pid],
    )
with c3:
    preset = st.selectbox("Date", ["All time", "Today", "Last 7 days", "Last month", "Custom"])

custom_from = custom_to = None
if preset == "Custom":
    d1, d2 = st.columns(2)
    custom_from = d1.date_input("From", value=None)
    custom_to = d2.date_input("To", value=None)

date_from, date_to = date_range(preset, custom_from, custom_to)

tasks = client.get_my_tasks(
    user["id"],
    search=search or None,
    project_id=project_filter,
    date_from=date_from,
    date_to=date_to,
)
members = client.get_team_members(user.get("team_id"))

pending = [t for t in tasks if t["status"] == "pending"]
done = [t for t in tasks if t["status"] == "done"]
st.caption(f"{len(pending)} pending · {len(done)} done")

st.markdown("---")

if not tasks:
    st.info("표시할 작업이 없습니다.")

for task in tasks:
    project = task.get("project") or {}
    with st.expander(task_heading(task, project.get("name"))):
        draw_task_card(task, user, members)
