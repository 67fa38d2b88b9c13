# performance.py

import streamlit as st
import pandas as pd
from datetime import date, datetime, time, timedelta
import client
from components import apply_custom_styles, metric_card, require_user, run_notifications, user_label, format_ms

st.set_page_config(page_title="Performance", page_icon="📈", layout="wide")
apply_custom_styles()

user = require_user(role="admin")
run_notifications(user)
team_id = user.get("team_id")

st.title("Performance")
st.caption("팀원별 작업 완료 이력")

members = client.get_team_members(team_id)
members_by_id = {m["id"]: m for m in members}

c1, c2 = st.columns(2)
with c1:
    employee = st.selectbox(
        "Employee", options=[None] + list(members_by_id),
        format_func=lambda uid: "All employees" if uid is None else user_label(members_by_id.get(uid)),
    )
with c2:
    period = st.date_input("Created between", value=(date.today() - timedelta(days=30), date.today()))

date_from = date_to = None
if isinstance(period, tuple) and len(period) == 2:
    date_from = int(datetime.combine(period[0], time.min).timestamp() * 1000)
    # 끝 날짜 하루 전체 포함
    date_to = int(datetime.combine(period[1], time.min).timestamp() * 1000) + 86400000

summary = client.get_performance(team_id, completed_by=employee, date_from=date_from, date_to=date_to)
if not summary:
    st.stop()

m1, m2, m3 = st.columns(3)
with m1:
    metric_card("Completed", str(summary["total"]), "✅")
with m2:
    metric_card("Today", str(summary["today"]), "📅")
with m3:
    metric_card("Last 7 days", str(summary["week"]), "🗓️")

by_day = summary.get("by_day") or {}
if not by_day:
    st.info("완료된 작업이 없습니다.")
    st.stop()

st.markdown("---")
chart_df = pd.DataFrame(
    {"completed": [len(tasks) for tasks in by_day.values()]},
    index=pd.to_datetime(list(by_day.keys())),
).sort_index()
st.bar_chart(chart_df)

selected_day = st.selectbox("Day", options=sorted(by_day, reverse=True))
for task in by_day[selected_day]:
    st.markdown(
        f"- **{task['title']}** • {user_label(task.get('completed_by_user'))} "
        f"({format_ms(task.get('completed_at'))})"
    )
    if task.get("completion_note"):
        st.caption(task["completion_note"])
