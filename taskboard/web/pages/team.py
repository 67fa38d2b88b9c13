# team.py

import streamlit as st
import pandas as pd
import client
from components import apply_custom_styles, metric_card, require_user, run_notifications

st.set_page_config(page_title="Team", page_icon="👥", layout="wide")
apply_custom_styles()

user = require_user(role="admin")
run_notifications(user)
team_id = user.get("team_id")
team = client.get_team(team_id)

st.title(f"Team · {team['name']}" if team else "Team")

members = client.get_team_members(team_id)
pending_members = [m for m in members if m["identity"].startswith("pending_")]

col_m1, col_m2, col_spacer = st.columns([1, 1, 3])
with col_m1:
    metric_card("Members", f"{len(members)}", "👥")
with col_m2:
    metric_card("Invited (pending)", f"{len(pending_members)}", "✉️")

st.markdown("<div style='margin-bottom: 24px;'></div>", unsafe_allow_html=True)

with st.form("invite", clear_on_submit=True):
    c1, c2 = st.columns([4, 1])
    email = c1.text_input("Email", label_visibility="collapsed", placeholder="초대할 이메일")
    if c2.form_submit_button("✉️ Invite", type="primary", use_container_width=True) and email.strip():
        if client.add_member_by_email(team_id, email.strip()):
            st.toast(f"{email} 추가 완료", icon="✅")
            st.rerun()

if not members:
    st.info("팀원이 없습니다.")
    st.stop()

members_df = pd.DataFrame(members)
members_df["status"] = ["pending" if m in pending_members else "active" for m in members]
st.dataframe(
    members_df[["id", "name", "email", "role", "status"]],
    use_container_width=True,
    hide_index=True,
)

st.subheader("Remove member")
removable = {m["id"]: m for m in members if m["id"] != user["id"]}
if removable:
    target = st.selectbox(
        "Member", options=list(removable),
        format_func=lambda uid: removable[uid].get("name") or removable[uid]["email"],
    )
    if st.button("Remove from team"):
        if client.remove_member(target):
            st.toast("팀에서 제외했습니다.", icon="✅")
            st.rerun()
