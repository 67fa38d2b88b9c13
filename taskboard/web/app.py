import streamlit as st
import client
from components import apply_custom_styles, metric_card, run_notifications

# --- 1. 페이지 기본 설정 ---
st.set_page_config(
    page_title="Taskboard",
    page_icon="✅",
    layout="wide",
    initial_sidebar_state="expanded",
)
apply_custom_styles()

# --- 2. 로그인 (외부 인증 제공자가 준 식별자를 그대로 사용) ---
identity = st.session_state.get("identity")
user = client.get_current_user(identity)

if not user:
    st.title("Sign in")
    with st.form("sign_in"):
        identity_input = st.text_input("Identity", placeholder="인증 제공자의 사용자 ID")
        email_input = st.text_input("Email")
        name_input = st.text_input("Name (optional)")
        if st.form_submit_button("Continue", type="primary"):
            if identity_input and email_input:
                created = client.create_or_get_user(identity_input, email_input, name_input or None)
                if created:
                    st.session_state["identity"] = identity_input
                    st.rerun()
            else:
                st.error("Identity 와 Email 을 입력하세요.")
    st.stop()

# --- 3. 역할 선택 (처음 로그인 시) ---
if not user.get("role"):
    st.title("Select your role")
    c1, c2 = st.columns(2)
    with c1:
        st.subheader("👑 Admin")
        team_name = st.text_input("Team name", placeholder="새 팀 이름")
        if st.button("Create team", type="primary", disabled=not team_name):
            if client.update_user_role(identity, "admin", team_name):
                st.rerun()
    with c2:
        st.subheader("🧑‍💻 Employee")
        st.caption("관리자가 이메일로 팀에 초대하면 팀 작업이 보입니다.")
        if st.button("Continue as employee"):
            if client.update_user_role(identity, "employee"):
                st.rerun()
    st.stop()

# --- 4. 대시보드 요약 ---
run_notifications(user)

st.title(f"Welcome, {user.get('name') or user['email']}")
team = client.get_team(user.get("team_id"))
st.caption(f"Role: {user['role']} · Team: {team['name'] if team else '없음'}")

if user["role"] == "admin":
    tasks = client.get_all_tasks_for_admin(user.get("team_id"))
    members = client.get_team_members(user.get("team_id"))
    col1, col2, col3 = st.columns(3)
    with col1:
        metric_card("Pending", str(len([t for t in tasks if t["status"] == "pending"])), "📋")
    with col2:
        metric_card("Done", str(len([t for t in tasks if t["status"] == "done"])), "✅")
    with col3:
        metric_card("Members", str(len(members)), "👥")
    st.info("👈 사이드바에서 Admin Board / Projects / Team / Performance 페이지로 이동하세요.")
else:
    tasks = client.get_my_tasks(user["id"])
    col1, col2 = st.columns(2)
    with col1:
        metric_card("My Pending Tasks", str(len([t for t in tasks if t["status"] == "pending"])), "📋")
    with col2:
        metric_card("My Completed Tasks", str(len([t for t in tasks if t["status"] == "done"])), "✅")
    st.info("👈 사이드바의 My Tasks 페이지에서 작업을 확인하세요.")

if st.sidebar.button("Sign out"):
    st.session_state.clear()
    st.rerun()
