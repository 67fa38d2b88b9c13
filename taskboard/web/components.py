import json
import html
import os
import streamlit as st
import streamlit.components.v1 as st_components
from datetime import datetime
from typing import Any, Dict, List, Optional
import client
from notifications import TaskWatcher, MODE_NEW, MODE_COMPLETED

POLL_INTERVAL = int(os.getenv("TASKBOARD_POLL_INTERVAL", "10"))


def apply_custom_styles():
    """ 앱 전체 공통 스타일 """
    st.markdown("""
    <style>
        @import url('https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&display=swap');

        html, body, [class*="css"] { font-family: 'Inter', sans-serif; color: #1F2937; }
        .stApp { background-color: #F3F4F6; }
        [data-testid="stSidebar"] { background-color: #FFFFFF; border-right: 1px solid #E5E7EB; }

        .metric-card {
            background-color: white; border: 1px solid #E5E7EB; border-radius: 10px;
            padding: 15px 20px; box-shadow: 0 1px 2px rgba(0,0,0,0.05);
        }
        .metric-label { font-size: 0.85rem; color: #6B7280; font-weight: 500; margin-bottom: 4px; }
        .metric-value { font-size: 1.5rem; font-weight: 700; color: #111827; }

        .status-badge {
            font-size: 0.75rem; padding: 3px 10px; border-radius: 999px;
            font-weight: 600; text-transform: uppercase;
        }
        .status-done { background: #ECFDF5; color: #059669; }
        .status-pending { background: #EFF6FF; color: #2563EB; }

        .note-row { font-size: 0.85rem; color: #374151; border-left: 3px solid #E5E7EB; padding-left: 8px; margin: 4px 0; }
        .note-meta { font-size: 0.75rem; color: #9CA3AF; }
    </style>
    """, unsafe_allow_html=True)


def metric_card(label: str, value: str, icon: str = ""):
    st.markdown(
        f"""
        <div class="metric-card">
            <div class="metric-label">{icon} {label}</div>
            <div class="metric-value">{value}</div>
        </div>
        """,
        unsafe_allow_html=True
    )


def format_ms(ms: Optional[int]) -> str:
    if not ms:
        return "-"
    return datetime.fromtimestamp(ms / 1000).strftime("%Y-%m-%d %H:%M")


def require_user(role: Optional[str] = None) -> Dict[str, Any]:
    """ 로그인/역할을 확인하고 현재 사용자를 반환합니다. 조건이 안 맞으면 페이지를 멈춥니다. """
    user = client.get_current_user(st.session_state.get("identity"))
    if not user:
        st.info("👈 먼저 메인 페이지에서 로그인하세요.")
        st.stop()
    if role and user.get("role") != role:
        st.warning(f"이 페이지는 {role} 전용입니다.")
        st.stop()
    return user

# --- 알림 ---

def _native_notifier(title: str, body: str) -> bool:
    """
    브라우저 Notification API 로 OS 알림을 띄웁니다. (권한이 default 면 요청만 합니다)
    iframe 안에서 실행되어 권한/표시 결과를 서버가 알 수 없으므로 False 를 반환하고,
    toast 가 항상 함께 나갑니다.
    """
    script = f"""
    <script>
    if ("Notification" in window && Notification.permission === "granted") {{
        new Notification({json.dumps(title)}, {{ body: {json.dumps(body)}, icon: "/favicon.ico" }});
    }} else if ("Notification" in window && Notification.permission === "default") {{
        Notification.requestPermission();
    }}
    </script>
    """
    st_components.html(script, height=0)
    return False


def _toast_notifier(title: str, body: str) -> bool:
    st.toast(f"**{title}**  \n{body}", icon="🔔")
    return True


def _watcher(key: str, mode: str) -> TaskWatcher:
    if key not in st.session_state:
        st.session_state[key] = TaskWatcher(mode=mode)
    return st.session_state[key]


def run_notifications(user: Dict[str, Any]):
    """
    현재 사용자 역할에 맞는 알림 감시를 POLL_INTERVAL 마다 실행합니다.
    직원은 새 배정, 관리자는 새 완료를 알립니다.
    """
    native_enabled = st.sidebar.toggle("🔔 브라우저 알림", key="native_notifications")

    @st.fragment(run_every=POLL_INTERVAL)
    def _poll():
        if user.get("role") == "admin":
            watcher = _watcher("admin_watcher", MODE_COMPLETED)
            snapshot = client.poll_admin_tasks(user.get("team_id"))
        else:
            watcher = _watcher("employee_watcher", MODE_NEW)
            snapshot = client.poll_my_tasks(user["id"])
        watcher.process(snapshot, toast=_toast_notifier, native=_native_notifier, permission_granted=native_enabled)

    _poll()

# --- 작업 카드 ---

def user_label(user: Optional[Dict[str, Any]]) -> str:
    if not user:
        return "Unassigned"
    return user.get("name") or user.get("email")


def task_heading(task: Dict[str, Any], detail: Optional[str]) -> str:
    """ 카드 제목: 아이콘, 작업명, 보조 정보(프로젝트/담당자) """
    icon = "✅" if task.get("status") == "done" else "📄"
    return f"{icon} {task['title']} • {detail}" if detail else f"{icon} {task['title']}"


def draw_notes(task: Dict[str, Any], members_by_id: Dict[int, Dict[str, Any]]):
    notes = task.get("notes") or []
    if not notes:
        return
    st.markdown("**📜 History**")
    for note in notes:
        author = html.escape(user_label(members_by_id.get(note["user_id"])))
        st.markdown(
            f"""
            <div class="note-row">
                <div class="note-meta">{note['type'].upper()} · {author} · {format_ms(note['timestamp'])}</div>
                {html.escape(note['content'])}
            </div>
            """,
            unsafe_allow_html=True
        )


def draw_task_card(
    task: Dict[str, Any],
    current_user: Dict[str, Any],
    members: List[Dict[str, Any]],
    can_assign: bool = False,
    can_delete: bool = False,
):
    """ 작업 상세 + 완료/재오픈(메모), 담당자 지정, 삭제 """
    key = f"task_{task['id']}"
    members_by_id = {m["id"]: m for m in members}
    is_done = task["status"] == "done"

    status_class = "status-done" if is_done else "status-pending"
    st.markdown(f'<span class="status-badge {status_class}">{task["status"]}</span>', unsafe_allow_html=True)
    st.caption(f"Created {format_ms(task['created_at'])}")

    assignees = [members_by_id.get(a) for a in task.get("assignees") or []]
    st.markdown("**Assignees:** " + (", ".join(user_label(a) for a in assignees if a) or "Unassigned"))
    if is_done:
        completer = members_by_id.get(task.get("completed_by"))
        st.markdown(f"**Completed:** {format_ms(task.get('completed_at'))} by {user_label(completer)}")
        if task.get("completion_note"):
            st.info(task["completion_note"])

    for url in task.get("image_urls") or []:
        st.image(url, use_container_width=True)

    draw_notes(task, members_by_id)

    with st.form(key=f"form_{key}"):
        note = st.text_area("Note", key=f"{key}_note", placeholder="메모 (선택)", height=80)
        if is_done:
            submitted = st.form_submit_button("↩️ Reopen", use_container_width=True)
            if submitted and client.mark_task_pending(task["id"], current_user["id"], note):
                st.toast("재오픈 완료", icon="✅")
                st.rerun()
        else:
            submitted = st.form_submit_button("✅ Mark Done", type="primary", use_container_width=True)
            if submitted and client.mark_task_done(task["id"], current_user["id"], note):
                st.toast("완료 처리됨", icon="✅")
                st.rerun()

    if can_assign and members:
        options = [m["id"] for m in members]
        selected = st.multiselect(
            "Assignees",
            options=options,
            default=[a for a in task.get("assignees") or [] if a in options],
            format_func=lambda uid: user_label(members_by_id.get(uid)),
            key=f"{key}_assignees",
        )
        if st.button("💾 Save Assignees", key=f"{key}_assign", use_container_width=True):
            if client.assign_task(task["id"], selected):
                st.toast("담당자 저장 완료", icon="✅")
                st.rerun()

    if can_delete:
        if st.button("🗑️ Delete Task", key=f"{key}_delete", use_container_width=True):
            if client.delete_task(task["id"]):
                st.toast("삭제 완료", icon="🗑️")
                st.rerun()
