import streamlit as st
import requests
import os
from typing import List, Dict, Any, Optional

API_URL = os.getenv("TASKBOARD_SERVER_URL", "http://taskboard_server:8000")
TIMEOUT = 10


def _error_detail(e: requests.exceptions.RequestException) -> str:
    """ 서버가 보낸 detail 메시지를 우선 사용합니다. """
    if e.response is not None:
        try:
            return e.response.json().get("detail", e.response.text)
        except ValueError:
            return e.response.text
    return str(e)


def _headers() -> Dict[str, str]:
    identity = st.session_state.get("identity")
    return {"X-User-Identity": identity} if identity else {}


def _get(path: str, params: Optional[Dict[str, Any]] = None, fallback: Any = None) -> Any:
    try:
        response = requests.get(f"{API_URL}{path}", params=params, headers=_headers(), timeout=TIMEOUT)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        st.error(f"데이터 로드 실패: {_error_detail(e)}")
        return fallback


def _send(method: str, path: str, payload: Optional[Dict[str, Any]] = None, action: str = "요청") -> Optional[Any]:
    """ mutation 호출. 실패하면 toast 로 알리고 None 을 반환합니다. (자동 재시도 없음) """
    try:
        response = requests.request(method, f"{API_URL}{path}", json=payload, headers=_headers(), timeout=TIMEOUT)
        response.raise_for_status()
        st.cache_data.clear()
        return response.json() if response.content else {}
    except requests.exceptions.RequestException as e:
        st.toast(f"{action} 실패: {_error_detail(e)}", icon="⚠️")
        return None


def _clean(params: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in params.items() if v is not None and v != ""}

# --- Users ---

def create_or_get_user(identity: str, email: str, name: Optional[str] = None) -> Optional[Dict[str, Any]]:
    return _send("POST", "/users", {"identity": identity, "email": email, "name": name}, "로그인")


def update_user_role(identity: str, role: str, team_name: Optional[str] = None) -> Optional[Dict[str, Any]]:
    return _send("PUT", "/users/role", {"identity": identity, "role": role, "team_name": team_name}, "역할 설정")


def get_current_user(identity: Optional[str]) -> Optional[Dict[str, Any]]:
    if not identity:
        return None
    return _get("/users/me", {"identity": identity})

# --- Teams ---

@st.cache_data(ttl=10)
def get_team(team_id: Optional[int]) -> Optional[Dict[str, Any]]:
    return _get("/teams", _clean({"team_id": team_id}))


@st.cache_data(ttl=10)
def get_team_members(team_id: Optional[int]) -> List[Dict[str, Any]]:
    return _get("/teams/members", _clean({"team_id": team_id}), fallback=[])


def add_member_by_email(team_id: int, email: str) -> Optional[Dict[str, Any]]:
    return _send("POST", f"/teams/{team_id}/members", {"email": email}, "팀원 추가")


def remove_member(user_id: int) -> bool:
    return _send("DELETE", f"/teams/members/{user_id}", action="팀원 제외") is not None

# --- Projects ---

@st.cache_data(ttl=10)
def get_projects(team_id: Optional[int]) -> List[Dict[str, Any]]:
    return _get("/projects", _clean({"team_id": team_id}), fallback=[])


def get_project(project_id: int) -> Optional[Dict[str, Any]]:
    return _get(f"/projects/{project_id}")


def create_project(name: str, team_id: int) -> Optional[Dict[str, Any]]:
    return _send("POST", "/projects", {"name": name, "team_id": team_id}, "프로젝트 생성")


def delete_project(project_id: int) -> bool:
    return _send("DELETE", f"/projects/{project_id}", action="프로젝트 삭제") is not None

# --- Tasks (조회는 live refresh 를 위해 캐시하지 않음) ---

def get_tasks_by_project(project_id: int) -> List[Dict[str, Any]]:
    return _get(f"/projects/{project_id}/tasks", fallback=[])


def get_my_tasks(user_id: Optional[int], **filters: Any) -> List[Dict[str, Any]]:
    if user_id is None:
        return []
    return _get("/tasks/mine", _clean({"user_id": user_id, **filters}), fallback=[])


def get_all_tasks_for_admin(team_id: Optional[int], **filters: Any) -> List[Dict[str, Any]]:
    if team_id is None:
        return []
    return _get("/tasks/admin", _clean({"team_id": team_id, **filters}), fallback=[])


# 알림 감시용: 실패한 회차는 None 으로 돌려주어 빈 스냅샷과 구분합니다.
def poll_my_tasks(user_id: int) -> Optional[List[Dict[str, Any]]]:
    return _get("/tasks/mine", {"user_id": user_id})


def poll_admin_tasks(team_id: Optional[int]) -> Optional[List[Dict[str, Any]]]:
    if team_id is None:
        return None
    return _get("/tasks/admin", {"team_id": team_id})


def get_performance(team_id: int, **filters: Any) -> Optional[Dict[str, Any]]:
    return _get("/tasks/admin/performance", _clean({"team_id": team_id, **filters}))


def create_task(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    return _send("POST", "/tasks", payload, "작업 생성")


def assign_task(task_id: int, assignees: List[int]) -> Optional[Dict[str, Any]]:
    return _send("PUT", f"/tasks/{task_id}/assignees", {"assignees": assignees}, "담당자 지정")


def mark_task_done(task_id: int, completed_by: Optional[int], note: Optional[str] = None) -> Optional[Dict[str, Any]]:
    return _send("POST", f"/tasks/{task_id}/done", {"completed_by": completed_by, "note": note or None}, "완료 처리")


def mark_task_pending(task_id: int, user_id: Optional[int], note: Optional[str] = None) -> Optional[Dict[str, Any]]:
    return _send("POST", f"/tasks/{task_id}/pending", {"user_id": user_id, "note": note or None}, "재오픈")


def add_comment(task_id: int, user_id: int, content: str) -> Optional[Dict[str, Any]]:
    return _send("POST", f"/tasks/{task_id}/notes", {"user_id": user_id, "content": content}, "코멘트")


def delete_task(task_id: int) -> bool:
    return _send("DELETE", f"/tasks/{task_id}", action="작업 삭제") is not None

# --- Storage ---

def upload_image(data: bytes, content_type: str) -> Optional[str]:
    """
    2단계 업로드: 업로드 URL 발급 후 바이트를 저장소(MinIO)로 직접 PUT.
    이후 작업 생성이 실패하면 파일은 참조 없이 남습니다.
    """
    target = _send("POST", "/storage/upload-url", action="업로드 URL 발급")
    if not target:
        return None
    try:
        response = requests.put(
            target["upload_url"], data=data, headers={"Content-Type": content_type}, timeout=TIMEOUT
        )
        response.raise_for_status()
        return target["storage_id"]
    except requests.exceptions.RequestException as e:
        st.toast(f"이미지 업로드 실패: {_error_detail(e)}", icon="⚠️")
        return None
