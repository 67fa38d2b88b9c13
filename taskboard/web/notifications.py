from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

Task = Dict[str, Any]
Notifier = Callable[[str, str], bool]

MODE_NEW = "new"              # 직원: 새로 배정된 작업
MODE_COMPLETED = "completed"  # 관리자: 새로 완료된 작업


@dataclass
class TaskEvent:
    title: str
    body: str
    task_id: int


def new_task_event(task: Task) -> TaskEvent:
    project = task.get("project") or {}
    body = task["title"] + (f" - {project['name']}" if project.get("name") else "")
    return TaskEvent("New Task Assigned", body, task["id"])


def completed_task_event(task: Task) -> TaskEvent:
    completer = (task.get("completed_by_user") or {}).get("name") or "An employee"
    return TaskEvent("Task Completed", f"{completer} completed: {task['title']}", task["id"])


@dataclass
class TaskWatcher:
    """
    같은 조회 결과를 주기적으로 다시 받아 이전 스냅샷과 비교하여 이벤트를 만듭니다.

    첫 스냅샷은 기준점으로만 사용하고 알림을 보내지 않습니다.
    이후 스냅샷에서:
      - new 모드: 처음 보는 task id
      - completed 모드: status 가 done 인데 done 집합에 없던 task id
    알림은 권한이 있으면 native, 아니면 toast 로 보내고, 결과와 무관하게 본 것으로 표시합니다.
    """
    mode: str = MODE_NEW
    seen: Set[int] = field(default_factory=set)
    initialized: bool = False

    def resubscribe(self) -> None:
        """ 구독을 다시 시작합니다. 다음 스냅샷은 다시 기준점이 됩니다. """
        self.seen.clear()
        self.initialized = False

    def _relevant(self, tasks: Iterable[Task]) -> List[Task]:
        if self.mode == MODE_COMPLETED:
            return [t for t in tasks if t.get("status") == "done"]
        return list(tasks)

    def diff(self, tasks: Optional[Iterable[Task]]) -> List[TaskEvent]:
        """ 스냅샷을 반영하고 새 이벤트 목록을 반환합니다. (아직 로드 전이면 None) """
        if tasks is None:
            return []
        relevant = self._relevant(tasks)

        if not self.initialized:
            self.seen.update(t["id"] for t in relevant)
            self.initialized = True
            return []

        events = []
        for task in relevant:
            if task["id"] in self.seen:
                continue
            self.seen.add(task["id"])
            if self.mode == MODE_COMPLETED:
                events.append(completed_task_event(task))
            else:
                events.append(new_task_event(task))
        return events

    def process(
        self,
        tasks: Optional[Iterable[Task]],
        toast: Notifier,
        native: Optional[Notifier] = None,
        permission_granted: bool = False,
    ) -> List[TaskEvent]:
        """ diff 후 각 이벤트를 native 알림 또는 toast 로 내보냅니다. """
        events = self.diff(tasks)
        for event in events:
            delivered = False
            if permission_granted and native is not None:
                delivered = native(event.title, event.body)
            if not delivered:
                toast(event.title, event.body)
        return events
