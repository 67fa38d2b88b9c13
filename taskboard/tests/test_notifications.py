import requests

import client
import components
from notifications import MODE_COMPLETED, MODE_NEW, TaskWatcher


def _task(task_id, status="pending", title=None, **extra):
    return {"id": task_id, "title": title or f"task {task_id}", "status": status, **extra}


class Recorder:
    def __init__(self, result=True):
        self.calls = []
        self.result = result

    def __call__(self, title, body):
        self.calls.append((title, body))
        return self.result


def test_first_snapshot_only_marks_seen():
    watcher = TaskWatcher(mode=MODE_NEW)
    assert watcher.diff([_task(1), _task(2)]) == []
    assert watcher.seen == {1, 2}


def test_snapshot_not_loaded_yet_is_ignored():
    watcher = TaskWatcher(mode=MODE_NEW)
    assert watcher.diff(None) == []
    assert not watcher.initialized


def test_new_tasks_fire_once():
    watcher = TaskWatcher(mode=MODE_NEW)
    watcher.diff([_task(1)])

    events = watcher.diff([_task(2, project={"name": "Launch"}), _task(1)])
    assert [(e.title, e.body, e.task_id) for e in events] == [("New Task Assigned", "task 2 - Launch", 2)]
    assert watcher.diff([_task(2), _task(1)]) == []


def test_completed_mode_fires_only_on_transition_to_done():
    watcher = TaskWatcher(mode=MODE_COMPLETED)
    watcher.diff([_task(1, "done"), _task(2)])

    # 이미 done 이던 작업과 새 pending 작업은 알리지 않음
    assert watcher.diff([_task(1, "done"), _task(2), _task(3)]) == []

    events = watcher.diff([
        _task(1, "done"),
        _task(2, "done", completed_by_user={"name": "Alice"}),
        _task(3),
    ])
    assert [(e.title, e.body) for e in events] == [("Task Completed", "Alice completed: task 2")]


def test_completed_without_completer_name():
    watcher = TaskWatcher(mode=MODE_COMPLETED)
    watcher.diff([])
    events = watcher.diff([_task(5, "done")])
    assert events[0].body == "An employee completed: task 5"


def test_process_prefers_native_when_permitted():
    watcher = TaskWatcher(mode=MODE_NEW)
    watcher.diff([])
    toast, native = Recorder(), Recorder()

    watcher.process([_task(1)], toast=toast, native=native, permission_granted=True)
    assert native.calls and not toast.calls

    watcher.process([_task(1), _task(2)], toast=toast, native=native, permission_granted=False)
    assert toast.calls == [("New Task Assigned", "task 2")]


def test_process_falls_back_to_toast_and_marks_seen():
    watcher = TaskWatcher(mode=MODE_NEW)
    watcher.diff([])
    toast, native = Recorder(), Recorder(result=False)

    watcher.process([_task(7)], toast=toast, native=native, permission_granted=True)

    assert len(native.calls) == 1
    assert len(toast.calls) == 1
    assert 7 in watcher.seen


def test_resubscribe_resets_baseline():
    watcher = TaskWatcher(mode=MODE_NEW)
    watcher.diff([_task(1)])
    watcher.resubscribe()

    assert watcher.diff([_task(1), _task(2)]) == []
    assert watcher.diff([_task(1), _task(2), _task(3)])[0].task_id == 3


class FakeResponse:
    def __init__(self, payload):
        self.payload = payload

    def raise_for_status(self):
        pass

    def json(self):
        return self.payload


def test_failed_poll_is_skipped_instead_of_becoming_baseline(monkeypatch):
    replies = iter([
        requests.exceptions.ConnectionError("server down"),
        FakeResponse([_task(1), _task(2)]),
        FakeResponse([_task(1), _task(2), _task(3)]),
    ])

    def fake_get(*args, **kwargs):
        reply = next(replies)
        if isinstance(reply, Exception):
            raise reply
        return reply

    monkeypatch.setattr(client.requests, "get", fake_get)
    monkeypatch.setattr(client, "_headers", lambda: {})
    monkeypatch.setattr(client.st, "error", lambda *args, **kwargs: None)
    watcher = TaskWatcher(mode=MODE_NEW)

    snapshot = client.poll_my_tasks(1)
    assert snapshot is None
    assert watcher.diff(snapshot) == []
    assert not watcher.initialized
    assert watcher.diff(client.poll_my_tasks(1)) == []
    assert [e.task_id for e in watcher.diff(client.poll_my_tasks(1))] == [3]


def test_browser_notification_is_not_counted_as_delivered(monkeypatch):
    scripts = []
    monkeypatch.setattr(components.st_components, "html", lambda html, height=0: scripts.append(html))
    watcher = TaskWatcher(mode=MODE_NEW)
    watcher.diff([])
    toast = Recorder()

    # 알림 토글은 켜져 있지만 브라우저 권한은 아직 허용되지 않은 경우
    watcher.process([_task(1)], toast=toast, native=components._native_notifier, permission_granted=True)

    assert "Notification.requestPermission()" in scripts[0]
    assert toast.calls == [("New Task Assigned", "task 1")]
