import pytest

from exceptions import InvalidStateError, NotFoundError, UnauthorizedError
from routers.deps import CallerContext
from schemas.task import TaskCreate
from services.task import TaskService, reconcile_assignees


def _create(db_session, project, **fields):
    return TaskService(db_session).create_task(TaskCreate(title="Write copy", project_id=project.id, **fields))


def test_reconcile_assignees_appends_missing_single_assignee():
    assert reconcile_assignees(None, None) == []
    assert reconcile_assignees([], 3) == [3]
    assert reconcile_assignees([3, 4], 3) == [3, 4]
    assert reconcile_assignees([4], 3) == [4, 3]


def test_create_with_legacy_assignee_only(db_session, project, make_member):
    alice = make_member("Alice")
    task = _create(db_session, project, assigned_to=alice.id, assignees=[])

    assert task.assignees == [alice.id]
    assert task.assigned_to == alice.id
    assert task.status == "pending"
    assert task.completed_at is None
    assert task.completed_by is None


def test_create_does_not_duplicate_assignee(db_session, project, make_member):
    alice, bob = make_member("Alice"), make_member("Bob")
    task = _create(db_session, project, assigned_to=alice.id, assignees=[alice.id, bob.id])

    assert task.assignees == [alice.id, bob.id]


def test_create_keeps_given_legacy_value_even_if_not_first(db_session, project, make_member):
    alice, bob = make_member("Alice"), make_member("Bob")
    task = _create(db_session, project, assigned_to=bob.id, assignees=[alice.id])

    assert task.assignees == [alice.id, bob.id]
    assert task.assigned_to == bob.id


def test_create_in_unknown_project_fails(db_session, admin):
    with pytest.raises(NotFoundError):
        TaskService(db_session).create_task(TaskCreate(title="x", project_id=404))


def test_assign_without_user_id_picks_first_assignee(db_session, project, make_member):
    alice, bob, carol = make_member("Alice"), make_member("Bob"), make_member("Carol")
    task = _create(db_session, project, assigned_to=carol.id)

    task = TaskService(db_session).assign_task(task.id, assignees=[alice.id, bob.id])

    assert task.assigned_to == alice.id
    assert task.assignees == [alice.id, bob.id]


def test_assign_with_user_id_appends_it(db_session, project, make_member):
    alice, bob = make_member("Alice"), make_member("Bob")
    task = _create(db_session, project)

    task = TaskService(db_session).assign_task(task.id, assignees=[alice.id], user_id=bob.id)

    assert task.assigned_to == bob.id
    assert task.assignees == [alice.id, bob.id]


def test_assign_with_nothing_clears_assignment(db_session, project, make_member):
    alice = make_member("Alice")
    task = _create(db_session, project, assignees=[alice.id])

    task = TaskService(db_session).assign_task(task.id)

    assert task.assignees == []
    assert task.assigned_to is None
    assert task.notes == []


def test_assign_unknown_task_fails(db_session, admin):
    with pytest.raises(NotFoundError):
        TaskService(db_session).assign_task(999, assignees=[1])


def test_done_then_pending_clears_completion_and_grows_history(db_session, project, make_member):
    alice = make_member("Alice")
    service = TaskService(db_session)
    task = _create(db_session, project)

    service.assign_task(task.id, assignees=[alice.id])
    task = service.mark_task_done(task.id, completed_by=alice.id, note="done")

    assert task.status == "done"
    assert task.completed_at is not None
    assert task.completed_by == alice.id
    assert task.completion_note == "done"
    assert [(n.type, n.user_id, n.content) for n in task.notes] == [("completion", alice.id, "done")]

    task = service.mark_task_pending(task.id, user_id=alice.id, note="needs edits")

    assert task.status == "pending"
    assert task.completed_at is None
    assert task.completed_by is None
    assert task.completion_note is None
    assert [(n.type, n.user_id, n.content) for n in task.notes] == [
        ("completion", alice.id, "done"),
        ("reopen", alice.id, "needs edits"),
    ]


def test_completing_twice_replaces_note_but_keeps_history(db_session, project, make_member):
    alice = make_member("Alice")
    service = TaskService(db_session)
    task = _create(db_session, project)

    service.mark_task_done(task.id, completed_by=alice.id, note="first")
    task = service.mark_task_done(task.id, completed_by=alice.id, note="second")

    assert task.completion_note == "second"
    assert [n.content for n in task.notes] == ["first", "second"]


def test_done_without_note_adds_no_history(db_session, project, make_member):
    alice = make_member("Alice")
    task = TaskService(db_session).mark_task_done(_create(db_session, project).id, completed_by=alice.id)

    assert task.status == "done"
    assert task.completion_note is None
    assert task.notes == []


def test_completion_note_without_author_is_rejected(db_session, project):
    task = _create(db_session, project)
    with pytest.raises(InvalidStateError):
        TaskService(db_session).mark_task_done(task.id, note="orphan note")

    db_session.refresh(task)
    assert task.status == "pending"


def test_reopen_note_without_author_adds_no_history(db_session, project, make_member):
    alice = make_member("Alice")
    service = TaskService(db_session)
    task = _create(db_session, project)
    service.mark_task_done(task.id, completed_by=alice.id)

    task = service.mark_task_pending(task.id, note="no author")

    assert task.status == "pending"
    assert task.notes == []


def test_status_transitions_on_unknown_task_fail(db_session, admin):
    service = TaskService(db_session)
    with pytest.raises(NotFoundError):
        service.mark_task_done(999)
    with pytest.raises(NotFoundError):
        service.mark_task_pending(999)


def test_add_comment_appends_comment_note(db_session, project, make_member):
    alice = make_member("Alice")
    task = _create(db_session, project)

    task = TaskService(db_session).add_comment(task.id, alice.id, "looks good", images=["img1"])

    assert [(n.type, n.content, n.images) for n in task.notes] == [("comment", "looks good", ["img1"])]


def test_delete_task_requires_admin(db_session, project, make_member):
    make_member("Bob")
    service = TaskService(db_session)
    task = _create(db_session, project)

    with pytest.raises(UnauthorizedError):
        service.delete_task(CallerContext(identity="id-bob"), task.id)
    with pytest.raises(UnauthorizedError):
        service.delete_task(CallerContext(), task.id)
    assert service.task_repo.get_task_by_id(task.id) is not None

    service.delete_task(CallerContext(identity="admin-1"), task.id)
    assert service.task_repo.get_task_by_id(task.id) is None
