from datetime import timedelta, timezone

import pytest

from app.core.exceptions import NotAProjectMember, NotFoundOrDenied, PermissionDenied
from app.core.time_utils import utc_now
from app.schemas.enums import SortOrder, TaskSortField, TaskStatus, UserRole


@pytest.fixture()
def alpha(services, make_user):
    creator = make_user("alice")
    member = make_user("bob")
    outsider = make_user("carol")
    admin = make_user("root", role=UserRole.ADMIN)
    project = services.projects.create(creator, "Alpha")
    services.projects.add_member(creator, project.id, member.id)
    return {
        "project_id": project.id,
        "creator": creator,
        "member": member,
        "outsider": outsider,
        "admin": admin,
    }


def test_alpha_assignment_scenario(services, alpha):
    creator, member = alpha["creator"], alpha["member"]
    project_id = alpha["project_id"]

    first = services.tasks.create(creator, project_id, "Write spec", assigned_to_id=member.id)
    assert first.assigned_to_id == member.id

    services.projects.remove_member(creator, project_id, member.id)

    with pytest.raises(NotAProjectMember):
        services.tasks.create(creator, project_id, "Review spec", assigned_to_id=member.id)

    # The earlier assignment is never revalidated
    assert services.tasks.get(creator, first.id).assigned_to_id == member.id


def test_assign_creator_and_member_but_not_outsider(services, alpha):
    project_id = alpha["project_id"]
    creator = alpha["creator"]

    to_creator = services.tasks.create(creator, project_id, "A", assigned_to_id=creator.id)
    to_member = services.tasks.create(creator, project_id, "B", assigned_to_id=alpha["member"].id)
    assert to_creator.assigned_to_id == creator.id
    assert to_member.assigned_to_id == alpha["member"].id

    with pytest.raises(NotAProjectMember):
        services.tasks.create(creator, project_id, "C", assigned_to_id=alpha["outsider"].id)
    with pytest.raises(NotAProjectMember):
        services.tasks.create(creator, project_id, "D", assigned_to_id=alpha["admin"].id)


def test_inactive_user_cannot_be_assigned(services, make_user, alpha):
    dormant = make_user("dave", is_active=False)
    with pytest.raises(NotAProjectMember):
        services.assignments.validate_assignment(alpha["project_id"], dormant.id)


def test_update_validates_only_changed_non_null_assignee(services, alpha):
    creator, member = alpha["creator"], alpha["member"]
    project_id = alpha["project_id"]
    task = services.tasks.create(creator, project_id, "Write spec", assigned_to_id=member.id)
    services.projects.remove_member(creator, project_id, member.id)

    # Unrelated edits and an unchanged assignee pass through
    updated = services.tasks.update(creator, task.id, {"title": "Write the spec", "assigned_to_id": member.id})
    assert updated.title == "Write the spec"
    assert updated.assigned_to_id == member.id

    with pytest.raises(NotAProjectMember):
        services.tasks.update(creator, task.id, {"assigned_to_id": alpha["outsider"].id})

    cleared = services.tasks.update(creator, task.id, {"assigned_to_id": None})
    assert cleared.assigned_to_id is None

    with pytest.raises(NotAProjectMember):
        services.tasks.update(creator, task.id, {"assigned_to_id": member.id})


def test_member_can_create_and_update_tasks(services, alpha):
    member = alpha["member"]
    task = services.tasks.create(member, alpha["project_id"], "From member")
    assert task.created_by_id == member.id
    assert task.status == TaskStatus.TO_DO.value

    updated = services.tasks.update(member, task.id, {"priority": 3})
    assert updated.priority == 3


def test_outsider_sees_nothing(services, alpha):
    task = services.tasks.create(alpha["creator"], alpha["project_id"], "Hidden")
    outsider = alpha["outsider"]

    with pytest.raises(NotFoundOrDenied):
        services.tasks.create(outsider, alpha["project_id"], "Nope")
    with pytest.raises(NotFoundOrDenied):
        services.tasks.get(outsider, task.id)
    with pytest.raises(NotFoundOrDenied):
        services.tasks.update(outsider, task.id, {"title": "x"})
    with pytest.raises(NotFoundOrDenied):
        services.tasks.delete(outsider, task.id)
    with pytest.raises(NotFoundOrDenied):
        services.tasks.list_tasks(outsider, project_id=alpha["project_id"])

    tasks, total = services.tasks.list_tasks(outsider)
    assert tasks == []
    assert total == 0


def test_delete_is_reserved_for_creator_and_admin(services, alpha):
    project_id = alpha["project_id"]
    first_id = services.tasks.create(alpha["member"], project_id, "one").id
    second_id = services.tasks.create(alpha["member"], project_id, "two").id

    with pytest.raises(PermissionDenied):
        services.tasks.delete(alpha["member"], first_id)

    services.tasks.delete(alpha["creator"], first_id)
    services.tasks.delete(alpha["admin"], second_id)

    with pytest.raises(NotFoundOrDenied):
        services.tasks.get(alpha["creator"], first_id)


def test_status_changes_stamp_completed_at(services, alpha):
    task = services.tasks.create(alpha["member"], alpha["project_id"], "Ship it")
    assert task.completed_at is None

    done = services.tasks.update_status(alpha["member"], task.id, TaskStatus.DONE)
    assert done.status == TaskStatus.DONE.value
    assert done.completed_at is not None

    reopened = services.tasks.update_status(alpha["member"], task.id, TaskStatus.IN_PROGRESS)
    assert reopened.completed_at is None


def test_list_filters_and_sorting(services, alpha):
    creator = alpha["creator"]
    project_id = alpha["project_id"]
    services.tasks.create(creator, project_id, "Alpha docs", priority=1)
    services.tasks.create(creator, project_id, "Beta code", priority=3, assigned_to_id=alpha["member"].id)
    services.tasks.create(creator, project_id, "Gamma docs", priority=2, description="More DOCS")

    tasks, total = services.tasks.list_tasks(creator, project_id=project_id, search="docs")
    assert total == 2
    assert {t.title for t in tasks} == {"Alpha docs", "Gamma docs"}

    tasks, total = services.tasks.list_tasks(creator, assigned_to_id=alpha["member"].id)
    assert [t.title for t in tasks] == ["Beta code"]

    tasks, _ = services.tasks.list_tasks(
        creator, sort_by=TaskSortField.PRIORITY, sort_order=SortOrder.ASC
    )
    assert [t.priority for t in tasks] == [1, 2, 3]

    tasks, total = services.tasks.list_tasks(creator, skip=1, limit=1)
    assert total == 3
    assert len(tasks) == 1


def test_soft_deleted_project_tasks_disappear(services, alpha):
    task = services.tasks.create(alpha["creator"], alpha["project_id"], "Orphaned")
    services.projects.soft_delete(alpha["creator"], alpha["project_id"])

    for actor_key in ("creator", "member", "admin"):
        with pytest.raises(NotFoundOrDenied):
            services.tasks.get(alpha[actor_key], task.id)
        assert services.tasks.list_tasks(alpha[actor_key]) == ([], 0)


def test_statistics(services, alpha):
    creator, member = alpha["creator"], alpha["member"]
    project_id = alpha["project_id"]
    services.tasks.create(creator, project_id, "late", due_date=utc_now() - timedelta(days=2))
    mine = services.tasks.create(creator, project_id, "mine", assigned_to_id=member.id)
    services.tasks.update_status(member, mine.id, TaskStatus.DONE)
    services.tasks.create(creator, project_id, "later", due_date=utc_now() + timedelta(days=2))
    finished_late = services.tasks.create(creator, project_id, "done late", due_date=utc_now() - timedelta(days=1))
    services.tasks.update_status(creator, finished_late.id, TaskStatus.DONE)

    stats = services.tasks.get_statistics(member)
    assert stats["total"] == 4
    assert stats["by_status"] == {"to_do": 2, "in_progress": 0, "done": 2}
    assert stats["overdue"] == 1
    assert stats["assigned_to_me"] == 1
    assert stats["completion_rate"] == 50

    assert services.tasks.get_statistics(alpha["outsider"])["total"] == 0


def test_due_dates_are_stored_in_utc(services, alpha):
    creator = alpha["creator"]
    plus_five = timezone(timedelta(hours=5))
    due = (utc_now() - timedelta(hours=1)).astimezone(plus_five)

    task = services.tasks.create(creator, alpha["project_id"], "offset", due_date=due)
    # SQLite hands back the wall clock only; it must be the UTC one
    assert task.due_date.replace(tzinfo=None) == due.astimezone(timezone.utc).replace(tzinfo=None)
    assert services.tasks.get_statistics(creator)["overdue"] == 1

    later = (utc_now() + timedelta(hours=1)).astimezone(timezone(timedelta(hours=-5)))
    updated = services.tasks.update(creator, task.id, {"due_date": later})
    assert updated.due_date.replace(tzinfo=None) == later.astimezone(timezone.utc).replace(tzinfo=None)
    assert services.tasks.get_statistics(creator)["overdue"] == 0
