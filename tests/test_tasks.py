# tests/test_tasks.py
import pytest

from lifeos.models import ValidationError
from lifeos.tasks import TaskBoard, new_task


def test_new_task_defaults():
    task = new_task("  Solve LeetCode Daily ")
    assert task.title == "Solve LeetCode Daily"
    assert task.category == "Personal"
    assert task.status == "Todo"
    assert task.created_at is not None
    assert task.due_date is None


def test_new_task_rejects_blank_title_and_bad_category():
    with pytest.raises(ValidationError) as exc:
        new_task("   ", category="Chores")
    assert set(exc.value.errors) == {"title", "category"}


def test_set_status_allows_any_transition():
    board = TaskBoard()
    task = board.add(new_task("Write report"))
    for status in ("Completed", "Blocked", "Todo", "In Progress", "Completed", "Todo"):
        assert board.set_status(task.id, status).status == status


def test_set_status_unknown_value_raises():
    board = TaskBoard()
    task = board.add(new_task("Write report"))
    with pytest.raises(ValidationError):
        board.set_status(task.id, "Done")


def test_set_status_missing_id_is_noop():
    board = TaskBoard([new_task("A")])
    assert board.set_status("missing", "Completed") is None


def test_toggle_flips_between_completed_and_todo():
    board = TaskBoard()
    task = board.add(new_task("A"))
    board.set_status(task.id, "Blocked")
    assert board.toggle(task.id).status == "Completed"
    assert board.toggle(task.id).status == "Todo"
    assert board.toggle("missing") is None


def test_remove_missing_is_noop():
    board = TaskBoard([new_task("A")])
    assert board.remove("missing") is False
    assert len(board) == 1


def test_clear_all():
    board = TaskBoard([new_task("A"), new_task("B")])
    board.clear_all()
    assert len(board) == 0


def test_ordered_puts_completed_last_and_keeps_order():
    board = TaskBoard()
    a = board.add(new_task("A"))
    b = board.add(new_task("B"))
    c = board.add(new_task("C"))
    board.set_status(a.id, "Completed")
    assert [t.title for t in board.ordered()] == ["B", "C", "A"]
    assert [t.title for t in board] == ["A", "B", "C"]
