import pytest
from unittest.mock import patch

from lifeos.app import (
    SessionExitRequested, cmd_settings, cmd_tasks, run_review_screen, session_int_prompt,
    session_prompt, split_tags,
)
from lifeos.assistant import Assistant


def test_session_prompt_raises_on_q():
    with patch("lifeos.app.Prompt.ask", return_value="q"):
        with pytest.raises(SessionExitRequested):
            session_prompt("test prompt")


def test_session_prompt_raises_on_menu():
    with patch("lifeos.app.Prompt.ask", return_value="menu"):
        with pytest.raises(SessionExitRequested):
            session_prompt("test prompt")


def test_session_prompt_returns_normal_input():
    with patch("lifeos.app.Prompt.ask", return_value="hello"):
        assert session_prompt("test prompt") == "hello"


def test_session_int_prompt_returns_normal_input():
    with patch("lifeos.app.Prompt.ask", return_value="3"):
        assert session_int_prompt("stage", choices=["1", "2", "3", "4", "5"]) == 3


def test_split_tags():
    assert split_tags("Array, Hash Table,,  ") == ["Array", " Hash Table"]


def test_review_screen_pass_advances_stage(session):
    with patch("lifeos.app.Prompt.ask", side_effect=["pass", "1", "menu"]):
        with pytest.raises(SessionExitRequested):
            run_review_screen(session, Assistant(None), "problem")
    assert session.problems.get("101").stage == 2


def test_review_screen_fail_resets_stage(session):
    with patch("lifeos.app.Prompt.ask", side_effect=["filter", "all", "fail", "2", "menu"]):
        with pytest.raises(SessionExitRequested):
            run_review_screen(session, Assistant(None), "problem")
    assert session.problems.get("102").stage == 1


def test_review_screen_invalid_add_keeps_store(session):
    answers = ["add", "", "bad", "", "Easy", "1", "", "menu"]
    with patch("lifeos.app.Prompt.ask", side_effect=answers):
        with pytest.raises(SessionExitRequested):
            run_review_screen(session, Assistant(None), "problem")
    assert len(session.problems) == 2


def test_review_screen_adds_topic(session):
    answers = ["add", "Consensus", "Distributed Systems", "raft, paxos", "1", "", "menu"]
    with patch("lifeos.app.Prompt.ask", side_effect=answers):
        with pytest.raises(SessionExitRequested):
            run_review_screen(session, Assistant(None), "topic")
    topic = list(session.topics)[0]
    assert topic.area == "Distributed Systems"
    assert topic.tags == ("raft", "paxos")


def test_tasks_screen_add_and_toggle(session):
    answers = ["add", "Buy milk", "Personal", "toggle", "1", "menu"]
    with patch("lifeos.app.Prompt.ask", side_effect=answers):
        with pytest.raises(SessionExitRequested):
            cmd_tasks(session, Assistant(None))
    assert len(session.tasks) == 5
    # first row in the ordered view is the sample "In Progress" task
    assert session.tasks.get("1").status == "Completed"


def test_tasks_screen_split_uses_breakdown(session):
    with patch("lifeos.app.Prompt.ask", side_effect=["split", "2", "menu"]):
        with pytest.raises(SessionExitRequested):
            cmd_tasks(session, Assistant(None))
    assert len(session.tasks) == 8


def test_settings_screen_saves(session):
    with patch("lifeos.app.Prompt.ask", side_effect=["Sam", "2026-01-01", "light"]):
        cmd_settings(session)
    assert session.settings.name == "Sam"
    assert session.settings.theme == "light"


def test_add_topic_lists_existing_areas(session):
    session.add_topic("Paging", area="OS")
    answers = ["add", "Deadlocks", "OS", "", "1", "", "menu"]
    with patch("lifeos.app.Prompt.ask", side_effect=answers), patch("lifeos.app.console") as console:
        with pytest.raises(SessionExitRequested):
            run_review_screen(session, Assistant(None), "topic")
    printed = " ".join(str(c.args[0]) for c in console.print.call_args_list if c.args)
    assert "Existing areas: OS" in printed
    assert len(session.topics) == 2
