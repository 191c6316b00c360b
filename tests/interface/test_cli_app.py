"""Tests for CLI commands: items, review, stats, logs and config."""

import json
import logging

import pytest
from typer.testing import CliRunner

from cadence.interface.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(mock_home, monkeypatch):
    for key in ("BACKEND", "STORE_PATH", "LOG_DIR", "POLL_INTERVAL", "LIMIT_NEW_CARDS"):
        monkeypatch.delenv(f"CADENCE_{key}", raising=False)
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()


@pytest.fixture
def store(tmp_path):
    return tmp_path / "collection.json"


def invoke(store, *args, **kwargs):
    return runner.invoke(app, ["--store", str(store), *args], **kwargs)


def list_json(store):
    result = invoke(store, "list", "--json")
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


# --- Help ---


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "cadence" in result.stdout
    for command in ("add", "review", "stats", "config"):
        assert command in result.stdout


# --- Items ---


def test_add_then_list(store):
    result = invoke(store, "add", "bonjour", "hello")
    assert result.exit_code == 0, result.output
    assert "Added item_" in result.stdout

    (item,) = list_json(store)
    assert item["front"] == "bonjour"
    assert item["back"] == "hello"
    assert item["state"] == "new"
    assert item["review_count"] == 0


def test_list_empty(store):
    result = invoke(store, "list")
    assert result.exit_code == 0
    assert "No items." in result.stdout


def test_list_due(store):
    invoke(store, "add", "q", "a")
    result = invoke(store, "list", "--due")
    assert result.exit_code == 0
    assert "[new]" in result.stdout


def test_edit_updates_text(store):
    invoke(store, "add", "q", "a")
    (item,) = list_json(store)

    result = invoke(store, "edit", item["id"], "--back", "answer")

    assert result.exit_code == 0, result.output
    assert "q -> answer" in result.stdout
    assert list_json(store)[0]["back"] == "answer"


def test_delete_with_force(store):
    invoke(store, "add", "q", "a")
    (item,) = list_json(store)

    result = invoke(store, "delete", item["id"], "--force")

    assert result.exit_code == 0
    assert list_json(store) == []


def test_delete_asks_for_confirmation(store):
    invoke(store, "add", "q", "a")
    (item,) = list_json(store)

    result = invoke(store, "delete", item["id"], input="n\n")

    assert result.exit_code != 0
    assert len(list_json(store)) == 1


def test_delete_missing_item_fails(store):
    result = invoke(store, "delete", "item_nope", "-f")
    assert result.exit_code == 1
    assert "Item not found: item_nope" in result.output


def test_search(store):
    invoke(store, "add", "Capital of France", "Paris")
    invoke(store, "add", "2 + 2", "4")

    result = invoke(store, "search", "paris")
    assert result.exit_code == 0
    assert "Capital of France" in result.stdout
    assert "2 + 2" not in result.stdout

    assert "No matches." in invoke(store, "search", "berlin").stdout


def test_corrupt_store_reports_error(store):
    store.write_text("{broken")
    result = invoke(store, "list")
    assert result.exit_code == 1
    assert "Corrupt collection file" in result.output


# --- Review ---


def test_review_grades_and_persists(store):
    invoke(store, "add", "q", "a")

    result = invoke(store, "review", input="\n3\n")

    assert result.exit_code == 0, result.output
    assert "Reviewed 1 item(s)." in result.stdout
    (item,) = list_json(store)
    assert item["state"] == "learning"
    assert item["current_step"] == 1
    assert item["interval"] == 10
    assert item["review_count"] == 1
    assert item["last_reviewed_at"] is not None


def test_review_rejects_unknown_grade_then_continues(store):
    invoke(store, "add", "q", "a")

    result = invoke(store, "review", input="\nperfect\n\neasy\n")

    assert result.exit_code == 0, result.output
    assert "Invalid grade" in result.stdout
    assert list_json(store)[0]["state"] == "review"


def test_review_quit_leaves_items_untouched(store):
    invoke(store, "add", "q", "a")

    result = invoke(store, "review", input="\nq\n")

    assert result.exit_code == 0
    assert "Reviewed 0 item(s)." in result.stdout
    assert list_json(store)[0]["review_count"] == 0


def test_review_with_nothing_due(store):
    result = invoke(store, "review")
    assert result.exit_code == 0
    assert "Reviewed 0 item(s)." in result.stdout


# --- Stats ---


def test_stats_json(store):
    invoke(store, "add", "q1", "a1")
    invoke(store, "add", "q2", "a2")

    result = invoke(store, "stats", "--json")

    assert result.exit_code == 0, result.output
    stats = json.loads(result.stdout)
    assert stats["total_cards"] == 2
    assert stats["due_today"] == 2
    assert stats["mastery_percentage"] == 0
    assert stats["current_streak"] == 0
    assert stats["states"]["new"] == 2


def test_stats_text(store):
    result = invoke(store, "stats")
    assert result.exit_code == 0
    assert "Total cards:     0" in result.stdout


# --- Logs ---


def test_logs_path(mock_home):
    result = runner.invoke(app, ["logs", "--path"])
    log_dir = mock_home / ".local/state/cadence/logs"
    assert result.exit_code == 0
    assert result.stdout.strip() == str(log_dir)
    assert (log_dir / "cadence.log").exists()


# --- Config ---


def test_config_show(store):
    result = invoke(store, "config", "show")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["store_path"] == str(store)
    assert data["backend"] == "json"


def test_config_learning_show_defaults(store):
    result = invoke(store, "config", "learning")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["learning_steps"] == [1.0, 10.0, 30.0]
    assert "updated" not in result.stdout


def test_config_learning_update_drives_scheduling(store):
    result = invoke(
        store, "config", "learning", "--learning-steps", "2, 20", "--easy-interval", "3"
    )
    assert result.exit_code == 0, result.output
    assert "Learning configuration updated." in result.stdout

    invoke(store, "add", "q", "a")
    invoke(store, "review", input="\nagain\n")

    assert list_json(store)[0]["interval"] == 2


def test_config_learning_rejects_empty_steps(store):
    result = invoke(store, "config", "learning", "--relearning-steps", "")
    assert result.exit_code == 1
    assert "relearning_steps must not be empty" in result.output

    data = json.loads(invoke(store, "config", "learning").stdout)
    assert data["relearning_steps"] == [10.0]


def test_config_learning_rejects_garbage_steps(store):
    result = invoke(store, "config", "learning", "--learning-steps", "1,soon")
    assert result.exit_code != 0
