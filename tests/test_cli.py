# tests/test_cli.py

import io

import click
import pytest
from click.testing import CliRunner
from rich.console import Console

from taskclient import cli as cli_module
from taskclient.board import TaskBoard
from taskclient.cli import TaskShell


@pytest.fixture()
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture()
def shell(board: TaskBoard, output: io.StringIO) -> TaskShell:
    return TaskShell(board, console=Console(file=output, width=120, color_system=None))


def _answers(monkeypatch, *answers):
    queue = list(answers)
    monkeypatch.setattr(click, "prompt", lambda *a, **kw: queue.pop(0))


def test_add_with_inline_title(shell: TaskShell, monkeypatch):
    _answers(monkeypatch, "from the shell")

    shell.handle("add Water plants")

    assert [(t.title, t.description) for t in shell.board.tasks] == [("Water plants", "from the shell")]


def test_edit_toggle_and_remove_by_row(shell: TaskShell, monkeypatch):
    _answers(monkeypatch, "First", "", "Second", "")
    shell.handle("add")
    shell.handle("add")

    _answers(monkeypatch, "Second (edited)", "notes")
    shell.handle("edit 1")
    assert shell.board.tasks[0].title == "Second (edited)"

    shell.handle("toggle 2")
    assert shell.board.tasks[1].status == "Completed"

    monkeypatch.setattr(click, "confirm", lambda *a, **kw: False)
    shell.handle("rm 1")
    assert len(shell.board.tasks) == 2

    monkeypatch.setattr(click, "confirm", lambda *a, **kw: True)
    shell.handle("rm 1")
    assert [t.title for t in shell.board.tasks] == ["First"]


def test_filter_and_search_commands(shell: TaskShell, output: io.StringIO, monkeypatch):
    _answers(monkeypatch, "Pay rent", "", "Walk dog", "")
    shell.handle("add")
    shell.handle("add")
    shell.handle("toggle 1")

    shell.handle("filter completed")
    shell.handle("search dog")
    shell.render()

    assert [t.title for t in shell.board.visible_tasks()] == ["Walk dog"]
    assert "Walk dog" in output.getvalue()

    shell.handle("filter everything")
    assert "filter must be one of" in output.getvalue()
    assert shell.board.filter_status == "Completed"


def test_bad_row_and_unknown_command(shell: TaskShell, output: io.StringIO):
    shell.handle("toggle 7")
    shell.handle("toggle x")
    shell.handle("frobnicate")

    text = output.getvalue()
    assert "No task at row 7" in text
    assert "Give the row number" in text
    assert "Unknown command: frobnicate" in text


def test_render_shows_error_and_counts(shell: TaskShell, output: io.StringIO):
    shell.board.error = "Failed to delete task"

    shell.render()

    text = output.getvalue()
    assert "Failed to delete task" in text
    assert "Total 0" in text
    assert "No tasks found" in text


def test_quit_stops_loop(shell: TaskShell, monkeypatch):
    _answers(monkeypatch, "help", "quit")

    shell.run()

    assert shell.running is False


def test_command_wires_api_url(monkeypatch):
    seen = {}

    class RecordingShell:
        def __init__(self, board):
            seen["board"] = board

        def run(self):
            seen["ran"] = True

    monkeypatch.setattr(cli_module, "TaskShell", RecordingShell)

    result = CliRunner().invoke(cli_module.cli, ["--api-url", "http://example.test/api"])

    assert result.exit_code == 0, result.output
    assert seen["ran"]
    assert str(seen["board"].api._client.base_url) == "http://example.test/api/"
