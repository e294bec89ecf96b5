"""Interactive terminal front-end for the task service.

Rows are numbered by their position in the currently visible (filtered and
searched) list, so ``edit 2`` always refers to the second row on screen.
"""

import logging
from typing import Callable, Dict, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from taskclient.api import DEFAULT_API_URL, Task, TaskApi
from taskclient.board import FILTERS, TaskBoard

HELP_TEXT = """Commands:
  add                      add a task (prompts for title and description)
  edit N                   edit task N
  cancel                   leave edit mode
  toggle N                 flip task N between Pending and Completed
  rm N                     delete task N (asks for confirmation)
  search [TERM]            filter by title/description; no TERM clears it
  filter all|pending|completed
  refresh                  reload tasks from the server
  dismiss                  hide the current error
  help                     show this help
  quit                     exit"""


class TaskShell:
    def __init__(self, board: TaskBoard, console: Optional[Console] = None):
        self.board = board
        self.console = console or Console()
        self.running = False
        self.commands: Dict[str, Callable[[str], None]] = {
            "add": self.cmd_add,
            "edit": self.cmd_edit,
            "cancel": self.cmd_cancel,
            "toggle": self.cmd_toggle,
            "rm": self.cmd_rm,
            "delete": self.cmd_rm,
            "search": self.cmd_search,
            "filter": self.cmd_filter,
            "refresh": self.cmd_refresh,
            "dismiss": self.cmd_dismiss,
            "help": self.cmd_help,
            "quit": self.cmd_quit,
            "exit": self.cmd_quit,
        }

    def run(self) -> None:
        self.running = True
        self.board.refresh()
        self.render()
        while self.running:
            try:
                line = click.prompt("tasks", default="", show_default=False, prompt_suffix="> ")
            except (click.Abort, EOFError):
                break
            self.handle(line)
            if self.running:
                self.render()

    def handle(self, line: str) -> None:
        line = line.strip()
        if not line:
            return
        name, _, args = line.partition(" ")
        handler = self.commands.get(name.lower())
        if handler is None:
            self.console.print(f"[red]Unknown command: {escape(name)}. Type help for available commands.[/red]")
            return
        handler(args.strip())

    def render(self) -> None:
        board = self.board
        counts = board.counts()
        self.console.print(
            f"[yellow]Pending {counts['Pending']}[/yellow]  "
            f"[green]Completed {counts['Completed']}[/green]  "
            f"[bold]Total {counts['Total']}[/bold]"
        )
        if board.error:
            self.console.print(Panel(escape(board.error), style="red", subtitle="dismiss to hide"))

        caption = f"filter: {board.filter_status}"
        if board.search_term:
            caption += f"  search: {board.search_term!r}"
        if board.editing is not None:
            caption += f"  editing: {board.editing.title}"

        visible = board.visible_tasks()
        if not visible:
            self.console.print("[dim]No tasks found[/dim]")
            self.console.print(f"[dim]{escape(caption)}[/dim]")
            return

        table = Table(caption=escape(caption))
        table.add_column("#", justify="right")
        table.add_column("Status")
        table.add_column("Title", style="cyan")
        table.add_column("Description")
        table.add_column("Created", style="dim")
        for index, task in enumerate(visible, start=1):
            done = task.status == "Completed"
            created = task.created_at.strftime("%b %d, %Y %H:%M") if task.created_at else ""
            table.add_row(
                str(index),
                "[green]x Completed[/green]" if done else "[yellow]o Pending[/yellow]",
                f"[strike]{escape(task.title)}[/strike]" if done else escape(task.title),
                escape(task.description),
                created,
            )
        self.console.print(table)

    def _pick(self, args: str) -> Optional[Task]:
        visible = self.board.visible_tasks()
        try:
            index = int(args)
        except ValueError:
            self.console.print("[red]Give the row number of a task.[/red]")
            return None
        if not 1 <= index <= len(visible):
            self.console.print(f"[red]No task at row {index}.[/red]")
            return None
        return visible[index - 1]

    def _fill_form(self) -> None:
        form = self.board.form
        form.title = click.prompt("Title", default=form.title or "", show_default=bool(form.title))
        form.description = click.prompt(
            "Description (optional)", default=form.description or "", show_default=bool(form.description)
        )

    def cmd_add(self, args: str) -> None:
        if self.board.editing is not None:
            self.board.cancel_edit()
        if args:
            self.board.form.title = args
            self.board.form.description = click.prompt("Description (optional)", default="", show_default=False)
        else:
            self._fill_form()
        self.board.submit()

    def cmd_edit(self, args: str) -> None:
        task = self._pick(args)
        if task is None:
            return
        self.board.start_edit(task)
        self._fill_form()
        self.board.submit()

    def cmd_cancel(self, args: str) -> None:
        self.board.cancel_edit()

    def cmd_toggle(self, args: str) -> None:
        task = self._pick(args)
        if task is not None:
            self.board.toggle_status(task)

    def cmd_rm(self, args: str) -> None:
        task = self._pick(args)
        if task is not None:
            self.board.delete(task.id, confirm=lambda: click.confirm("Are you sure you want to delete this task?"))

    def cmd_search(self, args: str) -> None:
        self.board.set_search(args)

    def cmd_filter(self, args: str) -> None:
        wanted = args.capitalize()
        if wanted not in FILTERS:
            self.console.print(f"[red]filter must be one of: {', '.join(f.lower() for f in FILTERS)}[/red]")
            return
        self.board.set_filter(wanted)

    def cmd_refresh(self, args: str) -> None:
        self.board.refresh()

    def cmd_dismiss(self, args: str) -> None:
        self.board.dismiss_error()

    def cmd_help(self, args: str) -> None:
        self.console.print(HELP_TEXT, markup=False, highlight=False)

    def cmd_quit(self, args: str) -> None:
        self.running = False


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.option(
    "--api-url",
    envvar="TASKS_API_URL",
    default=DEFAULT_API_URL,
    show_default=True,
    help="Base URL of the task service API.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log requests to stderr.")
def cli(api_url: str, verbose: bool):
    """Browse and edit tasks on a running task service."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    with TaskApi(api_url) as api:
        TaskShell(TaskBoard(api)).run()


def main():
    cli()


if __name__ == "__main__":
    main()
