"""CLI for the weekly training planner.

Acts as the host application: loads sessions from the store, runs the
planner commands and renders the positioned week with rich.
"""

from collections.abc import Callable
from datetime import datetime
from typing import TypeVar

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from weekplan.calendar.constraints import ShiftPolicy, ValidationOutcome
from weekplan.calendar.layout import LayoutConfig
from weekplan.calendar.models import PositionedSession, Session
from weekplan.config.settings import settings
from weekplan.core.logger import setup_logger_from_settings
from weekplan.db.repository import SqlSessionStore
from weekplan.db.session import configure_engine, init_db
from weekplan.sessions.errors import PlannerError
from weekplan.sessions.planner import WeekPlanner

# Initialize Rich console for output
console = Console()

app = typer.Typer(
    name="weekplan",
    help="Weekly training-session planner",
    add_completion=False,
)

DATETIME_FORMATS = ["%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M", "%Y-%m-%d"]
DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

T = TypeVar("T")


class ConsoleNotifier:
    """Planner notifier printing to the rich console."""

    def __init__(self, assume_yes: bool = False):
        self.assume_yes = assume_yes

    def session_added(self, session: Session) -> None:
        console.print(f"[green]Session added[/green] (#{session.id}) {session.description}")

    def confirm_deletion(self, session: Session) -> bool:
        if self.assume_yes:
            return True
        return typer.confirm(f"Delete session #{session.id} {session.description}?", default=False)

    def midnight_overrun(self, session: Session) -> None:
        console.print(
            f"[yellow]Warning:[/yellow] session #{session.id} cannot run past midnight "
            f"(duration {session.duration_minutes} min)"
        )

    def before_opening(self, session: Session) -> None:
        console.print(
            f"[yellow]Warning:[/yellow] session #{session.id} cannot start before "
            f"{settings.opening_hour:02d}:00"
        )


def _build_planner(assume_yes: bool = False, panel_width: float | None = None) -> WeekPlanner:
    init_db()
    return WeekPlanner(
        SqlSessionStore(),
        ConsoleNotifier(assume_yes=assume_yes),
        config=LayoutConfig.from_settings(settings, panel_width=panel_width),
        shift_policy=ShiftPolicy.REJECT,
    )


def _block_text(block: PositionedSession) -> Text:
    text = Text()
    text.append(f"{block.starts_at:%H:%M} ", style="bold")
    text.append(block.activity_label, style=f"bold {block.color}")
    text.append(f"\n#{block.session.id} {block.duration_minutes}min @ {block.location}")
    text.append(f"\n{block.category_label}", style="dim")
    if block.column_count > 1:
        text.append(f"\ncol {block.column_index + 1}/{block.column_count}", style="magenta")
    text.append(f"\nx={block.x:.0f} y={block.y:.0f} {block.width:.0f}x{block.height:.0f}", style="dim")
    return text


def render_week(planner: WeekPlanner) -> Table:
    """Render the displayed week as a seven-column table."""
    table = Table(title=planner.week_label, show_lines=True, expand=True)
    today = planner.today_index
    for idx, day in enumerate(planner.week_days):
        style = "bold dark_orange" if idx == today else ("yellow" if idx >= 5 else "")
        table.add_column(f"{DAY_NAMES[idx]} {day:%d/%m}", header_style=style, vertical="top")

    cells: list[list[Text]] = [[] for _ in range(7)]
    for block in planner.week_layout():
        cells[block.day_index].append(_block_text(block))

    table.add_row(*[Text("\n\n").join(cell) if cell else Text("-", style="dim") for cell in cells])
    return table


@app.callback()
def main(
    db: str | None = typer.Option(None, "--db", help="Database URL (overrides WEEKPLAN_DATABASE_URL)"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Weekly training-session planner."""
    setup_logger_from_settings(settings, debug=debug)
    if db:
        configure_engine(db)


@app.command("init-db")
def init_db_command() -> None:
    """Create the database tables."""
    init_db()
    console.print("[green]Database ready[/green]")


@app.command()
def show(
    week: datetime | None = typer.Option(None, "--week", "-w", formats=DATETIME_FORMATS, help="Any day of the week"),
    panel_width: float | None = typer.Option(None, "--panel-width", help="Total grid width in pixels"),
) -> None:
    """Show the sessions of a week with their layout."""
    planner = _build_planner(panel_width=panel_width)
    if week is not None:
        planner.show_week(week)
    console.print(render_week(planner))


@app.command()
def add(
    label: str = typer.Argument(..., help="Activity label"),
    start: datetime = typer.Option(..., "--start", "-s", formats=DATETIME_FORMATS, help="Start date-time"),
    duration: int = typer.Option(60, "--duration", "-d", help="Duration in minutes"),
    location: str = typer.Option("", "--location", "-l", help="Location"),
    category_id: int | None = typer.Option(None, "--category", "-c", help="Category id"),
) -> None:
    """Create a session."""
    planner = _build_planner()
    planner.new_draft()
    draft = planner.update_draft(activity_label=label, location=location, starts_at=start, duration_minutes=duration)
    session = planner.commit_draft() if draft.starts_at == start else None
    if session is None:
        console.print("[red]Session not created[/red]")
        raise typer.Exit(code=1)
    if category_id is not None:
        _run(lambda: planner.assign_category(session.id, category_id))


@app.command()
def move(
    session_id: int = typer.Argument(..., help="Session id"),
    later: bool = typer.Option(True, "--later/--earlier", help="Move one hour later or earlier"),
) -> None:
    """Shift a session by one hour."""
    planner = _build_planner()
    result = _run(lambda: planner.move_later(session_id) if later else planner.move_earlier(session_id))
    if result.outcome != ValidationOutcome.ACCEPTED:
        console.print(f"[red]Move refused:[/red] {result.outcome.value}")
        raise typer.Exit(code=1)
    console.print(f"[green]Moved[/green] {result.session.description}")


@app.command("set-duration")
def set_duration(
    session_id: int = typer.Argument(..., help="Session id"),
    minutes: int = typer.Argument(..., help="Duration in minutes"),
) -> None:
    """Change the duration of a session (truncated at midnight)."""
    planner = _build_planner()
    edit = _run(lambda: planner.edit_duration(session_id, minutes))
    console.print(f"[green]Duration set[/green] to {edit.session.duration_minutes} min")


@app.command()
def delete(
    session_id: int = typer.Argument(..., help="Session id"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete a session."""
    planner = _build_planner(assume_yes=yes)
    if _run(lambda: planner.delete_session(session_id)):
        console.print(f"[green]Deleted[/green] session #{session_id}")
    else:
        console.print("Deletion cancelled")


@app.command("add-category")
def add_category(
    name: str = typer.Argument(..., help="Category label"),
    color: str = typer.Argument("#808080", help="Display colour (#RRGGBB)"),
) -> None:
    """Create a category."""
    planner = _build_planner()
    category = planner.add_category(name, color)
    console.print(f"[green]Category created[/green] #{category.id} {category.display_name} {category.color_hex}")


@app.command()
def categorize(
    session_id: int = typer.Argument(..., help="Session id"),
    category_id: int | None = typer.Argument(None, help="Category id, omit to clear"),
) -> None:
    """Attach a category to a session, or clear it."""
    planner = _build_planner()
    session = _run(lambda: planner.assign_category(session_id, category_id))
    console.print(f"Session #{session.id} is now [bold]{session.category_label}[/bold]")


def _run(action: Callable[[], T]) -> T:
    try:
        return action()
    except PlannerError as e:
        logger.debug(f"Planner error: {e!r}")
        console.print(Panel(Text(str(e), style="bold red"), border_style="red"))
        raise typer.Exit(code=1) from e


if __name__ == "__main__":
    app()
