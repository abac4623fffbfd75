# ABOUTME: Provides a CLI that prints the instructor booking queue from participant records.
# ABOUTME: Ranks students by priority score and highlights overdue or late waits.

import logging
from pathlib import Path
from typing import Optional

import pandas as pd
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from src.booking_common.config import PriorityConfig, load_priority_config
from src.booking_common.errors import PriorityError
from src.booking_common.participants import filter_participants, snapshots_from_frame
from src.priority_engine.report import build_booking_queue, queue_to_frame
from src.priority_engine.scoring import ScoreCalculator
from src.priority_engine.wait_warning import classify

console = Console()
app = typer.Typer(help="Prioritize flight-training students for the next booking.")
logger = logging.getLogger("priority_queue")

WARNING_STYLES = {"OVERDUE": "orange3", "LATE": "red", "NONE": "green"}


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config(config: Optional[Path]) -> PriorityConfig:
    if config is None:
        return PriorityConfig()
    if not config.exists():
        raise typer.BadParameter(f"Config file not found: {config}", param_hint="--config")
    try:
        return load_priority_config(config)
    except PriorityError as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc


def _read_records(path: Path) -> pd.DataFrame:
    if path.suffix == ".parquet":
        return pd.read_parquet(path)
    return pd.read_csv(path)


def _write_records(df: pd.DataFrame, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix == ".parquet":
        df.to_parquet(path, index=False)
    else:
        df.to_csv(path, index=False)


@app.command()
def queue(
    participants: Path = typer.Option(..., "--participants", exists=True, dir_okay=False, help="CSV or parquet participant records."),
    config: Optional[Path] = typer.Option(None, "--config", help="Priority config YAML."),
    status: str = typer.Option("active", "--status", help="Participant filter: active, onhold, suspended, graduates, any."),
    include_on_hold: bool = typer.Option(False, "--include-on-hold", help="Keep on-hold students in the active list."),
    now: Optional[str] = typer.Option(None, "--now", help="ISO8601 reference time for recency; defaults to the current time."),
    output: Optional[Path] = typer.Option(None, "--output", help="Write the queue as parquet or CSV."),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging."),
) -> None:
    """
    Rank students by booking priority and flag overdue or late waits.
    """
    _configure_logging(verbose)
    priority_config = _load_config(config)

    records = _read_records(participants)
    logger.info("Loaded %d participant records from %s", len(records), participants)

    try:
        records = filter_participants(records, status=status, include_on_hold=include_on_hold)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--status") from exc

    reference = None
    if now:
        try:
            reference = pd.Timestamp(now).to_pydatetime()
        except ValueError as exc:
            raise typer.BadParameter(f"Cannot parse '{now}' as an ISO8601 time.", param_hint="--now") from exc

    if records.empty:
        console.print(f"[yellow]No {status} students to queue.[/yellow]")
        return

    try:
        snapshots = snapshots_from_frame(records, now=reference)
        booking_queue = build_booking_queue(
            snapshots,
            calculator=ScoreCalculator(priority_config.weights),
            wait_config=priority_config.wait,
        )
    except PriorityError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    names = {}
    if "student_name" in records.columns:
        names = dict(zip(records["student_id"].astype(str), records["student_name"].fillna("").astype(str)))
    frame = queue_to_frame(booking_queue, names=names)

    console.rule("[bold blue]Booking Queue[/bold blue]")
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#")
    table.add_column("Student")
    table.add_column("Name")
    table.add_column("Score")
    table.add_column("Days")
    table.add_column("Warning")
    for entry in booking_queue.entries:
        level = entry.warning.name
        style = WARNING_STYLES[level]
        table.add_row(
            str(entry.sequence),
            entry.snapshot.student_id,
            names.get(entry.snapshot.student_id, ""),
            f"{entry.priority.score:.2f}",
            str(entry.snapshot.recency_days),
            f"[{style}]{level.lower()}[/{style}]",
        )
    console.print(table)
    console.print(f"[bold]Average wait:[/] {booking_queue.average_wait} days")

    if output is not None:
        _write_records(frame, output)
        console.print(f"[bold]Queue of {len(frame):,} students saved to {output}[/bold]")


@app.command("classify")
def classify_wait(
    days: int = typer.Option(..., "--days", help="Days since the student's last session."),
    config: Optional[Path] = typer.Option(None, "--config", help="Priority config YAML."),
) -> None:
    """
    Report whether a wait is overdue or late.
    """
    wait_config = _load_config(config).wait
    try:
        level = classify(days, wait_config)
    except PriorityError as exc:
        raise typer.BadParameter(str(exc), param_hint="--days") from exc

    style = WARNING_STYLES[level.name]
    console.print(f"[{style}]{level.name.lower()}[/{style}]")
    console.print(
        f"  overdue from {wait_config.overdue_after:g} days, late from {wait_config.late_after:g} days"
    )


if __name__ == "__main__":
    app()
