"""cadence CLI: item management, review sessions, stats and configuration."""

import asyncio
import json
import logging
import os
import sys
from collections.abc import Coroutine
from dataclasses import asdict
from pathlib import Path
from typing import Annotated, Any, TypeVar

import typer

from cadence.application.config import AppConfig, resolve_config
from cadence.domain.exceptions import CadenceError, InvalidGrade

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="cadence: spaced-repetition flashcards in the terminal.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage cadence configuration.", no_args_is_help=True)
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

GRADE_KEYS = {
    "1": "again",
    "a": "again",
    "2": "hard",
    "h": "hard",
    "3": "good",
    "g": "good",
    "4": "easy",
    "e": "easy",
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _resolve(ctx: typer.Context, **overrides: Any) -> AppConfig:
    """Resolve config with the global options plus command-level overrides."""
    merged = dict((ctx.obj or {}).get("overrides", {}))
    merged.update({k: v for k, v in overrides.items() if v is not None})
    return resolve_config(merged)


def _run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine, turning domain errors into a red message and exit code 1."""
    try:
        return asyncio.run(coro)
    except CadenceError as e:
        typer.secho(f"Error: {e}", fg="red", err=True)
        raise typer.Exit(1) from None


def _repo(config: AppConfig):
    from cadence.application.factory import get_item_repository

    return get_item_repository(config)


def _jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if hasattr(value, "value"):
        return value.value
    if isinstance(value, Path):
        return str(value)
    return value


def _describe(item) -> str:
    when = item.next_review_date.astimezone().strftime("%Y-%m-%d %H:%M")
    return (
        f"{item.id}  [{item.state.value}]  {item.front} -> {item.back}  "
        f"(due {when}, interval {item.interval:g} {item.interval_unit.value})"
    )


def _attach_log_file(log_dir: Path) -> None:
    """Mirror log records into log_dir/cadence.log, once per process."""
    log_file = log_dir / "cadence.log"
    root = logging.getLogger()
    if any(getattr(h, "baseFilename", None) == str(log_file) for h in root.handlers):
        return
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError as e:
        logger.warning(f"Could not open log file {log_file}: {e}")
        return
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s:%(name)s:%(message)s"))
    root.addHandler(handler)


def _parse_steps(raw: str | None) -> tuple[float, ...] | None:
    if raw is None:
        return None
    try:
        return tuple(float(part) for part in raw.split(",") if part.strip())
    except ValueError:
        raise typer.BadParameter(f"Expected comma-separated minutes, got {raw!r}") from None


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
    store: Annotated[
        Path | None, typer.Option("--store", help="Path to the collection file.")
    ] = None,
    backend: Annotated[str | None, typer.Option(help="Item store: json, memory.")] = None,
):
    """Global settings for cadence."""
    ctx.ensure_object(dict)
    ctx.obj["overrides"] = {
        k: v for k, v in {"store_path": store, "backend": backend}.items() if v is not None
    }
    if verbose >= 2:
        logging.getLogger().setLevel(logging.DEBUG)
    elif verbose == 1:
        logging.getLogger().setLevel(logging.INFO)

    _attach_log_file(_resolve(ctx).log_dir)


# ---------------------------------------------------------------------------
# Item commands
# ---------------------------------------------------------------------------


@app.command()
def add(
    ctx: typer.Context,
    front: Annotated[str, typer.Argument(help="Prompt side.")],
    back: Annotated[str, typer.Argument(help="Answer side.")],
):
    """[bold green]Add[/bold green] a new item, due immediately."""
    from cadence.application.item_service import ItemService

    config = _resolve(ctx)
    item = _run(ItemService(_repo(config)).create(front, back))
    typer.secho(f"Added {item.id}", fg="green")


@app.command("list")
def list_items(
    ctx: typer.Context,
    due: Annotated[bool, typer.Option("--due", help="Only items that are due now.")] = False,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List items in the collection."""
    from cadence.domain.clock import SystemClock

    repo = _repo(_resolve(ctx))
    if due:
        items = _run(repo.load_due(SystemClock().now()))
    else:
        items = _run(repo.load_all())

    if json_output:
        typer.echo(json.dumps([_jsonable(asdict(i)) for i in items], indent=2))
        return

    if not items:
        typer.secho("No items.", fg="yellow")
        return
    for item in items:
        typer.echo(_describe(item))


@app.command()
def edit(
    ctx: typer.Context,
    item_id: Annotated[str, typer.Argument(help="Item id.")],
    front: Annotated[str | None, typer.Option(help="New prompt side.")] = None,
    back: Annotated[str | None, typer.Option(help="New answer side.")] = None,
):
    """Edit an item's text. Scheduling is left untouched."""
    from cadence.application.item_service import ItemService

    item = _run(ItemService(_repo(_resolve(ctx))).edit(item_id, front=front, back=back))
    typer.echo(_describe(item))


@app.command()
def delete(
    ctx: typer.Context,
    item_id: Annotated[str, typer.Argument(help="Item id.")],
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation.")] = False,
):
    """Delete an item."""
    from cadence.application.item_service import ItemService

    if not force:
        typer.confirm(f"Delete {item_id}?", abort=True)
    _run(ItemService(_repo(_resolve(ctx))).delete(item_id))
    typer.secho(f"Deleted {item_id}", fg="green")


@app.command()
def search(
    ctx: typer.Context,
    query: Annotated[str, typer.Argument(help="Text to look for in either side.")],
):
    """Find items by text."""
    from cadence.application.item_service import ItemService

    items = _run(ItemService(_repo(_resolve(ctx))).search(query))
    if not items:
        typer.secho("No matches.", fg="yellow")
        return
    for item in items:
        typer.echo(_describe(item))


# ---------------------------------------------------------------------------
# Review
# ---------------------------------------------------------------------------


@app.command()
def review(
    ctx: typer.Context,
    all_items: Annotated[
        bool, typer.Option("--all", help="Study every item; due items still come first.")
    ] = False,
    limit_new: Annotated[
        bool | None,
        typer.Option("--limit-new/--no-limit-new", help="Cap new items at new_cards_per_day."),
    ] = None,
):
    """Run an interactive [bold]review session[/bold]."""
    from cadence.application.session.review_session import ReviewSession
    from cadence.domain.models import SessionMode

    config = _resolve(ctx, limit_new_cards=limit_new)
    repo = _repo(config)
    mode = SessionMode.ALL if all_items else SessionMode.DUE

    async def run() -> int:
        session = ReviewSession(repo, poll_interval=config.poll_interval)
        new_limit = None
        if config.limit_new_cards:
            new_limit = (await repo.load_config()).new_cards_per_day
        await session.start(mode, new_limit=new_limit)

        reviewed = 0
        try:
            while (item := session.current()) is not None:
                typer.echo("")
                typer.secho(f"[{item.state.value}] {item.front}", bold=True)
                await asyncio.to_thread(
                    typer.prompt, "Press Enter to reveal", default="", show_default=False
                )
                typer.echo(f"  {item.back}")

                choice = await asyncio.to_thread(
                    typer.prompt, "Grade [1]again [2]hard [3]good [4]easy [q]uit"
                )
                choice = choice.strip().lower()
                if choice in ("q", "quit"):
                    break
                grade = GRADE_KEYS.get(choice, choice)
                try:
                    await session.answer(grade)
                except InvalidGrade as e:
                    typer.secho(str(e), fg="yellow")
                    continue
                reviewed += 1
        finally:
            session.end()
        return reviewed

    reviewed = _run(run())
    typer.secho(f"Reviewed {reviewed} item(s).", fg="green")


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------


@app.command()
def stats(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show collection statistics."""
    from cadence.application.stats.service import StatsService

    result = _run(StatsService(_repo(_resolve(ctx))).compute_stats())

    if json_output:
        typer.echo(json.dumps(asdict(result), indent=2))
        return

    typer.echo(f"Total cards:     {result.total_cards}")
    typer.echo(f"Due now:         {result.due_today}")
    typer.echo(f"Reviewed today:  {result.reviewed_today}")
    typer.echo(f"Mastery:         {result.mastery_percentage}%")
    s = result.states
    typer.echo(
        f"States:          new={s.new} learning={s.learning} "
        f"review={s.review} relearning={s.relearning}"
    )


@app.command()
def logs(
    ctx: typer.Context,
    print_path: Annotated[
        bool, typer.Option("--path", help="Print the log directory instead of opening it.")
    ] = False,
):
    """Open the log directory."""
    import subprocess

    log_dir = _resolve(ctx).log_dir
    log_dir.mkdir(parents=True, exist_ok=True)

    if print_path:
        typer.echo(str(log_dir))
    elif sys.platform == "darwin":
        subprocess.run(["open", str(log_dir)])
    elif sys.platform == "win32":
        os.startfile(str(log_dir))
    else:
        subprocess.run(["xdg-open", str(log_dir)])


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _resolve(ctx)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))


@config_app.command("learning")
def config_learning(
    ctx: typer.Context,
    learning_steps: Annotated[
        str | None, typer.Option(help="Comma-separated learning steps in minutes.")
    ] = None,
    relearning_steps: Annotated[
        str | None, typer.Option(help="Comma-separated relearning steps in minutes.")
    ] = None,
    graduating_interval: Annotated[
        float | None, typer.Option(help="Days granted on graduation.")
    ] = None,
    easy_interval: Annotated[float | None, typer.Option(help="Days granted on easy.")] = None,
    new_cards_per_day: Annotated[
        int | None, typer.Option(help="Advisory cap on new items per session.")
    ] = None,
):
    """Show the learning configuration, updating any fields given as options."""
    from dataclasses import replace

    repo = _repo(_resolve(ctx))
    changes = {
        "learning_steps": _parse_steps(learning_steps),
        "relearning_steps": _parse_steps(relearning_steps),
        "graduating_interval": graduating_interval,
        "easy_interval": easy_interval,
        "new_cards_per_day": new_cards_per_day,
    }
    changes = {k: v for k, v in changes.items() if v is not None}

    async def run():
        current = await repo.load_config()
        if not changes:
            return current
        # replace() re-runs validation and raises InvalidConfig before anything is saved
        updated = replace(current, **changes)
        await repo.save_config(updated)
        return updated

    learning = _run(run())
    if changes:
        typer.secho("Learning configuration updated.", fg="green")
    typer.echo(json.dumps(_jsonable(asdict(learning)), indent=2))


if __name__ == "__main__":
    app()
