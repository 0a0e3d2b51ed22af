"""
Pusula CLI - Learner progression from the terminal

Drives one learner's progression through the engine:
1. Content - submit tasks, complete micro-lessons, play simulations
2. Progress - status, streaks, level gates and graduation checklist
3. Demo - jump to a checkpoint scene of the walkthrough

Usage:
    pusula init --name "Ayse"          # Create a learner snapshot
    pusula submit-task t-dashboard     # Credit a task
    pusula submit-task t-charts -q 92  # Credit a graded task
    pusula sim-start climate-crisis    # Play a simulation
    pusula sim-choose opt-1-a
    pusula sim-next
    pusula graduation                  # Graduation checklist
    pusula feed                        # Notification feed

Snapshots live in PUSULA_DATA_DIR (default ~/.pusula).
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from datetime import date, datetime
from pathlib import Path
from typing import Annotated, NoReturn

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# Local imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))
from config import Settings, get_settings
from src.content import CHECKPOINTS, ContentCatalog, SpecialBonus, sample_catalog
from src.content import resolver
from src.content.sample import CAPSTONE_SIMULATION_ID, CAPSTONE_TASK_ID
from src.core.commands import AdvanceSimulationStep, BaseCommand, JumpToCheckpoint
from src.core.errors import ProgressionError
from src.core.levels import level_progress, next_level, xp_to_next_level
from src.core.state import LearnerState, SimulationRun, new_learner
from src.engine import LearnerStore, ProgressionReducer
from src.persistence import SnapshotStore
from src.readmodels import (
    GraduationReport,
    default_graduation_criteria,
    gate_criteria,
    report,
    synthesize,
)

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="pusula",
    help="🧭 Pusula - Gamified learning progression engine",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()

LearnerOption = Annotated[
    str | None, typer.Option("--learner", "-l", help="Learner id (defaults to PUSULA_DEFAULT_LEARNER_ID)")
]


def _settings() -> Settings:
    return get_settings()


def _load_catalog(settings: Settings) -> ContentCatalog:
    """Configured JSON catalog, or the built-in sample content."""
    if settings.catalog_path is None:
        return sample_catalog()
    return ContentCatalog.from_json(settings.catalog_path.expanduser())


def _snapshots(settings: Settings) -> SnapshotStore:
    return SnapshotStore(settings.get_snapshot_dir())


def _fail(message: str) -> NoReturn:
    console.print(f"[red]{message}[/]")
    raise typer.Exit(1)


def _load_state(settings: Settings, learner: str | None) -> LearnerState:
    learner_id = learner or settings.default_learner_id
    try:
        state = _snapshots(settings).load(learner_id)
    except ProgressionError as e:
        _fail(str(e))
    if state is None:
        _fail(f"No learner '{learner_id}'. Run 'pusula init' first.")
    return state


def _apply(
    learner: str | None,
    build: Callable[[LearnerState, ContentCatalog], BaseCommand | list[BaseCommand]],
) -> tuple[LearnerState, LearnerState, ContentCatalog]:
    """
    Load a snapshot, dispatch the built command(s) and persist the result.

    Returns:
        Tuple of (state before, state after, catalog)
    """
    settings = _settings()
    catalog = _load_catalog(settings)
    before = _load_state(settings, learner)

    store = LearnerStore(
        before,
        reducer=ProgressionReducer(streak_milestones=settings.streak_milestones),
    )
    store.subscribe(_snapshots(settings).save)

    try:
        built = build(before, catalog)
        after = store.dispatch_many(built) if isinstance(built, list) else store.dispatch(built)
    except ProgressionError as e:
        _fail(f"✗ {e}")
    return before, after, catalog


# =============================================================================
# Rendering
# =============================================================================


def _print_level_changes(before: LearnerState, after: LearnerState) -> None:
    if after.xp > before.xp:
        console.print(f"[green]+{after.xp - before.xp} XP[/] (total {after.xp})")
    if after.level != before.level:
        console.print(
            f"[bold {after.level.color}]▲ Level up: {after.level.display_name}[/]"
        )


def _print_step(catalog: ContentCatalog, run: SimulationRun) -> None:
    step = resolver.current_step(catalog, run)
    lines = [f"[bold]{step.title}[/]"]
    if step.description:
        lines.append(step.description)
    lines.append("")
    for option in step.options:
        lines.append(f"  [cyan]{option.id}[/]  {option.text}")
    console.print(
        Panel(
            "\n".join(lines),
            title=f"Step {run.current_step_index + 1}/{run.total_steps}",
            subtitle=f"Score {run.score}/100",
            border_style="magenta",
        )
    )


def _print_report(title: str, result: GraduationReport) -> None:
    table = Table(title=title)
    table.add_column("", width=2)
    table.add_column("Criterion", style="cyan")
    table.add_column("Progress", justify="right")

    for item in result.checklist:
        mark = "[green]✓[/]" if item.is_complete else "[red]✗[/]"
        table.add_row(mark, item.label, f"{item.current}/{item.target}")

    console.print(table)
    if result.eligible:
        console.print("[bold green]Eligible[/]")
    else:
        console.print(f"[yellow]{result.completed_count}/{len(result.checklist)} criteria complete[/]")


# =============================================================================
# Learner Commands
# =============================================================================


@app.command()
def init(
    learner: LearnerOption = None,
    name: Annotated[str | None, typer.Option("--name", "-n", help="Display name")] = None,
    force: Annotated[bool, typer.Option("--force", help="Overwrite an existing snapshot")] = False,
) -> None:
    """Create a fresh learner at 0 XP."""
    settings = _settings()
    snapshots = _snapshots(settings)
    learner_id = learner or settings.default_learner_id

    if snapshots.exists(learner_id) and not force:
        console.print(f"[yellow]Learner '{learner_id}' already exists (use --force to reset)[/]")
        return

    state = new_learner(learner_id, name or settings.default_display_name)
    path = snapshots.save(state)
    console.print(f"[green]✓[/] Created learner '{learner_id}' at {path}")


@app.command()
def status(learner: LearnerOption = None) -> None:
    """Show level, XP and progress counters."""
    state = _load_state(_settings(), learner)
    upcoming = next_level(state.level)

    body = [
        f"Level: [bold {state.level.color}]{state.level.display_name}[/]",
        f"XP: {state.xp}",
    ]
    if upcoming is not None:
        body.append(
            f"Next: {upcoming.display_name} in {xp_to_next_level(state.xp)} XP "
            f"({level_progress(state.xp):.0%})"
        )
    body += [
        f"Streak: {state.streak} day(s)",
        f"Performance: {state.performance_score}/100",
        f"Tasks: {len(state.completed_tasks)}  Lessons: {len(state.completed_lessons)}  "
        f"Simulations: {len(state.completed_simulations)}",
        f"Simulation: {state.simulation_status.value}",
    ]
    title = state.identity.display_name or state.learner_id
    console.print(Panel("\n".join(body), title=title, border_style="cyan"))


# =============================================================================
# Content Commands
# =============================================================================


@app.command("submit-task")
def submit_task(
    task_id: Annotated[str, typer.Argument(help="Task id from the catalog")],
    learner: LearnerOption = None,
    quality: Annotated[
        int | None, typer.Option("--quality", "-q", min=0, max=100, help="Review score 0-100")
    ] = None,
    bonus: Annotated[
        list[SpecialBonus] | None, typer.Option("--bonus", "-b", help="Special bonus (repeatable)")
    ] = None,
) -> None:
    """Submit an approved task."""
    resolved = {}

    def build(state: LearnerState, catalog: ContentCatalog) -> BaseCommand:
        reward, command = resolver.resolve_submission(
            catalog, task_id, at=datetime.now(), quality=quality, streak=state.streak, bonuses=bonus or ()
        )
        resolved["reward"] = reward
        return command

    before, after, _ = _apply(learner, build)
    if after is before:
        console.print(f"[dim]Task {task_id} was already completed[/]")
        return
    console.print(f"[green]✓[/] Task {task_id} approved")
    for line in resolved["reward"].lines()[1:]:
        console.print(f"  [dim]{line}[/]")
    _print_level_changes(before, after)


@app.command("complete-lesson")
def complete_lesson(
    lesson_id: Annotated[str, typer.Argument(help="Lesson id from the catalog")],
    learner: LearnerOption = None,
) -> None:
    """Mark a micro-lesson complete."""
    before, after, _ = _apply(
        learner, lambda state, catalog: resolver.complete_lesson(catalog, lesson_id, at=datetime.now())
    )
    if after is before:
        console.print(f"[dim]Lesson {lesson_id} was already completed[/]")
        return
    console.print(f"[green]✓[/] Lesson {lesson_id} completed")
    _print_level_changes(before, after)


# =============================================================================
# Simulation Commands
# =============================================================================


@app.command("sim-start")
def sim_start(
    scenario_id: Annotated[str, typer.Argument(help="Simulation id from the catalog")],
    learner: LearnerOption = None,
) -> None:
    """Start (or resume) a simulation."""
    before, after, catalog = _apply(
        learner, lambda state, catalog: resolver.start_simulation(catalog, scenario_id, at=datetime.now())
    )
    if before.simulation is not None and before.simulation.scenario_id != scenario_id:
        console.print(f"[yellow]Abandoned {before.simulation.scenario_id}[/]")
    console.print(f"[magenta]▶[/] Simulation {scenario_id}")
    _print_step(catalog, after.simulation)


@app.command("sim-choose")
def sim_choose(
    option_id: Annotated[str, typer.Argument(help="Option id on the current step")],
    learner: LearnerOption = None,
) -> None:
    """Choose an option on the current simulation step."""
    chosen = {}

    def build(state: LearnerState, catalog: ContentCatalog) -> BaseCommand:
        chosen["option"], command = resolver.resolve_choice(
            catalog, state.simulation, option_id, at=datetime.now()
        )
        return command

    before, after, _ = _apply(learner, build)
    option = chosen["option"]
    if option.feedback:
        console.print(f"[italic]{option.feedback}[/]")
    console.print(f"Score: {before.simulation.score} → [bold]{after.simulation.score}[/]")
    if after.simulation.is_last_step:
        console.print("[dim]Last step: run 'pusula sim-complete' to finish[/]")
    else:
        console.print("[dim]Run 'pusula sim-next' to continue[/]")


@app.command("sim-next")
def sim_next(learner: LearnerOption = None) -> None:
    """Advance to the next simulation step."""
    before, after, catalog = _apply(learner, lambda state, catalog: AdvanceSimulationStep(at=datetime.now()))
    if after is before:
        console.print("[yellow]Already on the last step[/]")
    _print_step(catalog, after.simulation)


@app.command("sim-complete")
def sim_complete(learner: LearnerOption = None) -> None:
    """Finish the simulation and collect XP."""
    before, after, _ = _apply(
        learner,
        lambda state, catalog: resolver.complete_simulation(catalog, state.simulation, at=datetime.now()),
    )
    run = before.simulation
    console.print(f"[bold magenta]★[/] Simulation {run.scenario_id} completed with score {run.score}/100")
    _print_level_changes(before, after)


# =============================================================================
# Progress Commands
# =============================================================================


@app.command()
def streak(
    learner: LearnerOption = None,
    inactive: Annotated[
        bool, typer.Option("--inactive", help="The learner was not active today")
    ] = False,
    day: Annotated[
        datetime | None, typer.Option("--day", formats=["%Y-%m-%d"], help="Day to evaluate (default today)")
    ] = None,
) -> None:
    """Evaluate today's streak; missed days reset it."""
    today: date = day.date() if day is not None else date.today()

    def build(state: LearnerState, catalog: ContentCatalog) -> list[BaseCommand]:
        return resolver.advance_streak(state.streak_day, today, active=not inactive, at=datetime.now())

    before, after, _ = _apply(learner, build)
    missed = before.streak_day is not None and (today - before.streak_day).days > 1
    if after is before:
        console.print(f"[dim]Streak already counted for {today.isoformat()}: {after.streak} day(s)[/]")
    elif after.streak == 0:
        console.print("[yellow]Streak reset[/]")
    else:
        if missed and before.streak > 0:
            console.print(f"[yellow]Missed day(s) since {before.streak_day.isoformat()}; streak restarted[/]")
        console.print(f"🔥 Streak: {after.streak} day(s)")


@app.command()
def checkpoint(
    checkpoint_id: Annotated[str | None, typer.Argument(help="Checkpoint to load")] = None,
    learner: LearnerOption = None,
) -> None:
    """Jump to a demo checkpoint (lists checkpoints without an id)."""
    if checkpoint_id is None:
        table = Table(title="Checkpoints")
        table.add_column("ID", style="cyan")
        table.add_column("Scene")
        table.add_column("XP", justify="right")
        table.add_column("Level")
        for item in CHECKPOINTS.values():
            table.add_row(item.checkpoint_id, item.label, str(item.xp), item.level.display_name)
        console.print(table)
        return

    before, after, _ = _apply(
        learner, lambda state, catalog: JumpToCheckpoint(checkpoint_id=checkpoint_id, at=datetime.now())
    )
    console.print(
        f"[green]✓[/] Loaded checkpoint {checkpoint_id}: "
        f"{after.xp} XP, [{after.level.color}]{after.level.display_name}[/]"
    )


@app.command()
def graduation(learner: LearnerOption = None) -> None:
    """Show the graduation checklist."""
    settings = _settings()
    catalog = _load_catalog(settings)
    state = _load_state(settings, learner)

    task_ids = {task.id for task in catalog.tasks}
    scenario_ids = {sim.id for sim in catalog.simulations}
    capstone_task = CAPSTONE_TASK_ID if CAPSTONE_TASK_ID in task_ids else None
    capstone_sim = CAPSTONE_SIMULATION_ID if CAPSTONE_SIMULATION_ID in scenario_ids else None
    required = [task.id for task in catalog.tasks if task.id != capstone_task]

    criteria = default_graduation_criteria(required, capstone_task, capstone_sim)
    _print_report("Graduation", report(state, criteria))


@app.command()
def gate(learner: LearnerOption = None) -> None:
    """Show what is needed to leave the current level."""
    settings = _settings()
    state = _load_state(settings, learner)
    upcoming = next_level(state.level)
    if upcoming is None:
        console.print(f"[bold {state.level.color}]{state.level.display_name}[/]: top level reached")
        return

    capstone_task = CAPSTONE_TASK_ID if CAPSTONE_TASK_ID in {t.id for t in _load_catalog(settings).tasks} else None
    criteria = gate_criteria(state.level, capstone_task_id=capstone_task)
    _print_report(f"{state.level.display_name} → {upcoming.display_name}", report(state, criteria))


@app.command()
def feed(
    learner: LearnerOption = None,
    limit: Annotated[int | None, typer.Option("--limit", "-n", help="Maximum items")] = None,
    oldest_first: Annotated[bool, typer.Option("--oldest-first", help="Chronological order")] = False,
) -> None:
    """Show the notification feed."""
    settings = _settings()
    state = _load_state(settings, learner)

    view = synthesize(state.events, newest_first=not oldest_first, limit=limit or settings.feed_limit)
    shown = 0
    for item in view:
        console.print(f"{item.kind.icon} [bold]{item.title}[/] {item.message}")
        shown += 1
    if shown == 0:
        console.print("[dim]No notifications yet[/]")


@app.command()
def catalog() -> None:
    """List tasks, lessons and simulations."""
    content = _load_catalog(_settings())

    tasks = Table(title="Tasks")
    tasks.add_column("ID", style="cyan")
    tasks.add_column("Title")
    tasks.add_column("Difficulty")
    tasks.add_column("XP", justify="right")
    for task in content.tasks:
        tasks.add_row(task.id, task.title, task.difficulty.value, str(task.reward))
    console.print(tasks)

    lessons = Table(title="Micro-lessons")
    lessons.add_column("ID", style="cyan")
    lessons.add_column("Title")
    lessons.add_column("XP", justify="right")
    for lesson in content.lessons:
        lessons.add_row(lesson.id, lesson.title, str(lesson.reward))
    console.print(lessons)

    sims = Table(title="Simulations")
    sims.add_column("ID", style="cyan")
    sims.add_column("Title")
    sims.add_column("Steps", justify="right")
    sims.add_column("XP cap", justify="right")
    for sim in content.simulations:
        sims.add_row(sim.id, sim.title, str(sim.total_steps), str(sim.xp_cap))
    console.print(sims)

    summary = content.summary()
    console.print(f"Total available XP: [bold]{summary.total_xp}[/]")


# =============================================================================
# Entry Point
# =============================================================================


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Verbose output")
    ] = False,
) -> None:
    """
    🧭 Pusula - Gamified learning progression engine

    \b
    Quick Start:
      pusula init --name "Ayse"       # Create a learner
      pusula catalog                  # Browse content
      pusula submit-task t-dashboard  # Earn XP
      pusula status                   # Level and progress
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else _settings().log_level,
        format="<level>{message}</level>",
    )


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
