"""Coursekit CLI - analyze and play course documents from the terminal.

Usage:
    coursekit analyze ./course.yaml
    coursekit analyze ./course.json --json
    coursekit play ./course.yaml --event click:start --event submit:quiz1
    coursekit info ./course.yaml
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from coursekit_core.analyzer import DryRunSimulator
from coursekit_core.config import RuntimeConfig
from coursekit_core.document import Course
from coursekit_core.errors import CourseLoadError, CoursekitError
from coursekit_core.events import RuntimeEvent, UIAction
from coursekit_core.loader import load_course
from coursekit_core.utils.logging import configure_from_config
from coursekit_engine.runtime import CourseRuntime

app = typer.Typer(
    name="coursekit",
    help="Coursekit CLI - course runtime and dry-run analyzer",
    add_completion=False,
)

console = Console()


def _load_or_exit(path: Path) -> Course:
    try:
        return load_course(path)
    except CourseLoadError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def parse_event_spec(spec: str) -> RuntimeEvent:
    """Turn ``TYPE`` or ``TYPE:TARGET`` into a RuntimeEvent."""
    event_type, _, target = spec.partition(":")
    if not event_type:
        raise typer.BadParameter(f"Event must look like TYPE or TYPE:TARGET, got '{spec}'")
    return RuntimeEvent(type=event_type, target=target or None)


@app.command("analyze")
def analyze(
    course_path: Annotated[Path, typer.Argument(help="Course file (.json, .yaml, .yml)")],
    as_json: Annotated[bool, typer.Option("--json", help="Print the raw dry-run result as JSON")] = False,
    max_paths: Annotated[Optional[int], typer.Option("--max-paths", help="Cap on enumerated paths")] = None,
) -> None:
    """Statically explore every scene path of a course."""
    course = _load_or_exit(course_path)
    config = RuntimeConfig.from_env()
    simulator = DryRunSimulator(max_paths=max_paths or config.max_dry_run_paths)
    result = simulator.analyze(course)

    if as_json:
        typer.echo(result.to_json())
        return

    console.print(simulator.generate_report(result), markup=False, highlight=False)


@app.command("play")
def play(
    course_path: Annotated[Path, typer.Argument(help="Course file (.json, .yaml, .yml)")],
    events: Annotated[
        Optional[list[str]],
        typer.Option("--event", "-e", help="Event to emit, TYPE or TYPE:TARGET (repeatable)"),
    ] = None,
    scene: Annotated[Optional[str], typer.Option("--scene", "-s", help="Override the start scene")] = None,
    debug: Annotated[bool, typer.Option("--debug", help="Print the runtime log")] = False,
) -> None:
    """Run a course headlessly, feeding it the given events in order."""
    course = _load_or_exit(course_path)
    config = RuntimeConfig.from_env()
    if debug:
        config.debug = True

    parsed_events = [parse_event_spec(spec) for spec in events or []]

    def show_ui_action(action: UIAction) -> None:
        console.print(f"[magenta]{action.kind.value}:[/magenta] {action.text}")

    def show_scene(scene_id: str) -> None:
        console.print(f"[cyan]-> scene[/cyan] {scene_id}")

    runtime = CourseRuntime(config=config, on_scene_change=show_scene, on_ui_action=show_ui_action)
    runtime.load_course(course)

    try:
        runtime.start(start_scene_id=scene)
        for event in parsed_events:
            console.print(f"[dim]emit {event}[/dim]")
            runtime.emit(event)
    except CoursekitError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(Panel(
        f"[bold]Final Scene:[/bold] {runtime.get_current_scene_id()}\n"
        f"[bold]Events Emitted:[/bold] {len(parsed_events)}",
        title=f"{course.meta.id} v{course.meta.version}",
        border_style="green",
    ))
    console.print_json(json.dumps(runtime.get_state(), default=str))

    if debug:
        table = Table(title="Runtime Log")
        table.add_column("Level")
        table.add_column("Category")
        table.add_column("Message")
        for entry in runtime.get_logs():
            table.add_row(entry.level.value, entry.category.value, entry.message)
        console.print(table)


@app.command("info")
def info(
    course_path: Annotated[Path, typer.Argument(help="Course file (.json, .yaml, .yml)")],
) -> None:
    """Show the scenes, nodes and triggers of a course."""
    course = _load_or_exit(course_path)

    table = Table(title=f"{course.meta.id} v{course.meta.version} (start: {course.start_scene_id})")
    table.add_column("Scene", style="cyan")
    table.add_column("Nodes", justify="right")
    table.add_column("Triggers", justify="right")
    table.add_column("Vars")
    for scene in course.scenes:
        table.add_row(
            scene.id,
            str(len(scene.nodes)),
            str(len(scene.triggers)),
            ", ".join(scene.vars) or "-",
        )
    console.print(table)


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    config = RuntimeConfig.from_env()
    configure_from_config(config, verbose=verbose)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
