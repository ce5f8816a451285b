"""Typer CLI for FatiGat: track projects and review productivity scores."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from pathlib import Path
from typing import Annotated, Any

import typer
from result import Err

from fatigat.config import Config
from fatigat.data.seed import PROJECT_TAGS, seed_sample_users
from fatigat.models.projects import Project
from fatigat.services.container import ServiceContainer
from fatigat.services.evaluator import filter_by_tags, format_duration, score, summarize
from fatigat.services.ticker import run_ticks
from fatigat.services.timer import system_clock

app = typer.Typer(
    name="fatigat",
    help="FatiGat: project time tracking with break-aware productivity scores.",
    no_args_is_help=True,
)

TagOption = Annotated[
    list[str] | None,
    typer.Option("--tag", "-t", help="Project tag (repeatable)"),
]


@app.callback()
def main(
    ctx: typer.Context,
    data_dir: Annotated[
        Path | None,
        typer.Option("--data-dir", help="Directory holding the FatiGat database"),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    """Configure logging and storage for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = Config(data_dir=data_dir) if data_dir is not None else Config()


def _run(coro: Coroutine[Any, Any, int]) -> None:
    code = asyncio.run(coro)
    if code:
        raise typer.Exit(code)


def _fail(message: object) -> int:
    typer.echo(f"Error: {message}", err=True)
    return 1


def _describe(project: Project) -> None:
    result = score(project)
    tags = f" [{', '.join(project.tags)}]" if project.tags else ""
    typer.echo(f"#{project.id} {project.name}{tags}")
    typer.echo(
        f"  time {format_duration(project.time_spent)} · breaks {project.breaks}"
        f" · sessions {len(project.session_lengths)} · score {result.score}"
    )
    for suggestion in result.suggestions:
        typer.echo(f"  - {suggestion}")


@app.command()
def seed(ctx: typer.Context) -> None:
    """Store the built-in sample users."""
    _run(_do_seed(ctx.obj))


async def _do_seed(config: Config) -> int:
    container = await ServiceContainer.create(config)
    try:
        names = await seed_sample_users(container.store, system_clock())
    finally:
        await container.close()
    typer.echo(f"Seeded {len(names)} users: {', '.join(names)}")
    return 0


@app.command()
def users(ctx: typer.Context) -> None:
    """List stored users."""
    _run(_do_users(ctx.obj))


async def _do_users(config: Config) -> int:
    container = await ServiceContainer.create(config)
    try:
        result = await container.user_service.list_users()
    finally:
        await container.close()
    if isinstance(result, Err):
        return _fail(result.err_value)
    if not result.ok_value:
        typer.echo("No users stored. Run 'fatigat seed' or 'fatigat new'.")
    for summary in result.ok_value:
        demo = " (demo)" if summary.is_demo else ""
        typer.echo(f"{summary.username}{demo}: {summary.project_count} projects")
    return 0


@app.command()
def show(
    ctx: typer.Context,
    username: Annotated[str, typer.Argument(help="User whose projects to show")],
    tag: TagOption = None,
) -> None:
    """Show a user's projects with scores and suggestions."""
    _run(_do_show(ctx.obj, username, tag or []))


async def _do_show(config: Config, username: str, tags: list[str]) -> int:
    container = await ServiceContainer.create(config)
    try:
        result = await container.user_service.get_user_data(username)
    finally:
        await container.close()
    if isinstance(result, Err):
        return _fail(result.err_value)
    projects = filter_by_tags(result.ok_value.projects, tags)
    if not projects:
        typer.echo("No projects match your filters.")
        return 0
    for project in projects:
        _describe(project)
    stats = summarize(projects)
    typer.echo(
        f"Total: {stats.project_count} projects, {format_duration(stats.total_time_spent)},"
        f" {stats.total_breaks} breaks, average score {stats.average_score:.1f}"
    )
    return 0


@app.command()
def new(
    ctx: typer.Context,
    username: Annotated[str, typer.Argument(help="Owner of the project")],
    name: Annotated[str, typer.Argument(help="Project name")],
    tag: TagOption = None,
) -> None:
    """Create a project."""
    _run(_do_new(ctx.obj, username, name, tag or []))


async def _do_new(config: Config, username: str, name: str, tags: list[str]) -> int:
    container = await ServiceContainer.create(config)
    try:
        async with container.workspace.open(username) as timer:
            result = timer.create_project(name, tags)
    finally:
        await container.close()
    if isinstance(result, Err):
        return _fail(result.err_value)
    typer.echo(f"Created project #{result.ok_value.id} {result.ok_value.name}")
    return 0


@app.command()
def tags() -> None:
    """List the suggested project tags."""
    for value in PROJECT_TAGS:
        typer.echo(value)


@app.command()
def track(
    ctx: typer.Context,
    username: Annotated[str, typer.Argument(help="Owner of the project")],
    project_id: Annotated[int, typer.Argument(help="Project to track")],
    seconds: Annotated[
        int | None,
        typer.Option("--seconds", "-s", help="Stop after this many seconds (default: Ctrl-C)"),
    ] = None,
) -> None:
    """Track time on a project until Ctrl-C or --seconds elapse."""
    try:
        _run(_do_track(ctx.obj, username, project_id, seconds))
    except KeyboardInterrupt:
        typer.echo("Stopped.")


async def _do_track(config: Config, username: str, project_id: int, seconds: int | None) -> int:
    def notify(project: Project) -> None:
        typer.echo(f"Break due on {project.name}: you have worked 45 minutes, take five.")

    container = await ServiceContainer.create(config, on_break_due=notify)
    try:
        async with container.workspace.open(username) as timer:
            started = timer.start(project_id)
            if isinstance(started, Err):
                return _fail(started.err_value)
            session = started.ok_value
            typer.echo(f"Tracking #{project_id}. Press Ctrl-C to stop.")
            try:
                await run_ticks(
                    timer, session.token, interval=config.tick_interval, max_ticks=seconds
                )
            finally:
                stopped = timer.stop(session.token)
                if not isinstance(stopped, Err):
                    typer.echo(f"Session length: {format_duration(stopped.ok_value)}")
    finally:
        await container.close()
    return 0


@app.command("take-break")
def take_break(
    ctx: typer.Context,
    username: Annotated[str, typer.Argument(help="Owner of the project")],
    project_id: Annotated[int, typer.Argument(help="Project taking the break")],
) -> None:
    """Record a five-minute break on a project."""
    _run(_do_take_break(ctx.obj, username, project_id))


async def _do_take_break(config: Config, username: str, project_id: int) -> int:
    container = await ServiceContainer.create(config)
    try:
        async with container.workspace.open(username) as timer:
            result = timer.take_break(project_id)
            if isinstance(result, Err):
                return _fail(result.err_value)
            project = timer.get(project_id)
            if project is not None:
                typer.echo(f"Break recorded for {project.name} ({project.breaks} total)")
    finally:
        await container.close()
    return 0


@app.command()
def demo(
    ctx: typer.Context,
    username: Annotated[str, typer.Argument(help="Name to generate demo data for")],
    save: Annotated[bool, typer.Option("--save", help="Store the demo projects")] = False,
) -> None:
    """Print deterministic demo projects for a username."""
    _run(_do_demo(ctx.obj, username, save))


async def _do_demo(config: Config, username: str, save: bool) -> int:
    container = await ServiceContainer.create(config)
    try:
        result = container.user_service.demo_user_data(username)
        if isinstance(result, Err):
            return _fail(result.err_value)
        data = result.ok_value
        if save:
            await container.workspace.replace(data.username, data.projects, is_demo=True)
    finally:
        await container.close()
    for project in data.projects:
        _describe(project)
    if save:
        typer.echo(f"Saved {len(data.projects)} demo projects for {data.username}")
    return 0


@app.command()
def health(ctx: typer.Context) -> None:
    """Report store health."""
    _run(_do_health(ctx.obj))


async def _do_health(config: Config) -> int:
    container = await ServiceContainer.create(config)
    try:
        status = await container.user_service.health()
    finally:
        await container.close()
    typer.echo(f"{status.status}: {status.active_users} users")
    return 0
