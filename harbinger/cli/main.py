"""harbinger CLI.

    harbinger think              # run one cycle now and show accepted thoughts
    harbinger think --remote     # ...against the coordinator API
    harbinger think --local      # ...against local profiles, whatever the mode
    harbinger run                # keep thinking until Ctrl-C
    harbinger agents             # list discovered agent profiles
    harbinger serve              # diagnostics API (+ engine if enabled)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import orjson
import typer
from rich.console import Console
from rich.table import Table

from harbinger import __version__
from harbinger.cli.context import HarbingerContext, run_async
from harbinger.engine.factory import create_engine, options_from_settings
from harbinger.engine.models import Candidate, EngineOptions
from harbinger.serve import build_registry

console = Console()

app = typer.Typer(
    name="harbinger",
    help="harbinger -- autonomous thinking engine for your agents.",
    no_args_is_help=True,
)


def _mode(remote: bool | None) -> str | None:
    """Explicit --remote/--local wins; otherwise settings.engine_mode applies."""
    if remote is None:
        return None
    return "remote" if remote else "local"


def _render_thoughts(candidates: list[Candidate], title: str) -> None:
    if not candidates:
        console.print("[dim]No thoughts cleared the cost-benefit threshold.[/dim]")
        return

    table = Table(title=title)
    table.add_column("P", style="bold", justify="right")
    table.add_column("Kind", style="cyan", max_width=12)
    table.add_column("Category", style="magenta", max_width=14)
    table.add_column("Title", style="white")
    table.add_column("C/B", justify="right", style="green")
    table.add_column("Automation", style="blue")

    for c in candidates:
        eff = c.efficiency
        table.add_row(
            str(c.priority),
            c.kind.value,
            c.category.value,
            c.title,
            f"{eff.cost_benefit:.2f}" if eff else "-",
            eff.automation_type.value if eff else "-",
        )
    console.print(table)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    ctx = HarbingerContext.get()
    level = "DEBUG" if verbose else ctx.settings.log_level.upper()
    logging.basicConfig(level=level)


@app.command("think")
def think(
    remote: Optional[bool] = typer.Option(
        None,
        "--remote/--local",
        help="Coordinator API or local profiles (default: HARBINGER_ENGINE_MODE)",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print thoughts as JSON"),
):
    """Run a single think cycle now."""
    ctx = HarbingerContext.get()
    engine = create_engine(
        options_from_settings(ctx.settings),
        mode=_mode(remote),
        settings=ctx.settings,
        event_bus=ctx.event_bus,
    )
    accepted = run_async(engine.run_cycle())

    if as_json:
        payload = [c.model_dump(mode="json") for c in accepted]
        typer.echo(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode())
        return

    snapshot = engine.get_last_context()
    if snapshot is not None:
        console.print(
            f"[dim]{snapshot.origin.value} context: {snapshot.agent_count} agents, "
            f"{snapshot.thought_count} thoughts[/dim]"
        )
    _render_thoughts(accepted, f"{ctx.settings.agent_name} - cycle 1")


@app.command("run")
def run(
    remote: Optional[bool] = typer.Option(
        None,
        "--remote/--local",
        help="Coordinator API or local profiles (default: HARBINGER_ENGINE_MODE)",
    ),
    interval: int = typer.Option(
        0, "--interval", "-i", help="Milliseconds between cycles (default from settings)"
    ),
):
    """Start the engine and keep thinking until interrupted."""
    ctx = HarbingerContext.get()
    options = options_from_settings(ctx.settings)
    if interval:
        options = EngineOptions.model_validate(
            {**options.model_dump(), "interval_ms": interval}
        )

    async def _accepted(event) -> None:
        console.print(
            f"[green]thought[/green] {event.data.get('title')} "
            f"[dim](c/b {event.data.get('cost_benefit')})[/dim]"
        )

    ctx.event_bus.subscribe("engine.thought_accepted", _accepted)

    registry = build_registry(ctx.settings, ctx.event_bus, mode=_mode(remote))

    async def _run() -> None:
        await registry.start_engine(options)
        try:
            while True:
                await asyncio.sleep(3600)
        finally:
            await registry.stop_engine()

    console.print(
        f"[bold]{options.agent_name}[/bold] thinking every {options.interval_ms / 1000:g}s "
        "[dim](Ctrl-C to stop)[/dim]"
    )
    try:
        run_async(_run())
    except KeyboardInterrupt:
        console.print("[dim]stopped[/dim]")


@app.command("agents")
def agents():
    """List agent profiles found in the agents directory."""
    from harbinger.agents.profiles import discover_agents

    ctx = HarbingerContext.get()
    profiles = discover_agents(ctx.settings.agents_dir)
    if not profiles:
        console.print(f"[dim]No agent profiles in {ctx.settings.agents_dir}.[/dim]")
        return

    table = Table(title=f"Agents in {ctx.settings.agents_dir}")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Role", style="white")
    table.add_column("Specialization", style="blue")
    for p in profiles:
        table.add_row(p.id, p.display_name, p.role, p.specialization)
    console.print(table)


@app.command("serve")
def serve():
    """Launch the diagnostics API (starts the engine if enabled)."""
    from harbinger.serve import main as serve_main

    ctx = HarbingerContext.get()
    console.print(
        f"[bold]harbinger[/bold] diagnostics at "
        f"http://{ctx.settings.dashboard_host}:{ctx.settings.dashboard_port}"
    )
    run_async(serve_main(ctx.settings))


@app.command("version")
def version():
    """Show version."""
    console.print(f"harbinger {__version__}")
