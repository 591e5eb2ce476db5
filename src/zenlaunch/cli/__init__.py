"""
Zen MCP Server launcher - main CLI entry point.

A single command: provision whatever is missing, then run the server with
this process's stdio attached. Arguments after the launcher's own options
(or after ``--``) are passed through to the server.
"""

import logging
import sys

import typer

from zenlaunch import __version__
from zenlaunch.cli.doctor import collect_checks, render_checks
from zenlaunch.cli.errors import ExitCode, console, print_launcher_error, print_warning
from zenlaunch.core.config.loader import load_config
from zenlaunch.core.errors import LauncherError
from zenlaunch.core.launch.models import ExecutionMode
from zenlaunch.core.launch.selector import select_mode
from zenlaunch.core.launch.signals import SignalChannel
from zenlaunch.core.services.launch import LaunchService

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="zen-launch",
    help="Set up and run the Zen MCP Server (Docker by default, or --native)",
    add_completion=False,
    context_settings={
        "help_option_names": ["--help", "-h"],
        "allow_extra_args": True,
        "ignore_unknown_options": True,
    },
)


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"zen-launch {__version__}")
        raise typer.Exit()


def _report_attempt(attempt: int, max_attempts: int) -> None:
    if attempt == 1:
        console.print("[yellow]Docker is not running. Starting Docker...[/yellow]")
    console.print(f"[dim]Waiting for Docker to start... ({attempt}/{max_attempts})[/dim]")


def run_launch(service: LaunchService, channel: SignalChannel) -> int:
    """
    Drive the launch stages in order and supervise the server.

    Returns:
        Exit code for the launcher

    Raises:
        LauncherError: If any fatal stage fails
    """
    ctx = service.context
    console.print(f"[bold]Starting Zen MCP Server ({ctx.mode.label} mode)[/bold]")

    service.check_prerequisites()
    probe = service.python_probe
    if probe is not None and probe.satisfies_minimum is False:
        print_warning(
            f"Python {ctx.config.native.min_python} or higher is recommended "
            f"(found {probe.version_string})"
        )

    if service.needs_clone():
        console.print(f"Zen MCP Server not found. Installing to {service.workspace}...")
        service.provision_workspace()
        console.print("[green]✓[/green] Zen MCP Server downloaded")

    env_file = service.ensure_config()
    missing = service.missing_credentials(service.child_env(env_file))
    if missing:
        print_warning(
            f"No API keys found in {env_file}",
            reason="The server needs at least one of: " + ", ".join(missing),
        )

    if ctx.mode is ExecutionMode.NATIVE:
        outcome = service.resolve_dependencies()
        if outcome.failed:
            print_warning(
                "Failed to install dependencies. Please install manually:",
                solution=outcome.instructions,
            )
        elif outcome.attempted:
            console.print("[green]✓[/green] Dependencies installed")
    else:
        service.prepare_engine(on_attempt=_report_attempt)
        if service.prepare_image():
            console.print("[green]✓[/green] Docker image built")
        if service.prepare_container():
            console.print("[green]✓[/green] Container started")

    spec = service.build_process_spec(env_file)
    console.rule(style="dim")
    logger.debug("Running %s", spec.display)
    return service.supervise(spec, channel)


@app.command()
def main(
    ctx: typer.Context,
    native: bool = typer.Option(
        False,
        "--native",
        "--python",
        help="Run with the local Python interpreter instead of Docker",
    ),
    check: bool = typer.Option(
        False,
        "--check",
        help="Diagnose the environment without provisioning or launching",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging on stderr",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """
    Launch the Zen MCP Server.

    Extra arguments are passed through to the server:

        zen-launch --native -- --help
    """
    _configure_logging(debug)
    mode = select_mode(native)

    try:
        config = load_config()
    except LauncherError as e:
        print_launcher_error(e)
        raise typer.Exit(ExitCode.FAILURE) from e

    service = LaunchService.from_config(config, mode, extra_args=ctx.args)

    if check:
        results = collect_checks(service)
        render_checks(results, title=f"Zen MCP Server ({mode.label} mode)")
        failed = any(r.failed for r in results)
        raise typer.Exit(ExitCode.FAILURE if failed else ExitCode.SUCCESS)

    channel = SignalChannel()
    channel.register()
    try:
        exit_code = run_launch(service, channel)
    except LauncherError as e:
        print_launcher_error(e)
        raise typer.Exit(ExitCode.FAILURE) from e
    finally:
        channel.unregister()

    raise typer.Exit(exit_code)


def cli_main() -> None:
    """Console script entry point."""
    app()


__all__ = ["app", "cli_main", "run_launch"]
