"""
Launcher diagnostics.

Backs ``zen-launch --check``: inspects the environment the way a launch
would, without cloning, installing, starting or spawning anything.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field
from rich.table import Table

from zenlaunch.cli.errors import console
from zenlaunch.core.deps.resolver import venv_bin
from zenlaunch.core.launch.models import ExecutionMode
from zenlaunch.core.prereq.prober import find_python
from zenlaunch.core.services.launch import LaunchService


class CheckStatus(str, Enum):
    OK = "ok"
    WARN = "warn"
    FAIL = "fail"


class DiagnosticResult(BaseModel):
    """
    Outcome of one environment check.

    Attributes:
        name: Short check name shown in the table
        status: ok, warn or fail
        message: One-line finding
        fix: Optional command or action that resolves a failure
    """

    name: str
    status: CheckStatus
    message: str
    fix: str | None = Field(default=None, description="Suggested remediation")

    @property
    def failed(self) -> bool:
        return self.status == CheckStatus.FAIL


def _tool_check(service: LaunchService, name: str, label: str, fix: str) -> DiagnosticResult:
    probe = service.context.prober.probe(name)
    if not probe.present:
        return DiagnosticResult(name=label, status=CheckStatus.FAIL, message="not found", fix=fix)
    return DiagnosticResult(name=label, status=CheckStatus.OK, message=probe.raw_version or "found")


def collect_checks(service: LaunchService) -> list[DiagnosticResult]:
    """
    Run every check relevant to the service's execution mode.

    Missing workspace or config file is reported as a warning: a real launch
    would provision them.
    """
    ctx = service.context
    results = [_tool_check(service, "git", "Git", "https://git-scm.com/downloads")]

    if ctx.mode is ExecutionMode.CONTAINERIZED:
        docker = _tool_check(
            service, service.engine.binary, "Docker client", "https://docs.docker.com/get-docker/"
        )
        results.append(docker)
        if not docker.failed:
            if service.engine.is_running():
                results.append(
                    DiagnosticResult(
                        name="Docker engine",
                        status=CheckStatus.OK,
                        message=f"running (server {service.engine.get_version()})",
                    )
                )
            else:
                results.append(
                    DiagnosticResult(
                        name="Docker engine",
                        status=CheckStatus.WARN,
                        message="not running (the launcher will try to start it)",
                    )
                )
    else:
        native = ctx.config.native
        python = find_python(ctx.prober, native.python_candidates, native.min_python_tuple)
        if python is None:
            results.append(
                DiagnosticResult(
                    name="Python",
                    status=CheckStatus.FAIL,
                    message="no Python 3 interpreter found",
                    fix="https://www.python.org/downloads/",
                )
            )
        else:
            status = CheckStatus.WARN if python.satisfies_minimum is False else CheckStatus.OK
            message = f"{python.name} {python.version_string}"
            if python.satisfies_minimum is False:
                message += f" (recommended: {native.min_python}+)"
            results.append(DiagnosticResult(name="Python", status=status, message=message))

        venv_python = venv_bin(ctx.workspace / native.venv_dir, "python")
        results.append(
            DiagnosticResult(
                name="Virtual environment",
                status=CheckStatus.OK if venv_python.exists() else CheckStatus.WARN,
                message=str(ctx.workspace / native.venv_dir)
                if venv_python.exists()
                else "not created yet",
            )
        )

    if service.needs_clone():
        results.append(
            DiagnosticResult(
                name="Workspace",
                status=CheckStatus.WARN,
                message=f"{ctx.workspace} (will be cloned)",
            )
        )
        return results

    results.append(
        DiagnosticResult(name="Workspace", status=CheckStatus.OK, message=str(ctx.workspace))
    )

    env_file = service.env_file
    if not env_file.exists():
        results.append(
            DiagnosticResult(
                name="Config file",
                status=CheckStatus.WARN,
                message=f"{env_file.name} missing (will be created from template)",
            )
        )
        return results

    results.append(
        DiagnosticResult(name="Config file", status=CheckStatus.OK, message=str(env_file))
    )
    missing = service.missing_credentials(service.child_env(env_file))
    if missing:
        results.append(
            DiagnosticResult(
                name="API keys",
                status=CheckStatus.WARN,
                message="none configured",
                fix=f"Set one of {', '.join(missing)} in {env_file}",
            )
        )
    else:
        results.append(
            DiagnosticResult(name="API keys", status=CheckStatus.OK, message="configured")
        )
    return results


def render_checks(results: list[DiagnosticResult], title: str) -> None:
    """Print the results as a rich table on stderr."""
    symbols = {
        CheckStatus.OK: "[green]✓[/green]",
        CheckStatus.WARN: "[yellow]![/yellow]",
        CheckStatus.FAIL: "[red]✗[/red]",
    }
    table = Table(title=title)
    table.add_column("", width=1)
    table.add_column("Check", style="cyan")
    table.add_column("Result")
    table.add_column("Fix", style="dim")
    for result in results:
        table.add_row(symbols[result.status], result.name, result.message, result.fix or "")
    console.print(table)

    failures = sum(1 for r in results if r.failed)
    if failures:
        console.print(f"[red]{failures} check(s) failed[/red]")
    else:
        console.print("[green]Ready to launch[/green]")


__all__ = ["CheckStatus", "DiagnosticResult", "collect_checks", "render_checks"]
