"""
Tests for the --check diagnostics.
"""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from zenlaunch.cli.doctor import CheckStatus, DiagnosticResult, collect_checks, render_checks
from zenlaunch.core.config.models import LauncherConfig, WorkspaceConfig
from zenlaunch.core.launch import ExecutionMode
from zenlaunch.core.services.launch import LaunchService


@pytest.fixture(autouse=True)
def no_parent_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("GEMINI_API_KEY", "OPENAI_API_KEY", "OPENROUTER_API_KEY"):
        monkeypatch.delenv(key, raising=False)


def _service(config, mode, prober, running: bool = True) -> LaunchService:
    engine = MagicMock()
    engine.binary = "docker"
    engine.is_running.return_value = running
    engine.get_version.return_value = "24.0.7"
    return LaunchService.from_config(config, mode, prober=prober, engine=engine)


def _by_name(results: list[DiagnosticResult]) -> dict[str, DiagnosticResult]:
    return {r.name: r for r in results}


class TestCollectChecksContainerized:
    def test_all_ok(self, configured_workspace: Path, config, make_prober) -> None:
        prober = make_prober(git="git version 2.43.0", docker="Docker version 24.0.7")
        results = _by_name(collect_checks(_service(config, ExecutionMode.CONTAINERIZED, prober)))

        assert set(results) == {
            "Git",
            "Docker client",
            "Docker engine",
            "Workspace",
            "Config file",
            "API keys",
        }
        assert all(r.status == CheckStatus.OK for r in results.values())
        assert "24.0.7" in results["Docker engine"].message

    def test_engine_down_is_warning(self, configured_workspace: Path, config, make_prober) -> None:
        prober = make_prober(git="git version 2.43.0", docker="Docker version 24.0.7")
        service = _service(config, ExecutionMode.CONTAINERIZED, prober, running=False)
        results = _by_name(collect_checks(service))
        assert results["Docker engine"].status == CheckStatus.WARN
        assert not any(r.failed for r in results.values())

    def test_docker_missing_fails(self, configured_workspace: Path, config, make_prober) -> None:
        service = _service(
            config, ExecutionMode.CONTAINERIZED, make_prober(git="git version 2.43.0")
        )
        results = _by_name(collect_checks(service))
        assert results["Docker client"].failed
        assert results["Docker client"].fix
        assert "Docker engine" not in results
        service.engine.is_running.assert_not_called()


class TestCollectChecksNative:
    def test_old_python_and_no_venv(self, configured_workspace: Path, config, make_prober) -> None:
        prober = make_prober(git="git version 2.43.0", python3="Python 3.9.6")
        results = _by_name(collect_checks(_service(config, ExecutionMode.NATIVE, prober)))

        assert results["Python"].status == CheckStatus.WARN
        assert "3.11" in results["Python"].message
        assert results["Virtual environment"].status == CheckStatus.WARN
        assert "Docker client" not in results

    def test_no_python_fails(self, configured_workspace: Path, config, make_prober) -> None:
        prober = make_prober(git="git version 2.43.0")
        results = _by_name(collect_checks(_service(config, ExecutionMode.NATIVE, prober)))
        assert results["Python"].failed

    def test_existing_venv(self, configured_workspace: Path, config, make_prober) -> None:
        (configured_workspace / "venv" / "bin").mkdir(parents=True)
        (configured_workspace / "venv" / "bin" / "python").touch()
        prober = make_prober(git="git version 2.43.0", python3="Python 3.12.1")
        results = _by_name(collect_checks(_service(config, ExecutionMode.NATIVE, prober)))
        assert results["Virtual environment"].status == CheckStatus.OK


class TestCollectChecksWorkspace:
    """Missing artifacts are reported, never created."""

    def test_missing_workspace(self, tmp_path: Path, make_prober) -> None:
        config = LauncherConfig(workspace=WorkspaceConfig(local_dir=str(tmp_path / "none")))
        prober = make_prober(git="git version 2.43.0", python3="Python 3.12.1")
        service = LaunchService.from_config(
            config, ExecutionMode.NATIVE, prober=prober, home=tmp_path / "home"
        )

        results = _by_name(collect_checks(service))

        assert results["Workspace"].status == CheckStatus.WARN
        assert "Config file" not in results
        assert not (tmp_path / "home" / ".zen-mcp-server").exists()

    def test_missing_config_file(self, workspace: Path, config, make_prober) -> None:
        prober = make_prober(git="git version 2.43.0", python3="Python 3.12.1")
        results = _by_name(collect_checks(_service(config, ExecutionMode.NATIVE, prober)))
        assert results["Config file"].status == CheckStatus.WARN
        assert not (workspace / ".env").exists()

    def test_missing_credentials(self, workspace: Path, config, make_prober) -> None:
        (workspace / ".env").write_text("GEMINI_API_KEY=\n")
        prober = make_prober(git="git version 2.43.0", python3="Python 3.12.1")
        results = _by_name(collect_checks(_service(config, ExecutionMode.NATIVE, prober)))
        assert results["API keys"].status == CheckStatus.WARN
        assert "GEMINI_API_KEY" in results["API keys"].fix


class TestRenderChecks:
    def test_summary_lines(self, capsys: pytest.CaptureFixture[str]) -> None:
        render_checks(
            [
                DiagnosticResult(name="Git", status=CheckStatus.OK, message="git version 2.43"),
                DiagnosticResult(name="Python", status=CheckStatus.FAIL, message="not found"),
            ],
            title="Zen MCP Server (Python mode)",
        )
        err = capsys.readouterr().err
        assert "Git" in err
        assert "1 check(s) failed" in err
