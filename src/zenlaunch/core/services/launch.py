"""
Launch service: stage-by-stage API for provisioning and supervision.

Wraps the prober, workspace provisioner, dependency resolver, engine
readiness controller and process supervisor behind one object bound to a
single immutable LaunchContext. The CLI calls the stages in order and
renders progress between them; every fatal stage raises a LauncherError.

Usage:
    >>> from zenlaunch.core.services.launch import LaunchService
    >>> service = LaunchService.from_config(config, ExecutionMode.NATIVE)
    >>> service.check_prerequisites()
    >>> service.provision_workspace()
    >>> env_file = service.ensure_config()
    >>> service.resolve_dependencies()
    >>> exit_code = service.supervise(service.build_process_spec(env_file), channel)
"""

from __future__ import annotations

import dataclasses
import logging
import time
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

from zenlaunch.core.config.env import build_child_env, has_any_key
from zenlaunch.core.config.models import LauncherConfig
from zenlaunch.core.deps.models import DependencyStatus
from zenlaunch.core.deps.resolver import DependencyResolver
from zenlaunch.core.engine.container import ensure_container, ensure_image
from zenlaunch.core.engine.docker import DockerEngine
from zenlaunch.core.engine.models import EngineState
from zenlaunch.core.engine.readiness import EngineReadinessController
from zenlaunch.core.errors import LauncherError, MissingPrerequisiteError
from zenlaunch.core.launch.models import ExecutionMode, LaunchContext, ProcessSpec
from zenlaunch.core.launch.signals import SignalChannel
from zenlaunch.core.launch.supervisor import ProcessSupervisor
from zenlaunch.core.prereq.models import ToolProbe
from zenlaunch.core.prereq.prober import ToolProber, find_python
from zenlaunch.core.workspace.provisioner import WorkspaceProvisioner, resolve_workspace

logger = logging.getLogger(__name__)

GIT_INSTALL = [
    "macOS: brew install git",
    "Linux: sudo apt install git",
    "Windows: https://git-scm.com/download/win",
]

PYTHON_INSTALL = [
    "macOS: brew install python@3.11",
    "Windows: https://www.python.org/downloads/",
    "Linux: sudo apt install python3.11",
]


@dataclasses.dataclass(frozen=True)
class DependencyOutcome:
    """
    Result of the native-mode dependency stage.

    Attributes:
        status: Status before any installation
        attempted: Whether an install was attempted
        installed: Whether that install succeeded
        instructions: Manual remediation when the install failed
    """

    status: DependencyStatus
    attempted: bool = False
    installed: bool = False
    instructions: list[str] = dataclasses.field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.attempted and not self.installed


class LaunchService:
    """
    Orchestrates one launcher invocation.

    Example:
        >>> service = LaunchService.from_config(load_config(), ExecutionMode.CONTAINERIZED)
        >>> service.check_prerequisites()
        >>> service.provision_workspace()
    """

    def __init__(
        self,
        context: LaunchContext,
        *,
        engine: DockerEngine | None = None,
        sleep: Callable[[float], None] = time.sleep,
        system: str | None = None,
    ) -> None:
        """
        Initialize service with dependencies.

        Args:
            context: Resolved invocation context
            engine: Docker client (containerized mode)
            sleep: Blocking sleep used by polling and settle delays
            system: platform.system() override for engine auto-start
        """
        self._context = context
        self._engine = engine or DockerEngine(probe_timeout=context.config.engine.probe_timeout)
        self._sleep = sleep
        self._system = system
        self._provisioner = WorkspaceProvisioner(context.workspace, context.config.workspace)
        self._python_probe: ToolProbe | None = None

    @classmethod
    def from_config(
        cls,
        config: LauncherConfig,
        mode: ExecutionMode,
        *,
        extra_args: Sequence[str] = (),
        prober: ToolProber | None = None,
        home: Path | None = None,
        engine: DockerEngine | None = None,
        sleep: Callable[[float], None] = time.sleep,
        system: str | None = None,
    ) -> LaunchService:
        """
        Create a service, resolving the workspace location once.

        Args:
            config: Launcher configuration
            mode: Selected execution mode
            extra_args: Arguments passed through to the server
            prober: Tool prober (a fresh one if None)
            home: Home directory for workspace resolution
            engine: Docker client override
            sleep: Sleep override for polling
            system: platform.system() override

        Returns:
            Configured LaunchService instance
        """
        context = LaunchContext(
            config=config,
            mode=mode,
            workspace=resolve_workspace(config.workspace, home=home),
            prober=prober or ToolProber(),
            extra_args=tuple(extra_args),
        )
        return cls(context, engine=engine, sleep=sleep, system=system)

    @property
    def context(self) -> LaunchContext:
        return self._context

    @property
    def workspace(self) -> Path:
        return self._context.workspace

    @property
    def engine(self) -> DockerEngine:
        return self._engine

    @property
    def env_file(self) -> Path:
        return self._provisioner.env_file

    @property
    def python_probe(self) -> ToolProbe | None:
        """Probe of the host interpreter (native mode, after prerequisites)."""
        return self._python_probe

    # ============================================================================
    # Prerequisites
    # ============================================================================

    def check_prerequisites(self) -> LaunchContext:
        """
        Verify mandatory tools before any provisioning.

        git is always required; docker in containerized mode; a Python 3
        interpreter in native mode.

        Returns:
            The updated context (python_cmd set in native mode)

        Raises:
            MissingPrerequisiteError: If a mandatory tool is absent
        """
        prober = self._context.prober

        if not prober.probe("git").present:
            raise MissingPrerequisiteError(
                "Git",
                reason="Git is needed to download the Zen MCP Server. Please install Git first.",
                solution=GIT_INSTALL,
            )

        if self._context.mode is ExecutionMode.CONTAINERIZED:
            if not prober.probe(self._engine.binary).present:
                raise MissingPrerequisiteError(
                    "Docker",
                    reason="Docker mode needs the docker command line client.",
                    solution=[
                        "Install Docker Desktop: https://docs.docker.com/get-docker/",
                        "Or run without Docker: zen-launch --native",
                    ],
                )
            return self._context

        native = self._context.config.native
        python = find_python(prober, native.python_candidates, native.min_python_tuple)
        if python is None:
            raise MissingPrerequisiteError(
                "Python 3",
                reason=f"Please install Python {native.min_python} or higher:",
                solution=PYTHON_INSTALL,
            )
        self._python_probe = python
        self._context = dataclasses.replace(self._context, python_cmd=python.name)
        return self._context

    # ============================================================================
    # Workspace
    # ============================================================================

    def needs_clone(self) -> bool:
        return self._provisioner.needs_clone()

    def provision_workspace(self) -> bool:
        """Clone the workspace if absent. Returns True if cloned."""
        return self._provisioner.ensure_workspace()

    def ensure_config(self) -> Path:
        """Ensure the config file exists. Returns its path."""
        return self._provisioner.ensure_config()

    def child_env(
        self,
        env_file: Path | None,
        base: Mapping[str, str] | None = None,
    ) -> dict[str, str]:
        """Parent environment plus config-file keys the parent lacks."""
        return build_child_env(env_file, base)

    def missing_credentials(self, env: Mapping[str, str]) -> list[str]:
        """
        Required keys to suggest when none of them is configured.

        Returns:
            Empty list if at least one required key is set
        """
        keys = self._context.config.workspace.required_keys
        if not keys or has_any_key(env, keys):
            return []
        return list(keys)

    # ============================================================================
    # Native mode
    # ============================================================================

    def _resolver(self) -> DependencyResolver:
        if self._context.python_cmd is None:
            raise LauncherError("check_prerequisites() must run before dependency resolution")
        return DependencyResolver(
            self._context.workspace,
            self._context.python_cmd,
            self._context.config.native,
        )

    def resolve_dependencies(self) -> DependencyOutcome:
        """
        Check the required modules and install them when missing.

        Never raises for install failures: the outcome carries manual
        instructions and the launch continues.
        """
        resolver = self._resolver()
        status = resolver.check_dependencies()
        if status is DependencyStatus.SATISFIED:
            return DependencyOutcome(status=status)

        installed = resolver.install_dependencies()
        return DependencyOutcome(
            status=status,
            attempted=True,
            installed=installed,
            instructions=[] if installed else resolver.manual_instructions(),
        )

    # ============================================================================
    # Containerized mode
    # ============================================================================

    def prepare_engine(
        self,
        on_attempt: Callable[[int, int], None] | None = None,
    ) -> EngineState:
        """
        Make sure the Docker daemon is ready, starting it if needed.

        Raises:
            ProvisioningError: Engine cannot be started on this platform
            ReadinessTimeoutError: Engine never became ready
        """
        engine_config = self._context.config.engine
        controller = EngineReadinessController(
            self._engine,
            max_attempts=engine_config.max_attempts,
            poll_interval=engine_config.poll_interval,
            sleep=self._sleep,
            system=self._system,
            on_attempt=on_attempt,
        )
        return controller.ensure_ready()

    def prepare_image(self) -> bool:
        """Build the server image unless it exists. Returns True if built."""
        return ensure_image(
            self._engine, self._context.workspace, self._context.config.container.image
        )

    def prepare_container(self) -> bool:
        """Start the server container unless running. Returns True if started."""
        container = self._context.config.container
        return ensure_container(
            self._engine, self._context.workspace, container, sleep=self._sleep
        )

    # ============================================================================
    # Supervision
    # ============================================================================

    def build_process_spec(
        self,
        env_file: Path | None,
        base_env: Mapping[str, str] | None = None,
    ) -> ProcessSpec:
        """
        Build the command that runs the server in the selected mode.

        Args:
            env_file: Workspace config file merged into the environment
            base_env: Parent environment (defaults to os.environ)
        """
        ctx = self._context
        env = self.child_env(env_file, base_env)

        if ctx.mode is ExecutionMode.CONTAINERIZED:
            container = ctx.config.container
            argv = self._engine.exec_argv(
                container.container_name,
                [*container.exec_command, *ctx.extra_args],
            )
        else:
            argv = [self._resolver().interpreter(), ctx.config.native.entrypoint, *ctx.extra_args]

        return ProcessSpec(argv=argv, cwd=ctx.workspace, env=env)

    def supervise(self, spec: ProcessSpec, channel: SignalChannel) -> int:
        """Run the server under supervision. Returns the launcher exit code."""
        return ProcessSupervisor(channel).run(spec)


__all__ = [
    "DependencyOutcome",
    "LaunchService",
]
