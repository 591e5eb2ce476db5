"""
Dependency resolution for native mode.

Verifies that the server's required modules import inside the target
interpreter and, when they don't, provisions an isolated environment in
the workspace and installs the manifest into it.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from pathlib import Path

from zenlaunch.core.config.models import NativeConfig
from zenlaunch.core.deps.models import DependencyStatus

logger = logging.getLogger(__name__)


def venv_bin(venv_path: Path, name: str, platform: str | None = None) -> Path:
    """
    Path of an executable inside a virtual environment.

    Examples:
        >>> venv_bin(Path("/w/venv"), "pip", platform="linux")
        PosixPath('/w/venv/bin/pip')
    """
    if platform is None:
        platform = sys.platform
    if platform == "win32":
        return venv_path / "Scripts" / name
    return venv_path / "bin" / name


class DependencyResolver:
    """
    Checks and installs the server's Python dependencies.

    The target interpreter is the workspace venv's python once the venv
    exists, otherwise the host interpreter found by the prober. The same
    interpreter later runs the server.
    """

    def __init__(
        self,
        workspace: Path,
        python_cmd: str,
        config: NativeConfig,
        platform: str | None = None,
    ) -> None:
        self._workspace = workspace
        self._python_cmd = python_cmd
        self._config = config
        self._platform = platform if platform is not None else sys.platform

    @property
    def venv_path(self) -> Path:
        return self._workspace / self._config.venv_dir

    @property
    def requirements_path(self) -> Path:
        return self._workspace / self._config.requirements_file

    @property
    def pip_path(self) -> Path:
        return venv_bin(self.venv_path, "pip", self._platform)

    @property
    def venv_python(self) -> Path:
        return venv_bin(self.venv_path, "python", self._platform)

    def interpreter(self) -> str:
        """Interpreter used to check dependencies and run the server."""
        if self.venv_python.exists():
            return str(self.venv_python)
        return self._python_cmd

    def check_dependencies(self) -> DependencyStatus:
        """
        Try importing every required module in the target interpreter.

        Returns:
            SATISFIED if all modules import, MISSING otherwise
        """
        statement = "import " + ", ".join(self._config.required_modules)
        try:
            result = subprocess.run(
                [self.interpreter(), "-c", statement],
                cwd=self._workspace,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )
        except OSError as e:
            logger.debug("Dependency check could not run: %s", e)
            return DependencyStatus.MISSING

        if result.returncode == 0:
            return DependencyStatus.SATISFIED
        return DependencyStatus.MISSING

    def ensure_venv(self) -> bool:
        """
        Create the isolated environment if it has no interpreter.

        A directory left without an interpreter by an interrupted run is
        recreated with ``--clear``.

        Returns:
            True if the environment was created, False if it already existed

        Raises:
            subprocess.CalledProcessError: If venv creation fails
        """
        if self.venv_python.exists():
            return False

        cmd = [self._python_cmd, "-m", "venv"]
        if self.venv_path.exists():
            logger.info("Recreating incomplete virtual environment at %s", self.venv_path)
            cmd.append("--clear")
        else:
            logger.info("Creating virtual environment at %s", self.venv_path)
        subprocess.run(
            [*cmd, str(self.venv_path)],
            cwd=self._workspace,
            stdout=sys.stderr,
            check=True,
        )
        return True

    def install_dependencies(self) -> bool:
        """
        Install the manifest into the isolated environment.

        Failure is reported through the return value, not raised: the
        server's own startup gives a more specific diagnostic.

        Returns:
            True if installation succeeded
        """
        if not self.requirements_path.exists():
            logger.warning("Dependency manifest %s not found", self.requirements_path)
            return False

        try:
            self.ensure_venv()
            subprocess.run(
                [str(self.pip_path), "install", "-r", str(self.requirements_path)],
                cwd=self._workspace,
                stdout=sys.stderr,
                check=True,
            )
        except (subprocess.CalledProcessError, OSError) as e:
            logger.warning("Dependency installation failed: %s", e)
            return False
        return True

    def manual_instructions(self) -> list[str]:
        """Commands the user can run to install dependencies by hand."""
        return [
            f"cd {self._workspace}",
            f"{self._python_cmd} -m pip install -r {self._config.requirements_file}",
        ]


__all__ = ["DependencyResolver", "venv_bin"]
