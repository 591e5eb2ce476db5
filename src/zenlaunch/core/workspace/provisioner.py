"""
Workspace provisioning.

Ensures the server checkout and its config file exist. Both operations are
idempotent: when the artifacts already exist they do nothing, which makes
the launcher safe to run on every startup.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from pathlib import Path

from zenlaunch.core.config.models import WorkspaceConfig
from zenlaunch.core.errors import ConfigCreatedError, ProvisioningError

logger = logging.getLogger(__name__)


def resolve_workspace(config: WorkspaceConfig, home: Path | None = None) -> Path:
    """
    Resolve the workspace location.

    Prefers the configured local checkout when it exists, otherwise a
    directory under the user's home. Callers resolve once per invocation
    and pass the result along.

    Args:
        config: Workspace configuration
        home: Home directory (defaults to Path.home())

    Returns:
        Absolute workspace path
    """
    if config.local_dir:
        local = Path(config.local_dir).expanduser()
        if local.exists():
            return local.resolve()
        logger.debug("Configured local_dir %s does not exist, ignoring", local)

    if home is None:
        home = Path.home()
    return (home / config.home_dir_name).absolute()


class WorkspaceProvisioner:
    """
    Clones the server source and seeds its config file.

    Example:
        >>> provisioner = WorkspaceProvisioner(Path("~/.zen-mcp-server"), WorkspaceConfig())
        >>> provisioner.ensure_workspace()
        >>> env_file = provisioner.ensure_config()
    """

    def __init__(self, workspace: Path, config: WorkspaceConfig) -> None:
        self._workspace = workspace
        self._config = config

    @property
    def workspace(self) -> Path:
        return self._workspace

    @property
    def env_file(self) -> Path:
        """Path of the KEY=VALUE config file."""
        return self._workspace / self._config.env_file

    @property
    def env_template(self) -> Path:
        return self._workspace / self._config.env_template

    def needs_clone(self) -> bool:
        """Whether the workspace is missing or an empty leftover directory."""
        if not self._workspace.exists():
            return True
        return self._workspace.is_dir() and not any(self._workspace.iterdir())

    def ensure_workspace(self) -> bool:
        """
        Clone the server source if the workspace is absent.

        Returns:
            True if a clone was performed, False if the workspace existed

        Raises:
            ProvisioningError: If the clone fails. A partial clone is not
                resumed; the user fixes the cause and re-runs.
        """
        if not self.needs_clone():
            logger.debug("Workspace %s already present", self._workspace)
            return False

        self._workspace.parent.mkdir(parents=True, exist_ok=True)
        cmd = ["git", "clone", self._config.repo_url, str(self._workspace)]
        logger.info("Cloning %s into %s", self._config.repo_url, self._workspace)
        try:
            subprocess.run(cmd, stdout=sys.stderr, check=True)
        except (subprocess.CalledProcessError, OSError) as e:
            raise ProvisioningError(
                "Failed to clone Zen MCP Server repository.",
                reason=str(e),
                solution=[
                    "Check your network connection and git credentials",
                    f"If {self._workspace} was left behind empty or partial, remove it",
                    "Then run this command again.",
                ],
            ) from e
        return True

    def ensure_config(self) -> Path:
        """
        Ensure the config file exists.

        An existing file is returned untouched. A missing file is copied
        from the template, after which the run stops so the user can add
        credentials.

        Returns:
            Path to the existing config file

        Raises:
            ConfigCreatedError: The file was just created from the template
            ProvisioningError: Neither the file nor its template exists
        """
        env_file = self.env_file
        if env_file.exists():
            return env_file

        template = self.env_template
        if not template.exists():
            raise ProvisioningError(
                f"No {env_file.name} file and no {template.name} template found",
                reason=f"Looked in {self._workspace}",
                solution=[
                    f"Create {env_file} with at least one of: "
                    + ", ".join(self._config.required_keys),
                    f"Or re-clone the workspace: rm -rf {self._workspace} and run again",
                ],
            )

        shutil.copyfile(template, env_file)
        logger.info("Created %s from %s", env_file, template)
        raise ConfigCreatedError(env_file, list(self._config.required_keys))


__all__ = ["WorkspaceProvisioner", "resolve_workspace"]
