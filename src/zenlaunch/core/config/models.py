"""
Configuration data models for the launcher.

These models define the structure of ~/.config/zen-launcher/config.json,
with validation and type safety via Pydantic. Every field has a default so
a first run works without any configuration file.
"""

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_REPO_URL = "https://github.com/BeehiveInnovations/zen-mcp-server"


class WorkspaceConfig(BaseModel):
    """
    Where the server checkout lives and how it is seeded.
    """
    repo_url: str = Field(
        default=DEFAULT_REPO_URL,
        description="Remote to clone the server source from"
    )
    local_dir: str | None = Field(
        default=None,
        description="Existing checkout to prefer over the home-directory workspace"
    )
    home_dir_name: str = Field(
        default=".zen-mcp-server",
        description="Workspace directory name under the user's home directory"
    )
    env_file: str = Field(
        default=".env",
        description="KEY=VALUE config file inside the workspace"
    )
    env_template: str = Field(
        default=".env.example",
        description="Template the config file is seeded from"
    )
    required_keys: list[str] = Field(
        default_factory=lambda: [
            "GEMINI_API_KEY",
            "OPENAI_API_KEY",
            "OPENROUTER_API_KEY",
        ],
        description="Credentials of which at least one must be configured"
    )


class NativeConfig(BaseModel):
    """
    Native (host interpreter) execution settings.
    """
    python_candidates: list[str] = Field(
        default_factory=lambda: ["python3", "python"],
        min_length=1,
        description="Interpreter commands to try, in order"
    )
    min_python: str = Field(
        default="3.11",
        description="Recommended minimum interpreter version (major.minor)"
    )
    venv_dir: str = Field(
        default="venv",
        description="Isolated environment directory inside the workspace"
    )
    requirements_file: str = Field(
        default="requirements.txt",
        description="Dependency manifest inside the workspace"
    )
    required_modules: list[str] = Field(
        default_factory=lambda: ["mcp", "google.genai", "openai", "pydantic"],
        description="Modules that must import for the server to start"
    )
    entrypoint: str = Field(
        default="server.py",
        description="Server script run by the interpreter"
    )

    @field_validator("min_python")
    @classmethod
    def validate_min_python(cls, v: str) -> str:
        """Require a dotted numeric version such as '3.11'."""
        if not re.fullmatch(r"\d+(\.\d+){0,2}", v):
            raise ValueError(f"min_python must look like '3.11', got {v!r}")
        return v

    @property
    def min_python_tuple(self) -> tuple[int, ...]:
        """Minimum version as a comparable tuple."""
        return tuple(int(part) for part in self.min_python.split("."))


class ContainerConfig(BaseModel):
    """
    Containerized execution settings.
    """
    image: str = Field(
        default="zen-mcp-server:latest",
        description="Image built from the workspace"
    )
    container_name: str = Field(
        default="zen-mcp-server",
        description="Container started by compose and exec'd into"
    )
    exec_command: list[str] = Field(
        default_factory=lambda: ["python", "server.py"],
        min_length=1,
        description="Command run inside the container"
    )
    settle_delay: float = Field(
        default=3.0,
        ge=0.0,
        description="Seconds to wait after starting the container"
    )


class EngineConfig(BaseModel):
    """
    Container engine readiness polling.
    """
    max_attempts: int = Field(
        default=30,
        ge=1,
        description="Readiness probes before giving up"
    )
    poll_interval: float = Field(
        default=2.0,
        gt=0.0,
        description="Seconds between readiness probes"
    )
    probe_timeout: float = Field(
        default=10.0,
        gt=0.0,
        description="Seconds a single readiness probe may take"
    )


class LauncherConfig(BaseModel):
    """
    Top-level launcher configuration.

    Example:
        >>> config = LauncherConfig(engine=EngineConfig(max_attempts=5))
        >>> config.engine.max_attempts
        5
        >>> config.native.venv_dir
        'venv'
    """
    workspace: WorkspaceConfig = Field(
        default_factory=WorkspaceConfig,
        description="Workspace location and seeding"
    )
    native: NativeConfig = Field(
        default_factory=NativeConfig,
        description="Native interpreter mode"
    )
    container: ContainerConfig = Field(
        default_factory=ContainerConfig,
        description="Containerized mode"
    )
    engine: EngineConfig = Field(
        default_factory=EngineConfig,
        description="Container engine readiness"
    )

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
    )
