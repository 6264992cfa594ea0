"""Core type definitions for the skill installer."""

from __future__ import annotations

import math
import os
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from skill_installer.core.errors import UsageError


class Agent(str, Enum):
    """AI coding agents that read skills from their own config directory."""

    CLAUDE = "claude"
    CODEX = "codex"
    GEMINI = "gemini"
    CURSOR = "cursor"

    @property
    def config_dir_name(self) -> str:
        """Name of the agent's configuration directory."""
        return f".{self.value}"


class InstallLevel(str, Enum):
    """Scope of an installation."""

    PROJECT = "project"
    USER = "user"


class DeployStrategy(str, Enum):
    """How skill content is placed into agent directories."""

    COPY = "copy"
    SYMLINK = "symlink"


class ResultStatus(str, Enum):
    """Outcome of a per-agent operation."""

    SUCCESS = "success"
    ERROR = "error"


class ArchiveSource(BaseModel):
    """GitHub coordinates of the skill archive."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    branch: str = "main"

    @property
    def archive_url(self) -> str:
        """Download URL of the branch zip archive."""
        return (
            f"https://github.com/{self.owner}/{self.repo}"
            f"/archive/refs/heads/{self.branch}.zip"
        )

    @property
    def extracted_dir_name(self) -> str:
        """Top-level directory GitHub puts inside branch archives."""
        return f"{self.repo}-{self.branch}"


DEFAULT_SOURCE = ArchiveSource(
    owner="sivaprasadreddy",
    repo="spring-boot-skill",
    branch="main",
)

# Packaging artifacts that are not skill content
DEFAULT_PRUNE_FILES = frozenset({".gitignore", "install.sh", "LICENSE", "README.md"})

# Environment variables read by InstallerConfig.from_env()
TIMEOUT_ENV_VAR = "SKILL_INSTALLER_TIMEOUT"
RETRIES_ENV_VAR = "SKILL_INSTALLER_RETRIES"


class InstallerConfig(BaseModel):
    """Immutable installer configuration.

    Holds the archive coordinates, the package name used for install
    directories, the known agents and the prune list. Passed to
    SkillInstaller at construction so tests can swap any of it.
    """

    model_config = ConfigDict(frozen=True)

    source: ArchiveSource = DEFAULT_SOURCE
    package_name: str = ""
    agents: tuple[Agent, ...] = tuple(Agent)
    prune_files: frozenset[str] = DEFAULT_PRUNE_FILES
    skills_subdir: str = "skills"
    shared_dir_name: str = ".agents"
    timeout: float = Field(default=30.0, gt=0)
    retries: int = Field(default=3, ge=0)
    retry_backoff: float = Field(default=1.0, ge=0)

    @property
    def resolved_package_name(self) -> str:
        """Package directory name, defaulting to the repository name."""
        return self.package_name or self.source.repo

    def install_dir(self, root: Path, agent: Agent) -> Path:
        """Destination directory of the skill for one agent."""
        return (
            root
            / agent.config_dir_name
            / self.skills_subdir
            / self.resolved_package_name
        )

    def shared_dir(self, root: Path) -> Path:
        """Single shared copy used by the symlink strategy."""
        return root / self.shared_dir_name / self.skills_subdir / self.resolved_package_name

    @classmethod
    def from_env(cls, **overrides: object) -> InstallerConfig:
        """
        Build a config from defaults plus environment settings.

        Loads a .env file if present, then applies SKILL_INSTALLER_TIMEOUT
        and SKILL_INSTALLER_RETRIES. Explicit overrides win.

        Raises:
            UsageError: If an environment value or override is invalid
        """
        load_dotenv()

        values: dict[str, object] = {}
        raw_timeout = os.environ.get(TIMEOUT_ENV_VAR)
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                raise UsageError(f"{TIMEOUT_ENV_VAR} must be a number, got '{raw_timeout}'")
            if not math.isfinite(timeout) or timeout <= 0:
                raise UsageError(f"{TIMEOUT_ENV_VAR} must be positive, got '{raw_timeout}'")
            values["timeout"] = timeout

        raw_retries = os.environ.get(RETRIES_ENV_VAR)
        if raw_retries:
            try:
                retries = int(raw_retries)
            except ValueError:
                raise UsageError(f"{RETRIES_ENV_VAR} must be an integer, got '{raw_retries}'")
            if retries < 0:
                raise UsageError(f"{RETRIES_ENV_VAR} must not be negative, got '{raw_retries}'")
            values["retries"] = retries

        values.update(overrides)
        try:
            return cls(**values)
        except ValidationError as e:
            raise UsageError(f"Invalid installer configuration: {e}") from e


DEFAULT_CONFIG = InstallerConfig()


class AgentResult(BaseModel):
    """Result of installing or removing the skill for one agent."""

    agent: Agent
    path: str = ""
    status: ResultStatus = ResultStatus.SUCCESS
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    @classmethod
    def success(cls, agent: Agent, path: Path | str, message: str = "") -> AgentResult:
        """Create a success result."""
        return cls(agent=agent, path=str(path), status=ResultStatus.SUCCESS, message=message)

    @classmethod
    def error(cls, agent: Agent, message: str, path: Path | str = "") -> AgentResult:
        """Create an error result."""
        return cls(agent=agent, path=str(path), status=ResultStatus.ERROR, message=message)

    def __str__(self) -> str:
        if self.ok:
            return f"{self.agent.value} -> {self.path}"
        return f"{self.agent.value}: {self.message}"


class InstallSummary(BaseModel):
    """Per-agent outcomes of one installer run."""

    level: InstallLevel
    strategy: DeployStrategy = DeployStrategy.COPY
    source_url: str = ""
    results: list[AgentResult] = Field(default_factory=list)

    @property
    def succeeded(self) -> list[Agent]:
        """Agents whose operation completed."""
        return [r.agent for r in self.results if r.ok]

    @property
    def failed(self) -> list[AgentResult]:
        """Results that carry an error."""
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        """True only if every agent succeeded."""
        return not self.failed
