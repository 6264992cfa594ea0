"""Spring Skill Installer - deploy the spring-boot-skill bundle into AI agent directories."""

from skill_installer.core.types import (
    Agent,
    AgentResult,
    ArchiveSource,
    DeployStrategy,
    InstallerConfig,
    InstallLevel,
    InstallSummary,
)

__version__ = "0.1.0"

__all__ = [
    "Agent",
    "AgentResult",
    "ArchiveSource",
    "DeployStrategy",
    "InstallerConfig",
    "InstallLevel",
    "InstallSummary",
]
