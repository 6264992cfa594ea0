"""Core modules for the skill installer.

Primary modules:
- types: Configuration and result models (InstallerConfig, InstallSummary, etc.)
- fetcher: Archive download and extraction
- deploy: Filesystem replacement helpers
"""

from skill_installer.core.errors import FetchError, FilesystemError, InstallError, UsageError
from skill_installer.core.fetcher import ArchiveFetcher, HttpArchiveFetcher
from skill_installer.core.types import (
    DEFAULT_CONFIG,
    Agent,
    AgentResult,
    ArchiveSource,
    DeployStrategy,
    InstallerConfig,
    InstallLevel,
    InstallSummary,
)

__all__ = [
    # Types
    "Agent",
    "AgentResult",
    "ArchiveSource",
    "DeployStrategy",
    "InstallerConfig",
    "InstallLevel",
    "InstallSummary",
    "DEFAULT_CONFIG",
    # Errors
    "FetchError",
    "FilesystemError",
    "InstallError",
    "UsageError",
    # Fetching
    "ArchiveFetcher",
    "HttpArchiveFetcher",
]
