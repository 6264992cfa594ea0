"""Skill installer module.

Downloads the skill archive once and deploys it into the configuration
directory of every selected agent, at project or user level.
"""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Callable, Iterable
from pathlib import Path

from skill_installer.core.deploy import (
    prune,
    remove_path,
    replace_tree,
    replace_with_symlink,
    same_location,
)
from skill_installer.core.errors import FilesystemError, UsageError
from skill_installer.core.fetcher import (
    ArchiveFetcher,
    HttpArchiveFetcher,
    extract_archive,
    locate_content_root,
)
from skill_installer.core.types import (
    DEFAULT_CONFIG,
    Agent,
    AgentResult,
    DeployStrategy,
    InstallerConfig,
    InstallLevel,
    InstallSummary,
)

logger = logging.getLogger(__name__)

# Agent selector meaning "every known agent"
ALL_AGENTS = "all"

ARCHIVE_FILE_NAME = "archive.zip"

Reporter = Callable[[AgentResult], None]


class SkillInstaller:
    """Handles skill installation and removal across agent directories."""

    def __init__(
        self,
        config: InstallerConfig | None = None,
        fetcher: ArchiveFetcher | None = None,
        cwd: Path | str | None = None,
        home: Path | str | None = None,
    ) -> None:
        """
        Initialize the installer.

        Args:
            config: Installer configuration. Defaults to DEFAULT_CONFIG
            fetcher: Archive fetcher. Defaults to an HttpArchiveFetcher built from config
            cwd: Project-level root. Defaults to the current working directory
            home: User-level root. Defaults to the user's home directory
        """
        self.config = config or DEFAULT_CONFIG
        self.fetcher = fetcher or HttpArchiveFetcher(
            timeout=self.config.timeout,
            retries=self.config.retries,
            retry_backoff=self.config.retry_backoff,
        )
        self._cwd = Path(cwd) if cwd is not None else None
        self._home = Path(home) if home is not None else None

    def root_for(self, level: InstallLevel) -> Path:
        """Destination root for an install level."""
        if level == InstallLevel.USER:
            return self._home or Path.home()
        return self._cwd or Path.cwd()

    def resolve_agents(self, names: Iterable[str | Agent] | None) -> list[Agent]:
        """
        Turn agent selectors into a deduplicated agent list.

        None, an empty selection or any 'all' entry selects every known agent.

        Raises:
            UsageError: If a name is not a known agent
        """
        selected: list[Agent] = []
        expand_all = names is None

        for name in names or ():
            value = name.value if isinstance(name, Agent) else str(name).strip().lower()
            if value == ALL_AGENTS:
                expand_all = True
                continue
            try:
                agent = Agent(value)
            except ValueError:
                agent = None
            if agent is None or agent not in self.config.agents:
                known = ", ".join(a.value for a in self.config.agents)
                raise UsageError(f"Unknown agent '{name}'. Expected one of: {known}, {ALL_AGENTS}")
            if agent not in selected:
                selected.append(agent)

        if expand_all or not selected:
            return list(self.config.agents)
        return selected

    def _validate(
        self,
        level: InstallLevel | str,
        agents: Iterable[str | Agent] | None,
        strategy: DeployStrategy | str = DeployStrategy.COPY,
    ) -> tuple[InstallLevel, list[Agent], DeployStrategy]:
        """Check every argument before any I/O happens."""
        try:
            level = InstallLevel(level)
        except ValueError:
            raise UsageError(f"Unknown install level '{level}'. Expected 'project' or 'user'")
        try:
            strategy = DeployStrategy(strategy)
        except ValueError:
            raise UsageError(f"Unknown strategy '{strategy}'. Expected 'copy' or 'symlink'")
        return level, self.resolve_agents(agents), strategy

    def install(
        self,
        level: InstallLevel | str = InstallLevel.PROJECT,
        agents: Iterable[str | Agent] | None = None,
        strategy: DeployStrategy | str = DeployStrategy.COPY,
        reporter: Reporter | None = None,
    ) -> InstallSummary:
        """
        Install the skill for the selected agents.

        Args:
            level: 'project' (working directory) or 'user' (home directory)
            agents: Agent names, or None/'all' for every known agent
            strategy: 'copy' into each agent directory, or 'symlink' each
                agent directory to one shared copy
            reporter: Called with each agent's result as soon as it is known

        Returns:
            InstallSummary with one result per agent

        Raises:
            UsageError: On an invalid argument, before any download
            FetchError: If the archive cannot be downloaded or extracted
        """
        level, selected, strategy = self._validate(level, agents, strategy)
        root = self.root_for(level)
        source = self.config.source
        summary = InstallSummary(level=level, strategy=strategy, source_url=source.archive_url)

        with tempfile.TemporaryDirectory(prefix="skill-install-") as tmp_dir:
            tmp_path = Path(tmp_dir)
            archive = tmp_path / ARCHIVE_FILE_NAME

            logger.info("Downloading %s", source.archive_url)
            self.fetcher.fetch(source.archive_url, archive)

            extracted = extract_archive(archive, tmp_path / "extracted")
            content_root = locate_content_root(extracted, source.extracted_dir_name)

            removed = prune(content_root, self.config.prune_files)
            if removed:
                logger.info("Pruned %s", ", ".join(removed))

            if strategy == DeployStrategy.SYMLINK:
                results = self._deploy_symlinked(content_root, root, selected, reporter)
            else:
                results = self._deploy_copies(content_root, root, selected, reporter)
            summary.results.extend(results)

        return summary

    def _deploy_copies(
        self,
        content_root: Path,
        root: Path,
        agents: list[Agent],
        reporter: Reporter | None,
    ) -> list[AgentResult]:
        """Copy the content into each agent's install directory."""
        results: list[AgentResult] = []
        for agent in agents:
            dest = self.config.install_dir(root, agent)
            try:
                replace_tree(content_root, dest)
            except OSError as e:
                error = FilesystemError(agent.value, dest, e)
                logger.warning("Install for %s failed: %s", agent.value, error)
                result = AgentResult.error(agent, str(error), dest)
            else:
                logger.info("Installed %s into %s", self.config.resolved_package_name, dest)
                result = AgentResult.success(agent, dest)
            results.append(result)
            if reporter:
                reporter(result)
        self._remove_unused_shared(root)
        return results

    def _deploy_symlinked(
        self,
        content_root: Path,
        root: Path,
        agents: list[Agent],
        reporter: Reporter | None,
    ) -> list[AgentResult]:
        """Copy the content once to the shared directory and link each agent to it."""
        shared = self.config.shared_dir(root)
        try:
            replace_tree(content_root, shared)
        except OSError as e:
            error = FilesystemError(self.config.shared_dir_name, shared, e)
            logger.warning("Shared install failed: %s", error)
            results = [
                AgentResult.error(a, str(error), self.config.install_dir(root, a)) for a in agents
            ]
            if reporter:
                for result in results:
                    reporter(result)
            return results

        logger.info("Installed %s into %s", self.config.resolved_package_name, shared)
        results = []
        for agent in agents:
            link = self.config.install_dir(root, agent)
            try:
                replace_with_symlink(shared, link)
            except OSError as e:
                error = FilesystemError(agent.value, link, e)
                logger.warning("Link for %s failed: %s", agent.value, error)
                result = AgentResult.error(agent, str(error), link)
            else:
                logger.info("Linked %s -> %s", link, shared)
                result = AgentResult.success(agent, link)
            results.append(result)
            if reporter:
                reporter(result)
        return results

    def uninstall(
        self,
        level: InstallLevel | str = InstallLevel.PROJECT,
        agents: Iterable[str | Agent] | None = None,
        reporter: Reporter | None = None,
    ) -> InstallSummary:
        """
        Remove the skill from the selected agents.

        The shared symlink-strategy copy is removed too once no known agent
        links to it anymore.

        Returns:
            InstallSummary with one result per agent

        Raises:
            UsageError: On an invalid argument
        """
        level, selected, _ = self._validate(level, agents)
        root = self.root_for(level)
        summary = InstallSummary(level=level, source_url=self.config.source.archive_url)

        for agent in selected:
            dest = self.config.install_dir(root, agent)
            try:
                removed = remove_path(dest)
            except OSError as e:
                error = FilesystemError(agent.value, dest, e)
                result = AgentResult.error(agent, str(error), dest)
            else:
                if removed:
                    logger.info("Removed %s", dest)
                    result = AgentResult.success(agent, dest)
                else:
                    result = AgentResult.error(agent, f"Not installed at {dest}", dest)
            summary.results.append(result)
            if reporter:
                reporter(result)

        self._remove_unused_shared(root)
        return summary

    def _remove_unused_shared(self, root: Path) -> None:
        # Agent paths reach the shared copy through their own symlink or
        # through a symlinked config dir left by older installs.
        shared = self.config.shared_dir(root)
        if not shared.is_dir():
            return
        for agent in self.config.agents:
            if same_location(self.config.install_dir(root, agent), shared):
                return
        try:
            remove_path(shared)
            logger.info("Removed shared copy %s", shared)
        except OSError as e:
            logger.warning("Could not remove shared copy %s: %s", shared, e)
