"""Tests for configuration and result types."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from skill_installer.core.errors import UsageError
from skill_installer.core.types import (
    DEFAULT_CONFIG,
    RETRIES_ENV_VAR,
    TIMEOUT_ENV_VAR,
    Agent,
    AgentResult,
    ArchiveSource,
    InstallerConfig,
    InstallLevel,
    InstallSummary,
)


class TestArchiveSource:
    """Tests for ArchiveSource."""

    def test_archive_url(self) -> None:
        source = ArchiveSource(owner="acme", repo="kotlin-skill", branch="develop")

        assert source.archive_url == "https://github.com/acme/kotlin-skill/archive/refs/heads/develop.zip"
        assert source.extracted_dir_name == "kotlin-skill-develop"

    def test_frozen(self) -> None:
        with pytest.raises(ValidationError):
            DEFAULT_CONFIG.source.branch = "dev"  # type: ignore[misc]


class TestInstallerConfig:
    """Tests for InstallerConfig."""

    def test_defaults(self) -> None:
        assert DEFAULT_CONFIG.resolved_package_name == "spring-boot-skill"
        assert DEFAULT_CONFIG.agents == (Agent.CLAUDE, Agent.CODEX, Agent.GEMINI, Agent.CURSOR)
        assert DEFAULT_CONFIG.prune_files == {".gitignore", "install.sh", "LICENSE", "README.md"}

    def test_install_dir(self) -> None:
        root = Path("/work/app")

        assert DEFAULT_CONFIG.install_dir(root, Agent.CODEX) == Path(
            "/work/app/.codex/skills/spring-boot-skill"
        )
        assert DEFAULT_CONFIG.shared_dir(root) == Path("/work/app/.agents/skills/spring-boot-skill")

    def test_package_name_override(self) -> None:
        config = InstallerConfig(package_name="spring")

        assert config.install_dir(Path("/r"), Agent.CLAUDE) == Path("/r/.claude/skills/spring")

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(TIMEOUT_ENV_VAR, "12.5")
        monkeypatch.setenv(RETRIES_ENV_VAR, "0")

        config = InstallerConfig.from_env()

        assert config.timeout == 12.5
        assert config.retries == 0
        assert config.source == DEFAULT_CONFIG.source

    def test_from_env_overrides_win(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(RETRIES_ENV_VAR, "5")

        assert InstallerConfig.from_env(retries=1).retries == 1

    @pytest.mark.parametrize(
        ("var", "value"),
        [
            (TIMEOUT_ENV_VAR, "soon"),
            (TIMEOUT_ENV_VAR, "-1"),
            (TIMEOUT_ENV_VAR, "nan"),
            (TIMEOUT_ENV_VAR, "inf"),
            (RETRIES_ENV_VAR, "many"),
            (RETRIES_ENV_VAR, "-2"),
        ],
    )
    def test_from_env_rejects_bad_values(
        self, monkeypatch: pytest.MonkeyPatch, var: str, value: str
    ) -> None:
        monkeypatch.setenv(var, value)

        with pytest.raises(UsageError, match=var):
            InstallerConfig.from_env()

    def test_from_env_invalid_override(self) -> None:
        with pytest.raises(UsageError, match="Invalid installer configuration"):
            InstallerConfig.from_env(retry_backoff=-1)


class TestInstallSummary:
    """Tests for InstallSummary."""

    def test_partial_failure(self) -> None:
        summary = InstallSummary(
            level=InstallLevel.PROJECT,
            results=[
                AgentResult.success(Agent.CLAUDE, "/p/.claude/skills/x"),
                AgentResult.error(Agent.CODEX, "Permission denied"),
            ],
        )

        assert summary.succeeded == [Agent.CLAUDE]
        assert [r.agent for r in summary.failed] == [Agent.CODEX]
        assert summary.ok is False
        assert str(summary.failed[0]) == "codex: Permission denied"
