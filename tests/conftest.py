"""Pytest configuration and fixtures for skill installer tests."""

from __future__ import annotations

import io
import logging
import zipfile
from collections.abc import Generator
from pathlib import Path

import pytest

from skill_installer.cli.installer import SkillInstaller
from skill_installer.core.errors import FetchError
from skill_installer.core.types import InstallerConfig

# Files inside the fake archive, relative to its top-level directory
SKILL_FILES = {
    "SKILL.md": "---\nname: spring-boot-skill\ndescription: Spring Boot conventions\n---\n",
    "references/jpa-entities.md": "# JPA entity design\n",
    "references/rest-api.md": "# REST API conventions\n",
    "LICENSE": "MIT License\n",
    "README.md": "# spring-boot-skill\n",
    ".gitignore": "*.zip\n",
    "install.sh": "#!/usr/bin/env bash\n",
}

PRUNED = {"LICENSE", "README.md", ".gitignore", "install.sh"}


def build_archive(files: dict[str, str], top_dir: str = "spring-boot-skill-main") -> bytes:
    """Build a zip laid out like a GitHub branch archive."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in files.items():
            arcname = f"{top_dir}/{name}" if top_dir else name
            zf.writestr(arcname, content)
    return buffer.getvalue()


class FakeFetcher:
    """Archive fetcher that serves bytes from memory and counts calls."""

    def __init__(self, payload: bytes | None = None, error: Exception | None = None) -> None:
        self.payload = payload if payload is not None else build_archive(SKILL_FILES)
        self.error = error
        self.calls: list[str] = []

    def fetch(self, url: str, dest: Path) -> None:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        dest.write_bytes(self.payload)


def tree_snapshot(root: Path) -> dict[str, bytes]:
    """Map relative file paths under root to their contents."""
    return {
        str(p.relative_to(root)): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Undo logging.disable() from CLI runs with --quiet."""
    yield
    logging.disable(logging.NOTSET)


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def home_dir(tmp_path: Path) -> Path:
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def config() -> InstallerConfig:
    return InstallerConfig(retries=0, retry_backoff=0)


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def failing_fetcher() -> FakeFetcher:
    return FakeFetcher(error=FetchError("Failed to download: ConnectError: connection refused"))


@pytest.fixture
def installer(
    config: InstallerConfig,
    fetcher: FakeFetcher,
    project_dir: Path,
    home_dir: Path,
) -> SkillInstaller:
    """SkillInstaller wired to the fake fetcher and temporary roots."""
    return SkillInstaller(config=config, fetcher=fetcher, cwd=project_dir, home=home_dir)
