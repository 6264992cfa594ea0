"""Filesystem helpers for placing skill content into agent directories."""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

STAGING_PREFIX = ".staging-"


def remove_path(path: Path) -> bool:
    """
    Remove a file, symlink or directory tree.

    Symlinks are unlinked, never followed.

    Returns:
        True if something was removed
    """
    if path.is_symlink() or path.is_file():
        path.unlink()
        return True
    if path.is_dir():
        shutil.rmtree(path)
        return True
    return False


def prune(root: Path, names: Iterable[str]) -> list[str]:
    """
    Remove the named entries directly under root.

    Missing names are skipped.

    Returns:
        Names that were removed, sorted
    """
    removed: list[str] = []
    for name in sorted(names):
        if remove_path(root / name):
            logger.debug("Pruned %s", name)
            removed.append(name)
    return removed


def replace_tree(source: Path, dest: Path) -> None:
    """
    Replace dest with a copy of source.

    The copy is staged next to dest and swapped in only once complete, so
    dest is either the previous install or the full new one. Anything that
    was at dest is removed, so no stale files survive.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    staging = dest.parent / f"{STAGING_PREFIX}{dest.name}"
    remove_path(staging)

    try:
        shutil.copytree(source, staging, symlinks=True)
        remove_path(dest)
        staging.rename(dest)
    except BaseException:
        if staging.exists() or staging.is_symlink():
            remove_path(staging)
        raise


def same_location(a: Path, b: Path) -> bool:
    """True if both paths resolve to the same place, following every symlink."""
    return os.path.realpath(a) == os.path.realpath(b)


def replace_with_symlink(target: Path, link: Path) -> None:
    """
    Replace whatever is at link with a directory symlink to target.

    Nothing is done when link already resolves to target, either as a link
    of its own or through a symlinked parent such as '.claude -> .agents'.
    """
    link.parent.mkdir(parents=True, exist_ok=True)
    if same_location(link, target):
        return
    remove_path(link)
    link.symlink_to(target, target_is_directory=True)
