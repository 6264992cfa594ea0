"""CLI module for spring-skill-installer.

Provides the command-line interface for installing and removing the skill.
"""

from skill_installer.cli.installer import SkillInstaller

__all__ = ["SkillInstaller"]
