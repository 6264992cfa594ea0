"""CLI entry point for spring-skill-installer.

Installs the skill bundle into the configuration directories of AI coding
agents, at project or user level.
"""

from __future__ import annotations

import argparse
import logging
import sys

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

from skill_installer import __version__
from skill_installer.cli.installer import ALL_AGENTS, SkillInstaller
from skill_installer.core.errors import FetchError, UsageError
from skill_installer.core.types import (
    Agent,
    AgentResult,
    DeployStrategy,
    InstallerConfig,
    InstallLevel,
    InstallSummary,
)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

custom_theme = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "bold green",
    "agent": "bold blue",
})

console = Console(theme=custom_theme, highlight=False, soft_wrap=True)
err_console = Console(theme=custom_theme, stderr=True, highlight=False, soft_wrap=True)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    agent_names = [a.value for a in Agent]

    parser = argparse.ArgumentParser(
        prog="spring-skill-install",
        description="Install the spring-boot-skill bundle into AI agent skill directories.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Agents: {", ".join(agent_names)} (default: {ALL_AGENTS})

Examples:
  # Install for every agent in the current project
  spring-skill-install

  # Install for Claude and Codex only
  spring-skill-install --agent claude --agent codex

  # Install for every agent in your home directory
  spring-skill-install --user

  # Keep one shared copy under .agents/ and symlink each agent to it
  spring-skill-install --strategy symlink

  # Remove the skill from Gemini
  spring-skill-install --uninstall --agent gemini

Environment Variables:
  SKILL_INSTALLER_TIMEOUT: Download timeout in seconds (default: 30)
  SKILL_INSTALLER_RETRIES: Extra download attempts (default: 3)
        """,
    )

    level = parser.add_mutually_exclusive_group()
    level.add_argument(
        "--project",
        dest="level",
        action="store_const",
        const=InstallLevel.PROJECT.value,
        help="Install into the current directory (default)",
    )
    level.add_argument(
        "--user",
        dest="level",
        action="store_const",
        const=InstallLevel.USER.value,
        help="Install into your home directory",
    )
    parser.set_defaults(level=InstallLevel.PROJECT.value)

    parser.add_argument(
        "--agent", "-a",
        dest="agents",
        action="append",
        choices=agent_names + [ALL_AGENTS],
        default=None,
        metavar="NAME",
        help=f"Agent to install for (repeatable; one of: {', '.join(agent_names)}, {ALL_AGENTS})",
    )

    parser.add_argument(
        "--strategy", "-s",
        choices=[s.value for s in DeployStrategy],
        default=DeployStrategy.COPY.value,
        help="copy into each agent directory, or symlink them to one shared copy (default: copy)",
    )

    parser.add_argument(
        "--uninstall",
        action="store_true",
        help="Remove the skill instead of installing it",
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show detailed progress logging",
    )
    verbosity.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress all logging output",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Set up logging for a CLI run."""
    if quiet:
        logging.disable(logging.CRITICAL)
        return

    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )
    if not verbose:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)


def print_result(result: AgentResult) -> None:
    """Print one agent's outcome as soon as it is known."""
    if result.ok:
        console.print(f"[success]✓[/success] [agent]{result.agent.value}[/agent] -> {escape(result.path)}")
    else:
        console.print(f"[error]✗[/error] [agent]{result.agent.value}[/agent]: {escape(result.message)}")


def print_summary(summary: InstallSummary, action: str) -> None:
    """Print the final summary line."""
    succeeded = ", ".join(a.value for a in summary.succeeded) or "none"
    style = "success" if summary.ok else "warning"
    console.print(
        f"[{style}]{action} for: {succeeded} ({summary.level.value} level)[/{style}]"
    )
    if summary.failed:
        failed = ", ".join(r.agent.value for r in summary.failed)
        err_console.print(f"[error]Failed for: {failed}[/error]")


def cmd_install(args: argparse.Namespace, installer: SkillInstaller) -> int:
    """Handle an install run."""
    console.print(f"Installing from [info]{installer.config.source.archive_url}[/info]...")

    summary = installer.install(
        level=args.level,
        agents=args.agents,
        strategy=args.strategy,
        reporter=print_result,
    )

    print_summary(summary, f"Installed {installer.config.resolved_package_name}")
    return EXIT_OK if summary.ok else EXIT_FAILURE


def cmd_uninstall(args: argparse.Namespace, installer: SkillInstaller) -> int:
    """Handle an uninstall run."""
    summary = installer.uninstall(
        level=args.level,
        agents=args.agents,
        reporter=print_result,
    )

    print_summary(summary, f"Removed {installer.config.resolved_package_name}")
    return EXIT_OK if summary.ok else EXIT_FAILURE


def main(argv: list[str] | None = None, installer: SkillInstaller | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        if installer is None:
            installer = SkillInstaller(config=InstallerConfig.from_env())
        if args.uninstall:
            return cmd_uninstall(args, installer)
        return cmd_install(args, installer)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        err_console.print(f"[error]Error:[/error] {escape(str(e))}")
        return EXIT_USAGE
    except FetchError as e:
        err_console.print(f"[error]✗ {escape(str(e))}[/error]")
        err_console.print("No agent directories were modified.")
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
