"""
Auto-discovery CLI dispatcher for dappforge.

Scans subfolders for commands and registers them as ``dappforge <domain> <command>``.
Adding a command = adding a .py file to the appropriate subfolder.
"""
from __future__ import annotations

import argparse
import importlib
import sys
from collections.abc import Callable
from functools import lru_cache
from pathlib import Path
from typing import Any

from dappforge.core.exceptions import DappForgeError


@lru_cache(maxsize=1)
def discover_domains() -> dict[str, Path]:
    """Map domain name to its directory for every subfolder holding commands."""
    cli_dir = Path(__file__).parent
    domains = {}
    for item in cli_dir.iterdir():
        if item.is_dir() and not item.name.startswith("_"):
            has_commands = any(f.suffix == ".py" and not f.name.startswith("_") for f in item.iterdir())
            if has_commands:
                domains[item.name] = item
    return domains


@lru_cache(maxsize=32)
def discover_commands(domain: str) -> dict[str, dict[str, Any]]:
    """Map command name to its module metadata for one domain."""
    domain_dir = Path(__file__).parent / domain
    commands: dict[str, dict[str, Any]] = {}

    for item in sorted(domain_dir.glob("*.py")):
        if item.name.startswith("_"):
            continue
        cmd_name = item.stem
        module = importlib.import_module(f"dappforge.cli.{domain}.{cmd_name}")
        commands[cmd_name] = {
            "module": module,
            "summary": getattr(module, "SUMMARY", f"{domain} {cmd_name}"),
            "register_args": getattr(module, "register_args", None),
            "main": getattr(module, "main", None),
        }
    return commands


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dappforge",
        description="dappforge - compose Web3 app blueprints into generated projects",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(
        dest="domain",
        title="domains",
        description="Available command domains",
        metavar="<domain>",
    )

    for domain_name in sorted(discover_domains()):
        domain_commands = discover_commands(domain_name)
        if not domain_commands:
            continue

        domain_parser = subparsers.add_parser(domain_name, help=f"{domain_name.title()} commands")
        cmd_subparsers = domain_parser.add_subparsers(
            dest="command",
            title="commands",
            description=f"Available {domain_name} commands",
            metavar="<command>",
        )

        for cmd_name, cmd_info in sorted(domain_commands.items()):
            primary_name = cmd_name.replace("_", "-")
            aliases = [cmd_name] if primary_name != cmd_name else []
            cmd_parser = cmd_subparsers.add_parser(primary_name, aliases=aliases, help=cmd_info["summary"])
            if cmd_info["register_args"]:
                cmd_info["register_args"](cmd_parser)
            if cmd_info["main"]:
                cmd_parser.set_defaults(_func=cmd_info["main"])

    return parser


def _get_version() -> str:
    from dappforge import __version__

    return __version__


def _setup_logging(args: argparse.Namespace, json_mode: bool) -> None:
    """Configure logging from the ``logging`` config section.

    JSON mode only logs to a configured file so stdout/stderr stay parseable.
    """
    from dappforge.cli._utils import get_repo_root
    from dappforge.core.config import LoggingConfig
    from dappforge.core.stdlib_logging import configure_logging, suppress_lastresort_in_json_mode

    cfg = LoggingConfig(repo_root=get_repo_root(args))
    if cfg.file is not None:
        configure_logging(level=cfg.level, log_path=cfg.file)
    elif json_mode:
        suppress_lastresort_in_json_mode()
    else:
        configure_logging(level=cfg.level)


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``dappforge`` command; returns the exit code."""
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.domain:
        parser.print_help()
        return 0

    func: Callable[[argparse.Namespace], int] | None = getattr(args, "_func", None)
    if func is None:
        domain_parser = parser._subparsers._group_actions[0].choices.get(args.domain)
        if domain_parser:
            domain_parser.print_help()
        return 0

    json_mode = bool(getattr(args, "json", False))
    try:
        _setup_logging(args, json_mode)
        return func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130
    except DappForgeError as e:
        from dappforge.cli._output import OutputFormatter

        OutputFormatter(json_mode=json_mode).error(e, error_code=e.__class__.__name__)
        return 1


if __name__ == "__main__":
    sys.exit(main())
