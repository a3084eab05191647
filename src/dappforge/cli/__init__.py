"""
dappforge command-line interface.

Commands are discovered from subfolders (blueprint/, plugins/); each command
module exposes ``SUMMARY``, ``register_args(parser)`` and ``main(args)``.

Helpers for building commands:
- _output: JSON/text output formatting
- _args: common argument registration
- _utils: shared utilities
"""
from ._args import add_dry_run_flag, add_json_flag, add_repo_root_flag
from ._output import OutputFormatter
from ._utils import get_repo_root

__all__ = [
    "OutputFormatter",
    "add_dry_run_flag",
    "add_json_flag",
    "add_repo_root_flag",
    "get_repo_root",
]
