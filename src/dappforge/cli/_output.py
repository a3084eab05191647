"""CLI output formatting (JSON and text modes)."""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, Optional

from dappforge.core.exceptions import DappForgeError


class OutputFormatter:
    """Prints command results as JSON or as plain text."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        self.json_mode = json_mode
        self.indent = indent

    def success(self, data: Dict[str, Any], message: str, *, status: str = "success") -> None:
        if self.json_mode:
            print(json.dumps({"status": status, **data}, indent=self.indent, default=str))
        else:
            print(message)

    def error(self, error: Exception, message: Optional[str] = None, *, error_code: str = "error") -> None:
        """Report ``error`` on stderr.

        In JSON mode the payload carries the error's structured context when it
        is a DappForgeError.
        """
        msg = message or str(error)
        if self.json_mode:
            payload: Dict[str, Any] = {"error": error_code, "message": msg}
            if isinstance(error, DappForgeError):
                payload["details"] = error.to_json_error()
            print(json.dumps(payload, indent=self.indent, default=str), file=sys.stderr)
        else:
            print(f"Error: {msg}", file=sys.stderr)

    def json_output(self, data: Any) -> None:
        print(json.dumps(data, indent=self.indent, default=str))

    def text(self, message: str) -> None:
        if not self.json_mode:
            print(message)

    def text_kv(self, key: str, value: Any, prefix: str = "  ") -> None:
        if not self.json_mode:
            print(f"{prefix}{key}: {value}")


__all__ = ["OutputFormatter"]
