"""Structured output for the setup command in text and JSON modes."""

# ruff: noqa: T201  # this module is the output layer, print() is how it produces CLI output.

import json
import sys
from pathlib import Path
from typing import NoReturn

import typer


class Output:
    """Handles all CLI output in JSON or human-readable format.

    Never used while serving: stdout then belongs to the native messaging wire.
    """

    def __init__(self, *, json_mode: bool) -> None:
        """Initialize output handler.

        Args:
            json_mode: If True, output JSON envelopes; otherwise human-readable text.

        """
        self._json_mode = json_mode

    def print_error_and_exit(self, code: str, message: str) -> NoReturn:
        """Print an error in JSON or human-readable format and exit with code 1.

        Raises:
            typer.Exit: Always, with code 1.

        """
        if self._json_mode:
            print(json.dumps({"ok": False, "error": code, "message": message}))
        else:
            print(f"Error: {message}", file=sys.stderr)
        raise typer.Exit(code=1)

    def print_manifests_installed(self, paths: list[Path]) -> None:
        """Print the manifest files written by setup."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": {"installed": [str(p) for p in paths]}}))
        else:
            for path in paths:
                print(f"installing manifest to: {path}")
