"""Path helpers: variable substitution, tilde expansion, file name sanitization."""

import os
import re
from collections.abc import Callable, Mapping
from pathlib import Path

# $NAME or ${NAME}
_VAR_RE = re.compile(r"\$(\w+|\{[^}]*\})")


def expand_vars(text: str, lookup: Callable[[str], str | None]) -> str:
    """Substitute ``$NAME`` and ``${NAME}`` tokens using ``lookup``.

    Tokens whose name ``lookup`` cannot resolve are left verbatim.
    """
    if "$" not in text:
        return text

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name.startswith("{") and name.endswith("}"):
            name = name[1:-1]
        value = lookup(name)
        return match.group(0) if value is None else value

    return _VAR_RE.sub(_replace, text)


def expand_tilde(path: str, home: Path) -> Path:
    """Replace a leading ``~`` with the home directory."""
    if not path.startswith("~"):
        return Path(path)
    rest = path[1:].lstrip("/" + os.sep)
    return home / rest if rest else home


def sanitize_file_name(name: str) -> str:
    """Lowercase, keep only alphanumerics and dots, collapse ``..`` to ``.``."""
    kept = "".join(c for c in name.lower() if c.isalnum() or c == ".")
    return kept.replace("..", ".")


class PathExpander:
    """Resolve request paths against the invoking user's home and environment."""

    def __init__(self, home: Path, environ: Mapping[str, str], *, expand_env: bool) -> None:
        """Initialize the expander.

        Args:
            home: Directory substituted for a leading ``~``.
            environ: Variables available to ``$NAME`` substitution.
            expand_env: If False, ``$NAME`` tokens are never substituted.

        """
        self._home = home
        self._environ = environ
        self._expand_env = expand_env

    def expand(self, raw: str) -> Path:
        """Substitute environment variables (when enabled), then expand the tilde."""
        text = expand_vars(raw, self._environ.get) if self._expand_env else raw
        return expand_tilde(text, self._home)

    def expand_user(self, raw: str) -> Path:
        """Expand only the tilde."""
        return expand_tilde(raw, self._home)


def find_rc_file(candidates: tuple[Path, ...]) -> Path | None:
    """Return the first existing candidate, or None."""
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None
