"""Route decoded messages to host operations."""

import logging
from collections.abc import Mapping

from tridactyl_native.messaging.protocol import Response
from tridactyl_native.operations import Operations

logger = logging.getLogger(__name__)


def _str(message: Mapping[str, object], key: str) -> str:
    """Return a string field, or an empty string if missing or not a string."""
    value = message.get(key)
    return value if isinstance(value, str) else ""


def _bool(message: Mapping[str, object], key: str) -> bool:
    """Return a boolean field, or False if missing or not a boolean."""
    value = message.get(key)
    return value if isinstance(value, bool) else False


def _optional_str(message: Mapping[str, object], key: str) -> str | None:
    """Return a string field, or None if missing or not a string."""
    value = message.get(key)
    return value if isinstance(value, str) else None


class Dispatcher:
    """Inspect the ``cmd`` field of a message and invoke the matching operation."""

    def __init__(self, operations: Operations) -> None:
        """Initialize the dispatcher.

        Args:
            operations: Host operations to route to.

        """
        self._ops = operations

    def dispatch(self, message: object) -> Response:
        """Handle one decoded message and return its response.

        Anything that is not an object with a known string ``cmd`` gets the
        generic unhandled response. ``OSError`` and ``ValueError`` raised by an
        operation become a ``FAILED`` response for that command.
        """
        if not isinstance(message, dict):
            return Response.unhandled()
        cmd = message.get("cmd")
        if not isinstance(cmd, str):
            return Response.unhandled()
        logger.debug("Request: %s", cmd)
        try:
            return self._route(cmd, message)
        except (OSError, ValueError) as e:
            logger.warning("%s failed: %s", cmd, e)
            return Response.failed(cmd)

    def _route(self, cmd: str, message: dict[str, object]) -> Response:
        """Extract parameters with defaults and call the operation for ``cmd``."""
        match cmd:
            case "version":
                return self._ops.version()
            case "getconfig":
                return self._ops.get_config()
            case "getconfigpath":
                return self._ops.get_config_path()
            case "read":
                return self._ops.read(_str(message, "file"))
            case "write":
                return self._ops.write(_str(message, "file"), _str(message, "content"))
            case "writerc":
                return self._ops.write_rc(_str(message, "file"), _str(message, "content"), force=_bool(message, "force"))
            case "move":
                return self._ops.move(
                    _str(message, "from"),
                    _str(message, "to"),
                    overwrite=_bool(message, "overwrite"),
                    cleanup=_bool(message, "cleanup"),
                )
            case "mkdir":
                return self._ops.mkdir(_str(message, "dir"))
            case "list_dir":
                return self._ops.list_dir(_str(message, "path"))
            case "temp":
                return self._ops.temp(_str(message, "prefix"), _str(message, "content")) or Response.unhandled()
            case "run":
                return self._ops.run(_str(message, "command"), _optional_str(message, "content"))
            case "run_async":
                return self._ops.run_async(_str(message, "command"))
            case "env":
                var = message.get("var")
                if not isinstance(var, str):
                    return Response.unhandled()
                return self._ops.env(var)
            case "ppid":
                return self._ops.ppid()
            case _:
                logger.warning("Unknown command: %s", cmd)
                return Response.unhandled()
