"""Synchronous stdio loop: read a frame, dispatch, write the response."""

import logging
import sys
from typing import IO

from tridactyl_native.config import Config
from tridactyl_native.messaging.dispatcher import Dispatcher
from tridactyl_native.messaging.protocol import FrameDecodeError, Response, SessionClosedError, read_message, write_message
from tridactyl_native.operations import Operations

logger = logging.getLogger(__name__)


class BridgeServer:
    """Answers extension requests one at a time over a pair of binary streams."""

    def __init__(self, cfg: Config, dispatcher: Dispatcher | None = None) -> None:
        """Initialize the server.

        Args:
            cfg: Application configuration.
            dispatcher: Dispatcher to use; built from ``cfg`` if omitted.

        """
        self._cfg = cfg
        self._dispatcher = dispatcher if dispatcher is not None else Dispatcher(Operations(cfg))

    def serve(self, reader: IO[bytes], writer: IO[bytes]) -> None:
        """Run until the peer closes the stream or sends an undecodable frame."""
        logger.info("Session started (version %s)", self._cfg.version)
        while True:
            try:
                message = read_message(reader)
            except SessionClosedError as e:
                logger.info("Session closed: %s", e)
                return
            except FrameDecodeError as e:
                logger.error("Undecodable frame, ending session: %s", e)
                return

            if message is None:
                # zero length frame
                continue

            resp = self._handle(message)
            try:
                write_message(writer, resp.to_dict())
            except SessionClosedError as e:
                logger.info("Peer stopped reading: %s", e)
                return
            logger.debug("Sent response: %s", resp.cmd)

    def _handle(self, message: object) -> Response:
        """Dispatch a message, answering unexpected errors with a FAILED response."""
        try:
            return self._dispatcher.dispatch(message)
        except Exception:
            logger.exception("Error handling message")
            cmd = message.get("cmd") if isinstance(message, dict) else None
            return Response.failed(cmd) if isinstance(cmd, str) else Response.unhandled()


def run_server(cfg: Config) -> None:
    """Entry point: serve the extension over stdin/stdout."""
    BridgeServer(cfg).serve(sys.stdin.buffer, sys.stdout.buffer)
