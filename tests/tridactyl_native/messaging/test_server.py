"""Tests for the stdio message loop."""

import io
import struct

from tridactyl_native.config import Config
from tridactyl_native.messaging.dispatcher import Dispatcher
from tridactyl_native.messaging.protocol import Response, encode_message, read_message
from tridactyl_native.messaging.server import BridgeServer


def run_session(cfg: Config, data: bytes, dispatcher: Dispatcher | None = None) -> list[object]:
    """Serve a byte stream and return every decoded response."""
    out = io.BytesIO()
    BridgeServer(cfg, dispatcher).serve(io.BytesIO(data), out)
    out.seek(0)
    responses = []
    while out.tell() < len(out.getvalue()):
        responses.append(read_message(out))
    return responses


class ExplodingDispatcher(Dispatcher):
    """Dispatcher whose every call raises an unexpected error."""

    def __init__(self) -> None:
        pass

    def dispatch(self, message: object) -> Response:
        raise RuntimeError("boom")


class TestServe:
    """Request/response ordering and session termination."""

    def test_responses_in_order(self, cfg: Config):
        """Each request is answered in receipt order."""
        data = encode_message({"cmd": "version"}) + encode_message({"cmd": "bogus"})
        assert run_session(cfg, data) == [
            {"cmd": "version", "code": 0, "version": cfg.version},
            {"cmd": "error", "code": 1, "error": "Unhandled message"},
        ]

    def test_zero_frame_skipped(self, cfg: Config):
        """A zero length frame produces no response and does not end the session."""
        data = struct.pack("=I", 0) + encode_message({"cmd": "version"})
        assert run_session(cfg, data) == [{"cmd": "version", "code": 0, "version": cfg.version}]

    def test_empty_input(self, cfg: Config):
        """Immediate end of stream ends the session without output."""
        assert run_session(cfg, b"") == []

    def test_truncated_frame_ends_session(self, cfg: Config):
        """A frame longer than the available bytes ends the session cleanly."""
        data = encode_message({"cmd": "version"}) + struct.pack("=I", 1000) + b'{"cmd"'
        assert run_session(cfg, data) == [{"cmd": "version", "code": 0, "version": cfg.version}]

    def test_invalid_json_ends_session(self, cfg: Config):
        """An undecodable frame ends the session without a response."""
        body = b"{oops"
        data = struct.pack("=I", len(body)) + body + encode_message({"cmd": "version"})
        assert run_session(cfg, data) == []

    def test_unexpected_error_answered(self, cfg: Config):
        """An unexpected exception gets a FAILED response and the loop continues."""
        data = encode_message({"cmd": "version"}) + encode_message("not an object")
        assert run_session(cfg, data, ExplodingDispatcher()) == [
            {"cmd": "version", "code": 2},
            {"cmd": "error", "code": 1, "error": "Unhandled message"},
        ]

    def test_closed_output_ends_session(self, cfg: Config):
        """A closed output stream ends the session."""
        out = io.BytesIO()
        out.close()
        BridgeServer(cfg).serve(io.BytesIO(encode_message({"cmd": "version"})), out)
