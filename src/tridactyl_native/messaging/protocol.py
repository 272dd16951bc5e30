"""Native messaging wire protocol and response envelope.

Each frame is a 4-byte native-endian unsigned length followed by that many
bytes of UTF-8 JSON. A zero length frame carries no message.

Request:  {"cmd": "read", "file": "~/notes.txt"}
Response: {"cmd": "read", "code": 0, "content": "..."}
Error:    {"cmd": "error", "code": 1, "error": "Unhandled message"}
"""

import json
import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import IO, Any

# "=" is native byte order with standard size, so the prefix is always 4 bytes.
_LENGTH = struct.Struct("=I")

# Upper bound for a single read, so a huge declared length never allocates up front.
_READ_CHUNK = 65536


class Code(IntEnum):
    """Result code carried in the ``code`` field of a response."""

    SUCCESS = 0
    DECLINED = 1  # not found, precondition failed, nothing done
    FAILED = 2  # I/O or execution failure


class ProtocolError(Exception):
    """Base class for framing errors that end the session."""


class SessionClosedError(ProtocolError):
    """The peer closed the stream, possibly in the middle of a frame."""


class FrameDecodeError(ProtocolError):
    """A complete frame arrived but is not UTF-8 JSON."""


@dataclass(frozen=True)
class Response:
    """Bridge response: command echo, optional result code, and payload fields."""

    cmd: str
    code: int | None = None
    data: dict[str, object] = field(default_factory=dict)

    @staticmethod
    def success(cmd: str, **data: object) -> "Response":
        """Build a success response."""
        return Response(cmd=cmd, code=Code.SUCCESS, data=data)

    @staticmethod
    def declined(cmd: str, **data: object) -> "Response":
        """Build a response for a request that was not acted upon."""
        return Response(cmd=cmd, code=Code.DECLINED, data=data)

    @staticmethod
    def failed(cmd: str, **data: object) -> "Response":
        """Build a response for an attempted action that failed."""
        return Response(cmd=cmd, code=Code.FAILED, data=data)

    @staticmethod
    def unhandled() -> "Response":
        """Build the generic response for malformed or unknown requests."""
        return Response(cmd="error", code=Code.DECLINED, data={"error": "Unhandled message"})

    def to_dict(self) -> dict[str, object]:
        """Flatten into the JSON object sent over the wire."""
        payload: dict[str, object] = {"cmd": self.cmd}
        if self.code is not None:
            payload["code"] = int(self.code)
        payload.update(self.data)
        return payload


def encode_message(value: Any) -> bytes:
    """Serialize a value to compact JSON and prefix it with its byte length."""
    body = json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    return _LENGTH.pack(len(body)) + body


def _read_exact(stream: IO[bytes], size: int) -> bytes:
    """Read exactly ``size`` bytes.

    Raises:
        SessionClosedError: The stream ended first.

    """
    chunks: list[bytes] = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(min(remaining, _READ_CHUNK))
        if not chunk:
            msg = f"Stream closed with {remaining} of {size} bytes outstanding."
            raise SessionClosedError(msg)
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def read_message(stream: IO[bytes]) -> Any | None:
    """Read one frame and return the decoded JSON value, or None for a zero length frame.

    Raises:
        SessionClosedError: End of stream, including a truncated frame.
        FrameDecodeError: The payload is not valid UTF-8 JSON.

    """
    (length,) = _LENGTH.unpack(_read_exact(stream, _LENGTH.size))
    if length == 0:
        return None
    body = _read_exact(stream, length)
    try:
        return json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise FrameDecodeError(str(e)) from e


def write_message(stream: IO[bytes], value: Any) -> None:
    """Write one frame and flush.

    Raises:
        SessionClosedError: The peer stopped reading.

    """
    try:
        stream.write(encode_message(value))
        stream.flush()
    except (BrokenPipeError, ValueError) as e:
        # ValueError: write to a closed file object
        raise SessionClosedError(str(e)) from e
