"""Host operations executed on behalf of the extension.

Every operation returns a self-contained ``Response``. Expected failures
(missing file, permission denied, bad encoding) are mapped to a result code
here or by the dispatcher; nothing is kept between calls.
"""

import base64
import logging
import os
import re
import shutil
import subprocess  # nosec B404
import tempfile
from collections.abc import Mapping
from pathlib import Path

from tridactyl_native.config import Config
from tridactyl_native.messaging import Code, Response
from tridactyl_native.paths import PathExpander, find_rc_file, sanitize_file_name

logger = logging.getLogger(__name__)

_DATA_URL_RE = re.compile(r"^data:((.*?)(;charset=.*?)?)(;base64)?,")


def decode_data_url(content: str) -> str:
    """Strip a ``data:`` URL prefix, base64-decoding the payload when marked.

    Content that is not a data URL is returned unchanged.

    Raises:
        ValueError: Payload is not valid base64 or does not decode to UTF-8.

    """
    match = _DATA_URL_RE.match(content)
    if match is None:
        return content
    payload = content[match.end() :]
    if match.group(4) is None:
        return payload
    return base64.b64decode(payload, validate=True).decode("utf-8")


def normalize_lines(text: str) -> str:
    """Terminate every line with ``\\n``, dropping ``\\r`` from ``\\r\\n`` endings."""
    if not text:
        return ""
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return "".join(line.removesuffix("\r") + "\n" for line in lines)


def _shell_argv(command: str) -> list[str]:
    """Return the platform shell invocation for a command string."""
    if os.name == "nt":
        return ["cmd", "/c", command]
    return ["sh", "-c", command]


class Operations:
    """The fixed catalog of host operations."""

    def __init__(self, cfg: Config, environ: Mapping[str, str] | None = None) -> None:
        """Initialize operations.

        Args:
            cfg: Application configuration.
            environ: Environment used for ``env`` lookups and ``$VAR`` expansion. Defaults to ``os.environ``.

        """
        self._cfg = cfg
        self._environ = os.environ if environ is None else environ
        self._paths = PathExpander(cfg.home_dir, self._environ, expand_env=cfg.expand_env)

    # --- Info ---

    def version(self) -> Response:
        """Report the build version."""
        return Response.success("version", version=self._cfg.version)

    def env(self, var: str) -> Response:
        """Look up an environment variable; the response has no content when it is unset."""
        value = self._environ.get(var)
        if value is None:
            logger.warning("Environment variable not set: %s", var)
            return Response(cmd="env")
        logger.info("Retrieved environment variable: %s", var)
        return Response(cmd="env", data={"content": value})

    def ppid(self) -> Response:
        """Report the id of this process."""
        pid = os.getpid()
        logger.info("Process id: %d", pid)
        return Response(cmd="ppid", data={"content": pid})

    # --- RC file ---

    def get_config(self) -> Response:
        """Return the contents of the RC file."""
        path = find_rc_file(self._cfg.rc_candidates)
        if path is None:
            logger.info("No rc file found")
            return Response.declined("getconfig")
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            logger.warning("Failed to read rc file %s", path, exc_info=True)
            return Response.failed("getconfig")
        return Response.success("getconfig", content=content)

    def get_config_path(self) -> Response:
        """Return the canonical absolute path of the RC file."""
        path = find_rc_file(self._cfg.rc_candidates)
        if path is None:
            return Response.declined("getconfigpath")
        try:
            resolved = path.resolve(strict=True)
        except OSError:
            logger.warning("Failed to resolve rc file %s", path, exc_info=True)
            return Response.failed("getconfigpath")
        return Response.success("getconfigpath", content=str(resolved))

    def write_rc(self, file: str, content: str, *, force: bool) -> Response:
        """Write an RC file unless it already exists and ``force`` is false."""
        path = self._paths.expand(file)
        if path.exists() and not force:
            logger.info("writerc %s: exists, not forced", path)
            return Response.declined("writerc")
        path.write_bytes(content.encode("utf-8"))
        logger.info("writerc %s: written (force=%s)", path, force)
        return Response.success("writerc")

    # --- Files ---

    def read(self, file: str) -> Response:
        """Read a UTF-8 text file."""
        path = self._paths.expand(file)
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, ValueError) as e:
            # ValueError: undecodable content or a NUL byte in the path
            logger.warning("read %s: %s", path, e)
            return Response.failed("read", content="")
        logger.info("read %s", path)
        return Response.success("read", content=content)

    def write(self, file: str, content: str) -> Response:
        """Write content, decoding data URLs, to the literal path given."""
        text = decode_data_url(content)
        Path(file).write_bytes(text.encode("utf-8"))
        logger.info("write %s", file)
        return Response.success("write")

    def mkdir(self, dir_: str) -> Response:
        """Create a directory and all missing parents."""
        path = self._paths.expand(dir_)
        path.mkdir(parents=True, exist_ok=True)
        logger.info("mkdir %s", path)
        return Response.success("mkdir")

    def list_dir(self, path_: str) -> Response:
        """List entry names of a directory, or of the parent of a non-directory path."""
        path = self._paths.expand_user(path_)
        # An empty path is not a directory; its parent falls back to the current directory.
        is_dir = bool(path_) and path.is_dir()
        target = path if is_dir else path.parent

        files: list[str] = []
        try:
            with os.scandir(target) as entries:
                files.extend(entry.name for entry in entries)
        except OSError as e:
            logger.warning("list_dir %s: %s", target, e)
        logger.info("list_dir %s: %d entries", target, len(files))
        return Response(cmd="list_dir", data={"isDir": is_dir, "files": files, "sep": os.sep})

    def temp(self, prefix: str, content: str) -> Response | None:
        """Write content to a new uniquely named temp file. Return None if it cannot be created."""
        try:
            with tempfile.NamedTemporaryFile(
                mode="wb", prefix=f"tmp_{sanitize_file_name(prefix)}_", suffix=".txt", delete=False
            ) as f:
                f.write(content.encode("utf-8"))
        except OSError:
            logger.exception("Failed to create temp file")
            return None
        logger.info("temp %s", f.name)
        return Response.success("temp", content=f.name)

    def move(self, from_: str, to: str, *, overwrite: bool, cleanup: bool) -> Response:
        """Move a file, into ``to`` when it is an existing directory.

        With ``cleanup``, the source is removed if it still exists after the attempt.
        """
        src = self._paths.expand(from_)
        dst = self._paths.expand(to)
        joined = dst / src.name

        code = Code.DECLINED
        if overwrite or not dst.exists() or joined.exists():
            target = joined if dst.is_dir() else dst
            try:
                shutil.move(src, target)
                code = Code.SUCCESS
            except OSError as e:
                logger.warning("move %s -> %s: %s", src, target, e)
                code = Code.FAILED
        logger.info("move %s -> %s: code %d", src, dst, code)

        if cleanup and src.exists():
            try:
                src.unlink()
            except OSError:
                logger.exception("Failed to clean up %s", src)
        return Response(cmd="move", code=code)

    # --- Processes ---

    def run(self, command: str, content: str | None) -> Response:
        """Run a shell command, feeding ``content`` on stdin, and capture its output."""
        try:
            # S603: running caller-supplied commands is this operation's purpose
            proc = subprocess.run(  # noqa: S603  # nosec B603
                _shell_argv(command),
                input=None if content is None else content.encode("utf-8"),
                stdin=subprocess.DEVNULL if content is None else None,
                stdout=subprocess.PIPE,
                check=False,
            )
        except OSError:
            logger.exception("Failed to run process: %r", command)
            return Response.failed("run", result="")
        logger.info("Ran process %r, exit status %d", command, proc.returncode)
        # Negative status: killed by a signal, no exit code to report
        code = proc.returncode if proc.returncode >= 0 else int(Code.SUCCESS)
        result = normalize_lines(proc.stdout.decode("utf-8", errors="replace"))
        return Response(cmd="run", code=code, data={"result": result})

    def run_async(self, command: str) -> Response:
        """Spawn a detached process from a whitespace-split command line. Failures are only logged."""
        argv = command.split()
        if not argv:
            logger.error("run_async: empty command")
            return Response(cmd="run_async")
        try:
            # S603: running caller-supplied commands is this operation's purpose
            subprocess.Popen(  # noqa: S603  # nosec B603
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            logger.error("Failed to spawn process %r: %s", command, e)
        else:
            logger.info("Spawned process %r", command)
        return Response(cmd="run_async")
