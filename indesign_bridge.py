"""
InDesign Automation Bridge.

Runs one rendered ExtendScript payload in a running InDesign and returns a
classified outcome:
- The payload is wrapped by ``outcome.guard`` (engine errors come back as text)
- The guarded script is written to a uniquely named temporary .jsx file
- One outer automation call asks InDesign to run that file:
  ``osascript`` / AppleScript ``do script`` on macOS,
  COM ``DoScript`` via pywin32 on Windows
- The call is bounded by a timeout
- The temporary file is deleted on every exit path

Mutating operations pass an undo name so InDesign groups the whole run into
one undo step (UndoModes.ENTIRE_SCRIPT).

The transport does not serialise calls; callers must not run two scripts
against the same InDesign at once (see ``dispatcher.Dispatcher``).
"""

import contextlib
import logging
import os
import subprocess
import sys
import tempfile
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from pathlib import Path
from typing import Any, Callable, Iterator

import extendscript
import outcome

log = logging.getLogger("indesign_bridge")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SCRIPT_LANGUAGE_JAVASCRIPT = 1246973031

# UndoModes.ENTIRE_SCRIPT (from InDesign DOM / OMV XML)
UNDO_ENTIRE_SCRIPT = 1699963733      # UndoModes.ENTIRE_SCRIPT

# ProgIDs to try, newest first
PROGIDS = [
    "InDesign.Application.2026",
    "InDesign.Application.2025",
    "InDesign.Application",
]

# RPC_E_DISCONNECTED, RPC_S_SERVER_UNAVAILABLE, CO_E_OBJNOTCONNECTED, RPC_E_SERVERFAULT
CONNECTION_LOSS_HRESULTS = {-2147417848, -2147023174, -2147220992, -2147417851}

DEFAULT_TIMEOUT = float(os.environ.get("INDESIGN_EXEC_TIMEOUT", "30"))
LONG_TIMEOUT = float(os.environ.get("INDESIGN_LONG_TIMEOUT", "300"))
APP_NAME = os.environ.get("INDESIGN_APP_NAME", "Adobe InDesign 2025")
SCRATCH_DIR = os.environ.get("INDESIGN_SCRATCH_DIR") or None
TRANSPORT = os.environ.get("INDESIGN_TRANSPORT", "").strip().lower()

SCRIPT_PREFIX = "indesign_bridge_"


class TransportFailure(Exception):
    """The outer automation call did not complete.

    ``kind`` is one of ``"spawn"``, ``"exit"``, ``"timeout"`` or
    ``"unsupported"``; the message carries the raw diagnostic text.
    """

    def __init__(self, kind: str, diagnostic: str):
        super().__init__(diagnostic)
        self.kind = kind
        self.diagnostic = diagnostic


# ---------------------------------------------------------------------------
# Temporary script file
# ---------------------------------------------------------------------------

@contextlib.contextmanager
def scratch_script(script: str, directory: str | os.PathLike | None = None) -> Iterator[Path]:
    """Write *script* to a uniquely named .jsx file and remove it on exit."""
    try:
        fd, name = tempfile.mkstemp(prefix=SCRIPT_PREFIX, suffix=".jsx", dir=directory)
    except OSError as e:
        raise TransportFailure("spawn", f"Could not create temporary script: {e}") from e
    path = Path(name)
    try:
        try:
            # ExtendScript only reads a file as UTF-8 when it carries a BOM.
            with os.fdopen(fd, "w", encoding="utf-8-sig", newline="\n") as f:
                f.write(script)
        except OSError as e:
            raise TransportFailure("spawn", f"Could not write temporary script {path}: {e}") from e
        yield path
    finally:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            log.error("Could not remove temporary script %s: %s", path, e)


# ---------------------------------------------------------------------------
# Transports
# ---------------------------------------------------------------------------

class Transport:
    """Base class: guard the payload, scope the temp file, run it once."""

    name = "base"

    def __init__(self, scratch_dir: str | os.PathLike | None = None):
        self.scratch_dir = scratch_dir if scratch_dir is not None else SCRATCH_DIR

    def execute(
        self,
        payload: str,
        timeout: float | None = None,
        undo_name: str | None = None,
    ) -> Any:
        """Run *payload* in InDesign and return the raw result.

        Raises TransportFailure when the outer call fails or times out.
        The temporary script is gone by the time this returns or raises.
        """
        timeout = DEFAULT_TIMEOUT if timeout is None else timeout
        guarded = outcome.guard(payload)
        with scratch_script(guarded, self.scratch_dir) as path:
            log.debug("Running %s via %s (timeout %.0fs)", path.name, self.name, timeout)
            t0 = time.monotonic()
            raw = self._run_file(path, timeout, undo_name)
            log.debug("%s finished in %.2fs", path.name, time.monotonic() - t0)
            return raw

    def _run_file(self, path: Path, timeout: float, undo_name: str | None) -> Any:
        raise NotImplementedError


class OsascriptTransport(Transport):
    """macOS: ``osascript`` tells InDesign to ``do script`` the temp file."""

    name = "osascript"

    def __init__(
        self,
        app_name: str = APP_NAME,
        executable: str = "osascript",
        scratch_dir: str | os.PathLike | None = None,
    ):
        super().__init__(scratch_dir)
        self.app_name = app_name
        self.executable = executable

    def applescript(self, path: Path, undo_name: str | None = None) -> str:
        """Build the AppleScript that activates InDesign and runs *path*."""
        do_script = f"do script POSIX file {_applescript_quote(str(path))} language javascript"
        if undo_name:
            do_script += f" undo mode entire script undo name {_applescript_quote(undo_name)}"
        return (
            f"tell application {_applescript_quote(self.app_name)}\n"
            "activate\n"
            f"{do_script}\n"
            "end tell"
        )

    def _run_file(self, path: Path, timeout: float, undo_name: str | None) -> str:
        command = [self.executable, "-e", self.applescript(path, undo_name)]
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            log.warning("osascript timed out after %.0fs", timeout)
            raise TransportFailure("timeout", f"AppleScript execution timed out after {timeout:g}s")
        except OSError as e:
            raise TransportFailure("spawn", f"Could not start {self.executable}: {e}") from e

        if completed.returncode != 0:
            diagnostic = (completed.stderr or completed.stdout or "").strip()
            raise TransportFailure(
                "exit",
                f"AppleScript execution failed (exit {completed.returncode}): {diagnostic}",
            )
        return completed.stdout


class ComTransport(Transport):
    """Windows: COM ``DoScript`` of a bootstrap that evaluates the temp file.

    COM blocks the calling thread until ExtendScript finishes and a running
    script cannot be aborted, so the call runs on a dedicated worker thread
    and only the wait is bounded.  A timed-out script keeps the worker busy;
    later calls queue behind it.
    """

    name = "com"

    def __init__(
        self,
        connect: Callable[[], Any] | None = None,
        scratch_dir: str | os.PathLike | None = None,
    ):
        super().__init__(scratch_dir)
        if connect is None:
            self._connect = _com_connect
            initializer = _com_thread_init
        else:
            self._connect = connect
            initializer = None
        self._app = None
        self._executor = ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix="indesign-com",
            initializer=initializer,
        )

    def bootstrap(self, path: Path) -> str:
        """ExtendScript that brings InDesign forward and runs *path*."""
        return extendscript.template(
            """
            app.activate();
            $.evalFile(File($PATH$));
            """,
            path=path.as_posix(),
        ).text

    def _run_file(self, path: Path, timeout: float, undo_name: str | None) -> Any:
        future = self._executor.submit(self._do_script, self.bootstrap(path), undo_name)
        try:
            return future.result(timeout=timeout)
        except FutureTimeout:
            log.warning("DoScript did not finish within %.0fs", timeout)
            raise TransportFailure("timeout", f"DoScript timed out after {timeout:g}s")

    def _do_script(self, script: str, undo_name: str | None) -> Any:
        """Worker-thread side of the COM call."""
        if self._app is None:
            try:
                self._app = self._connect()
            except ConnectionError as e:
                raise TransportFailure("spawn", str(e)) from e
        try:
            if undo_name:
                return self._app.DoScript(
                    script,
                    SCRIPT_LANGUAGE_JAVASCRIPT,
                    [],                    # withArguments (empty)
                    UNDO_ENTIRE_SCRIPT,
                    undo_name,
                )
            return self._app.DoScript(script, SCRIPT_LANGUAGE_JAVASCRIPT)
        except Exception as e:  # pywintypes.com_error, raised by the COM layer
            hresult = e.args[0] if e.args and isinstance(e.args[0], int) else 0
            if hresult in CONNECTION_LOSS_HRESULTS:
                log.warning(
                    "Connection to InDesign lost (HRESULT %s). Will reconnect on next call.",
                    hex(hresult & 0xFFFFFFFF),
                )
                self._app = None
            raise TransportFailure("exit", f"COM DoScript failed: {_describe_com_error(e)}") from e


class UnsupportedTransport(Transport):
    """Placeholder on platforms without an InDesign automation host."""

    name = "unsupported"

    def _run_file(self, path: Path, timeout: float, undo_name: str | None) -> Any:
        raise TransportFailure(
            "unsupported",
            f"No InDesign automation host on platform {sys.platform!r} "
            "(set INDESIGN_TRANSPORT to 'osascript' or 'com')",
        )


# ---------------------------------------------------------------------------
# Transport selection
# ---------------------------------------------------------------------------

_transport: Transport | None = None
_transport_lock = threading.Lock()


def create_transport(kind: str | None = None) -> Transport:
    """Create a transport for *kind* (``osascript`` / ``com``) or the platform."""
    kind = kind or TRANSPORT
    if not kind:
        if sys.platform == "darwin":
            kind = "osascript"
        elif sys.platform == "win32":
            kind = "com"
    if kind == "osascript":
        return OsascriptTransport()
    if kind == "com":
        return ComTransport()
    return UnsupportedTransport()


def default_transport() -> Transport:
    """Return the process-wide transport, creating it on first use."""
    global _transport
    with _transport_lock:
        if _transport is None:
            _transport = create_transport()
            log.info("Using %s transport", _transport.name)
        return _transport


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def run(
    payload: str,
    timeout: float | None = None,
    undo_name: str | None = None,
    transport: Transport | None = None,
) -> outcome.ExecutionOutcome:
    """Execute *payload* and classify the result.

    Never raises for engine or transport problems; those come back as
    ``EngineError`` / ``TransportError``.
    """
    transport = transport or default_transport()
    try:
        raw = transport.execute(payload, timeout=timeout, undo_name=undo_name)
    except TransportFailure as e:
        log.warning("Transport failure (%s): %s", e.kind, e.diagnostic)
        return outcome.from_failure(e)
    return outcome.classify(raw)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _applescript_quote(text: str) -> str:
    """Quote *text* as an AppleScript string literal."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _com_thread_init():
    """Initialise COM on the worker thread."""
    import pythoncom

    pythoncom.CoInitialize()


def _com_connect() -> Any:
    """Connect to a running InDesign instance.

    Tries GetActiveObject first (attach to existing), falls back to Dispatch.
    Raises ConnectionError if InDesign is not reachable.
    """
    import pywintypes
    import win32com.client

    last_error = None
    for prog_id in PROGIDS:
        try:
            return win32com.client.GetActiveObject(prog_id)
        except pywintypes.com_error:
            pass

        try:
            app = win32com.client.Dispatch(prog_id)
            _ = app.Name  # Verify it's actually running
            return app
        except pywintypes.com_error as e:
            last_error = e

    raise ConnectionError(
        f"Could not connect to InDesign. Is it running? Last error: {last_error}"
    )


def _describe_com_error(e: Exception) -> str:
    """Extract a human-readable description from a COM exception."""
    desc = ""
    if len(e.args) > 2:
        excep = e.args[2]
        if excep and len(excep) > 2 and excep[2]:
            desc = str(excep[2])
    return desc or str(e)
