"""
Operation dispatcher.

Turns ``(name, parameters)`` into a response string:
  lookup -> contract check -> render -> bridge run -> outcome mapping

Only one script runs against InDesign at a time; the dispatcher holds a
single-slot lock around the bridge call.  Lookup and validation failures
never reach the bridge, so they leave no temporary file behind.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND

import indesign_bridge
import operations
import outcome
from catalog import Operation, ValidationError
from extendscript import RenderError

log = logging.getLogger("indesign_bridge.dispatcher")


class DispatchError(Exception):
    """Base for everything ``Dispatcher.invoke`` raises."""

    code = INTERNAL_ERROR


class OperationNotFound(DispatchError):
    code = METHOD_NOT_FOUND

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class InvalidParameters(DispatchError):
    code = INVALID_PARAMS


class OperationFailed(DispatchError):
    """InDesign reported an error or could not be reached."""

    def __init__(self, name: str, result: outcome.EngineError | outcome.TransportError):
        super().__init__(f"Error executing tool {name}: {result.describe()}")
        self.name = name
        self.result = result


@dataclass(frozen=True)
class OperationRequest:
    name: str
    parameters: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters or {})))


class Dispatcher:
    """Serialised entry point for running catalog operations."""

    def __init__(self, transport: indesign_bridge.Transport | None = None,
                 catalog: Mapping[str, Operation] | None = None):
        self.transport = transport
        self.catalog = catalog if catalog is not None else operations.OPERATIONS
        self._lock = threading.Lock()

    def operation(self, name: str) -> Operation:
        op = self.catalog.get(name)
        if op is None:
            raise OperationNotFound(name)
        return op

    def prepare(self, request: OperationRequest) -> tuple[Operation, str]:
        """Validate *request* and render its payload without running it."""
        op = self.operation(request.name)
        try:
            params = op.validate(dict(request.parameters))
            payload = op.render(params)
        except (ValidationError, RenderError) as e:
            raise InvalidParameters(str(e)) from e
        return op, payload

    def dispatch(self, request: OperationRequest) -> str:
        op, payload = self.prepare(request)
        timeout = indesign_bridge.LONG_TIMEOUT if op.long_running else indesign_bridge.DEFAULT_TIMEOUT

        with self._lock:
            t0 = time.monotonic()
            result = indesign_bridge.run(
                payload,
                timeout=timeout,
                undo_name=op.undo_name,
                transport=self.transport,
            )
        elapsed = time.monotonic() - t0

        if isinstance(result, outcome.Success):
            log.info("%s ok in %.2fs", op.name, elapsed)
            return f"{op.label}: {result.text}"

        log.warning("%s failed in %.2fs: %s", op.name, elapsed, result.describe())
        raise OperationFailed(op.name, result)

    def invoke(self, name: str, parameters: Mapping[str, Any] | None = None) -> str:
        """Run operation *name* with *parameters*; return ``"<Label>: <text>"``.

        Raises OperationNotFound, InvalidParameters or OperationFailed.
        """
        return self.dispatch(OperationRequest(name, parameters or {}))
