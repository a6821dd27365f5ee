"""
Execution outcomes and the engine-side error channel.

InDesign hands back a single value per script run, so success and failure
share one text channel.  This module owns both ends of that convention:

- ``guard()`` wraps a payload so that any ExtendScript exception becomes the
  string ``"ERROR: <message> (Line: <line or unknown>)"`` instead of aborting
  the outer automation call.
- ``classify()`` splits the returned text into ``Success`` or
  ``EngineError``; ``from_failure()`` turns a transport exception into
  ``TransportError``.

No other module needs to know the sentinel format.
"""

import re
from dataclasses import dataclass

SENTINEL = "ERROR: "

_LINE_SUFFIX = re.compile(r"^(?P<message>.*) \(Line: (?P<line>[^()]*)\)$", re.DOTALL)

# The payload is inlined rather than wrapped in a function so its final
# expression statement stays the completion value that InDesign returns.
_GUARD_TEMPLATE = """\
var __uiLevel = app.scriptPreferences.userInteractionLevel;
app.scriptPreferences.userInteractionLevel = UserInteractionLevels.NEVER_INTERACT;
try {
try {
$PAYLOAD$
} catch (__err) {
"ERROR: " + (__err.message || String(__err)) + " (Line: " + (__err.line || "unknown") + ")";
}
} finally {
app.scriptPreferences.userInteractionLevel = __uiLevel;
}
"""


@dataclass(frozen=True)
class Success:
    text: str


@dataclass(frozen=True)
class EngineError:
    """The ExtendScript engine raised while running the payload."""

    message: str
    line: str = "unknown"

    def describe(self) -> str:
        return f"{self.message} (Line: {self.line})"


@dataclass(frozen=True)
class TransportError:
    """The outer automation call failed, exited non-zero or timed out."""

    message: str

    def describe(self) -> str:
        return self.message


ExecutionOutcome = Success | EngineError | TransportError


def guard(payload: str) -> str:
    """Wrap *payload* so every inner exception comes back as sentinel text.

    Also suppresses modal dialogs for the duration of the run and restores
    the previous interaction level afterwards.
    """
    return _GUARD_TEMPLATE.replace("$PAYLOAD$", payload)


def classify(raw) -> ExecutionOutcome:
    """Classify the value returned by a completed automation call."""
    if raw is None:
        return Success("")
    text = raw if isinstance(raw, str) else str(raw)
    text = text.strip()
    if not text.startswith(SENTINEL):
        return Success(text)

    body = text[len(SENTINEL):]
    match = _LINE_SUFFIX.match(body)
    if match is None:
        return EngineError(body, "unknown")
    line = match.group("line").strip() or "unknown"
    return EngineError(match.group("message"), line)


def from_failure(exc: BaseException) -> TransportError:
    """Classify an exception raised by the transport step."""
    message = str(exc) or type(exc).__name__
    return TransportError(message)
