from __future__ import annotations

import pytest

import outcome
from outcome import EngineError, Success, TransportError


def test_plain_text_is_success() -> None:
    assert outcome.classify("  Page 2 deleted. Remaining pages: 3\n") == Success("Page 2 deleted. Remaining pages: 3")


def test_empty_and_missing_results_are_success() -> None:
    assert outcome.classify(None) == Success("")
    assert outcome.classify("") == Success("")


def test_non_string_results_are_stringified() -> None:
    assert outcome.classify(3) == Success("3")


def test_sentinel_with_line_is_engine_error() -> None:
    result = outcome.classify("ERROR: Object is invalid (Line: 12)")
    assert result == EngineError("Object is invalid", "12")
    assert result.describe() == "Object is invalid (Line: 12)"


def test_sentinel_without_line_defaults_to_unknown() -> None:
    assert outcome.classify("ERROR: boom") == EngineError("boom", "unknown")


def test_parentheses_in_message_are_kept() -> None:
    result = outcome.classify("ERROR: bad value (x) (Line: unknown)")
    assert result == EngineError("bad value (x)", "unknown")


@pytest.mark.parametrize(
    "raw",
    [None, "", "ok", "ERROR: x", "ERROR: x (Line: 1)", "error: lower case", " ERROR: padded (Line: 2) ", 0, 1.5],
)
def test_every_result_classifies_to_exactly_one_outcome(raw) -> None:
    result = outcome.classify(raw)
    assert isinstance(result, (Success, EngineError))
    assert isinstance(result, EngineError) == str(raw).strip().startswith(outcome.SENTINEL)


def test_from_failure_uses_the_diagnostic() -> None:
    assert outcome.from_failure(RuntimeError("osascript exited 1")) == TransportError("osascript exited 1")
    assert outcome.from_failure(TimeoutError()) == TransportError("TimeoutError")


def test_guard_wraps_payload_once_and_restores_interaction_level() -> None:
    guarded = outcome.guard('"done";')
    assert guarded.count('"done";') == 1
    assert "UserInteractionLevels.NEVER_INTERACT" in guarded
    assert "app.scriptPreferences.userInteractionLevel = __uiLevel;" in guarded
    assert '"ERROR: "' in guarded
    assert "(Line: " in guarded
