from __future__ import annotations

import json

import pytest

import manage
from conftest import FakeTransport
from dispatcher import Dispatcher


def test_list(capsys: pytest.CaptureFixture[str]) -> None:
    code = manage.main(["list"])
    output = capsys.readouterr().out
    assert code == 0
    assert "Pages:" in output
    assert "delete_page" in output
    assert "36 operations" in output


def test_describe(capsys: pytest.CaptureFixture[str]) -> None:
    code = manage.main(["describe", "delete_page"])
    output = capsys.readouterr().out
    assert code == 0
    schema = json.loads(output[output.index("{"):])
    assert schema["required"] == ["pageIndex"]


def test_describe_unknown(capsys: pytest.CaptureFixture[str]) -> None:
    assert manage.main(["describe", "nope"]) == 1
    assert "Unknown tool: nope" in capsys.readouterr().out


def test_render(capsys: pytest.CaptureFixture[str]) -> None:
    code = manage.main(["render", "delete_page", "--params", '{"pageIndex": 2}'])
    output = capsys.readouterr().out
    assert code == 0
    assert "doc.pages[2].remove();" in output
    assert "NEVER_INTERACT" not in output


def test_render_guarded(capsys: pytest.CaptureFixture[str]) -> None:
    assert manage.main(["render", "list_layers", "--guarded"]) == 0
    assert "NEVER_INTERACT" in capsys.readouterr().out


@pytest.mark.parametrize(
    "params, message",
    [
        ("{not json", "not valid JSON"),
        ("[1, 2]", "must be a JSON object"),
        ("{}", "Missing required parameter: pageIndex"),
    ],
)
def test_render_rejections(capsys: pytest.CaptureFixture[str], params: str, message: str) -> None:
    assert manage.main(["render", "delete_page", "--params", params]) == 1
    assert message in capsys.readouterr().out


def test_run(tmp_path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    fake = FakeTransport(tmp_path, result="Layer 'Notes' created successfully")
    monkeypatch.setattr(manage, "Dispatcher", lambda: Dispatcher(fake))
    code = manage.main(["run", "create_layer", "--params", '{"name": "Notes"}'])
    assert code == 0
    assert capsys.readouterr().out.strip() == "Create Layer: Layer 'Notes' created successfully"


def test_run_failure(tmp_path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    fake = FakeTransport(tmp_path, result="ERROR: Layer is locked (Line: 9)")
    monkeypatch.setattr(manage, "Dispatcher", lambda: Dispatcher(fake))
    assert manage.main(["run", "list_layers"]) == 1
    assert "Error executing tool list_layers: Layer is locked (Line: 9)" in capsys.readouterr().out


def test_check(tmp_path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    fake = FakeTransport(tmp_path, result="Adobe InDesign 20.0|2")
    monkeypatch.setattr(manage.indesign_bridge, "default_transport", lambda: fake)
    assert manage.main(["check"]) == 0
    output = capsys.readouterr().out
    assert "Transport:      fake" in output
    assert "Open documents: 2" in output


def test_no_command_prints_help() -> None:
    assert manage.main([]) == 1
