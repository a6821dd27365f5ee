from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

import indesign_bridge


class FakeTransport(indesign_bridge.Transport):
    """Runs the real guard/temp-file path but answers instead of InDesign."""

    name = "fake"

    def __init__(self, scratch_dir: Path, result: Any = "ok",
                 failure: BaseException | None = None) -> None:
        super().__init__(scratch_dir)
        self.result = result
        self.failure = failure
        self.calls: list[dict] = []

    def _run_file(self, path: Path, timeout: float, undo_name: str | None) -> Any:
        self.calls.append({
            "script": path.read_text(encoding="utf-8-sig"),
            "timeout": timeout,
            "undo_name": undo_name,
        })
        if self.failure is not None:
            raise self.failure
        return self.result


@pytest.fixture
def fake_transport(tmp_path: Path) -> FakeTransport:
    return FakeTransport(tmp_path)


def leftovers(directory: Path) -> list[Path]:
    return list(directory.glob(f"{indesign_bridge.SCRIPT_PREFIX}*"))
