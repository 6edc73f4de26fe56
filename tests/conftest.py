"""
Shared test fixtures and configuration.

Nothing here spawns a process: tests swap ``probes.capture`` and the
action runners for recorders.
"""

from pathlib import Path

import pytest

from jcli.core.models.catalog import CheckResult, InstallMethod, Tool, ToolCategory


@pytest.fixture
def fake_home(tmp_path: Path, monkeypatch) -> Path:
    """Point ``HOME`` at a temporary directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


class CommandRecorder:
    """Stands in for ``run_interactive`` / ``run_tee``; records argv."""

    def __init__(self, results=None):
        self.calls: list[list[str]] = []
        self._results = list(results or [])

    def __call__(self, cmd, **kwargs):
        self.calls.append(list(cmd))
        if self._results:
            return self._results.pop(0)
        return {"ok": True, "returncode": 0, "output": "", "error": ""}


@pytest.fixture
def recorder() -> CommandRecorder:
    return CommandRecorder()


def make_tool(name: str, installed: bool = False, version: str = "", state: dict | None = None, **fields) -> Tool:
    """A catalog tool whose check reads *state* instead of probing.

    Pass your own *state* dict to flip ``installed`` or ``version`` mid-test.
    """
    fields.setdefault("category", ToolCategory.DEVOPS)
    if state is None:
        state = {}
    state.setdefault("installed", installed)
    state.setdefault("version", version)

    def _check() -> CheckResult:
        return CheckResult(installed=state["installed"], version=state["version"])

    return Tool(name=name, check_fn=_check, **fields)


@pytest.fixture
def tool_factory():
    return make_tool


@pytest.fixture
def brew_tool():
    return make_tool("ripgrep", method=InstallMethod.BREW_FORMULA, formula="ripgrep")
