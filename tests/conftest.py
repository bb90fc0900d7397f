"""Shared test fixtures."""

from collections.abc import Iterable, Iterator
from pathlib import Path

import pytest

import fast_task.settings as settings_module
from fast_task.models import ConnectionProfile, IssueType

ENDPOINT = "https://jira.example.com"


class ScriptedPrompter:
    """Prompter that replays canned answers and records what was asked."""

    def __init__(
        self,
        selects: Iterable[str] = (),
        texts: Iterable[str] = (),
        confirms: Iterable[bool] = (),
    ) -> None:
        self.selects = list(selects)
        self.texts = list(texts)
        self.confirms = list(confirms)
        self.select_calls: list[tuple[str, list[str]]] = []
        self.text_calls: list[str] = []
        self.confirm_calls: list[str] = []
        self.shown: list[str] = []

    def select(self, message: str, options: list[str], help_text: str = "") -> str:
        self.select_calls.append((message, list(options)))
        return self.selects.pop(0)

    def text(self, message: str, help_text: str = "", hide_input: bool = False) -> str:
        self.text_calls.append(message)
        return self.texts.pop(0)

    def confirm(self, message: str, default: bool = False) -> bool:
        self.confirm_calls.append(message)
        return self.confirms.pop(0)

    def show(self, message: str) -> None:
        self.shown.append(message)


@pytest.fixture
def profile() -> ConnectionProfile:
    return ConnectionProfile(
        endpoint=ENDPOINT,
        identity="ops@example.com",
        credential="tok_secret",
        projects={"OPS": "Infra"},
    )


@pytest.fixture
def bug_type() -> IssueType:
    return IssueType(id="10001", name="Bug", description=None)


@pytest.fixture
def config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point the config store at a temp file."""
    path = tmp_path / "fast-task" / "config.json"
    monkeypatch.setenv("FAST_TASK_CONFIG_PATH", str(path))
    settings_module.get_settings.cache_clear()
    yield path
    settings_module.get_settings.cache_clear()


@pytest.fixture
def make_prompter() -> type[ScriptedPrompter]:
    return ScriptedPrompter
