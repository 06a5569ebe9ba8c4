import io
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import pytest
from rich.console import Console

from mac_bootstrap.config import BootstrapConfig
from mac_bootstrap.runner import CommandResult


class FakeRunner:
    """Records every command and answers with canned results keyed by argv prefix."""

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self.inputs: List[Optional[bytes]] = []
        self._responses: Dict[Tuple[str, ...], Tuple[int, str]] = {}
        self._effects: Dict[Tuple[str, ...], Callable[[List[str]], None]] = {}

    def respond(self, prefix: Sequence[str], returncode: int = 0, stdout: str = "") -> None:
        self._responses[tuple(prefix)] = (returncode, stdout)

    def on(self, prefix: Sequence[str], effect: Callable[[List[str]], None]) -> None:
        self._effects[tuple(prefix)] = effect

    def run(self, args, *, capture=False, input_bytes=None) -> CommandResult:
        argv = [str(arg) for arg in args]
        self.calls.append(argv)
        self.inputs.append(input_bytes)
        for prefix, effect in self._effects.items():
            if tuple(argv[: len(prefix)]) == prefix:
                effect(argv)
        returncode, stdout = 0, ""
        best = -1
        for prefix, response in self._responses.items():
            if tuple(argv[: len(prefix)]) == prefix and len(prefix) > best:
                best = len(prefix)
                returncode, stdout = response
        return CommandResult(args=argv, returncode=returncode, stdout=stdout)

    def calls_to(self, *prefix: str) -> List[List[str]]:
        return [call for call in self.calls if tuple(call[: len(prefix)]) == prefix]


def make_ask(answers: Iterable[str]) -> Callable[[str], str]:
    remaining = iter(answers)
    asked: List[str] = []

    def ask(question: str) -> str:
        asked.append(question)
        try:
            return next(remaining)
        except StopIteration:
            raise EOFError from None

    ask.asked = asked  # type: ignore[attr-defined]
    return ask


def make_console() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None)


def console_text(console: Console) -> str:
    return console.file.getvalue()  # type: ignore[attr-defined]


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def config(tmp_path: Path) -> BootstrapConfig:
    return BootstrapConfig(ssh_dir=tmp_path / ".ssh", dotfiles_dir=tmp_path / ".dotfiles")
