"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

import pytest

from winsvc_installer.infra.sc import CommandResult


class FakeServiceControl:
    """Records sc invocations and answers from a per-subcommand script."""

    def __init__(self, responses: dict[str, CommandResult] | None = None) -> None:
        self.responses = responses or {}
        self.calls: list[tuple[str, ...]] = []

    def run(self, *args: str) -> CommandResult:
        self.calls.append(args)
        return self.responses.get(args[0], CommandResult(0))

    @property
    def subcommands(self) -> list[str]:
        return [call[0] for call in self.calls]


@dataclass
class FakeChild:
    exit_code: int = 0
    output: list[str | None] = field(default_factory=list)
    errors: list[str | None] = field(default_factory=list)
    wait_error: Exception | None = None
    stream_error: Exception | None = None
    waited_with: list[float | None] = field(default_factory=list)
    close_calls: int = 0

    def stream_output(
        self,
        on_output: Callable[[str | None], None],
        on_error: Callable[[str | None], None],
    ) -> None:
        if self.stream_error is not None:
            raise self.stream_error
        for line in self.output:
            on_output(line)
        for line in self.errors:
            on_error(line)

    def wait(self, timeout: float | None = None) -> int:
        self.waited_with.append(timeout)
        if self.wait_error is not None:
            raise self.wait_error
        return self.exit_code

    def close(self) -> None:
        self.close_calls += 1


@dataclass
class FakeLauncher:
    privileged: bool = False
    child: FakeChild = field(default_factory=FakeChild)
    spawn_error: Exception | None = None
    spawned: list[tuple[str, list[str]]] = field(default_factory=list)

    def is_privileged(self) -> bool:
        return self.privileged

    def spawn_elevated(self, exe_path: str, args: Sequence[str]) -> FakeChild:
        self.spawned.append((exe_path, list(args)))
        if self.spawn_error is not None:
            raise self.spawn_error
        return self.child


@pytest.fixture
def fake_sc() -> FakeServiceControl:
    return FakeServiceControl()


@pytest.fixture
def fake_launcher() -> FakeLauncher:
    return FakeLauncher()
