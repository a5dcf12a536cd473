"""Shared pytest fixtures for the workvisor test suite.

Children are spawned from the current interpreter, either with inline
`-c` programs or with the bundled dummy worker, so the suite needs no
external binaries.
"""

from __future__ import annotations

import sys
import time
from typing import Callable, Iterator, List

import pytest

from workvisor.local.supervisor import ProcessStatus, Supervisor, SupervisorError

DUMMY_WORKER = ["-m", "workvisor.local.script_entry.dummy_worker"]
TERMINAL = (ProcessStatus.SUCCESS, ProcessStatus.FAILED)


def wait_for_status(supervisor: Supervisor, *statuses: ProcessStatus, timeout: float = 15.0) -> ProcessStatus:
    """Polls until the supervisor reports one of `statuses`."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        status = supervisor.status()
        if status in statuses:
            return status
        time.sleep(0.05)
    raise AssertionError(f"Status never reached {statuses}; last seen {supervisor.status()}")


def wait_for_output(supervisor: Supervisor, needle: bytes, timeout: float = 15.0) -> bytes:
    """Polls until the captured output contains `needle`."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        output = supervisor.logs()
        if needle in output:
            return output
        time.sleep(0.05)
    raise AssertionError(f"Output never contained {needle!r}; got {supervisor.logs()!r}")


@pytest.fixture
def make_supervisor() -> Iterator[Callable[..., Supervisor]]:
    """Builds supervisors around the current interpreter and stops leftover children on teardown."""
    created: List[Supervisor] = []

    def build(*arguments: str, **kwargs) -> Supervisor:
        supervisor = Supervisor(sys.executable, list(arguments), **kwargs)
        created.append(supervisor)
        return supervisor

    yield build

    for supervisor in created:
        try:
            supervisor.stop()
        except SupervisorError:
            continue
        wait_for_status(supervisor, *TERMINAL)


@pytest.fixture
def python_child(make_supervisor) -> Callable[..., Supervisor]:
    """Builds a supervisor running an inline Python program."""
    def build(code: str, **kwargs) -> Supervisor:
        return make_supervisor("-c", code, **kwargs)
    return build


@pytest.fixture
def dummy_worker(make_supervisor) -> Callable[..., Supervisor]:
    """Builds a supervisor running the bundled dummy worker with extra flags."""
    def build(*flags: str, **kwargs) -> Supervisor:
        return make_supervisor(*DUMMY_WORKER, *flags, **kwargs)
    return build
