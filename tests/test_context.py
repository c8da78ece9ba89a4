# tests/test_context.py
from __future__ import annotations

from pathlib import Path

import pytest

from loginbench.credentials import Credential
from loginbench.scheduler import InvalidTransitionError, TaskContext, TaskState

CRED = Credential("alice", "secret")


def _running(index: int = 0) -> TaskContext:
    ctx = TaskContext(index, CRED)
    ctx.dispatch()
    ctx.start(100.0)
    return ctx


def test_success_path_records_both_times() -> None:
    ctx = _running()
    ctx.succeed(101.5)

    assert ctx.state is TaskState.SUCCEEDED
    assert ctx.terminal
    result = ctx.to_result()
    assert result.start_time == 100.0
    assert result.finish_time == 101.5
    assert result.failure_reason is None
    assert result.duration == 1.5


def test_driver_timing_overrides_start() -> None:
    ctx = _running()
    ctx.succeed(103.0, started=102.0)

    assert ctx.to_result().duration == 1.0


def test_failure_leaves_finish_time_absent() -> None:
    ctx = _running()
    ctx.fail("Ended on wrong page - https://idp/error")

    result = ctx.to_result()
    assert ctx.state is TaskState.FAILED
    assert result.finish_time is None
    assert result.duration is None
    assert result.failure_reason == "Ended on wrong page - https://idp/error"
    assert not result.succeeded


def test_empty_failure_reason_is_replaced() -> None:
    ctx = _running()
    ctx.fail("")

    assert ctx.failure_reason


def test_skip_only_from_created() -> None:
    ctx = TaskContext(3, CRED)
    ctx.skip("not run")

    assert ctx.state is TaskState.NOT_RUN
    assert ctx.start_time is None

    with pytest.raises(InvalidTransitionError):
        _running().skip("not run")


@pytest.mark.parametrize("terminal", ["succeed", "fail", "skip"])
def test_no_transition_leaves_terminal_state(terminal: str) -> None:
    ctx = TaskContext(0, CRED) if terminal == "skip" else _running()
    match terminal:
        case "succeed":
            ctx.succeed(200.0)
        case "fail":
            ctx.fail("boom")
        case "skip":
            ctx.skip("not run")

    state = ctx.state
    for move in (ctx.dispatch, lambda: ctx.start(1.0), lambda: ctx.succeed(2.0)):
        with pytest.raises(InvalidTransitionError):
            move()
    with pytest.raises(InvalidTransitionError):
        ctx.fail("again")
    assert ctx.state is state


def test_start_requires_dispatch() -> None:
    ctx = TaskContext(0, CRED)
    with pytest.raises(InvalidTransitionError) as e:
        ctx.start(1.0)

    assert e.value.current is TaskState.CREATED
    assert e.value.target is TaskState.RUNNING


def test_output_dir_uses_padded_index(tmp_path: Path) -> None:
    ctx = TaskContext(7, CRED, tmp_path)

    assert ctx.padded_index == "007"
    assert ctx.output_dir == tmp_path / "iteration-007"


def test_no_output_dir_without_destination() -> None:
    assert TaskContext(1, CRED).output_dir is None


def test_log_messages_are_prefixed(caplog: pytest.LogCaptureFixture) -> None:
    ctx = _running(12)
    with caplog.at_level("INFO"):
        ctx.succeed(101.0)

    assert "012: Success" in caplog.messages
