"""ResultAsync tests: awaiting, chaining, observers, and async wrappers."""

from __future__ import annotations

import asyncio
import logging

import pytest

from resultar import (
    ResultAsync,
    failure,
    failure_async,
    from_awaitable,
    from_safe_awaitable,
    from_throwable_async,
    success,
    success_async,
    try_catch_async,
    unit_async,
)
from tests.helpers import Recorder, delayed, delayed_raise

pytestmark = pytest.mark.unit


# =============================================================================
# Construction & awaiting
# =============================================================================


@pytest.mark.asyncio
async def test_success_async_awaits_to_success() -> None:
    res = await success_async(12)
    assert res == success(12)


@pytest.mark.asyncio
async def test_failure_async_awaits_to_failure() -> None:
    res = await failure_async("boom")
    assert res == failure("boom")


@pytest.mark.asyncio
async def test_unit_async_awaits_to_empty_success() -> None:
    assert await unit_async() == success(None)


@pytest.mark.asyncio
async def test_awaiting_twice_runs_the_computation_once() -> None:
    calls = Recorder()

    async def compute() -> int:
        calls()
        await asyncio.sleep(0)
        return 5

    res = from_safe_awaitable(compute())
    first, second = await asyncio.gather(res, res)
    third = await res

    assert first == second == third == success(5)
    assert calls.call_count == 1


@pytest.mark.asyncio
async def test_constructor_accepts_awaitables_of_results() -> None:
    async def produce():
        return failure("late")

    assert await ResultAsync(produce()) == failure("late")


@pytest.mark.asyncio
async def test_repr_shows_settled_or_pending() -> None:
    assert repr(success_async(1)) == "ResultAsync(Success(value=1))"

    pending = from_safe_awaitable(delayed("v", 0))
    assert repr(pending) == "ResultAsync(<pending>)"
    await pending
    assert repr(pending) == "ResultAsync(Success(value='v'))"


@pytest.mark.asyncio
async def test_chain_is_lazy_until_awaited() -> None:
    spy = Recorder(returns=2)
    chained = success_async(1).map(spy)
    await asyncio.sleep(0)
    assert spy.call_count == 0

    assert await chained == success(2)
    assert spy.call_count == 1


# =============================================================================
# map / map_err
# =============================================================================


@pytest.mark.asyncio
async def test_map_with_sync_function() -> None:
    res = await success_async(12).map(lambda x: x * 2)
    assert res == success(24)


@pytest.mark.asyncio
async def test_map_with_async_function() -> None:
    async def double(x: int) -> int:
        await asyncio.sleep(0)
        return x * 2

    assert await success_async(12).map(double) == success(24)


@pytest.mark.asyncio
async def test_map_skips_failures() -> None:
    spy = Recorder()
    assert await failure_async("boom").map(spy) == failure("boom")
    assert spy.call_count == 0


@pytest.mark.asyncio
async def test_map_err_with_sync_and_async_functions() -> None:
    async def shout(e: str) -> str:
        return e.upper()

    assert await failure_async("wrong").map_err(lambda e: f"{e}!") == failure("wrong!")
    assert await failure_async("wrong").map_err(shout) == failure("WRONG")


@pytest.mark.asyncio
async def test_map_err_skips_successes() -> None:
    spy = Recorder()
    assert await success_async(1).map_err(spy) == success(1)
    assert spy.call_count == 0


@pytest.mark.asyncio
async def test_map_callback_exceptions_propagate() -> None:
    def explode(_: int) -> int:
        raise ValueError("mapper failed")

    with pytest.raises(ValueError, match="mapper failed"):
        await success_async(1).map(explode)


# =============================================================================
# and_then / or_else / if_
# =============================================================================


@pytest.mark.asyncio
async def test_and_then_accepts_result_async() -> None:
    res = await success_async(12).and_then(lambda x: success_async(x + 1))
    assert res == success(13)


@pytest.mark.asyncio
async def test_and_then_accepts_plain_result() -> None:
    res = await success_async(12).and_then(lambda x: failure(f"no {x}"))
    assert res == failure("no 12")


@pytest.mark.asyncio
async def test_and_then_skips_failures() -> None:
    spy = Recorder(returns=success(1))
    assert await failure_async("boom").and_then(spy) == failure("boom")
    assert spy.call_count == 0


@pytest.mark.asyncio
async def test_and_then_rejects_non_results() -> None:
    with pytest.raises(TypeError, match="expected a Result"):
        await success_async(1).and_then(lambda x: x + 1)


@pytest.mark.asyncio
async def test_or_else_skips_successes() -> None:
    spy = Recorder(returns=success(0))
    assert await success_async("foo").or_else(spy) == success("foo")
    assert spy.call_count == 0


@pytest.mark.asyncio
async def test_or_else_recovers_with_result_or_result_async() -> None:
    recovered = await failure_async("bar").or_else(lambda _: success_async(1))
    assert recovered == success(1)

    replaced = await failure_async("bar").or_else(lambda e: failure(f"still {e}"))
    assert replaced == failure("still bar")


@pytest.mark.asyncio
async def test_if_branches_on_value() -> None:
    def check(res: ResultAsync[int, str]) -> ResultAsync[str, str]:
        return (
            res.if_(lambda x: x > 5)
            .true(lambda x: success_async(f"big:{x}"))
            .false(lambda x: failure(f"small:{x}"))
        )

    assert await check(success_async(10)) == success("big:10")
    assert await check(success_async(1)) == failure("small:1")


@pytest.mark.asyncio
async def test_if_skips_branches_on_failure() -> None:
    condition, on_true, on_false = Recorder(True), Recorder(), Recorder()
    res = await failure_async("boom").if_(condition).true(on_true).false(on_false)
    assert res == failure("boom")
    assert condition.call_count == on_true.call_count == on_false.call_count == 0


@pytest.mark.asyncio
async def test_continuations_run_in_chain_order() -> None:
    order: list[str] = []

    def step(name: str):
        def run(x: int) -> int:
            order.append(name)
            return x + 1

        return run

    res = await success_async(0).map(step("a")).map(step("b")).map(step("c"))
    assert res == success(3)
    assert order == ["a", "b", "c"]


# =============================================================================
# Terminal observers
# =============================================================================


@pytest.mark.asyncio
async def test_match_returns_plain_values() -> None:
    assert await success_async(2).match(lambda x: x * 10, lambda _: -1) == 20
    assert await failure_async("e").match(lambda _: 0, lambda e: f"err:{e}") == "err:e"


@pytest.mark.asyncio
async def test_match_awaits_async_branches() -> None:
    async def describe(x: int) -> str:
        return f"value {x}"

    assert await success_async(3).match(describe, str) == "value 3"


@pytest.mark.asyncio
async def test_unwrap_or() -> None:
    assert await success_async(12).unwrap_or(10) == 12
    assert await failure_async("e").unwrap_or(10) == 10


# =============================================================================
# tap / tap_error / log / finally_
# =============================================================================


@pytest.mark.asyncio
async def test_tap_observes_without_changing_value() -> None:
    original = {"name": "John"}
    spy = Recorder(returns={"name": "Alice"})

    mapped = success_async(original).tap(spy)

    assert isinstance(mapped, ResultAsync)
    res = await mapped
    assert res._unsafe_unwrap() is original
    assert spy.call_count == 1


@pytest.mark.asyncio
async def test_tap_skips_failures_and_tap_error_observes_them() -> None:
    on_ok, on_err = Recorder(), Recorder()
    res = await failure_async("Wrong format").tap(on_ok).tap_error(on_err)

    assert res == failure("Wrong format")
    assert on_ok.call_count == 0
    assert on_err.calls == [("Wrong format",)]


@pytest.mark.asyncio
async def test_async_observer_exceptions_are_swallowed() -> None:
    async def boom(*_: object) -> None:
        raise RuntimeError("observer failed")

    assert await success_async(1).tap(boom) == success(1)
    assert await failure_async("e").tap_error(boom) == failure("e")
    assert await success_async(1).log(boom) == success(1)


@pytest.mark.asyncio
async def test_log_runs_on_both_branches() -> None:
    spy = Recorder()
    await success_async(20).log(spy)
    await failure_async(40).log(spy)
    assert spy.calls == [(20, None), (None, 40)]


@pytest.mark.asyncio
async def test_finally_runs_after_settling_with_value() -> None:
    closed: list[tuple[object, object]] = []

    async def close(value: object, error: object) -> None:
        await asyncio.sleep(0)
        closed.append((value, error))

    res = await from_safe_awaitable(delayed(32, 0.01)).finally_(close)

    assert res == success(32)
    assert closed == [(32, None)]


@pytest.mark.asyncio
async def test_finally_runs_with_error() -> None:
    spy = Recorder()
    res = await from_awaitable(delayed_raise(OSError("EACCES")), str).finally_(spy)

    assert res == failure("EACCES")
    assert spy.calls == [(None, "EACCES")]


@pytest.mark.asyncio
async def test_finally_failure_does_not_change_outcome(
    caplog: pytest.LogCaptureFixture,
) -> None:
    spy = Recorder(raises=RuntimeError("close failed"))
    with caplog.at_level(logging.WARNING, logger="resultar"):
        res = await success_async(1).finally_(spy)

    assert res == success(1)
    assert spy.call_count == 1
    assert "cleanup failed" in caplog.text


# =============================================================================
# Wrappers
# =============================================================================


@pytest.mark.asyncio
async def test_from_safe_awaitable_wraps_value() -> None:
    assert await from_safe_awaitable(delayed(12, 0)) == success(12)


@pytest.mark.asyncio
async def test_from_safe_awaitable_does_not_catch() -> None:
    with pytest.raises(RuntimeError, match="unexpected"):
        await from_safe_awaitable(delayed_raise(RuntimeError("unexpected")))


@pytest.mark.asyncio
async def test_from_awaitable_maps_exceptions() -> None:
    res = await from_awaitable(
        delayed_raise(ValueError("oops")), lambda e: f"Oops: {e}"
    )
    assert res == failure("Oops: oops")


@pytest.mark.asyncio
async def test_from_awaitable_accepts_tasks() -> None:
    task = asyncio.ensure_future(delayed("done", 0))
    assert await from_awaitable(task, str) == success("done")


@pytest.mark.asyncio
async def test_from_throwable_async_wraps_results() -> None:
    async def fetch(x: int, *, scale: int = 1) -> int:
        await asyncio.sleep(0)
        return x * scale

    safe_fetch = from_throwable_async(fetch)
    assert isinstance(safe_fetch(1), ResultAsync)
    assert await safe_fetch(2, scale=3) == success(6)
    assert safe_fetch.__name__ == "fetch"


@pytest.mark.asyncio
async def test_from_throwable_async_handles_sync_and_async_raises() -> None:
    def raises_before_awaiting(_: str):
        raise LookupError("sync")

    async def raises_while_awaiting(_: str) -> str:
        await asyncio.sleep(0)
        raise LookupError("async")

    sync_res = await from_throwable_async(raises_before_awaiting)("x")
    async_res = await from_throwable_async(raises_while_awaiting, str)("x")

    assert isinstance(sync_res.error, LookupError)
    assert async_res == failure("async")


@pytest.mark.asyncio
async def test_try_catch_async() -> None:
    async def ok() -> int:
        return 1

    assert await try_catch_async(ok) == success(1)
    assert await try_catch_async(
        lambda: delayed_raise(KeyError("k")), lambda e: type(e).__name__
    ) == failure("KeyError")


@pytest.mark.asyncio
async def test_timed_out_waiter_leaves_the_computation_running() -> None:
    res = from_safe_awaitable(delayed("slow", 0.05))

    with pytest.raises(TimeoutError):
        await asyncio.wait_for(res, 0.01)

    assert await res == success("slow")
    assert repr(res) == "ResultAsync(Success(value='slow'))"


@pytest.mark.asyncio
async def test_cancelled_waiter_does_not_affect_other_waiters() -> None:
    res = from_safe_awaitable(delayed(7, 0.03))
    cancelled = asyncio.ensure_future(res)
    survivor = asyncio.ensure_future(res)
    await asyncio.sleep(0)

    cancelled.cancel()

    assert await survivor == success(7)
    assert cancelled.cancelled()
