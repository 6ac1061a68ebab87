"""safe_try: early-return-on-failure evaluation over generator bodies.

A body is a generator function. Each ``value = yield from container`` either
produces the success value or hands the evaluator a step:

- a ``Failure``: abort; that failure is the outcome and the body is closed.
- a ``ResultAsync``: pending; the evaluator awaits it and sends the settled
  ``Result`` back into the body, which then continues or aborts.

When the body returns, its ``Result`` (or ``ResultAsync``) is the outcome.

Example:
    def body():
        user = yield from find_user(uid)
        plan = yield from find_plan(user.plan_id)
        return success((user, plan))

    outcome = safe_try(body)
"""

from __future__ import annotations

from collections.abc import Callable, Generator
import inspect
from typing import Any

from resultar.errors import SafeUnwrapMisuseError
from resultar.result import Failure, Result, Success
from resultar.result_async import ResultAsync

type Body = Callable[[], Generator[Any, Any, Any]]


def _misuse(step: object) -> SafeUnwrapMisuseError:
    return SafeUnwrapMisuseError(
        f"safe_try body yielded {type(step).__name__}, expected a Failure or ResultAsync"
    )


def _check_outcome(outcome: Any) -> Result[Any, Any] | ResultAsync[Any, Any]:
    if isinstance(outcome, (Success, Failure, ResultAsync)):
        return outcome
    raise SafeUnwrapMisuseError(
        f"safe_try body returned {type(outcome).__name__}, expected a Result or ResultAsync",
        hint="End the body with `return success(...)` or `return failure(...)`.",
    )


def _start(body: Body) -> Generator[Any, Any, Any]:
    gen = body()
    if inspect.isasyncgen(gen):
        raise SafeUnwrapMisuseError(
            "safe_try body is an async generator, expected a plain generator",
            hint="Drop `async` from the body and delegate awaits with "
            "`yield from from_safe_awaitable(...)`.",
        )
    return gen


async def _settle_outcome(outcome: Any) -> Result[Any, Any]:
    checked = _check_outcome(outcome)
    if isinstance(checked, ResultAsync):
        return await checked
    return checked


async def _pump(gen: Generator[Any, Any, Any], step: Any) -> Result[Any, Any]:
    """Drive *gen* from *step* until it aborts or returns."""
    try:
        while True:
            if isinstance(step, Failure):
                return step
            if not isinstance(step, ResultAsync):
                raise _misuse(step)
            settled = await step
            try:
                step = gen.send(settled)
            except StopIteration as stop:
                return await _settle_outcome(stop.value)
    finally:
        gen.close()


def safe_try(body: Body) -> Result[Any, Any] | ResultAsync[Any, Any]:
    """Evaluate *body* until its first failure or its returned result.

    The first step is driven synchronously. A body that only delegates to
    plain results yields a ``Result``; as soon as it delegates to a
    ``ResultAsync`` the evaluation continues on the event loop and a
    ``ResultAsync`` is returned.
    """
    gen = _start(body)
    try:
        step = next(gen)
    except StopIteration as stop:
        return _check_outcome(stop.value)
    if isinstance(step, ResultAsync):
        return ResultAsync._defer(lambda: _pump(gen, step))
    try:
        if isinstance(step, Failure):
            return step
        raise _misuse(step)
    finally:
        gen.close()


def safe_try_async(body: Body) -> ResultAsync[Any, Any]:
    """Like ``safe_try`` but always returns a ``ResultAsync``.

    The body does not start until the returned container is awaited.
    """

    async def run() -> Result[Any, Any]:
        gen = _start(body)
        try:
            step = next(gen)
        except StopIteration as stop:
            return await _settle_outcome(stop.value)
        return await _pump(gen, step)

    return ResultAsync._defer(run)
