"""ResultAsync: an awaitable that settles to a ``Result``.

Every combinator returns a new ``ResultAsync`` whose continuation awaits the
previous container first, so callbacks run in the order they were chained.
Nothing is scheduled until the container (or one chained from it) is awaited.
The underlying computation runs at most once; later awaits share the same
future, the way ``asyncio`` futures are shared between waiters.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Generator, Sequence
import functools
import inspect
import logging
from typing import TYPE_CHECKING, Any

from resultar.errors import SafeUnwrapMisuseError
from resultar.result import Conditional, Failure, Result, Success

if TYPE_CHECKING:
    from resultar.combine import AsyncCombinable

logger = logging.getLogger(__name__)


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


async def _settle(container: Any) -> Result[Any, Any]:
    """Normalize a callback's ``Result``/``ResultAsync``/awaitable into a ``Result``."""
    settled = await _maybe_await(container)
    if not isinstance(settled, (Success, Failure)):
        raise TypeError(
            f"expected a Result or ResultAsync, got {type(container).__name__}"
        )
    return settled


async def _observe(name: str, f: Callable[..., Any], *args: Any) -> None:
    """Run an observer callback (sync or async), discarding anything it raises."""
    try:
        await _maybe_await(f(*args))
    except Exception:
        logger.debug("%s callback raised; result left unchanged", name, exc_info=True)


class ResultAsync[T, E]:
    """A pending computation of ``Result[T, E]``.

    Example:
        user = await fetch_user(uid).map(lambda u: u.name).unwrap_or("anonymous")
    """

    __slots__ = ("_factory", "_future", "_settled")

    def __init__(self, source: Awaitable[Result[T, E]] | Result[T, E]) -> None:
        self._future: asyncio.Future[Result[T, E]] | None = None
        if isinstance(source, (Success, Failure)):
            self._settled: Result[T, E] | None = source
            self._factory: Callable[[], Awaitable[Result[T, E]]] = functools.partial(
                _maybe_await, source
            )
        else:
            self._settled = None
            self._factory = lambda: source

    @classmethod
    def _defer(
        cls, factory: Callable[[], Awaitable[Result[T, E]]]
    ) -> ResultAsync[T, E]:
        """Wrap a computation that is only started on first await."""
        inst = cls.__new__(cls)
        inst._future = None
        inst._settled = None
        inst._factory = factory
        return inst

    async def _resolve(self) -> Result[T, E]:
        if self._settled is not None:
            return self._settled
        if self._future is None:
            self._future = asyncio.ensure_future(self._factory())
        # A cancelled waiter must not cancel the computation other waiters share.
        result = await asyncio.shield(self._future)
        self._settled = result
        return result

    def __await__(self) -> Generator[Any, None, Result[T, E]]:
        return self._resolve().__await__()

    def __repr__(self) -> str:
        if self._settled is not None:
            return f"ResultAsync({self._settled!r})"
        return "ResultAsync(<pending>)"

    # --- Combine helpers -------------------------------------------------

    @staticmethod
    def combine(items: Sequence[AsyncCombinable]) -> ResultAsync[list[Any], Any]:
        """First-error-wins aggregation; see ``resultar.combine``."""
        from resultar.combine import combine_result_async_list

        return combine_result_async_list(items)

    @staticmethod
    def combine_with_all_errors(
        items: Sequence[AsyncCombinable],
    ) -> ResultAsync[list[Any], list[Any]]:
        """All-errors aggregation; see ``resultar.combine``."""
        from resultar.combine import combine_result_async_list_with_all_errors

        return combine_result_async_list_with_all_errors(items)

    # --- Transformers ----------------------------------------------------

    def map[U](self, f: Callable[[T], U | Awaitable[U]]) -> ResultAsync[U, E]:
        """Transform the success value; *f* may be sync or async."""

        async def run() -> Result[U, E]:
            res = await self
            if res.is_failure():
                return res
            return Success(await _maybe_await(f(res.value)))

        return ResultAsync._defer(run)

    def map_err[F](self, f: Callable[[E], F | Awaitable[F]]) -> ResultAsync[T, F]:
        """Transform the failure payload; *f* may be sync or async."""

        async def run() -> Result[T, F]:
            res = await self
            if res.is_success():
                return res
            return Failure(await _maybe_await(f(res.error)))

        return ResultAsync._defer(run)

    def and_then[U, F](
        self, f: Callable[[T], Result[U, F] | ResultAsync[U, F]]
    ) -> ResultAsync[U, E | F]:
        """Chain a computation that may fail, sync or async.

        *f* may return a ``Result`` or a ``ResultAsync``; both are flattened
        into the returned container. Skipped on failure.
        """

        async def run() -> Result[U, E | F]:
            res = await self
            if res.is_failure():
                return res
            return await _settle(f(res.value))

        return ResultAsync._defer(run)

    def or_else[U, F](
        self, f: Callable[[E], Result[U, F] | ResultAsync[U, F]]
    ) -> ResultAsync[T | U, F]:
        """Recover from a failure with another ``Result``/``ResultAsync``."""

        async def run() -> Result[T | U, F]:
            res = await self
            if res.is_success():
                return res
            return await _settle(f(res.error))

        return ResultAsync._defer(run)

    def if_(self, condition: Callable[[T], bool]) -> Conditional[T]:
        """Branch on the success value: ``.if_(cond).true(f).false(g)``.

        Both branches may return a ``Result`` or ``ResultAsync``. On failure
        neither the condition nor a branch is evaluated.
        """

        def run(
            f_true: Callable[[T], Any], f_false: Callable[[T], Any]
        ) -> ResultAsync[Any, Any]:
            async def branch() -> Result[Any, Any]:
                res = await self
                if res.is_failure():
                    return res
                chosen = f_true if condition(res.value) else f_false
                return await _settle(chosen(res.value))

            return ResultAsync._defer(branch)

        return Conditional(run)

    # --- Observers -------------------------------------------------------

    def tap(self, f: Callable[[T], Any]) -> ResultAsync[T, E]:
        """Side effect on success; exceptions from *f* are swallowed."""

        async def run() -> Result[T, E]:
            res = await self
            if res.is_success():
                await _observe("tap", f, res.value)
            return res

        return ResultAsync._defer(run)

    def tap_error(self, f: Callable[[E], Any]) -> ResultAsync[T, E]:
        """Side effect on failure; exceptions from *f* are swallowed."""

        async def run() -> Result[T, E]:
            res = await self
            if res.is_failure():
                await _observe("tap_error", f, res.error)
            return res

        return ResultAsync._defer(run)

    def log(self, f: Callable[[T | None, E | None], Any]) -> ResultAsync[T, E]:
        """Call ``f(value, error)`` on either branch; exceptions are swallowed."""

        async def run() -> Result[T, E]:
            res = await self
            await _observe("log", f, res.value, res.error)
            return res

        return ResultAsync._defer(run)

    def finally_(self, f: Callable[[T | None, E | None], Any]) -> ResultAsync[T, E]:
        """Run cleanup once the computation settles, keeping its outcome.

        *f* receives ``(value, error)`` and may be async. A failing cleanup is
        logged and never replaces the settled result.
        """

        async def run() -> Result[T, E]:
            res = await self
            try:
                await _maybe_await(f(res.value, res.error))
            except Exception as exc:
                logger.warning("finally_ cleanup failed: %s", exc)
            return res

        return ResultAsync._defer(run)

    # --- Terminal observers ----------------------------------------------

    async def match[U](
        self,
        on_success: Callable[[T], U | Awaitable[U]],
        on_failure: Callable[[E], U | Awaitable[U]],
    ) -> U:
        """Settle and return the matching branch's value (awaited if needed)."""
        res = await self
        return await _maybe_await(res.match(on_success, on_failure))

    async def unwrap_or[A](self, default: A) -> T | A:
        res = await self
        return res.unwrap_or(default)

    # --- safe_try protocol -----------------------------------------------

    def safe_unwrap(self) -> Generator[Any, Any, T]:
        """Delegate to the settled ``Result``'s ``safe_unwrap`` inside ``safe_try``.

        Yields this container as a pending step; the evaluator awaits it and
        sends the settled ``Result`` back.
        """
        settled = yield self
        if not isinstance(settled, (Success, Failure)):
            raise SafeUnwrapMisuseError(
                "ResultAsync.safe_unwrap was resumed without a settled Result"
            )
        return (yield from settled.safe_unwrap())

    def __iter__(self) -> Generator[Any, Any, T]:
        return self.safe_unwrap()


def success_async[T](value: T) -> ResultAsync[T, Any]:
    """Create an already-settled successful ``ResultAsync``."""
    return ResultAsync(Success(value))


def failure_async[E](error: E) -> ResultAsync[Any, E]:
    """Create an already-settled failed ``ResultAsync``."""
    return ResultAsync(Failure(error))


def unit_async() -> ResultAsync[None, Any]:
    return ResultAsync(Success(None))


def from_awaitable[T, E](
    awaitable: Awaitable[T], error_fn: Callable[[Exception], E]
) -> ResultAsync[T, E]:
    """Settle to ``Success`` with the awaited value, or ``Failure(error_fn(exc))``.

    Example:
        body = from_awaitable(client.get(url), lambda e: f"fetch failed: {e}")
    """

    async def run() -> Result[T, E]:
        try:
            value = await awaitable
        except Exception as exc:
            return Failure(error_fn(exc))
        return Success(value)

    return ResultAsync._defer(run)


def from_safe_awaitable[T](awaitable: Awaitable[T]) -> ResultAsync[T, Any]:
    """Wrap an awaitable that is known not to raise.

    Nothing is caught: if the awaitable does raise, the exception surfaces
    from ``await`` on the returned container.
    """

    async def run() -> Result[T, Any]:
        return Success(await awaitable)

    return ResultAsync._defer(run)


def from_throwable_async[**P, T, E](
    fn: Callable[P, Awaitable[T]],
    error_fn: Callable[[Exception], E] | None = None,
) -> Callable[P, ResultAsync[T, Any]]:
    """Async counterpart of ``from_throwable``.

    Exceptions raised while calling *fn* or while awaiting its result become
    ``Failure(error_fn(exc))`` (or ``Failure(exc)`` without *error_fn*).
    """

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> ResultAsync[T, Any]:
        async def run() -> Result[T, Any]:
            try:
                value = await fn(*args, **kwargs)
            except Exception as exc:
                return Failure(error_fn(exc) if error_fn is not None else exc)
            return Success(value)

        return ResultAsync._defer(run)

    return wrapper


def try_catch_async[T, E](
    fn: Callable[[], Awaitable[T]],
    error_fn: Callable[[Exception], E] | None = None,
) -> ResultAsync[T, Any]:
    """Call *fn* under the ``from_throwable_async`` contract."""
    return from_throwable_async(fn, error_fn)()
