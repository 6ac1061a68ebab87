"""Result: a two-variant success/failure container.

``Success`` and ``Failure`` are small frozen dataclasses sharing one method
surface, so a ``Result`` can be threaded through ``map``/``and_then`` pipelines
without inspecting its tag. Domain failures are data, never raised.

Example:
    parsed = from_throwable(int)("42").map(lambda n: n * 2)
    parsed.unwrap_or(0)  # 84
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Generator
import dataclasses
import functools
import logging
import typing
from typing import TYPE_CHECKING, Any, NoReturn, overload

from resultar.config import ErrorConfig, resolve_error_config
from resultar.errors import SafeUnwrapMisuseError, UnwrapError

if TYPE_CHECKING:
    from resultar.result_async import ResultAsync

logger = logging.getLogger(__name__)

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure")


def _observe(name: str, f: Callable[..., object], *args: Any) -> None:
    """Run an observer callback, discarding anything it raises."""
    try:
        f(*args)
    except Exception:
        logger.debug("%s callback raised; result left unchanged", name, exc_info=True)


@dataclasses.dataclass(frozen=True, slots=True)
class Success[T]:
    """A successful result carrying ``value``."""

    value: T

    @property
    def error(self) -> None:
        """Always None: a success has no failure payload."""
        return None

    def is_success(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False

    def map[U](self, f: Callable[[T], U]) -> Success[U]:
        """Return ``Success(f(value))``."""
        return Success(f(self.value))

    def map_err(self, f: Callable[[Any], object]) -> Success[T]:
        return self

    def and_then[R](self, f: Callable[[T], R]) -> R:
        """Return whatever container ``f(value)`` produced, flattening one level."""
        return f(self.value)

    def or_else(self, f: Callable[[Any], object]) -> Success[T]:
        return self

    def if_(self, condition: Callable[[T], bool]) -> Conditional[T]:
        """Start a ``.if_(cond).true(f).false(g)`` branch on the success value."""

        def run(f_true: Callable[[T], Any], f_false: Callable[[T], Any]) -> Any:
            return f_true(self.value) if condition(self.value) else f_false(self.value)

        return Conditional(run)

    def async_and_then[U, F](
        self, f: Callable[[T], ResultAsync[U, F]]
    ) -> ResultAsync[U, F]:
        return f(self.value)

    def async_map[U](self, f: Callable[[T], Awaitable[U]]) -> ResultAsync[U, Any]:
        from resultar.result_async import from_safe_awaitable

        return from_safe_awaitable(f(self.value))

    def unwrap_or(self, default: object) -> T:
        return self.value

    def match[U](
        self, on_success: Callable[[T], U], on_failure: Callable[[Any], U]
    ) -> U:
        return on_success(self.value)

    def log(self, f: Callable[[T | None, Any], object]) -> Success[T]:
        """Call ``f(value, None)`` for its side effect."""
        _observe("log", f, self.value, None)
        return self

    def tap(self, f: Callable[[T], object]) -> Success[T]:
        _observe("tap", f, self.value)
        return self

    def tap_error(self, f: Callable[[Any], object]) -> Success[T]:
        return self

    def finally_(self, f: Callable[[T, None], object]) -> DisposableResult[T, Any]:
        return DisposableResult.run(self, f)

    def _unsafe_unwrap(self, config: ErrorConfig | None = None) -> T:
        """Return the value. Test-only; see ``_unsafe_unwrap_err``."""
        return self.value

    def _unsafe_unwrap_err(self, config: ErrorConfig | None = None) -> NoReturn:
        """Raise ``UnwrapError``: this is a success.

        **Unsafe**: meant for tests, never for production control flow.
        """
        cfg = resolve_error_config(config)
        raise UnwrapError(
            "Called `_unsafe_unwrap_err` on a Success",
            result=self,
            stack=cfg.capture_stack(),
        )

    def safe_unwrap(self) -> Generator[Any, Any, T]:
        """Produce the value without yielding; see ``safe_try``."""
        return self.value
        yield  # pragma: no cover

    def __iter__(self) -> Generator[Any, Any, T]:
        return self.safe_unwrap()


@dataclasses.dataclass(frozen=True, slots=True)
class Failure[E]:
    """A failed result carrying ``error``."""

    error: E

    @property
    def value(self) -> None:
        """Always None: a failure has no success payload."""
        return None

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True

    def map(self, f: Callable[[Any], object]) -> Failure[E]:
        return self

    def map_err[F](self, f: Callable[[E], F]) -> Failure[F]:
        """Return ``Failure(f(error))``."""
        return Failure(f(self.error))

    def and_then(self, f: Callable[[Any], object]) -> Failure[E]:
        return self

    def or_else[R](self, f: Callable[[E], R]) -> R:
        """Return the container ``f(error)`` produced, for recovery."""
        return f(self.error)

    def if_(self, condition: Callable[[Any], bool]) -> Conditional[Any]:
        return Conditional(lambda _f_true, _f_false: self)

    def async_and_then(self, f: Callable[[Any], object]) -> ResultAsync[Any, E]:
        from resultar.result_async import failure_async

        return failure_async(self.error)

    def async_map(self, f: Callable[[Any], object]) -> ResultAsync[Any, E]:
        from resultar.result_async import failure_async

        return failure_async(self.error)

    def unwrap_or[A](self, default: A) -> A:
        return default

    def match[U](
        self, on_success: Callable[[Any], U], on_failure: Callable[[E], U]
    ) -> U:
        return on_failure(self.error)

    def log(self, f: Callable[[Any, E | None], object]) -> Failure[E]:
        """Call ``f(None, error)`` for its side effect."""
        _observe("log", f, None, self.error)
        return self

    def tap(self, f: Callable[[Any], object]) -> Failure[E]:
        return self

    def tap_error(self, f: Callable[[E], object]) -> Failure[E]:
        _observe("tap_error", f, self.error)
        return self

    def finally_(self, f: Callable[[None, E], object]) -> DisposableResult[Any, E]:
        return DisposableResult.run(self, f)

    def _unsafe_unwrap(self, config: ErrorConfig | None = None) -> NoReturn:
        """Raise ``UnwrapError``: this is a failure.

        **Unsafe**: meant for tests, never for production control flow.
        """
        cfg = resolve_error_config(config)
        raise UnwrapError(
            "Called `_unsafe_unwrap` on a Failure",
            result=self,
            stack=cfg.capture_stack(),
        )

    def _unsafe_unwrap_err(self, config: ErrorConfig | None = None) -> E:
        return self.error

    def safe_unwrap(self) -> Generator[Failure[E], Any, NoReturn]:
        """Yield this failure once as an abort signal for ``safe_try``.

        Resuming the generator afterwards is a misuse and raises
        ``SafeUnwrapMisuseError``.
        """
        yield self
        raise SafeUnwrapMisuseError()

    def __iter__(self) -> Generator[Failure[E], Any, NoReturn]:
        return self.safe_unwrap()


Result = Success[TSuccess] | Failure[TFailure]


@dataclasses.dataclass(frozen=True, slots=True)
class Conditional[T]:
    """First stage of ``if_(cond).true(f).false(g)``."""

    _run: Callable[[Callable[[T], Any], Callable[[T], Any]], Any]

    def true(self, f_true: Callable[[T], Any]) -> ConditionalBranch[T]:
        return ConditionalBranch(self._run, f_true)


@dataclasses.dataclass(frozen=True, slots=True)
class ConditionalBranch[T]:
    """Second stage of ``if_``; ``false`` evaluates the branch."""

    _run: Callable[[Callable[[T], Any], Callable[[T], Any]], Any]
    _f_true: Callable[[T], Any]

    def false(self, f_false: Callable[[T], Any]) -> Any:
        return self._run(self._f_true, f_false)


class DisposableResult[T, E]:
    """Read-only view of a ``Result`` paired with a cleanup callback.

    The cleanup runs at most once. ``finally_`` invokes it right away, so the
    ``with`` form is accepted but exiting the block finds nothing left to do.
    """

    __slots__ = ("_disposed", "_finalizer", "result")

    def __init__(
        self, result: Result[T, E], finalizer: Callable[[T | None, E | None], object]
    ) -> None:
        self.result = result
        self._finalizer = finalizer
        self._disposed = False

    @classmethod
    def run(
        cls, result: Result[T, E], finalizer: Callable[[Any, Any], object]
    ) -> DisposableResult[T, E]:
        """Build the wrapper and dispose of it immediately."""
        disposable = cls(result, finalizer)
        disposable.dispose()
        return disposable

    @property
    def value(self) -> T | None:
        return self.result.value

    @property
    def error(self) -> E | None:
        return self.result.error

    @property
    def disposed(self) -> bool:
        return self._disposed

    def is_success(self) -> bool:
        return self.result.is_success()

    def is_failure(self) -> bool:
        return self.result.is_failure()

    def unwrap_or[A](self, default: A) -> T | A:
        return self.result.unwrap_or(default)

    def _unsafe_unwrap(self, config: ErrorConfig | None = None) -> T:
        return self.result._unsafe_unwrap(config)

    def _unsafe_unwrap_err(self, config: ErrorConfig | None = None) -> E:
        return self.result._unsafe_unwrap_err(config)

    def dispose(self) -> None:
        """Run the cleanup callback unless it already ran."""
        if self._disposed:
            return
        self._disposed = True
        self._finalizer(self.result.value, self.result.error)

    def __enter__(self) -> DisposableResult[T, E]:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.dispose()

    def __repr__(self) -> str:
        return f"DisposableResult({self.result!r}, disposed={self._disposed})"


def success[T](value: T) -> Success[T]:
    """Create a success holding *value*."""
    return Success(value)


def failure[E](error: E) -> Failure[E]:
    """Create a failure holding *error*."""
    return Failure(error)


def unit() -> Success[None]:
    """Create a success with no meaningful payload."""
    return Success(None)


@overload
def from_throwable[**P, R](
    fn: Callable[P, R], error_fn: None = None
) -> Callable[P, Result[R, Exception]]: ...


@overload
def from_throwable[**P, R, F](
    fn: Callable[P, R], error_fn: Callable[[Exception], F]
) -> Callable[P, Result[R, F]]: ...


def from_throwable(
    fn: Callable[..., Any], error_fn: Callable[[Exception], Any] | None = None
) -> Callable[..., Result[Any, Any]]:
    """Wrap *fn* so that it returns a ``Result`` instead of raising.

    Args:
        fn: Function to wrap.
        error_fn: Maps a caught exception to the failure payload. Without it
            the exception itself becomes the payload.

    Returns:
        A function with *fn*'s signature returning ``Success`` with the return
        value or ``Failure`` with the (mapped) exception.

    Example:
        safe_loads = from_throwable(json.loads, lambda e: f"bad json: {e}")
        safe_loads("{")  # Failure(error='bad json: ...')
    """

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Result[Any, Any]:
        try:
            return Success(fn(*args, **kwargs))
        except Exception as exc:
            return Failure(error_fn(exc) if error_fn is not None else exc)

    return wrapper


def try_catch[R, F](
    fn: Callable[[], R], error_fn: Callable[[Exception], F] | None = None
) -> Result[R, Any]:
    """Call *fn* now under the ``from_throwable`` contract."""
    return from_throwable(fn, error_fn)()
