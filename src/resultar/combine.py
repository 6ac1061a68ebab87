"""Combine: aggregate ordered collections of results into one.

Two policies are provided, each in a sync and an async flavor:

- first-error-wins (``combine_result_list``): the first ``Failure`` in input
  order is the outcome; otherwise a ``Success`` with every value in order.
- all-errors (``combine_result_list_with_all_errors``): every failure payload
  is collected in encounter order; success values are only returned when
  nothing failed.

The async flavors await all elements concurrently with ``asyncio.gather``,
then apply the sync policy, so output order always follows input order.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence
from typing import Any, overload

from resultar.result import Failure, Result, Success
from resultar.result_async import ResultAsync

type AsyncCombinable = Result[Any, Any] | ResultAsync[Any, Any]


def _like(items: Sequence[Any], values: list[Any]) -> list[Any] | tuple[Any, ...]:
    # Tuples in, tuple out; any other sequence gives a list.
    return tuple(values) if isinstance(items, tuple) else values


def combine_result_list(
    results: Sequence[Result[Any, Any]],
) -> Result[list[Any] | tuple[Any, ...], Any]:
    """Short-circuit on the first failure, else collect all values."""
    values: list[Any] = []
    for result in results:
        if result.is_failure():
            return result
        values.append(result.value)
    return Success(_like(results, values))


def combine_result_list_with_all_errors(
    results: Sequence[Result[Any, Any]],
) -> Result[list[Any] | tuple[Any, ...], list[Any]]:
    """Collect every failure payload, or every value when nothing failed."""
    values: list[Any] = []
    errors: list[Any] = []
    for result in results:
        if result.is_failure():
            errors.append(result.error)
        else:
            values.append(result.value)
    if errors:
        return Failure(errors)
    return Success(_like(results, values))


async def _settle_all(
    items: Sequence[AsyncCombinable],
) -> list[Result[Any, Any]] | tuple[Result[Any, Any], ...]:
    pending = [
        item if isinstance(item, ResultAsync) else ResultAsync(item) for item in items
    ]
    return _like(items, list(await asyncio.gather(*pending)))


def combine_result_async_list(
    items: Sequence[AsyncCombinable],
) -> ResultAsync[list[Any], Any]:
    """Async first-error-wins: settle everything concurrently, then combine."""

    async def run() -> Result[list[Any], Any]:
        return combine_result_list(await _settle_all(items))

    return ResultAsync._defer(run)


def combine_result_async_list_with_all_errors(
    items: Sequence[AsyncCombinable],
) -> ResultAsync[list[Any], list[Any]]:
    """Async all-errors: settle everything concurrently, then combine."""

    async def run() -> Result[list[Any], list[Any]]:
        return combine_result_list_with_all_errors(await _settle_all(items))

    return ResultAsync._defer(run)


def _materialize(items: Iterable[Any]) -> Sequence[Any]:
    # Dispatch and the combine policy both iterate the input.
    return items if isinstance(items, (list, tuple)) else list(items)


def _has_pending(items: Sequence[Any]) -> bool:
    return any(isinstance(item, ResultAsync) for item in items)


@overload
def combine[T1, T2, E1, E2](
    items: tuple[Result[T1, E1], Result[T2, E2]],
) -> Result[tuple[T1, T2], E1 | E2]: ...


@overload
def combine[T1, T2, T3, E1, E2, E3](
    items: tuple[Result[T1, E1], Result[T2, E2], Result[T3, E3]],
) -> Result[tuple[T1, T2, T3], E1 | E2 | E3]: ...


@overload
def combine[T1, T2, T3, T4, E1, E2, E3, E4](
    items: tuple[Result[T1, E1], Result[T2, E2], Result[T3, E3], Result[T4, E4]],
) -> Result[tuple[T1, T2, T3, T4], E1 | E2 | E3 | E4]: ...


@overload
def combine[T, E](items: Iterable[Result[T, E]]) -> Result[list[T], E]: ...


@overload
def combine(items: Iterable[AsyncCombinable]) -> ResultAsync[list[Any], Any]: ...


def combine(items: Iterable[Any]) -> Any:
    """Combine results with the first-error-wins policy.

    Returns a ``ResultAsync`` when any element is a ``ResultAsync``, otherwise
    a plain ``Result``. Values keep input order; a list input yields a list and
    a tuple input yields a tuple of values.

    Example:
        combine([success(1), failure("a"), failure("b")])  # Failure(error='a')
    """
    items = _materialize(items)
    if _has_pending(items):
        return combine_result_async_list(items)
    return combine_result_list(items)


@overload
def combine_with_all_errors[T1, T2, E1, E2](
    items: tuple[Result[T1, E1], Result[T2, E2]],
) -> Result[tuple[T1, T2], list[E1 | E2]]: ...


@overload
def combine_with_all_errors[T1, T2, T3, E1, E2, E3](
    items: tuple[Result[T1, E1], Result[T2, E2], Result[T3, E3]],
) -> Result[tuple[T1, T2, T3], list[E1 | E2 | E3]]: ...


@overload
def combine_with_all_errors[T1, T2, T3, T4, E1, E2, E3, E4](
    items: tuple[Result[T1, E1], Result[T2, E2], Result[T3, E3], Result[T4, E4]],
) -> Result[tuple[T1, T2, T3, T4], list[E1 | E2 | E3 | E4]]: ...


@overload
def combine_with_all_errors[T, E](
    items: Iterable[Result[T, E]],
) -> Result[list[T], list[E]]: ...


@overload
def combine_with_all_errors(
    items: Iterable[AsyncCombinable],
) -> ResultAsync[list[Any], list[Any]]: ...


def combine_with_all_errors(items: Iterable[Any]) -> Any:
    """Combine results with the all-errors policy.

    Returns a ``ResultAsync`` when any element is a ``ResultAsync``, otherwise
    a plain ``Result``.

    Example:
        combine_with_all_errors([success(1), failure("a"), failure("b")])
        # Failure(error=['a', 'b'])
    """
    items = _materialize(items)
    if _has_pending(items):
        return combine_result_async_list_with_all_errors(items)
    return combine_result_list_with_all_errors(items)
