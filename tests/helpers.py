"""Test helpers (small, reusable doubles).

Keep this file tiny and purpose-built: it exists so suites share one
call-recording callback instead of growing ad-hoc counters.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Recorder:
    """Callable test double that records every call's arguments.

    Use it where a callback's call count matters (e.g. asserting that
    ``and_then`` never invokes its function on a failure).
    """

    returns: Any = None
    raises: BaseException | None = None
    calls: list[tuple[Any, ...]] = field(default_factory=list)

    def __call__(self, *args: Any) -> Any:
        self.calls.append(args)
        if self.raises is not None:
            raise self.raises
        return self.returns

    @property
    def call_count(self) -> int:
        return len(self.calls)


async def delayed(value: Any, delay_s: float) -> Any:
    """Return *value* after sleeping, to stagger settlement order."""
    await asyncio.sleep(delay_s)
    return value


async def delayed_raise(exc: BaseException, delay_s: float = 0) -> Any:
    """Raise *exc* after sleeping."""
    await asyncio.sleep(delay_s)
    raise exc
