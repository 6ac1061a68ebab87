"""Reads the stack-trace switch for unwrap diagnostics from the environment."""

from __future__ import annotations

import os

__all__ = ["STACK_TRACE_ENV_VAR", "stack_trace_enabled"]

STACK_TRACE_ENV_VAR = "RESULTAR_WITH_STACK_TRACE"


def stack_trace_enabled(*, override: bool | None = None) -> bool:
    """Whether a failed unsafe unwrap should attach the caller's stack.

    An explicit *override* wins. Without one, only the exact string ``"1"``
    in ``RESULTAR_WITH_STACK_TRACE`` turns capture on; ``"true"`` or ``"yes"``
    leave it off.
    """
    if override is not None:
        return bool(override)
    return os.getenv(STACK_TRACE_ENV_VAR) == "1"
