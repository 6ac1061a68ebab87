"""Configuration: frozen options for unwrap diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
import traceback

from dotenv import load_dotenv

from resultar._flags import STACK_TRACE_ENV_VAR, stack_trace_enabled
from resultar.errors import ConfigurationError

load_dotenv()


@dataclass(frozen=True)
class ErrorConfig:
    """Immutable options consumed by ``_unsafe_unwrap`` and ``_unsafe_unwrap_err``.

    ``with_stack_trace`` is auto-resolved from ``RESULTAR_WITH_STACK_TRACE``
    when *None*. Capturing a stack is off by default because it costs a frame
    walk on every failed unwrap.

    Example:
        result._unsafe_unwrap(ErrorConfig(with_stack_trace=True))
    """

    with_stack_trace: bool | None = None

    def __post_init__(self) -> None:
        """Validate and resolve the stack-trace toggle."""
        if self.with_stack_trace is not None and not isinstance(
            self.with_stack_trace, bool
        ):
            raise ConfigurationError(
                f"with_stack_trace must be a bool, got {self.with_stack_trace!r}",
                hint=f"Pass True/False or set {STACK_TRACE_ENV_VAR}=1.",
            )
        if self.with_stack_trace is None:
            object.__setattr__(self, "with_stack_trace", stack_trace_enabled())

    def capture_stack(self) -> str | None:
        """Return the caller's formatted stack when enabled, else None."""
        if not self.with_stack_trace:
            return None
        # Drop this frame and the unwrap method that called it.
        return "".join(traceback.format_stack()[:-2])


def resolve_error_config(config: ErrorConfig | None = None) -> ErrorConfig:
    """Return *config*, or a fresh default that reflects the current environment."""
    return config if config is not None else ErrorConfig()
