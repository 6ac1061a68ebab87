"""Exception hierarchy for resultar.

Domain failures travel as ``Failure`` payloads and are never raised. The
classes here cover misuse of the API only.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from resultar.result import Result

Variant = Literal["Success", "Failure"]


class ResultarError(Exception):
    """Base exception for all resultar errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(ResultarError):
    """Configuration validation failed."""


class UnwrapError(ResultarError):
    """An unsafe unwrap was called on the wrong variant.

    Test-only diagnostic: ``variant`` and ``value`` describe the container the
    call was made on, so assertion output shows what was actually there.
    ``stack`` holds the captured call stack when stack traces are enabled.
    """

    def __init__(
        self,
        message: str,
        *,
        result: Result[Any, Any],
        stack: str | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.result = result
        self.variant: Variant = "Success" if result.is_success() else "Failure"
        self.value = result.value if result.is_success() else result.error
        self.stack = stack

    @property
    def data(self) -> dict[str, Any]:
        """Return the mismatched variant's tag and payload."""
        return {"type": self.variant, "value": self.value}

    def __str__(self) -> str:
        msg = super().__str__()
        return f"{msg} ({self.variant}: {self.value!r})"


class SafeUnwrapMisuseError(ResultarError):
    """A ``safe_unwrap`` sequence was driven outside ``safe_try``."""

    def __init__(self, message: str | None = None, *, hint: str | None = None) -> None:
        super().__init__(
            message or "Do not use this generator out of `safe_try`",
            hint=hint
            or "Delegate with `yield from result` inside a `safe_try` body.",
        )
