"""resultar: explicit success/failure values for sync and async Python.

Public API:
    - success(), failure(), unit(): build a Result
    - success_async(), failure_async(), unit_async(): build a ResultAsync
    - from_throwable(), from_awaitable(), from_safe_awaitable(),
      from_throwable_async(): wrap code that raises
    - combine(), combine_with_all_errors(): aggregate results
    - safe_try(), safe_try_async(): early-return-on-failure evaluation
    - ErrorConfig: options for the unsafe unwrap diagnostics
"""

from __future__ import annotations

import logging

from resultar.combine import (
    combine,
    combine_result_async_list,
    combine_result_async_list_with_all_errors,
    combine_result_list,
    combine_result_list_with_all_errors,
    combine_with_all_errors,
)
from resultar.config import ErrorConfig
from resultar.errors import (
    ConfigurationError,
    ResultarError,
    SafeUnwrapMisuseError,
    UnwrapError,
)
from resultar.result import (
    DisposableResult,
    Failure,
    Result,
    Success,
    failure,
    from_throwable,
    success,
    try_catch,
    unit,
)
from resultar.result_async import (
    ResultAsync,
    failure_async,
    from_awaitable,
    from_safe_awaitable,
    from_throwable_async,
    success_async,
    try_catch_async,
    unit_async,
)
from resultar.safe_try import safe_try, safe_try_async

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("resultar")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("resultar").addHandler(logging.NullHandler())

__all__ = [
    "ConfigurationError",
    "DisposableResult",
    "ErrorConfig",
    "Failure",
    "Result",
    "ResultAsync",
    "ResultarError",
    "SafeUnwrapMisuseError",
    "Success",
    "UnwrapError",
    "combine",
    "combine_result_async_list",
    "combine_result_async_list_with_all_errors",
    "combine_result_list",
    "combine_result_list_with_all_errors",
    "combine_with_all_errors",
    "failure",
    "failure_async",
    "from_awaitable",
    "from_safe_awaitable",
    "from_throwable",
    "from_throwable_async",
    "safe_try",
    "safe_try_async",
    "success",
    "success_async",
    "try_catch",
    "try_catch_async",
    "unit",
    "unit_async",
]
