"""Application-layer errors – raised by the query engine itself."""

from __future__ import annotations

from typing import Any

from journal_query.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern."""

    default_code = "application_error"


class TimeoutError(ApplicationError):  # noqa: A001
    """Operation timed out."""

    default_code = "timeout"


class FrontierTimeoutError(TimeoutError):
    """The ordering frontier was not available within the request deadline.

    Transient: a tag query that sees this simply polls again later.
    """

    default_code = "frontier_timeout"

    def __init__(self, timeout: float, **kwargs: Any) -> None:
        super().__init__(
            f"Ordering frontier not available within {timeout}s",
            detail={"timeout": timeout},
            **kwargs,
        )
        self.timeout = timeout


__all__ = ["ApplicationError", "FrontierTimeoutError", "TimeoutError"]
