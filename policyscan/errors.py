"""Failure taxonomy for the fetch → sanitize → analyze pipeline.

Every failure is terminal for the request that raised it.  Each class knows
the HTTP status it maps to and the short ``error`` label sent to the caller,
so the API layer translates them in exactly one place.
"""

from __future__ import annotations

from typing import Any


class PipelineError(Exception):
    """Base class for every expected pipeline failure."""

    status_code: int = 500
    error: str = "Failed to process webpage content"

    def __init__(
        self,
        message: str = "",
        details: str | None = None,
        *,
        error: str | None = None,
    ) -> None:
        super().__init__(message or details or self.error)
        self.message = message
        self.details = details
        if error is not None:
            self.error = error

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body sent to the caller."""
        payload: dict[str, Any] = {"error": self.error, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidUrl(PipelineError):
    status_code = 400
    error = "Invalid URL format"

    def __init__(self, url: str) -> None:
        super().__init__("Please provide a valid URL")
        self.url = url


# ---------------------------------------------------------------------------
# Fetch failures
# ---------------------------------------------------------------------------

class FetchFailure(PipelineError):
    """Any failure of a single bounded fetch."""

    error = "Failed to fetch content"


class ResponseTooLarge(FetchFailure):
    status_code = 413
    error = "Response too large"

    def __init__(self, label: str, limit: int) -> None:
        mb = limit // (1024 * 1024)
        limit_text = f"{mb}MB" if mb else f"{limit} bytes"
        super().__init__(
            f"The {label} content exceeds the maximum allowed size of {limit_text}"
        )
        self.limit = limit


class RequestTimeout(FetchFailure):
    status_code = 504
    error = "Request timeout"

    def __init__(self, seconds: float, label: str = "") -> None:
        super().__init__(f"Request exceeded {seconds:g} seconds timeout limit")
        self.seconds = seconds
        self.label = label


class TransportError(FetchFailure):
    """DNS, connection or upstream-status failure.

    The underlying cause appears in both *message* and *details*.
    """

    def __init__(self, label: str, details: str) -> None:
        super().__init__(
            f"Could not retrieve the {label} content: {details}",
            details,
            error=f"Failed to fetch {label} content",
        )


# ---------------------------------------------------------------------------
# Analysis failures
# ---------------------------------------------------------------------------

class AnalysisError(PipelineError):
    """The completion model call failed for a reason other than a timeout."""

    def __init__(self, details: str, message: str = "The compliance analysis failed") -> None:
        super().__init__(f"{message}: {details}", details)


class AnalysisParseError(AnalysisError):
    """The model answered, but not with JSON of the expected shape."""

    def __init__(self, details: str) -> None:
        super().__init__(details, "The model response was not a valid analysis")
