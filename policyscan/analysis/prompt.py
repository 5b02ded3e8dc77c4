"""Prompt construction and response parsing for the compliance analysis."""

from __future__ import annotations

from pydantic import ValidationError

from policyscan.analysis.models import AnalysisResult
from policyscan.errors import AnalysisParseError

_OUTPUT_SHAPE = """\
{
    "structured_content": [<array of logical statements extracted from URL content>],
    "compliance_analysis": {
        "compliant": [<array of followed policies>],
        "non_compliant": [<array of policies not followed>]
    }
}"""


def build_prompt(policy_text: str, page_text: str, policy_source: str = "") -> str:
    """Return the single system message sent to the completion model.

    Both texts are embedded verbatim; they are expected to be sanitized
    already.
    """
    source = f" published at {policy_source}" if policy_source else ""
    return (
        "You are an expert at structured data extraction. "
        "You will analyze two pieces of content:\n"
        f"1. Compliance policies{source}\n"
        "2. Content from the provided URL\n\n"
        f"Compliance Policies Content:\n{policy_text}\n\n"
        f"URL Content to analyze:\n{page_text}\n\n"
        f"Respond in the following JSON format:\n{_OUTPUT_SHAPE}\n"
    )


def parse_analysis(content: str) -> AnalysisResult:
    """Parse the model's reply into an :class:`AnalysisResult`.

    Raises:
        AnalysisParseError: If *content* is not JSON, or is JSON of the
            wrong shape.
    """
    try:
        return AnalysisResult.model_validate_json(content)
    except ValidationError as exc:
        raise AnalysisParseError(str(exc)) from exc
