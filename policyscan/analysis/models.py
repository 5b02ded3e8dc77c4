"""Result shapes returned by the completion model and by the API."""

from __future__ import annotations

from pydantic import BaseModel, field_validator


def _dedupe(labels: list[str]) -> list[str]:
    seen: set[str] = set()
    unique: list[str] = []
    for label in labels:
        if label not in seen:
            seen.add(label)
            unique.append(label)
    return unique


class ComplianceAnalysis(BaseModel):
    compliant: list[str]
    non_compliant: list[str]

    @field_validator("compliant", "non_compliant")
    @classmethod
    def _unique_labels(cls, value: list[str]) -> list[str]:
        # Policy labels form a set; keep the model's ordering of first mentions.
        return _dedupe(value)


class AnalysisResult(BaseModel):
    """What the model must answer with: statements plus the compliance split."""

    structured_content: list[str]
    compliance_analysis: ComplianceAnalysis


class Report(BaseModel):
    url: str
    analysis: AnalysisResult
