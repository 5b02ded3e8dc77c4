"""Analysis package — prompt construction, model call, result parsing."""

from policyscan.analysis.llm import CompletionModel, LangChainCompletionModel
from policyscan.analysis.models import AnalysisResult, ComplianceAnalysis, Report
from policyscan.analysis.orchestrator import ComplianceAnalyzer

__all__ = [
    "AnalysisResult",
    "ComplianceAnalysis",
    "ComplianceAnalyzer",
    "CompletionModel",
    "LangChainCompletionModel",
    "Report",
]
