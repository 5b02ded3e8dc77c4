"""Two-stage compliance analysis: fetch the policy, then ask the model.

``ComplianceAnalyzer.analyze_url`` runs the whole pipeline for one request::

    validate URL → fetch page → sanitize → analyze
                                            │
            fetch policy → sanitize → build prompt → model → parse

Every step either completes or raises a :class:`~policyscan.errors.PipelineError`;
nothing later in the chain runs after a failure, and nothing is cached
between calls.  The policy document is re-fetched on every analysis so the
rules are always current.
"""

from __future__ import annotations

import logging

from pydantic import HttpUrl, TypeAdapter, ValidationError

from policyscan.analysis.llm import CompletionModel, LangChainCompletionModel
from policyscan.analysis.models import AnalysisResult, Report
from policyscan.analysis.prompt import build_prompt, parse_analysis
from policyscan.config import Settings
from policyscan.errors import AnalysisError, InvalidUrl, PipelineError
from policyscan.scraper.fetcher import BoundedFetcher, Fetcher, proxy_target
from policyscan.scraper.sanitizer import sanitize

logger = logging.getLogger(__name__)

_HTTP_URL = TypeAdapter(HttpUrl)

POLICY_LABEL = "compliance policies"
PAGE_LABEL = "webpage"


def validate_target_url(url: str) -> str:
    """Return ``https://<url>`` if it parses as an absolute URL.

    *url* is the bare host+path the caller supplied, without a scheme.

    Raises:
        InvalidUrl: If the prefixed string is not a well-formed URL.
    """
    candidate = f"https://{url}"
    try:
        _HTTP_URL.validate_python(candidate)
    except ValidationError as exc:
        raise InvalidUrl(url) from exc
    return candidate


class ComplianceAnalyzer:
    """Stateless pipeline runner; one instance serves every request.

    Args:
        settings: Read-only configuration (ceiling, timeouts, proxy, policy URL).
        fetcher: Bounded fetch capability.  Defaults to a :class:`BoundedFetcher`
            using ``settings.max_response_size``.
        model: Completion model.  Defaults to :class:`LangChainCompletionModel`.
    """

    def __init__(
        self,
        settings: Settings,
        fetcher: Fetcher | None = None,
        model: CompletionModel | None = None,
    ) -> None:
        self.settings = settings
        self.fetcher = fetcher or BoundedFetcher(settings.max_response_size)
        self.model = model or LangChainCompletionModel(settings)

    async def fetch_policies(self) -> str:
        """Fetch and sanitize the compliance-policy document."""
        target = proxy_target(self.settings, self.settings.policy_url, label=POLICY_LABEL)
        return sanitize(await self.fetcher(target))

    async def analyze(self, page_text: str) -> AnalysisResult:
        """Analyze already-sanitized *page_text* against the current policies.

        Raises:
            FetchFailure: The policy document could not be fetched; the model
                is not called.
            RequestTimeout: The model did not answer in time.
            AnalysisError: The model call failed.
            AnalysisParseError: The model's reply was not the expected JSON.
        """
        policy_text = await self.fetch_policies()
        prompt = build_prompt(policy_text, page_text, policy_source=self.settings.policy_url)

        try:
            content = await self.model.complete(prompt)
        except PipelineError:
            raise
        except Exception as exc:
            logger.error("Completion model call failed: %s", exc)
            raise AnalysisError(str(exc) or type(exc).__name__) from exc

        return parse_analysis(content)

    async def analyze_url(self, url: str) -> Report:
        """Fetch *url* through the proxy, sanitize it and analyze it.

        *url* is the bare host+path, without a scheme.
        """
        target_url = validate_target_url(url)
        raw = await self.fetcher(proxy_target(self.settings, target_url, label=PAGE_LABEL))
        page_text = sanitize(raw)
        logger.info("Sanitized %s to %d characters", target_url, len(page_text))

        analysis = await self.analyze(page_text)
        return Report(url=url, analysis=analysis)
