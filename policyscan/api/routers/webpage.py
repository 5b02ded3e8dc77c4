"""Compliance analysis endpoint.

Routes
------
GET /webpage/{url}    ``url`` is a bare host+path, e.g. ``example.com/pricing``

Responses
---------
200  ``{"url": ..., "analysis": {"structured_content": [...], "compliance_analysis": {...}}}``
400  invalid URL
413  page or policy body exceeds the size ceiling
500  transport / model / parse failure (``details`` carries the cause)
504  upstream timeout
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request

from policyscan.analysis.models import Report

router = APIRouter()


@router.get("/{url:path}", response_model=Report)
async def analyze_webpage(url: str, request: Request) -> Any:
    """Fetch *url* through the rendering proxy and return its compliance report.

    The analyzer validates *url* and runs the whole pipeline before anything
    is sent back.  Failures are raised as ``PipelineError`` subclasses and
    serialised by the app's exception handlers.
    """
    analyzer = request.app.state.analyzer
    return await analyzer.analyze_url(url)
