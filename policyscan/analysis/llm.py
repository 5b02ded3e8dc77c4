"""Completion-model boundary.

The analyzer only needs one operation — send a prompt, get JSON-bearing text
back — so that is all :class:`CompletionModel` exposes.  Tests substitute a
stub; production uses :class:`LangChainCompletionModel`.

Providers
---------
``openai`` (default)
    ``ChatOpenAI`` in JSON-object mode.  Requires ``OPENAI_API_KEY``.
    Configure via ``OPENAI_CHAT_MODEL``.

``ollama``
    ``ChatOllama`` with ``format="json"``.
    Configure via ``OLLAMA_BASE_URL`` and ``OLLAMA_CHAT_MODEL``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

from policyscan.config import Settings
from policyscan.errors import RequestTimeout

logger = logging.getLogger(__name__)


class CompletionModel(Protocol):
    async def complete(self, prompt: str) -> str:
        """Submit *prompt* as a single system message and return the reply text."""
        ...


class LangChainCompletionModel:
    """:class:`CompletionModel` backed by a LangChain chat model."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def _get_llm(self) -> Any:
        """Return a JSON-constrained LangChain chat model based on settings.

        No client-side timeout is set; :meth:`complete` owns the deadline.
        """
        if self._settings.llm_provider == "ollama":
            from langchain_ollama import ChatOllama

            return ChatOllama(
                model=self._settings.ollama_chat_model,
                base_url=self._settings.ollama_base_url,
                temperature=0,
                format="json",
            )

        from langchain_openai import ChatOpenAI

        llm = ChatOpenAI(
            model=self._settings.openai_chat_model,
            temperature=0,
            max_retries=0,
        )
        return llm.bind(response_format={"type": "json_object"})

    async def complete(self, prompt: str) -> str:
        from langchain_core.messages import SystemMessage

        llm = self._get_llm()
        timeout = self._settings.llm_timeout
        logger.info("Calling %s completion model", self._settings.llm_provider)
        try:
            response = await asyncio.wait_for(
                llm.ainvoke([SystemMessage(content=prompt)]), timeout=timeout
            )
        except asyncio.TimeoutError:
            logger.warning("Completion model did not answer within %ss", timeout)
            raise RequestTimeout(timeout, "completion model") from None

        content = response.content if hasattr(response, "content") else str(response)
        if not isinstance(content, str):
            content = str(content)
        logger.info("Completion model returned %d characters", len(content))
        return content
