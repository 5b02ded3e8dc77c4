"""Turn rendered markup into the plain text embedded in analysis prompts.

The steps run in a fixed order, each one assuming the previous has already
happened:

1. ``<a href="https://...">label</a>`` elements are removed *with* their label,
   even when the label spans several lines.
2. Bare ``https://`` tokens (and the whitespace before them) are removed.
3. Any remaining tag becomes a single space.
4. Whitespace runs collapse to one space, hyphens are dropped, ends trimmed.

Dropping a hyphen can glue two fragments into something a previous step would
have removed (``https:/-/x`` becomes ``https://x``, ``a - b`` leaves a double
space), so the steps are repeated until the text stops changing.  No step
lengthens the text, so this settles after a handful of passes.
"""

from __future__ import annotations

import re

_HTTPS_ANCHOR_RE = re.compile(r'<a[^>]*href="https://[^"]*"[^>]*>(.*?)</a>', re.DOTALL)
_BARE_HTTPS_RE = re.compile(r"\s*https://\S*")
_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")
_HYPHENS_RE = re.compile(r"-+")


def _sanitize_once(text: str) -> str:
    text = _HTTPS_ANCHOR_RE.sub("", text)
    text = _BARE_HTTPS_RE.sub("", text)
    text = _TAG_RE.sub(" ", text)
    text = _WHITESPACE_RE.sub(" ", text)
    text = _HYPHENS_RE.sub("", text)
    return text.strip()


def sanitize(raw: str) -> str:
    """Return *raw* as normalized plain text.

    Never raises; empty input gives an empty string.  The result is a fixed
    point, so ``sanitize(sanitize(x)) == sanitize(x)``.

    Example::

        >>> sanitize('<a href="https://evil.com">click here</a> Safe text - here https://track.me more text')
        'Safe text here more text'
    """
    text = raw
    while True:
        cleaned = _sanitize_once(text)
        if cleaned == text:
            return cleaned
        text = cleaned
