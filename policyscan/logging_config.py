"""Process-wide logging setup: one stdout handler, long INFO lines trimmed."""

from __future__ import annotations

import logging
import sys

_MAX_INFO_LENGTH = 1000


class TrimFilter(logging.Filter):
    """Trim INFO records longer than ``_MAX_INFO_LENGTH`` characters.

    Sanitized page text can end up in log lines; WARNING and above pass
    through untouched.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno == logging.INFO:
            try:
                message = record.getMessage()
            except (TypeError, ValueError):
                return True
            if len(message) > _MAX_INFO_LENGTH:
                record.msg = message[:_MAX_INFO_LENGTH] + "... [trimmed]"
                record.args = ()
        return True


def setup_logging(level: str = "INFO") -> None:
    """Install the stdout handler on the root logger (idempotent)."""
    root = logging.getLogger()
    root.setLevel(level.upper())

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    formatter = logging.Formatter(
        "%(asctime)s,%(msecs)03d [%(levelname)s] %(filename)s:%(lineno)d %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.addFilter(TrimFilter())
    root.addHandler(handler)
