"""policyscan — fetch a web page and check it against a compliance policy."""

__version__ = "0.1.0"
