"""Base exception shared by the jsmini pipeline stages."""


class JsMiniError(Exception):
    """Base error for scanning, parsing and evaluation failures."""
