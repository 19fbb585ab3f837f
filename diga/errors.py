"""Fehlertypen an der Schnittstelle des XML-Writers."""

from __future__ import annotations

from typing import Optional


class DigaXmlWriterError(Exception):
    """Raised when a request document cannot be rendered to bytes.

    Wraps structural violations found while rendering the document tree,
    schema violations (when XSD checks are enabled) and buffering failures.
    The original exception is available as ``__cause__``.
    """

    def __init__(self, message: str, *, path: Optional[str] = None) -> None:
        self.path = path
        if path:
            message = f"{message} (at {path})"
        super().__init__(message)
