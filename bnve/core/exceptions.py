"""
bnve/core/exceptions.py

Error taxonomy.

Integrity errors are raised while a network is built or validated, query
errors when a request cannot be answered as posed, and contradictory
evidence when the evidence has zero joint probability.
"""

from __future__ import annotations

from typing import Optional


class BNVEError(Exception):
    """Base class for bnve-specific exceptions."""


class NetworkIntegrityError(BNVEError, ValueError):
    """Malformed network: bad CPT rows, unknown parents, cycles."""


class BIFParseError(NetworkIntegrityError):
    def __init__(self, message: str, *, line: Optional[int] = None, line_text: Optional[str] = None):
        detail = ""
        if line is not None:
            detail = f" (line {line}"
            if line_text:
                detail += f": {line_text.strip()!r}"
            detail += ")"
        super().__init__(f"{message}{detail}")
        self.line = line
        self.line_text = line_text


class QueryError(BNVEError, ValueError):
    """The query cannot be answered as posed."""


class ContradictoryEvidenceError(BNVEError, ArithmeticError):
    """The evidence has zero probability; the posterior is undefined."""
