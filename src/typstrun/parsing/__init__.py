from .diagnostics import (
    Diagnostic,
    ParseResult,
    Severity,
    Span,
    parse_diagnostics,
)
from .fonts import parse_font_list

__all__ = [
    "Diagnostic",
    "ParseResult",
    "Severity",
    "Span",
    "parse_diagnostics",
    "parse_font_list",
]
