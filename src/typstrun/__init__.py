"""
Python binding around the typst command-line compiler.

    >>> import typstrun
    >>> result = typstrun.compile("report.typ", "report.pdf")
    >>> for warning in result.warnings:
    ...     print(warning)
"""
from typing import Any, List, Optional

from .compiler import (
    CompileOptions,
    CompileResult,
    FontOptions,
    QueryOptions,
    TypstDriver,
    WorldOptions,
)
from .errors import (
    CompileError,
    ProcessFailed,
    QueryDecodeError,
    ToolError,
    ToolNotFound,
    TypstrunError,
)
from .parsing import Diagnostic, ParseResult, Severity, Span, parse_diagnostics
from .utils.formats import OutputFormat, QueryFormat

_default_driver: Optional[TypstDriver] = None


def _driver() -> TypstDriver:
    global _default_driver
    if _default_driver is None:
        _default_driver = TypstDriver()
    return _default_driver


def compile(input: str, output: Optional[str] = None, options: Optional[CompileOptions] = None) -> CompileResult:
    return _driver().compile(input, output, options)


def query(input: str, selector: str, options: Optional[QueryOptions] = None) -> Any:
    return _driver().query(input, selector, options)


def fonts(options: Optional[FontOptions] = None) -> List[str]:
    return _driver().fonts(options)


__all__ = [
    "CompileError",
    "CompileOptions",
    "CompileResult",
    "Diagnostic",
    "FontOptions",
    "OutputFormat",
    "ParseResult",
    "ProcessFailed",
    "QueryDecodeError",
    "QueryFormat",
    "QueryOptions",
    "Severity",
    "Span",
    "ToolError",
    "ToolNotFound",
    "TypstDriver",
    "TypstrunError",
    "WorldOptions",
    "compile",
    "fonts",
    "parse_diagnostics",
    "query",
]
