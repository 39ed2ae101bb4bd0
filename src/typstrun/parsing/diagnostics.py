import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Severity(str, Enum):
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Span:
    file: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"


@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    message: str
    span: Optional[Span] = None

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    @property
    def is_warning(self) -> bool:
        return self.severity == Severity.WARNING

    def __str__(self) -> str:
        prefix = f"{self.span}: " if self.span else ""
        return f"{prefix}{self.severity.value}: {self.message}"


@dataclass
class ParseResult:
    preamble: str = ""
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.is_error]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.is_warning]


# Pattern: [file:line:col: ]severity: message
# The file group may contain ':' (Windows drives) but never ': '.
RE_HEADER = re.compile(
    r"^(?:(?P<file>(?:(?!: ).)+?):(?P<line>\d+):(?P<column>\d+): )?"
    r"(?P<severity>warning|error): (?P<message>.*)$"
)


class _OpenDiagnostic:
    """The diagnostic currently collecting continuation lines."""

    def __init__(self, severity: Severity, span: Optional[Span], message: str):
        self.severity = severity
        self.span = span
        self.lines = [message]

    def close(self) -> Diagnostic:
        return Diagnostic(self.severity, "\n".join(self.lines), self.span)


def _open_from_header(match: re.Match) -> _OpenDiagnostic:
    # Severity() and int() raise ValueError if the tool's output format drifts
    # away from what RE_HEADER accepts.
    severity = Severity(match.group("severity"))
    span = None
    if match.group("file") is not None:
        span = Span(
            file=match.group("file"),
            line=int(match.group("line")),
            column=int(match.group("column")),
        )
    return _OpenDiagnostic(severity, span, match.group("message"))


def parse_diagnostics(output: str) -> ParseResult:
    """
    Parses typst's short diagnostic format into structured objects.
    Example: main.typ:3:7: warning: unknown font family: foo

    Lines before the first header form the preamble. Any later line that is
    not a header is folded into the message of the diagnostic above it.
    """
    lines = output.split("\n")
    if lines and lines[-1] == "":
        lines.pop()

    preamble: List[str] = []
    diagnostics: List[Diagnostic] = []
    current: Optional[_OpenDiagnostic] = None

    for line in lines:
        match = RE_HEADER.match(line)
        if match:
            if current is not None:
                diagnostics.append(current.close())
            current = _open_from_header(match)
        elif current is not None:
            current.lines.append(line)
        else:
            preamble.append(line)

    if current is not None:
        diagnostics.append(current.close())

    return ParseResult(preamble="\n".join(preamble), diagnostics=diagnostics)
