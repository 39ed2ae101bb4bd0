from typing import List, Optional

from .parsing.diagnostics import Diagnostic


class TypstrunError(Exception):
    """Base class for everything typstrun raises."""


class ToolError(TypstrunError):
    """
    The typst binary could not be run, or exited with a status other than
    0 (success) or 1 (compilation failed). The output is never parsed.
    """

    def __init__(self, exit_code: int, output: str):
        self.exit_code = exit_code
        self.output = output
        super().__init__(f"typst exited with status {exit_code}: {output.strip()}")


class ProcessFailed(ToolError):
    """Raised by the process invoker for any nonzero exit status."""


class ToolNotFound(ToolError):
    """The binary is missing or not executable."""

    def __init__(self, program: str, reason: str = "not found"):
        self.program = program
        super().__init__(127, f"'{program}' {reason}")


class CompileError(TypstrunError):
    """
    typst reported a failed compilation (exit status 1).
    Carries the diagnostics parsed from the tool output.
    """

    def __init__(self, diagnostics: List[Diagnostic], preamble: str = ""):
        self.diagnostics = diagnostics
        self.preamble = preamble
        super().__init__(self._summary())

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.is_error]

    def _summary(self) -> str:
        errors = self.errors
        if not errors:
            return "compilation failed without reporting an error"
        return "compilation failed:\n" + "\n".join(str(d) for d in errors)


class QueryDecodeError(TypstrunError):
    """typst query succeeded but its output was not valid JSON."""

    def __init__(self, output: str, reason: Optional[str] = None):
        self.output = output
        super().__init__(f"could not decode query output: {reason or output[:80]}")
