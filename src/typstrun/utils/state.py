from dataclasses import dataclass, field
from typing import List, Optional
from ..parsing.diagnostics import Diagnostic

@dataclass
class BuildState:
    """
    The outcome of the most recent build in watch mode.
    """
    source_path: str = ""
    output_path: Optional[str] = None

    # Tool Output
    diagnostics: List[Diagnostic] = field(default_factory=list)
    preamble: str = ""
    tool_error: str = ""  # set when typst itself could not run
    failed: bool = False  # typst reported a failed compilation
    build_count: int = 0
    last_update: float = 0.0

    @property
    def has_errors(self) -> bool:
        """Returns True if the build failed, either in typst or in the document."""
        return bool(self.tool_error) or self.failed or any(d.is_error for d in self.diagnostics)

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.is_warning]

    def update_diagnostics(self, diagnostics: List[Diagnostic], preamble: str, when: float, failed: bool = False):
        self.diagnostics = diagnostics
        self.preamble = preamble
        self.tool_error = ""
        self.failed = failed
        self._stamp(when)

    def update_tool_error(self, message: str, when: float):
        self.diagnostics = []
        self.preamble = ""
        self.tool_error = message
        self.failed = False
        self._stamp(when)

    def _stamp(self, when: float):
        self.build_count += 1
        self.last_update = when
