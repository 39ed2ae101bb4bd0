import json
import shutil
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, List, Optional

from . import process
from .options import CompileOptions, FontOptions, QueryOptions, WorldOptions
from ..errors import CompileError, ProcessFailed, QueryDecodeError, ToolError, ToolNotFound
from ..parsing import Diagnostic, parse_diagnostics, parse_font_list
from ..utils.config import ConfigManager
from ..utils.formats import OutputFormat, QueryFormat, detect_format, is_supported

# typst's documented "compilation failed" status. Anything else nonzero is a tool error.
EXIT_COMPILATION_FAILED = 1

# Reads the document from stdin
STDIN_INPUT = "-"


@dataclass
class CompileResult:
    output_path: str
    diagnostics: List[Diagnostic] = field(default_factory=list)
    preamble: str = ""

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.is_warning]


class TypstDriver:
    def __init__(self, config_manager: Optional[ConfigManager] = None):
        # Use provided config or load default
        self.config = config_manager if config_manager else ConfigManager()
        self.set_binary(self.config.get("typst", "typst"))

    @staticmethod
    def _discover_binary(binary: str) -> Optional[str]:
        """Find typst on PATH, then where `cargo install` puts it."""
        path = shutil.which(binary)
        if path:
            return path
        if binary != "typst":
            return None
        cargo_bin = Path.home() / ".cargo" / "bin" / "typst"
        if cargo_bin.exists():
            return str(cargo_bin)
        return None

    @staticmethod
    def discover_binaries() -> List[str]:
        """
        Returns the typst binaries found on the system.
        """
        candidates = ["typst", "typst-cli"]
        return [c for c in candidates if shutil.which(c)]

    def set_binary(self, binary: str):
        """
        Updates the typst binary used by the driver.
        """
        path = self._discover_binary(binary)
        if not path:
            # Don't raise so a stale config doesn't break import.
            # The error surfaces on the first invocation instead.
            print(f"Warning: typst binary '{binary}' not found.")
        self.binary = binary
        self.binary_path = path

    def _invoke(self, args: List[str], merge_stderr: bool = False, stdin: Optional[str] = None) -> str:
        if not self.binary_path:
            raise ToolNotFound(self.binary)
        try:
            return process.run(self.binary_path, args, merge_stderr=merge_stderr, stdin=stdin)
        except ProcessFailed as e:
            if e.exit_code == EXIT_COMPILATION_FAILED:
                parsed = parse_diagnostics(e.output)
                raise CompileError(parsed.diagnostics, parsed.preamble) from e
            raise ToolError(e.exit_code, e.output) from e

    def _with_config(self, options: WorldOptions) -> WorldOptions:
        """Fill options the caller left unset from the config file."""
        changes = {}
        if not options.root and self.config.get("root"):
            changes["root"] = self.config.get("root")
        if not options.font_paths and self.config.get("font_paths"):
            changes["font_paths"] = list(self.config.get("font_paths"))
        if not options.ignore_system_fonts and self.config.get("ignore_system_fonts"):
            changes["ignore_system_fonts"] = True
        return replace(options, **changes) if changes else options

    def version(self) -> str:
        """Returns the version line typst reports, e.g. 'typst 0.11.0 (2bf9f95d)'."""
        return self._invoke(["--version"]).strip()

    def compile(
        self,
        input: str,
        output: Optional[str] = None,
        options: Optional[CompileOptions] = None,
    ) -> CompileResult:
        """
        Compiles a .typ file.
        Returns the output path along with any warnings typst printed.
        Raises CompileError when typst reports errors.
        """
        if input == STDIN_INPUT:
            # Nothing would be piped to the child; use compile_source for in-memory markup
            raise ValueError("compiling from stdin needs compile_source() and an output path")

        options = self._with_config(options or CompileOptions())
        if output is None:
            fmt = OutputFormat(options.format) if options.format else OutputFormat.PDF
            output = str(Path(input).with_suffix(f".{fmt.value}"))
        elif options.format is None and not is_supported(output):
            # typst can't infer a format from this extension
            options = replace(options, format=detect_format(output))

        command = ["compile", *options.to_args(), str(input), str(output)]

        stdout = self._invoke(command, merge_stderr=True)
        parsed = parse_diagnostics(stdout)
        return CompileResult(output, parsed.diagnostics, parsed.preamble)

    def compile_source(
        self,
        source: str,
        output: str,
        options: Optional[CompileOptions] = None,
    ) -> CompileResult:
        """Compiles typst markup held in memory by piping it through stdin."""
        options = self._with_config(options or CompileOptions())
        if options.format is None:
            options = replace(options, format=detect_format(output))

        command = ["compile", *options.to_args(), STDIN_INPUT, str(output)]
        stdout = self._invoke(command, merge_stderr=True, stdin=source)
        parsed = parse_diagnostics(stdout)
        return CompileResult(output, parsed.diagnostics, parsed.preamble)

    def query_raw(self, input: str, selector: str, options: Optional[QueryOptions] = None) -> str:
        """
        Runs `typst query` and returns its output untouched, in the requested format.
        """
        options = self._with_config(options or QueryOptions())
        command = ["query", *options.to_args(), str(input), selector]
        # stderr stays separate so warnings can't corrupt the JSON/YAML on stdout
        return self._invoke(command)

    def query(self, input: str, selector: str, options: Optional[QueryOptions] = None) -> Any:
        """
        Queries a document for elements matching selector, e.g. "<label>" or "heading".
        Returns the decoded JSON.
        """
        options = replace(options or QueryOptions(), format=QueryFormat.JSON)
        raw = self.query_raw(input, selector, options)
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise QueryDecodeError(raw, str(e)) from e

    def fonts(self, options: Optional[FontOptions] = None) -> List[str]:
        """Lists the font families typst can see."""
        options = options or FontOptions(
            font_paths=list(self.config.get("font_paths", [])),
            ignore_system_fonts=bool(self.config.get("ignore_system_fonts", False)),
        )
        return parse_font_list(self._invoke(["fonts", *options.to_args()]))
