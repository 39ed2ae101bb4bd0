"""
Typed option records for the typst CLI.
Each record knows how to turn itself into the flag/value list typst expects.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Union

from ..utils.formats import OutputFormat, QueryFormat

# Guarantees the line grammar parse_diagnostics understands.
DIAGNOSTIC_FLAGS = ["--diagnostic-format", "short"]


def _timestamp(value: Union[int, datetime]) -> str:
    if isinstance(value, datetime):
        return str(int(value.timestamp()))
    return str(value)


@dataclass
class WorldOptions:
    """Options shared by every command that builds a document."""
    root: Optional[str] = None
    font_paths: List[str] = field(default_factory=list)
    ignore_system_fonts: bool = False
    inputs: Dict[str, str] = field(default_factory=dict)
    package_path: Optional[str] = None
    package_cache_path: Optional[str] = None
    creation_timestamp: Optional[Union[int, datetime]] = None
    features: List[str] = field(default_factory=list)

    def to_args(self) -> List[str]:
        args: List[str] = []
        if self.root:
            args.extend(["--root", str(self.root)])
        for path in self.font_paths:
            args.extend(["--font-path", str(path)])
        if self.ignore_system_fonts:
            args.append("--ignore-system-fonts")
        for key, value in self.inputs.items():
            args.extend(["--input", f"{key}={value}"])
        if self.package_path:
            args.extend(["--package-path", str(self.package_path)])
        if self.package_cache_path:
            args.extend(["--package-cache-path", str(self.package_cache_path)])
        if self.creation_timestamp is not None:
            args.extend(["--creation-timestamp", _timestamp(self.creation_timestamp)])
        if self.features:
            args.extend(["--features", ",".join(self.features)])
        args.extend(DIAGNOSTIC_FLAGS)
        return args


@dataclass
class CompileOptions(WorldOptions):
    format: Optional[OutputFormat] = None
    ppi: Optional[float] = None
    pages: Optional[str] = None  # typst page ranges, e.g. "1,3-5"
    pdf_standards: List[str] = field(default_factory=list)
    jobs: Optional[int] = None
    make_deps: Optional[str] = None

    def to_args(self) -> List[str]:
        args = super().to_args()
        if self.format is not None:
            args.extend(["--format", OutputFormat(self.format).value])
        if self.ppi is not None:
            args.extend(["--ppi", f"{self.ppi:g}"])
        if self.pages:
            args.extend(["--pages", self.pages])
        if self.pdf_standards:
            args.extend(["--pdf-standard", ",".join(self.pdf_standards)])
        if self.jobs is not None:
            args.extend(["--jobs", str(self.jobs)])
        if self.make_deps:
            args.extend(["--make-deps", str(self.make_deps)])
        return args


@dataclass
class QueryOptions(WorldOptions):
    field: Optional[str] = None
    one: bool = False
    format: QueryFormat = QueryFormat.JSON
    pretty: bool = False

    def to_args(self) -> List[str]:
        args = super().to_args()
        if self.field:
            args.extend(["--field", self.field])
        if self.one:
            args.append("--one")
        args.extend(["--format", QueryFormat(self.format).value])
        if self.pretty:
            args.append("--pretty")
        return args


@dataclass
class FontOptions:
    font_paths: List[str] = field(default_factory=list)
    ignore_system_fonts: bool = False
    variants: bool = False

    def to_args(self) -> List[str]:
        args: List[str] = []
        for path in self.font_paths:
            args.extend(["--font-path", str(path)])
        if self.ignore_system_fonts:
            args.append("--ignore-system-fonts")
        if self.variants:
            args.append("--variants")
        return args
