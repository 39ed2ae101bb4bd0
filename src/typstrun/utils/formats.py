"""
Output format detection — determines the typst export format from a file extension.
"""
from pathlib import Path
from enum import Enum


class OutputFormat(str, Enum):
    PDF = "pdf"
    PNG = "png"
    SVG = "svg"
    HTML = "html"


class QueryFormat(str, Enum):
    JSON = "json"
    YAML = "yaml"


_EXT_MAP = {
    ".pdf": OutputFormat.PDF,
    ".png": OutputFormat.PNG,
    ".svg": OutputFormat.SVG,
    ".html": OutputFormat.HTML,
    ".htm": OutputFormat.HTML,
}

SUPPORTED_EXTENSIONS = set(_EXT_MAP.keys())


def detect_format(file_path: str) -> OutputFormat:
    """Detect the output format from the extension, defaulting to PDF like typst does."""
    ext = Path(file_path).suffix.lower()
    return _EXT_MAP.get(ext, OutputFormat.PDF)


def is_supported(file_path: str) -> bool:
    """Return True if the output extension maps to a known format."""
    return Path(file_path).suffix.lower() in SUPPORTED_EXTENSIONS


def is_source(file_path: str) -> bool:
    """Return True for typst source files."""
    return Path(file_path).suffix == ".typ"
