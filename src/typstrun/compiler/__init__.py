from .driver import CompileResult, TypstDriver
from .options import CompileOptions, FontOptions, QueryOptions, WorldOptions
from .analyzer import find_project_root

__all__ = [
    "CompileOptions",
    "CompileResult",
    "FontOptions",
    "QueryOptions",
    "TypstDriver",
    "WorldOptions",
    "find_project_root",
]
