from pathlib import Path
from typing import Optional

# Files that mark the top of a typst project
ROOT_MARKERS = ["typst.toml", ".typstroot"]


def find_project_root(source_file: str) -> Optional[Path]:
    """
    Walks up from the source file looking for a project marker.
    typst refuses to read files outside --root, so this is the directory
    to pass when the document imports from sibling folders.
    """
    start = Path(source_file).resolve().parent
    for directory in [start, *start.parents]:
        for marker in ROOT_MARKERS:
            if (directory / marker).exists():
                return directory
    return None
