from typing import List


def parse_font_list(output: str) -> List[str]:
    """
    Parses the output of `typst fonts` into family names.
    With --variants, typst lists each variant as a "- Style: ..." line under
    its family; those lines are skipped so the result is one entry per family.
    """
    families = []
    for line in output.splitlines():
        if not line.strip():
            continue
        if line[0].isspace() or line.startswith("- "):
            continue
        families.append(line.strip())
    return families
