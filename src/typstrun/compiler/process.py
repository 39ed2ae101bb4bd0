import subprocess
from typing import Optional, Sequence

from ..errors import ProcessFailed, ToolNotFound


def run(
    program: str,
    arguments: Sequence[str],
    merge_stderr: bool = False,
    cwd: Optional[str] = None,
    stdin: Optional[str] = None,
) -> str:
    """
    Runs program to completion and returns its captured stdout.
    With merge_stderr, stderr is folded into stdout (this is where typst writes
    its diagnostics). stdin, when given, is piped to the child.
    Raises ProcessFailed with the exit code and error text on nonzero exit.
    """
    command = [program, *arguments]
    try:
        result = subprocess.run(
            command,
            input=stdin,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT if merge_stderr else subprocess.PIPE,
            # typst always writes UTF-8, whatever the locale says
            encoding="utf-8",
            errors="replace",
            check=False,
            cwd=cwd,
        )
    except FileNotFoundError:
        raise ToolNotFound(program)
    except PermissionError:
        raise ToolNotFound(program, "is not executable")
    except OSError as e:
        # e.g. ENOEXEC for a binary built for another architecture
        raise ToolNotFound(program, f"could not be started: {e.strerror or e}")

    if result.returncode != 0:
        error_text = result.stdout if merge_stderr else result.stderr
        raise ProcessFailed(result.returncode, error_text or "")

    return result.stdout
