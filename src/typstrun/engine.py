from typing import Callable, Optional
from dataclasses import replace
from .compiler import CompileOptions, TypstDriver, find_project_root
from .errors import CompileError, ToolError
from .utils.config import ConfigManager
from .utils.formats import is_source
from .utils.report import print_build
from .utils.state import BuildState
from .utils.watcher import FileWatcher
import time
import os

class TypstEngine:
    """
    Recompiles a document whenever one of its sources is saved.
    """
    def __init__(
        self,
        source_file: str,
        output_file: Optional[str] = None,
        options: Optional[CompileOptions] = None,
        config_manager: Optional[ConfigManager] = None,
    ):
        if not is_source(source_file):
            raise ValueError(f"Not a typst source file: {source_file}")
        self.config = config_manager if config_manager else ConfigManager()
        self.driver = TypstDriver(self.config)
        self.options = options or CompileOptions()
        if not self.options.root:
            root = find_project_root(source_file)
            if root:
                self.options = replace(self.options, root=str(root))
        self.state = BuildState(source_path=os.path.abspath(source_file), output_path=output_file)
        self.watcher = FileWatcher()
        self.on_update_callback: Optional[Callable[[BuildState], None]] = print_build
        self.log_file: Optional[str] = self.config.get("log_file")

    def _log(self, msg: str):
        if not self.log_file:
            return
        with open(self.log_file, "a") as f:
            f.write(f"[{time.time()}] {msg}\n")

    def start(self):
        self.refresh()
        self.watcher.start_watching(self.state.source_path, self._on_file_saved, directory=self.options.root)

    def stop(self):
        self.watcher.stop_watching()

    def _on_file_saved(self, path: str):
        self._log(f"Change detected in {path}")
        self.refresh()

    def refresh(self):
        self._log(f"Compiling {self.state.source_path} -> {self.state.output_path}")
        try:
            result = self.driver.compile(self.state.source_path, self.state.output_path, self.options)
            self.state.output_path = result.output_path
            self.state.update_diagnostics(result.diagnostics, result.preamble, time.time())
            self._log(f"Compiled with {len(result.warnings)} warning(s)")
        except CompileError as e:
            self.state.update_diagnostics(e.diagnostics, e.preamble, time.time(), failed=True)
            if not e.errors:
                self._log("Compilation failed without reporting an error")
            for diag in e.errors:
                self._log(f"Error: {diag}")
        except ToolError as e:
            self._log(f"Tool Error: {e}")
            self.state.update_tool_error(str(e), time.time())

        if self.on_update_callback:
            self.on_update_callback(self.state)
