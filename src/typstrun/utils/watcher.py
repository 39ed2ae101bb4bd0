import time
from pathlib import Path
from typing import Callable, Optional
from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler

class SourceChangeHandler(FileSystemEventHandler):
    """
    Listens for changes to typst sources under a project directory and triggers a callback.
    A document pulls in other .typ files and assets through #import and #include,
    so any source change counts, not only the entrypoint.
    """
    def __init__(self, callback: Callable[[str], None], suffixes=(".typ",)):
        self.callback = callback
        self.suffixes = tuple(suffixes)
        self.last_triggered = 0.0
        self.debounce_seconds = 0.5 # Editors often write a file twice per save

    def on_modified(self, event):
        if event.is_directory:
            return

        path = Path(event.src_path)
        if path.suffix not in self.suffixes:
            return

        now = time.time()
        if now - self.last_triggered > self.debounce_seconds:
            self.last_triggered = now
            self.callback(str(path.resolve()))

    # Atomic-save editors replace the file instead of modifying it
    on_created = on_modified

class FileWatcher:
    """
    Runs one watchdog observer over a typst project.
    A fresh observer is created per start, so a stopped watcher can be started again.
    """
    def __init__(self):
        self.observer: Optional[Observer] = None
        self.watched_dir: Optional[Path] = None

    @property
    def is_watching(self) -> bool:
        return self.observer is not None and self.observer.is_alive()

    def start_watching(
        self,
        file_path: str,
        callback: Callable[[str], None],
        directory: Optional[str] = None,
    ):
        """
        Starts a background thread that calls callback with the resolved path of
        every saved .typ file under directory.

        directory is usually the project root, so edits to chapters pulled in
        with #include or #import recompile the entrypoint too. Without it only
        the entrypoint's own directory (and its subdirectories) is watched.
        The entrypoint must exist; a running watch is stopped first.
        """
        path = Path(file_path).resolve()
        if not path.exists():
            raise FileNotFoundError(f"Cannot watch non-existent file: {file_path}")

        self.stop_watching()
        self.watched_dir = Path(directory).resolve() if directory else path.parent
        self.observer = Observer()
        self.observer.schedule(SourceChangeHandler(callback), str(self.watched_dir), recursive=True)
        self.observer.start()

    def stop_watching(self):
        if self.is_watching:
            self.observer.stop()
            self.observer.join()
        self.observer = None
