"""File watcher that rebuilds .svelte.md files as they change."""

import threading
import time
from pathlib import Path

from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler
from rich.console import Console

from .writer import OutputWriter

console = Console()


class RebuildHandler(FileSystemEventHandler):
    """Collects file events and debounces them."""

    def __init__(self, extension: str = ".svelte.md", debounce: float = 1.0):
        super().__init__()
        self._extension = extension
        self._pending: set[str] = set()
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._debounce = debounce
        self._callback = None

    def set_callback(self, callback):
        self._callback = callback

    def _is_supported(self, path: str) -> bool:
        name = Path(path).name
        return name.endswith(self._extension) and not name.startswith(".")

    def on_created(self, event):
        if not event.is_directory and self._is_supported(event.src_path):
            self._add(event.src_path)

    def on_modified(self, event):
        if not event.is_directory and self._is_supported(event.src_path):
            self._add(event.src_path)

    def on_deleted(self, event):
        if not event.is_directory and self._is_supported(event.src_path):
            self._add(event.src_path)

    def on_moved(self, event):
        if event.is_directory:
            return
        if self._is_supported(event.src_path):
            self._add(event.src_path)
        if self._is_supported(event.dest_path):
            self._add(event.dest_path)

    def _add(self, path: str):
        with self._lock:
            self._pending.add(path)
            if self._timer:
                self._timer.cancel()
            self._timer = threading.Timer(self._debounce, self._flush)
            self._timer.daemon = True
            self._timer.start()

    def _flush(self):
        with self._lock:
            paths = sorted(self._pending)
            self._pending.clear()
        if paths and self._callback:
            self._callback(paths)


class FileWatcher:
    """Watches the source directory and rebuilds changed files."""

    def __init__(self, config: dict, debounce: float | None = None, write_maps: bool = True):
        self.config = config
        self.source_dir = Path(config["source_dir"])
        self.writer = OutputWriter(self.source_dir, config["output_dir"], config, write_maps=write_maps)
        if debounce is None:
            debounce = config.get("watch", {}).get("debounce", 1.0)
        self.handler = RebuildHandler(extension=self.writer.extension, debounce=debounce)
        self.handler.set_callback(self._process_batch)
        self.observer = Observer()

    def _process_batch(self, paths: list[str]):
        """Rebuild a batch of changed files and drop outputs of deleted ones.

        Failures are reported, not fatal.
        """
        for p in paths:
            source = Path(p)
            if not source.exists():
                for removed in self.writer.remove(source):
                    console.print(f"  [yellow]− Removed {removed}[/]")
                continue
            try:
                target = self.writer.write(source)
            except Exception as e:
                console.print(f"  [red]✗ {source.name}: {e}[/]")
                continue
            if target:
                console.print(f"  [green]✓ {source.name} → {target}[/]")
            else:
                console.print(f"  [dim]{source.name} unchanged[/]")

    def run(self):
        """Start watching (blocks until Ctrl+C)."""
        self.source_dir.mkdir(parents=True, exist_ok=True)
        self.observer.schedule(self.handler, str(self.source_dir), recursive=True)
        self.observer.start()

        console.print(f"[bold]Watching {self.source_dir} for *{self.writer.extension} changes... (Ctrl+C to stop)[/]")

        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Stopping watcher...[/]")
            self.observer.stop()
        self.observer.join()
        console.print("[green]✓ Watcher stopped.[/]")
