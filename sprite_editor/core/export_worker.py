"""
Runs GIF / sprite-sheet exports on a background thread.

The snapshot is taken synchronously inside export_animation()/export_sheet(),
before anything is handed to the worker, so edits made while an export runs
never leak into it. Only one export runs at a time.
"""
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from sprite_editor.core import exporter
from sprite_editor.core.errors import ExportError
from sprite_editor.core.exporter import ExportSnapshot
from sprite_editor.core.frames import FrameSequence

logger = logging.getLogger(__name__)

ANIMATION = "animation"
SHEET = "sheet"


@dataclass(frozen=True)
class ExportResult:
    kind: str
    path: Optional[Path] = None
    error: Optional[ExportError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.path is not None


def _call_directly(fn: Callable[[], None]):
    fn()


class ExportController:
    """
    `dispatch` receives a zero-argument callable and must run it on the UI
    thread (for tkinter: lambda fn: root.after(0, fn)). By default completion
    callbacks run on the worker thread.
    """

    def __init__(self, output_dir: str | Path | None = None,
                 dispatch: Callable[[Callable[[], None]], None] | None = None):
        self.output_dir = Path(output_dir) if output_dir else exporter.default_export_dir()
        self.dispatch = dispatch or _call_directly
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="sprite-export")
        self._lock = threading.Lock()
        self._exporting = False
        self.last_result: Optional[ExportResult] = None

    @property
    def is_exporting(self) -> bool:
        with self._lock:
            return self._exporting

    def export_animation(self, sequence: FrameSequence,
                         on_done: Callable[[ExportResult], None] | None = None,
                         out_path: str | Path | None = None) -> Optional[Future]:
        return self._start(ANIMATION, sequence, on_done, out_path)

    def export_sheet(self, sequence: FrameSequence,
                     on_done: Callable[[ExportResult], None] | None = None,
                     out_path: str | Path | None = None) -> Optional[Future]:
        return self._start(SHEET, sequence, on_done, out_path)

    def _start(self, kind, sequence, on_done, out_path) -> Optional[Future]:
        with self._lock:
            if self._exporting:
                logger.info(f"Export already running, ignoring {kind} request")
                return None
            self._exporting = True

        try:
            snapshot = ExportSnapshot.capture(sequence)
            target = Path(out_path) if out_path else self.output_dir / snapshot.default_filename(kind)
            future = self._executor.submit(self._run, kind, snapshot, target)
        except BaseException:
            with self._lock:
                self._exporting = False
            raise
        future.add_done_callback(lambda f: self._finish(kind, f, on_done))
        return future

    @staticmethod
    def _run(kind: str, snapshot: ExportSnapshot, target: Path) -> Path:
        if kind == ANIMATION:
            return exporter.export_animation(snapshot, target)
        return exporter.export_sheet(snapshot, target)

    def _finish(self, kind: str, future: Future, on_done):
        error = future.exception()
        if error is None:
            result = ExportResult(kind, path=future.result())
        elif isinstance(error, ExportError):
            logger.error(f"{kind} export failed [{error.kind}]: {error}")
            result = ExportResult(kind, error=error)
        else:
            logger.exception(f"Unexpected {kind} export failure", exc_info=error)
            wrapped = ExportError(str(error))
            wrapped.__cause__ = error
            result = ExportResult(kind, error=wrapped)

        with self._lock:
            self._exporting = False
            self.last_result = result

        if on_done is not None:
            self.dispatch(lambda: on_done(result))

    def cleanup(self, path: str | Path | None = None):
        """Remove a delivered export file once the UI is done sharing it."""
        p = Path(path) if path else (self.last_result.path if self.last_result else None)
        if p is None:
            return
        try:
            p.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove export {p}: {e}")
        if self.last_result is not None and self.last_result.path == p:
            self.last_result = None

    def shutdown(self, wait: bool = True):
        self._executor.shutdown(wait=wait)
