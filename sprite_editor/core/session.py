"""
EditorSession is the surface the UI talks to. It owns the frame sequence,
the active frame index, the canvas engine and the export controller, and tells
listeners about changes through plain callbacks.
"""
import logging
from concurrent.futures import Future
from pathlib import Path
from typing import Callable, Optional

from sprite_editor.core.canvas_engine import CanvasEngine
from sprite_editor.core.color import DEFAULT_PALETTE, Color, parse_hex
from sprite_editor.core.editor_tools import ToolType
from sprite_editor.core.export_worker import ExportController, ExportResult
from sprite_editor.core.frames import Frame, FrameSequence
from sprite_editor.core.pixel_grid import GRID_SIZE, PixelGrid
from sprite_editor.core.project_file import decode_project, encode_project, load_project, save_project
from sprite_editor.utils.config import AppConfig
from sprite_editor.utils.helpers import wrap_index
from sprite_editor.utils.validators import DEFAULT_FPS, validate_grid_size

logger = logging.getLogger(__name__)

# Change notifications passed to subscribers
CANVAS = "canvas"
FRAMES = "frames"
SELECTION = "selection"
PROJECT = "project"
HISTORY = "history"


class EditorSession:
    def __init__(self, grid_size: int = GRID_SIZE, fps: int = DEFAULT_FPS,
                 exports: ExportController | None = None):
        self.grid_size = validate_grid_size(grid_size)
        self.default_fps = fps
        self.sequence = FrameSequence(fps=fps, grid_size=grid_size)
        self.active_index = 0
        self.current_path: Optional[Path] = None
        self.engine = CanvasEngine(self)
        self.exports = exports or ExportController()
        self._listeners: list[Callable[[str], None]] = []

    @classmethod
    def from_config(cls, config: AppConfig) -> "EditorSession":
        """Session seeded with the saved fps, export folder, tool and colour."""
        session = cls(fps=config.default_fps, exports=ExportController(output_dir=config.export_directory()))
        try:
            session.set_tool(config.last_tool)
            session.set_color(parse_hex(config.last_color))
        except ValueError as e:
            logger.warning(f"Ignoring saved tool/colour: {e}")
        return session

    @property
    def palette(self) -> list[Color]:
        return list(DEFAULT_PALETTE)

    # ---------- Notification ----------
    def subscribe(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)
        return unsubscribe

    def _notify(self, *changes: str):
        for change in changes:
            for listener in list(self._listeners):
                listener(change)

    # ---------- Active grid (used by the canvas engine) ----------
    @property
    def active_frame(self) -> Optional[Frame]:
        return self.sequence.frame_at(self.active_index)

    def active_grid(self) -> PixelGrid:
        frame = self.active_frame
        return frame.grid.copy() if frame else PixelGrid(self.grid_size)

    def update_active_grid(self, grid: PixelGrid):
        if self.sequence.set_grid(self.active_index, grid):
            self._notify(CANVAS)

    # ---------- Project lifecycle ----------
    def new_project(self, name: str | None = None):
        self._replace_sequence(FrameSequence(name=name or "", fps=self.default_fps, grid_size=self.grid_size))
        self.current_path = None
        logger.info("New project")

    def load_project(self, data: bytes | str):
        """Raises ProjectFileError; the current project is kept when it does."""
        sequence = decode_project(data, self.grid_size)
        self._replace_sequence(sequence)

    def save_project(self) -> bytes:
        return encode_project(self.sequence)

    def load_from(self, path: str | Path):
        sequence = load_project(path, self.grid_size)
        self._replace_sequence(sequence)
        self.current_path = Path(path)

    def save_to(self, path: str | Path) -> Path:
        p = Path(path)
        previous_name = self.sequence.name
        self.sequence.name = p.stem
        try:
            save_project(self.sequence, p)
        except Exception:
            self.sequence.name = previous_name
            raise
        self.current_path = p
        self._notify(PROJECT)
        return p

    def _replace_sequence(self, sequence: FrameSequence):
        self.sequence = sequence
        self.active_index = 0
        self.engine.reset_history()
        self._notify(PROJECT, FRAMES, SELECTION, CANVAS, HISTORY)

    def set_fps(self, fps: int):
        self.sequence.fps = fps
        self._notify(PROJECT)

    def rename(self, name: str):
        self.sequence.name = name
        self._notify(PROJECT)

    # ---------- Navigation ----------
    @property
    def frame_count(self) -> int:
        return len(self.sequence)

    def _set_active(self, index: int):
        if index == self.active_index:
            return
        self.active_index = index
        # history belongs to one grid, it cannot follow a frame switch
        self.engine.reset_history()
        self._notify(SELECTION, CANVAS, HISTORY)

    def select_frame(self, index: int) -> bool:
        if not self.sequence.is_valid_index(index):
            return False
        self._set_active(index)
        return True

    def next_frame(self):
        self._set_active(wrap_index(self.active_index + 1, self.frame_count))

    def previous_frame(self):
        self._set_active(wrap_index(self.active_index - 1, self.frame_count))

    # ---------- Frame operations ----------
    @property
    def can_add_frame(self) -> bool:
        return self.sequence.can_add

    def add_frame(self) -> Optional[int]:
        new_index = self.sequence.insert_after(self.active_index)
        if new_index is None:
            return None
        self._notify(FRAMES)
        self._set_active(new_index)
        return new_index

    def duplicate_active_frame(self) -> Optional[int]:
        new_index = self.sequence.duplicate(self.active_index)
        if new_index is None:
            return None
        self._notify(FRAMES)
        self._set_active(new_index)
        return new_index

    def delete_frame(self, index: int) -> bool:
        was_active = index == self.active_index
        was_before = index < self.active_index
        if not self.sequence.delete(index):
            return False
        self._notify(FRAMES)
        if was_before:
            # same frame, its index just shifted
            self.active_index -= 1
            self._notify(SELECTION)
        elif was_active:
            self.active_index = min(self.active_index, self.frame_count - 1)
            self.engine.reset_history()
            self._notify(SELECTION, CANVAS, HISTORY)
        return True

    def delete_active_frame(self) -> bool:
        return self.delete_frame(self.active_index)

    def _reselect_by_identity(self, active_id):
        if active_id is None:
            return
        new_index = self.sequence.index_of(active_id)
        if new_index is not None and new_index != self.active_index:
            self.active_index = new_index
            self._notify(SELECTION)

    def move_frame(self, source: int, dest: int):
        if not self.sequence.is_valid_index(source):
            return
        active = self.active_frame
        self.sequence.move(source, dest)
        self._notify(FRAMES)
        self._reselect_by_identity(active.id if active else None)

    def move_frame_to_slot(self, source: int, slot: int):
        if not self.sequence.is_valid_index(source):
            return
        active = self.active_frame
        self.sequence.move_to_slot(source, slot)
        self._notify(FRAMES)
        self._reselect_by_identity(active.id if active else None)

    # ---------- Drawing ----------
    def set_tool(self, tool: ToolType | str):
        self.engine.set_tool(tool)

    def set_color(self, color):
        self.engine.set_color(color)

    def begin_stroke(self, x: int, y: int) -> bool:
        changed = self.engine.begin_stroke(x, y)
        self._notify(HISTORY)
        return changed

    def continue_stroke(self, x: int, y: int) -> bool:
        return self.engine.continue_stroke(x, y)

    def end_stroke(self):
        self.engine.end_stroke()

    def undo(self) -> bool:
        if not self.engine.undo():
            return False
        self._notify(HISTORY)
        return True

    def redo(self) -> bool:
        if not self.engine.redo():
            return False
        self._notify(HISTORY)
        return True

    def clear_canvas(self):
        self.engine.clear_canvas()
        self._notify(HISTORY)

    @property
    def can_undo(self) -> bool:
        return self.engine.can_undo

    @property
    def can_redo(self) -> bool:
        return self.engine.can_redo

    # ---------- Export ----------
    @property
    def is_exporting(self) -> bool:
        return self.exports.is_exporting

    def export_animation(self, on_done: Callable[[ExportResult], None] | None = None,
                         out_path: str | Path | None = None) -> Optional[Future]:
        return self.exports.export_animation(self.sequence, on_done, out_path)

    def export_sheet(self, on_done: Callable[[ExportResult], None] | None = None,
                     out_path: str | Path | None = None) -> Optional[Future]:
        return self.exports.export_sheet(self.sequence, on_done, out_path)

    def close(self):
        self.exports.shutdown()
