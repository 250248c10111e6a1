"""
Frames and the ordered frame sequence that makes up an animation project.

Every index-taking operation treats a bad index as a no-op (or a None/False
result). UI code calls these with indices that may already be stale, so they
must never raise.
"""
import logging
import uuid
from typing import Iterator, Optional

from sprite_editor.core.pixel_grid import GRID_SIZE, PixelGrid
from sprite_editor.utils.helpers import clamp
from sprite_editor.utils.validators import DEFAULT_FPS, MAX_FRAMES, validate_fps

logger = logging.getLogger(__name__)

DEFAULT_NAME = "Untitled"


class Frame:
    """One animation step: a stable identity plus its grid."""

    __slots__ = ("id", "grid")

    def __init__(self, grid: Optional[PixelGrid] = None, size: int = GRID_SIZE):
        self.id: uuid.UUID = uuid.uuid4()
        self.grid = grid if grid is not None else PixelGrid(size)

    def duplicate(self) -> "Frame":
        return Frame(self.grid.copy())

    def to_transfer(self) -> dict:
        """Drag payload: only the identity travels, the pixels stay put."""
        return {"id": str(self.id)}

    def __repr__(self):
        return f"Frame(id={self.id}, grid={self.grid!r})"


class FrameSequence:
    def __init__(self, name: str = DEFAULT_NAME, fps: int = DEFAULT_FPS, grid_size: int = GRID_SIZE,
                 max_frames: int = MAX_FRAMES):
        self.grid_size = grid_size
        self.max_frames = max_frames
        self._name = DEFAULT_NAME
        self._fps = DEFAULT_FPS
        self.name = name
        self.fps = fps
        self._frames: list[Frame] = [Frame(size=grid_size)]

    # ---------- Properties ----------
    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str):
        self._name = (value or "").strip() or DEFAULT_NAME

    @property
    def fps(self) -> int:
        return self._fps

    @fps.setter
    def fps(self, value: int):
        self._fps = validate_fps(value)

    @property
    def frames(self) -> tuple[Frame, ...]:
        return tuple(self._frames)

    @property
    def can_add(self) -> bool:
        return len(self._frames) < self.max_frames

    def __len__(self):
        return len(self._frames)

    def __iter__(self) -> Iterator[Frame]:
        return iter(tuple(self._frames))

    def is_valid_index(self, index: int) -> bool:
        return 0 <= index < len(self._frames)

    # ---------- Access ----------
    def frame_at(self, index: int) -> Optional[Frame]:
        if not self.is_valid_index(index):
            return None
        return self._frames[index]

    def index_of(self, frame_id) -> Optional[int]:
        key = str(frame_id)
        for i, frame in enumerate(self._frames):
            if str(frame.id) == key:
                return i
        return None

    def set_grid(self, index: int, grid: PixelGrid) -> bool:
        if not self.is_valid_index(index):
            return False
        self._frames[index].grid = grid.copy()
        return True

    # ---------- Mutations ----------
    def insert_after(self, index: int) -> Optional[int]:
        if not self.can_add:
            logger.info(f"Frame limit of {self.max_frames} reached, not inserting")
            return None
        insert_index = clamp(index + 1, 0, len(self._frames))
        self._frames.insert(insert_index, Frame(size=self.grid_size))
        return insert_index

    def duplicate(self, index: int) -> Optional[int]:
        if not self.is_valid_index(index) or not self.can_add:
            return None
        copy = self._frames[index].duplicate()
        self._frames.insert(index + 1, copy)
        return index + 1

    def delete(self, index: int) -> bool:
        if not self.is_valid_index(index) or len(self._frames) <= 1:
            return False
        del self._frames[index]
        return True

    def move(self, source: int, dest: int):
        if not self.is_valid_index(source):
            return
        dest = clamp(dest, 0, len(self._frames) - 1)
        frame = self._frames.pop(source)
        self._frames.insert(dest, frame)

    def move_to_slot(self, source: int, slot: int):
        """
        List-view drop semantics: slot is the position the frame is dropped
        before, counted with the dragged frame still in place.
        """
        if not self.is_valid_index(source):
            return
        dest = slot - 1 if source < slot else slot
        self.move(source, dest)

    def replace_frames(self, frames: list[Frame]):
        """Swap in a whole new frame list (load). Enforces the never-empty and cap rules."""
        frames = list(frames)
        if len(frames) > self.max_frames:
            logger.warning(f"Dropping {len(frames) - self.max_frames} frames beyond the limit of {self.max_frames}")
            frames = frames[: self.max_frames]
        if not frames:
            frames = [Frame(size=self.grid_size)]
        self._frames = frames

    def __repr__(self):
        return f"FrameSequence(name={self.name!r}, fps={self.fps}, frames={len(self._frames)})"
