import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

from sprite_editor.core.color import Color
from sprite_editor.core.pixel_grid import PixelGrid

logger = logging.getLogger(__name__)

MAX_HISTORY = 20


class ToolType(Enum):
    PEN = "pen"
    ERASER = "eraser"
    FILL = "fill"


@dataclass
class HistoryStack:
    """
    Bounded undo/redo store of grid snapshots. The current grid belongs to the
    caller; only past and undone states live here.
    """
    limit: int = MAX_HISTORY

    def __post_init__(self):
        self._undo: list[PixelGrid] = []
        self._redo: list[PixelGrid] = []

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def _push_undo(self, grid: PixelGrid):
        self._undo.append(grid.copy())
        if len(self._undo) > self.limit:
            self._undo.pop(0)

    def begin_edit(self, current: PixelGrid):
        """Call once per gesture, before the first pixel changes."""
        self._push_undo(current)
        self._redo.clear()

    def continue_edit(self):
        pass

    def undo(self, current: PixelGrid) -> Optional[PixelGrid]:
        if not self._undo:
            return None
        previous = self._undo.pop()
        self._redo.append(current.copy())
        return previous

    def redo(self, current: PixelGrid) -> Optional[PixelGrid]:
        if not self._redo:
            return None
        following = self._redo.pop()
        self._push_undo(current)
        return following

    def reset(self):
        self._undo.clear()
        self._redo.clear()


def line_points(p0: tuple[int, int], p1: tuple[int, int]) -> Iterator[tuple[int, int]]:
    """Bresenham cells from p0 to p1, both ends included."""
    x0, y0 = p0
    x1, y1 = p1
    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    x, y = x0, y0
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy
    while True:
        yield x, y
        if x == x1 and y == y1:
            break
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x += sx
        if e2 < dx:
            err += dx
            y += sy


def flood_fill(grid: PixelGrid, x: int, y: int, new_color: Optional[Color]) -> int:
    """
    Non-recursive 4-connected flood fill. Returns the number of cells recoloured.
    """
    if not grid.is_valid(x, y):
        return 0

    target = grid.get(x, y)
    if target == new_color:
        return 0

    count = 0
    stack = [(x, y)]

    while stack:
        cx, cy = stack.pop()
        if not grid.is_valid(cx, cy):
            continue
        if grid.get(cx, cy) != target:
            continue

        grid.set(cx, cy, new_color)
        count += 1

        stack.append((cx + 1, cy))
        stack.append((cx - 1, cy))
        stack.append((cx, cy + 1))
        stack.append((cx, cy - 1))

    logger.debug("Flood fill at (%d, %d) recoloured %d cells", x, y, count)
    return count
