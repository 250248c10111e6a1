import logging
from typing import Optional, Protocol

from sprite_editor.core.color import DEFAULT_COLOR, Color, coerce_color
from sprite_editor.core.editor_tools import HistoryStack, ToolType, flood_fill, line_points
from sprite_editor.core.pixel_grid import PixelGrid

logger = logging.getLogger(__name__)


class GridOwner(Protocol):
    def active_grid(self) -> PixelGrid: ...

    def update_active_grid(self, grid: PixelGrid) -> None: ...


class CanvasEngine:
    """
    Applies the current tool to the active grid and keeps undo history.

    The engine never holds on to the owner's grid: it reads a copy, edits it
    and writes it back through update_active_grid().
    """

    def __init__(self, owner: GridOwner, tool: ToolType = ToolType.PEN, color: Color = DEFAULT_COLOR):
        self.owner = owner
        self.tool = tool
        self.color: Color = color
        self.history = HistoryStack()
        self._stroke_active = False
        self._last_pos: Optional[tuple[int, int]] = None

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    @property
    def stroke_active(self) -> bool:
        return self._stroke_active

    def set_tool(self, tool: ToolType | str):
        self.tool = ToolType(tool)
        logger.debug(f"Tool: {self.tool.value}")

    def set_color(self, color):
        rgba = coerce_color(color)
        if rgba is None:
            raise ValueError("Drawing colour cannot be empty, use the eraser instead")
        self.color = rgba

    # ---------- Strokes ----------
    def begin_stroke(self, x: int, y: int) -> bool:
        """Start a gesture: one history snapshot, then the first application."""
        grid = self.owner.active_grid()
        self.history.begin_edit(grid)
        self._stroke_active = True
        self._last_pos = None
        return self._apply(grid, x, y)

    def continue_stroke(self, x: int, y: int) -> bool:
        if not self._stroke_active:
            return self.begin_stroke(x, y)
        self.history.continue_edit()
        return self._apply(self.owner.active_grid(), x, y)

    def end_stroke(self):
        self._stroke_active = False
        self._last_pos = None

    def _apply(self, grid: PixelGrid, x: int, y: int) -> bool:
        if self.tool == ToolType.FILL:
            changed = flood_fill(grid, x, y, self.color) > 0
        else:
            color = self.color if self.tool == ToolType.PEN else None
            # pointer samples can skip cells, join them to the previous one
            points = line_points(self._last_pos, (x, y)) if self._last_pos else [(x, y)]
            changed = False
            for px, py in points:
                if grid.is_valid(px, py) and grid.get(px, py) != color:
                    grid.set(px, py, color)
                    changed = True
        self._last_pos = (x, y)
        if changed:
            self.owner.update_active_grid(grid)
        return changed

    # ---------- History ----------
    def undo(self) -> bool:
        self.end_stroke()
        previous = self.history.undo(self.owner.active_grid())
        if previous is None:
            return False
        self.owner.update_active_grid(previous)
        return True

    def redo(self) -> bool:
        self.end_stroke()
        following = self.history.redo(self.owner.active_grid())
        if following is None:
            return False
        self.owner.update_active_grid(following)
        return True

    def clear_canvas(self):
        self.end_stroke()
        grid = self.owner.active_grid()
        self.history.begin_edit(grid)
        grid.clear()
        self.owner.update_active_grid(grid)

    def reset_history(self):
        self.end_stroke()
        self.history.reset()
