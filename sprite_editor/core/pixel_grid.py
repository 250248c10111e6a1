from typing import Iterator, Optional, Sequence

from sprite_editor.core.color import Color

GRID_SIZE = 32


class PixelGrid:
    """
    Square raster of optional RGBA colours, stored row-major (cells[y][x]).
    Invalid coordinates never raise: reads give None, writes are ignored.
    """

    __slots__ = ("size", "_cells")

    def __init__(self, size: int = GRID_SIZE):
        if size < 1:
            raise ValueError(f"Grid size must be positive, got {size}")
        self.size = size
        self._cells: list[list[Optional[Color]]] = [[None] * size for _ in range(size)]

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Optional[Color]]], size: int = GRID_SIZE) -> "PixelGrid":
        grid = cls(size)
        for y, row in enumerate(rows):
            for x, color in enumerate(row):
                grid.set(x, y, color)
        return grid

    def is_valid(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def get(self, x: int, y: int) -> Optional[Color]:
        if not self.is_valid(x, y):
            return None
        return self._cells[y][x]

    def set(self, x: int, y: int, color: Optional[Color]):
        if not self.is_valid(x, y):
            return
        self._cells[y][x] = color

    def clear(self):
        self._cells = [[None] * self.size for _ in range(self.size)]

    def is_empty(self) -> bool:
        return all(c is None for row in self._cells for c in row)

    def rows(self) -> list[list[Optional[Color]]]:
        return [list(row) for row in self._cells]

    def iter_cells(self) -> Iterator[tuple[int, int, Optional[Color]]]:
        for y, row in enumerate(self._cells):
            for x, color in enumerate(row):
                yield x, y, color

    def copy(self) -> "PixelGrid":
        dup = PixelGrid.__new__(PixelGrid)
        dup.size = self.size
        # colour tuples are immutable, copying the row lists is enough
        dup._cells = [list(row) for row in self._cells]
        return dup

    __copy__ = copy

    def __deepcopy__(self, memo):
        return self.copy()

    def __eq__(self, other):
        if isinstance(other, PixelGrid):
            return self.size == other.size and self._cells == other._cells
        return NotImplemented

    __hash__ = None

    def __repr__(self):
        filled = sum(1 for _, _, c in self.iter_cells() if c is not None)
        return f"PixelGrid(size={self.size}, filled={filled})"
