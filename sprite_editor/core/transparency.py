from PIL import Image, ImageDraw

from sprite_editor.core.exporter import render_grid
from sprite_editor.core.pixel_grid import PixelGrid

GRID_LINE_COLOR = (0, 0, 0, 40)
CHECKER_LIGHT = (220, 220, 220)
CHECKER_DARK = (180, 180, 180)


def create_checkerboard(size: tuple[int, int], square_size: int = 8,
                        light: tuple[int, int, int] = CHECKER_LIGHT,
                        dark: tuple[int, int, int] = CHECKER_DARK) -> Image.Image:
    """Light squares where (column + row) is even, starting at the top-left."""
    w, h = size
    bg = Image.new("RGB", (w, h), light)
    draw = ImageDraw.Draw(bg)
    for row, top in enumerate(range(0, h, square_size)):
        for col, left in enumerate(range(0, w, square_size)):
            if (row + col) % 2:
                draw.rectangle([left, top, left + square_size - 1, top + square_size - 1], fill=dark)
    return bg


def render_preview(grid: PixelGrid, zoom: int = 8, show_grid: bool = False) -> Image.Image:
    """
    Display image for a canvas or a frame thumbnail: transparent cells over a
    checkerboard, upscaled without smoothing, optional cell grid lines.
    """
    zoom = max(1, int(zoom))
    comp = render_grid(grid)
    if zoom != 1:
        comp = comp.resize((comp.width * zoom, comp.height * zoom), Image.Resampling.NEAREST)

    bg = create_checkerboard(comp.size, square_size=max(1, zoom // 2))
    composed = Image.alpha_composite(bg.convert("RGBA"), comp)

    if show_grid and zoom >= 4:
        overlay = Image.new("RGBA", composed.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(overlay)
        w, h = composed.size
        for x in range(0, w, zoom):
            draw.line([(x, 0), (x, h)], fill=GRID_LINE_COLOR)
        for y in range(0, h, zoom):
            draw.line([(0, y), (w, y)], fill=GRID_LINE_COLOR)
        composed = Image.alpha_composite(composed, overlay)
    return composed
