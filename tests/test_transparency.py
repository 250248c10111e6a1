from sprite_editor.core.pixel_grid import PixelGrid
from sprite_editor.core.transparency import create_checkerboard, render_preview

from conftest import RED


def test_checkerboard_alternates():
    bg = create_checkerboard((4, 4), square_size=2)
    assert bg.getpixel((0, 0)) != bg.getpixel((2, 0))
    assert bg.getpixel((0, 0)) == bg.getpixel((2, 2))


def test_preview_is_zoomed_and_opaque():
    grid = PixelGrid(4)
    grid.set(0, 0, RED)
    preview = render_preview(grid, zoom=8)
    assert preview.size == (32, 32)
    assert preview.getpixel((7, 7)) == RED
    assert preview.getpixel((20, 20))[3] == 255


def test_preview_grid_lines_change_output():
    grid = PixelGrid(4)
    plain = render_preview(grid, zoom=8)
    lined = render_preview(grid, zoom=8, show_grid=True)
    assert plain.getpixel((8, 3)) != lined.getpixel((8, 3))


def test_checkerboard_colours_and_partial_squares():
    bg = create_checkerboard((5, 3), square_size=2, light=(255, 255, 255), dark=(0, 0, 0))
    assert bg.size == (5, 3)
    assert bg.getpixel((0, 0)) == (255, 255, 255)
    assert bg.getpixel((2, 0)) == (0, 0, 0)
    assert bg.getpixel((4, 0)) == (255, 255, 255)
    assert bg.getpixel((0, 2)) == (0, 0, 0)
    assert bg.getpixel((2, 2)) == (255, 255, 255)
