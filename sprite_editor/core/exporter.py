"""
Rasterise frames and encode them as an animated GIF or a horizontal PNG
sprite sheet.

Both encoders work on an ExportSnapshot, a frozen copy of the frame grids,
fps and name. Capture it on the editing thread; the encoders never touch the
live FrameSequence.
"""
import logging
import tempfile
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import BinaryIO

from PIL import GifImagePlugin, Image

from sprite_editor.core.errors import (
    ContextCreationError,
    DestinationCreationError,
    EncodingError,
    FinalizationError,
    FrameRenderError,
    ImageCreationError,
)
from sprite_editor.core.frames import FrameSequence
from sprite_editor.core.pixel_grid import PixelGrid
from sprite_editor.utils.helpers import safe_file_stem

logger = logging.getLogger(__name__)

GIF_LOOP_FOREVER = 0
GIF_TRANSPARENT_INDEX = 255
# Cells at or above this alpha are drawn opaque in the GIF; GIF has 1-bit alpha.
GIF_ALPHA_THRESHOLD = 128


@dataclass(frozen=True)
class ExportSnapshot:
    grids: tuple[PixelGrid, ...]
    fps: int
    name: str
    grid_size: int

    @classmethod
    def capture(cls, sequence: FrameSequence) -> "ExportSnapshot":
        return cls(
            grids=tuple(frame.grid.copy() for frame in sequence),
            fps=sequence.fps,
            name=sequence.name,
            grid_size=sequence.grid_size,
        )

    @property
    def frame_count(self) -> int:
        return len(self.grids)

    @property
    def frame_duration_ms(self) -> int:
        # GIF delays are whole centiseconds
        return round(100 / self.fps) * 10

    def default_filename(self, kind: str) -> str:
        stem = safe_file_stem(self.name)
        if kind == "animation":
            return f"{stem}_animation.gif"
        return f"{stem}_spritesheet.png"


# ---------- Rasterisation ----------
def render_grid(grid: PixelGrid) -> Image.Image:
    """
    One cell per pixel, RGBA with straight alpha, grid row 0 as the top row.
    """
    clear = (0, 0, 0, 0)
    data = [color or clear for _, _, color in grid.iter_cells()]
    img = Image.new("RGBA", (grid.size, grid.size), clear)
    img.putdata(data)
    return img


def _render_or_raise(grid: PixelGrid, index: int) -> Image.Image:
    try:
        return render_grid(grid)
    except (ValueError, TypeError, MemoryError) as e:
        raise FrameRenderError(f"frame {index}: {e}") from e


def _to_gif_frame(image: Image.Image) -> Image.Image:
    """
    Palette image with colours in 0..254 and index 255 reserved for
    transparent cells.
    """
    alpha = image.getchannel("A")
    frame = image.convert("RGB").quantize(
        colors=GIF_TRANSPARENT_INDEX,
        method=Image.Quantize.MEDIANCUT,
        dither=Image.Dither.NONE,
    )
    palette = (frame.getpalette() or [])[: GIF_TRANSPARENT_INDEX * 3]
    palette += [0] * (256 * 3 - len(palette))
    frame.putpalette(palette)
    mask = alpha.point(lambda a: 255 if a < GIF_ALPHA_THRESHOLD else 0)
    frame.paste(GIF_TRANSPARENT_INDEX, mask=mask)
    return frame


# ---------- Animated GIF ----------
def write_animation(snapshot: ExportSnapshot, fp: BinaryIO):
    """
    Every frame is written as its own image block with a local colour table
    and the full frame delay. Image.save(save_all=True) folds a frame that
    repeats the previous one into it, which would change the frame count.
    """
    if not snapshot.grids:
        raise FrameRenderError("no frames to export")

    frames = [_to_gif_frame(_render_or_raise(g, i)) for i, g in enumerate(snapshot.grids)]
    duration = snapshot.frame_duration_ms
    try:
        header, _ = GifImagePlugin.getheader(
            frames[0],
            info={"loop": GIF_LOOP_FOREVER, "transparency": GIF_TRANSPARENT_INDEX, "duration": duration},
        )
    except (OSError, ValueError) as e:
        raise FinalizationError(str(e)) from e

    blocks = list(header)
    for i, frame in enumerate(frames):
        try:
            blocks.extend(GifImagePlugin.getdata(
                frame,
                duration=duration,
                transparency=GIF_TRANSPARENT_INDEX,
                disposal=2,
                include_color_table=True,
            ))
        except (OSError, ValueError) as e:
            raise FrameRenderError(f"frame {i}: {e}") from e

    try:
        for block in blocks:
            fp.write(block)
        fp.write(b";")
    except (OSError, ValueError) as e:
        raise FinalizationError(str(e)) from e


def encode_animation(snapshot: ExportSnapshot) -> bytes:
    buf = BytesIO()
    write_animation(snapshot, buf)
    return buf.getvalue()


def export_animation(snapshot: ExportSnapshot, out_path: str | Path) -> Path:
    p = Path(out_path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        fp = open(p, "wb")
    except OSError as e:
        raise DestinationCreationError(f"{p}: {e}") from e
    with fp:
        write_animation(snapshot, fp)
    logger.info(f"Exported {snapshot.frame_count} frame GIF at {snapshot.fps} fps to {p}")
    return p


# ---------- Sprite sheet ----------
def build_sheet(snapshot: ExportSnapshot) -> Image.Image:
    """All frames side by side: width N * count, height N, transparent background."""
    size = snapshot.grid_size
    try:
        sheet = Image.new("RGBA", (size * snapshot.frame_count, size), (0, 0, 0, 0))
    except (ValueError, MemoryError) as e:
        raise ContextCreationError(str(e)) from e

    for i, grid in enumerate(snapshot.grids):
        tile = _render_or_raise(grid, i)
        try:
            sheet.paste(tile, (i * size, 0))
        except (ValueError, MemoryError) as e:
            raise ImageCreationError(f"frame {i}: {e}") from e
    return sheet


def encode_sheet(snapshot: ExportSnapshot) -> bytes:
    sheet = build_sheet(snapshot)
    buf = BytesIO()
    try:
        sheet.save(buf, format="PNG", optimize=True)
    except (OSError, ValueError) as e:
        raise EncodingError(str(e)) from e
    return buf.getvalue()


def export_sheet(snapshot: ExportSnapshot, out_path: str | Path) -> Path:
    data = encode_sheet(snapshot)
    p = Path(out_path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(data)
    except OSError as e:
        raise EncodingError(f"{p}: {e}") from e
    logger.info(f"Exported {snapshot.frame_count} frame sheet ({snapshot.grid_size * snapshot.frame_count}x{snapshot.grid_size}) to {p}")
    return p


# ---------- Single frame ----------
def export_frame_png(grid: PixelGrid, out_path: str | Path, scale: int = 1) -> Path:
    img = render_grid(grid)
    if scale > 1:
        img = img.resize((img.width * scale, img.height * scale), Image.Resampling.NEAREST)
    p = Path(out_path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        img.save(p, format="PNG", optimize=True)
    except (OSError, ValueError) as e:
        raise EncodingError(f"{p}: {e}") from e
    return p


def default_export_dir() -> Path:
    return Path(tempfile.gettempdir())
