"""
Versioned JSON project file.

    {"version": 1, "name": ..., "fps": ..., "gridSize": ...,
     "frames": [{"pixels": [[hex-or-null, ...], ...]}, ...]}

pixels[y][x]; null is a transparent cell. Frame identities are never stored,
every load hands out fresh ones.
"""
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from sprite_editor.core.color import Color, hex_or_none, parse_hex
from sprite_editor.core.errors import ProjectFileError
from sprite_editor.core.frames import DEFAULT_NAME, Frame, FrameSequence
from sprite_editor.core.pixel_grid import GRID_SIZE, PixelGrid
from sprite_editor.utils.validators import DEFAULT_FPS, validate_fps

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1
PROJECT_EXTENSION = ".sprite"


PixelRows = list[list[Optional[str]]]


@dataclass
class ProjectDocument:
    name: str = DEFAULT_NAME
    fps: int = DEFAULT_FPS
    grid_size: int = GRID_SIZE
    frames: list[PixelRows] = field(default_factory=list)
    version: int = FORMAT_VERSION

    # ---------- FrameSequence <-> document ----------
    @classmethod
    def from_sequence(cls, sequence: FrameSequence) -> "ProjectDocument":
        frames = [
            [[hex_or_none(c) for c in row] for row in frame.grid.rows()]
            for frame in sequence
        ]
        return cls(name=sequence.name, fps=sequence.fps, grid_size=sequence.grid_size, frames=frames)

    def to_sequence(self, grid_size: int = GRID_SIZE) -> FrameSequence:
        """
        Build a new sequence on a grid of `grid_size`. Cells that fall outside
        it are dropped, missing ones stay transparent.
        """
        sequence = FrameSequence(name=self.name, fps=self.fps, grid_size=grid_size)
        frames = []
        for i, pixels in enumerate(self.frames):
            grid = PixelGrid(grid_size)
            for y, row in enumerate(pixels):
                for x, value in enumerate(row):
                    if value is None:
                        continue
                    grid.set(x, y, _parse_cell(value, i, x, y))
            frames.append(Frame(grid))
        sequence.replace_frames(frames)
        return sequence

    # ---------- dict / JSON ----------
    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "name": self.name,
            "fps": self.fps,
            "gridSize": self.grid_size,
            "frames": [{"pixels": pixels} for pixels in self.frames],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "ProjectDocument":
        if not isinstance(data, dict):
            raise ProjectFileError("Project file must contain a JSON object")

        version = data.get("version")
        if version != FORMAT_VERSION:
            raise ProjectFileError(f"Unsupported project version: {version!r}")

        raw_frames = data.get("frames", [])
        if not isinstance(raw_frames, list):
            raise ProjectFileError("'frames' must be a list")

        frames: list[PixelRows] = []
        for i, raw in enumerate(raw_frames):
            if not isinstance(raw, dict):
                raise ProjectFileError(f"Frame {i} must be an object")
            pixels = raw.get("pixels", [])
            if not isinstance(pixels, list) or not all(isinstance(r, list) for r in pixels):
                raise ProjectFileError(f"Frame {i}: 'pixels' must be a list of rows")
            for y, row in enumerate(pixels):
                for x, value in enumerate(row):
                    if value is not None and not isinstance(value, str):
                        raise ProjectFileError(f"Frame {i}: pixel ({x}, {y}) must be a hex string or null")
            frames.append(pixels)

        grid_size = data.get("gridSize", GRID_SIZE)
        if not isinstance(grid_size, int) or grid_size < 1:
            raise ProjectFileError(f"Invalid gridSize: {grid_size!r}")

        name = data.get("name")
        return cls(
            name=name if isinstance(name, str) and name.strip() else DEFAULT_NAME,
            fps=validate_fps(data.get("fps", DEFAULT_FPS)),
            grid_size=grid_size,
            frames=frames,
            version=version,
        )

    def dumps(self) -> bytes:
        return json.dumps(self.to_dict(), indent=2).encode("utf-8")

    @classmethod
    def loads(cls, data: bytes | str) -> "ProjectDocument":
        try:
            parsed = json.loads(data)
        except (UnicodeDecodeError, ValueError, RecursionError) as e:
            raise ProjectFileError(f"Not a valid project file: {e}") from e
        return cls.from_dict(parsed)


def _parse_cell(value: str, frame: int, x: int, y: int) -> Color:
    try:
        return parse_hex(value)
    except ValueError as e:
        raise ProjectFileError(f"Frame {frame}: bad colour at ({x}, {y}): {e}") from e


def encode_project(sequence: FrameSequence) -> bytes:
    return ProjectDocument.from_sequence(sequence).dumps()


def decode_project(data: bytes | str, grid_size: int = GRID_SIZE) -> FrameSequence:
    document = ProjectDocument.loads(data)
    if document.grid_size != grid_size:
        logger.warning(f"Project grid size {document.grid_size} differs from editor grid {grid_size}")
    return document.to_sequence(grid_size)


def save_project(sequence: FrameSequence, out_path: str | Path) -> Path:
    p = Path(out_path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(encode_project(sequence))
    except OSError as e:
        raise ProjectFileError(f"Could not write {p}: {e}") from e
    logger.info(f"Saved project '{sequence.name}' ({len(sequence)} frames) to {p}")
    return p


def load_project(path: str | Path, grid_size: int = GRID_SIZE) -> FrameSequence:
    p = Path(path)
    try:
        data = p.read_bytes()
    except OSError as e:
        raise ProjectFileError(f"Could not read {p}: {e}") from e
    sequence = decode_project(data, grid_size)
    logger.info(f"Loaded project '{sequence.name}' ({len(sequence)} frames) from {p}")
    return sequence
