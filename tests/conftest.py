import logging

import pytest

from sprite_editor.core.export_worker import ExportController
from sprite_editor.core.frames import FrameSequence
from sprite_editor.core.pixel_grid import PixelGrid
from sprite_editor.core.session import EditorSession
from sprite_editor.utils.logging_config import LoggingConfig

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setattr("sprite_editor.utils.config.DEFAULT_PATH", tmp_path / "config.json")


@pytest.fixture(autouse=True)
def reset_logging(monkeypatch):
    monkeypatch.setattr(LoggingConfig, "_initialized", False)
    monkeypatch.setattr(LoggingConfig, "_log_file_path", None)
    root = logging.getLogger()
    level = root.level
    before = list(root.handlers)
    yield
    for handler in list(root.handlers):
        if handler not in before:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def small_grid():
    return PixelGrid(4)


@pytest.fixture
def sequence():
    return FrameSequence(name="Plankton")


@pytest.fixture
def exports(tmp_path):
    controller = ExportController(output_dir=tmp_path / "exports")
    yield controller
    controller.shutdown()


@pytest.fixture
def session(exports):
    s = EditorSession(exports=exports)
    s.set_color(RED)
    return s
