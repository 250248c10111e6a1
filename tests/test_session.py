import json

import pytest

from sprite_editor.core.editor_tools import ToolType
from sprite_editor.core.errors import ProjectFileError
from sprite_editor.core.session import EditorSession
from sprite_editor.utils.config import AppConfig

from conftest import BLUE, GREEN, RED


def test_stroke_is_one_undo_step(session):
    session.begin_stroke(0, 0)
    session.continue_stroke(3, 0)
    session.end_stroke()
    grid = session.active_grid()
    assert [grid.get(x, 0) for x in range(4)] == [RED] * 4
    assert session.can_undo

    assert session.undo()
    assert session.active_grid().is_empty()
    assert not session.can_undo
    assert session.can_redo
    assert session.redo()
    assert session.active_grid().get(2, 0) == RED


def test_eraser_and_fill_tools(session):
    session.begin_stroke(1, 1)
    session.end_stroke()
    session.set_tool(ToolType.ERASER)
    session.begin_stroke(1, 1)
    session.end_stroke()
    assert session.active_grid().get(1, 1) is None

    session.set_tool("fill")
    session.set_color(BLUE)
    session.begin_stroke(10, 10)
    session.end_stroke()
    grid = session.active_grid()
    assert all(c == BLUE for _, _, c in grid.iter_cells())


def test_undo_with_empty_history_is_noop(session):
    assert session.undo() is False
    assert session.redo() is False


def test_new_stroke_after_undo_drops_redo(session):
    session.begin_stroke(0, 0)
    session.end_stroke()
    session.undo()
    session.begin_stroke(5, 5)
    session.end_stroke()
    assert not session.can_redo


def test_clear_canvas_is_undoable(session):
    session.begin_stroke(4, 4)
    session.end_stroke()
    session.clear_canvas()
    assert session.active_grid().is_empty()
    session.undo()
    assert session.active_grid().get(4, 4) == RED


def test_active_grid_is_a_copy(session):
    grid = session.active_grid()
    grid.set(0, 0, GREEN)
    assert session.active_frame.grid.get(0, 0) is None


def test_add_duplicate_and_navigation(session):
    session.begin_stroke(0, 0)
    session.end_stroke()
    assert session.duplicate_active_frame() == 1
    assert session.active_index == 1
    assert session.active_grid().get(0, 0) == RED
    assert session.add_frame() == 2
    assert session.active_index == 2
    assert session.active_grid().is_empty()

    session.next_frame()
    assert session.active_index == 0
    session.previous_frame()
    assert session.active_index == 2
    assert session.select_frame(1)
    assert not session.select_frame(9)
    assert session.active_index == 1


def test_add_frame_stops_at_capacity(session):
    while session.can_add_frame:
        assert session.add_frame() is not None
    assert session.frame_count == 24
    assert session.add_frame() is None
    assert session.duplicate_active_frame() is None
    assert session.frame_count == 24


def test_delete_adjusts_active_index(session):
    session.add_frame()
    session.add_frame()
    active_id = session.active_frame.id
    assert session.delete_frame(0)
    assert session.active_frame.id == active_id
    assert session.active_index == 1

    assert session.delete_active_frame()
    assert session.active_index == 0
    assert not session.delete_active_frame()
    assert session.frame_count == 1


def test_move_keeps_same_visual_frame_active(session):
    session.add_frame()
    session.add_frame()
    session.select_frame(0)
    session.begin_stroke(7, 7)
    session.end_stroke()
    active_id = session.active_frame.id

    session.move_frame(0, 2)
    assert session.active_index == 2
    assert session.active_frame.id == active_id
    assert session.active_grid().get(7, 7) == RED

    session.move_frame_to_slot(2, 0)
    assert session.active_index == 0
    assert session.active_frame.id == active_id


def test_switching_frames_resets_history(session):
    session.begin_stroke(0, 0)
    session.end_stroke()
    session.add_frame()
    assert not session.can_undo


def test_save_and_load_bytes(session):
    session.begin_stroke(2, 3)
    session.end_stroke()
    session.set_fps(12)
    data = session.save_project()

    session.new_project()
    assert session.active_grid().is_empty()
    assert session.sequence.fps == 6

    session.load_project(data)
    assert session.sequence.fps == 12
    assert session.active_grid().get(2, 3) == RED
    assert session.active_index == 0
    assert not session.can_undo


def test_failed_load_keeps_current_project(session):
    session.begin_stroke(1, 1)
    session.end_stroke()
    before = session.sequence
    with pytest.raises(ProjectFileError):
        session.load_project(b'{"version": 7}')
    assert session.sequence is before
    assert session.can_undo


def test_save_to_renames_project(session, tmp_path):
    path = session.save_to(tmp_path / "jellyfish.sprite")
    assert session.sequence.name == "jellyfish"
    assert json.loads(path.read_bytes())["name"] == "jellyfish"
    session.new_project()
    session.load_from(path)
    assert session.current_path == path


def test_subscribers_are_notified(session):
    seen = []
    unsubscribe = session.subscribe(seen.append)
    session.begin_stroke(0, 0)
    session.add_frame()
    assert "canvas" in seen
    assert "frames" in seen
    assert "selection" in seen
    unsubscribe()
    seen.clear()
    session.next_frame()
    assert seen == []


def test_session_from_config(tmp_path):
    config = AppConfig(tmp_path / "settings.json")
    config.default_fps = 12
    config.export_dir = str(tmp_path / "out")
    config.last_tool = "fill"
    config.last_color = "#0000FFFF"
    session = EditorSession.from_config(config)
    try:
        assert session.sequence.fps == 12
        assert session.exports.output_dir == tmp_path / "out"
        assert session.engine.tool == ToolType.FILL
        assert session.engine.color == BLUE
    finally:
        session.close()


def test_bad_saved_tool_falls_back_to_defaults(tmp_path):
    config = AppConfig(tmp_path / "settings.json")
    config.last_tool = "spray"
    session = EditorSession.from_config(config)
    try:
        assert session.engine.tool == ToolType.PEN
        assert len(session.palette) == 24
    finally:
        session.close()


def test_grid_size_is_validated():
    with pytest.raises(ValueError):
        EditorSession(grid_size=0)
