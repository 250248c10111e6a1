import json
import logging
from pathlib import Path

from sprite_editor.utils.validators import DEFAULT_FPS, validate_fps

logger = logging.getLogger(__name__)

DEFAULT_PATH = Path.home() / ".sprite_editor_config.json"
MAX_RECENT = 5


class AppConfig:
    def __init__(self, path: Path | None = None):
        self.path = path or DEFAULT_PATH
        self.recent_files: list[str] = []
        self.export_dir: str | None = None
        self.default_fps: int = DEFAULT_FPS
        self.last_tool: str = "pen"
        self.last_color: str = "#00FFFFFF"
        self._load()

    def _load(self):
        if not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            self.recent_files = [str(p) for p in data.get("recent_files", [])][:MAX_RECENT]
            self.export_dir = data.get("export_dir") or None
            self.default_fps = validate_fps(data.get("default_fps", DEFAULT_FPS))
            self.last_tool = str(data.get("last_tool", "pen"))
            self.last_color = str(data.get("last_color", "#00FFFFFF"))
        except (OSError, ValueError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable config {self.path}: {e}")
            self.recent_files = []
            self.export_dir = None
            self.default_fps = DEFAULT_FPS

    def add_recent(self, path: str | Path):
        p = str(path)
        if p in self.recent_files:
            self.recent_files.remove(p)
        self.recent_files.insert(0, p)
        del self.recent_files[MAX_RECENT:]

    def export_directory(self) -> Path | None:
        return Path(self.export_dir) if self.export_dir else None

    def save(self):
        data = {
            "recent_files": self.recent_files[:MAX_RECENT],
            "export_dir": self.export_dir,
            "default_fps": self.default_fps,
            "last_tool": self.last_tool,
            "last_color": self.last_color,
        }
        try:
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not write config {self.path}: {e}")
