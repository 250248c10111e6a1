"""
Central logging setup for the command line and any embedding UI.
"""
import logging
import sys
from pathlib import Path


class LoggingConfig:
    """Central logging configuration"""

    _initialized = False
    _log_file_path = None

    @classmethod
    def setup_logging(cls, log_dir: Path | None = None, verbose: bool = False):
        """Attach a console handler and, if log_dir is given, a file handler."""
        if cls._initialized:
            return

        logger = logging.getLogger()
        logger.setLevel(logging.DEBUG)

        if log_dir is not None:
            log_dir.mkdir(parents=True, exist_ok=True)
            cls._log_file_path = log_dir / "sprite_editor.log"
            file_handler = logging.FileHandler(cls._log_file_path, encoding="utf-8")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S"
            ))
            logger.addHandler(file_handler)

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
        console_handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        logger.addHandler(console_handler)

        cls._initialized = True
        logger.debug("Logging system initialized")

    @classmethod
    def get_log_file_path(cls) -> Path | None:
        return cls._log_file_path


__all__ = ["LoggingConfig"]
