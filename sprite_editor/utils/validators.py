MIN_FPS = 1
MAX_FPS = 24
DEFAULT_FPS = 6
MAX_FRAMES = 24


def validate_fps(fps, default: int = DEFAULT_FPS) -> int:
    """Coerce fps into 1..24. Anything unparseable yields the default."""
    try:
        value = int(fps)
    except (TypeError, ValueError):
        return default
    return max(MIN_FPS, min(MAX_FPS, value))


def validate_grid_size(size) -> int:
    try:
        value = int(size)
    except (TypeError, ValueError):
        raise ValueError(f"Grid size must be an integer, got {size!r}") from None
    if not 1 <= value <= 256:
        raise ValueError(f"Grid size out of range: {value}")
    return value