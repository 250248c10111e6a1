import re


def clamp(v: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, int(v)))


def human_readable_size(bytes_count: int) -> str:
    units = ["B", "KB", "MB", "GB"]
    i = 0
    v = float(bytes_count)
    while v >= 1024 and i < len(units) - 1:
        v /= 1024.0
        i += 1
    return f"{v:.2f} {units[i]}"


def safe_file_stem(name: str, fallback: str = "sprite") -> str:
    """
    Turn a project name into something usable as a file name stem.
    """
    stem = re.sub(r"[^\w\-. ]+", "_", (name or "").strip())
    stem = stem.strip(" .")
    return stem or fallback


def wrap_index(index: int, count: int) -> int:
    if count <= 0:
        return 0
    return index % count
