"""Text formatting helpers shared by the views."""


def format_bytes(size: int) -> str:
    """Human-readable binary size, e.g. 1536 -> '1.5 KB'."""
    unit = 1024
    if size < unit:
        return f"{size} B"
    div, exp = unit, 0
    n = size // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    return f"{size / div:.1f} {'KMGTPE'[exp]}B"


def truncate_path(path: str, max_len: int) -> str:
    """Shorten path from the left, keeping its tail visible."""
    if len(path) <= max_len:
        return path
    if max_len < 10:
        return path[:max_len]
    return "..." + path[len(path) - (max_len - 3):]


def usage_bar(percent: float, width: int = 40) -> str:
    """Rich markup for a filled/empty usage bar."""
    percent = int(min(max(percent, 0), 100))
    filled = width * percent // 100
    empty = width - filled
    return f"[cyan]{'█' * filled}[/cyan][grey37]{'░' * empty}[/grey37]"
