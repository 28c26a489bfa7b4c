from datetime import datetime, timedelta, timezone
from typing import Optional


def format_elapsed(seconds: float, now: Optional[datetime] = None) -> str:
    """Human readable age of an entry, e.g. ``"3m 12s ago"`` or ``"yesterday"``."""
    total = int(max(seconds, 0))
    secs = total % 60
    minutes = (total // 60) % 60
    hours = (total // 3600) % 24
    days = total // 86400

    if days > 7:
        now = now or datetime.now(timezone.utc)
        then = now - timedelta(seconds=total)
        return f"{then:%B} {then.day}"
    elif days > 1:
        return f"{days}d {hours}h ago"
    elif days == 1:
        return "yesterday"
    elif hours > 0:
        return f"{hours}h {minutes}m ago"
    elif minutes > 0:
        return f"{minutes}m {secs}s ago"
    return f"{secs}s ago"


def preview(text: str, width: int = 60) -> str:
    """Single-line preview of clipboard text for listings."""
    flat = " ".join(text.split())
    if len(flat) <= width:
        return flat
    return flat[: max(width - 3, 0)] + "..."
