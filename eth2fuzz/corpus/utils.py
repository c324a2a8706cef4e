import functools
import time


@functools.cache
def format_seconds(seconds: int) -> str:
    """Convert seconds to a more readable time."""
    h, rem = divmod(seconds, 3600)
    m, s = divmod(rem, 60)
    parts = []
    if h:
        parts.append(f"{h}h")
    if m:
        parts.append(f"{m}m")
    parts.append(f"{s}s")
    return " ".join(parts)


def time_since(start_time: float) -> str:
    """Get the duration since some start time."""
    return format_seconds(int(time.time() - start_time))
