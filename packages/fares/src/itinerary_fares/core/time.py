import time
from datetime import datetime


def local_now_stamp() -> str:
    """Local wall-clock time as `YYYY-MM-DD HH:MM:SS`, for status lines."""
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def monotonic_ms() -> int:
    return int(time.monotonic() * 1000)
