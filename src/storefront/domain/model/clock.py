"""Time source for entities and rule services.

Rule services take a ``Clock`` so the time-boxed rules can be exercised
deterministically; everything else just calls ``utc_now()``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
