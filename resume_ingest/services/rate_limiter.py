"""
In-process sliding-window rate limiter.

Counters live in memory only: they reset on restart and are not shared
between workers. Stale timestamps are pruned lazily on each check.
"""
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_seconds: int


class RateLimiter:
    def __init__(self, window_seconds: float = 60, clock: Callable[[], float] = time.monotonic):
        self.window_seconds = window_seconds
        self._clock = clock
        self._requests: Dict[str, List[float]] = {}
        self._lock = threading.Lock()

    @property
    def active_clients(self) -> int:
        return len(self._requests)

    def check(self, client_id: str, limit: int) -> RateLimitResult:
        """Record a request for ``client_id`` if it fits in the window."""
        now = self._clock()
        window_start = now - self.window_seconds

        with self._lock:
            recent = [ts for ts in self._requests.get(client_id, []) if ts > window_start]

            if len(recent) >= limit:
                self._requests[client_id] = recent
                # Seconds until the oldest request in the window expires
                reset = max(1, math.ceil(recent[0] + self.window_seconds - now))
                return RateLimitResult(allowed=False, remaining=0, reset_seconds=reset)

            recent.append(now)
            self._requests[client_id] = recent
            return RateLimitResult(
                allowed=True,
                remaining=limit - len(recent),
                reset_seconds=math.ceil(self.window_seconds),
            )

    def reset(self, client_id: Optional[str] = None) -> None:
        with self._lock:
            if client_id is None:
                self._requests.clear()
            else:
                self._requests.pop(client_id, None)


def client_identifier(headers) -> str:
    """First X-Forwarded-For hop, then X-Real-IP, else a shared 'unknown' bucket."""
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    real_ip = headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return "unknown"
