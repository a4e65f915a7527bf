"""In-process submission rate limiting for the public forms.

One fixed window per client IP. Windows roll over on the next submission
after they expire; stale entries are never evicted explicitly.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

from fastapi import HTTPException, Request, status

from wonderlake.config import get_settings

settings = get_settings()


@dataclass
class _Window:
    count: int
    started_at: float


class SubmissionRateLimiter:
    def __init__(
        self,
        max_submissions: int = 5,
        window_seconds: float = 60 * 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_submissions = max_submissions
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}

    def check(self, key: str) -> bool:
        """Count one submission for ``key``; False once the window is full."""
        now = self._clock()
        window = self._windows.get(key)

        if window is None or now - window.started_at > self.window_seconds:
            self._windows[key] = _Window(count=1, started_at=now)
            return True

        if window.count >= self.max_submissions:
            return False

        window.count += 1
        return True

    def reset(self) -> None:
        self._windows.clear()


def client_key(request: Request) -> str:
    """First X-Forwarded-For hop, else the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client is not None:
        return request.client.host
    return "unknown"


submission_limiter = SubmissionRateLimiter(
    max_submissions=settings.SUBMISSION_RATE_LIMIT_MAX,
    window_seconds=settings.SUBMISSION_RATE_LIMIT_WINDOW_SECONDS,
)


async def enforce_submission_rate_limit(request: Request) -> None:
    """FastAPI dependency guarding the public submission endpoints."""
    if not submission_limiter.check(client_key(request)):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": "Too many submissions. Please try again later.",
                "message": (
                    "For security purposes, we limit submissions to "
                    f"{submission_limiter.max_submissions} per hour."
                ),
            },
        )
