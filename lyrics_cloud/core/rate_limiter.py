"""
Request rate limiting for resolver-backed endpoints

Fixed-window counting per client identity: a client may be admitted
`max_requests` times within any `window_seconds`. Each admission check first
prunes timestamps older than the window, then admits iff fewer than
`max_requests` remain, recording a timestamp only when it admits.

State lives in an explicit RateLimitStore passed to the limiter, and every
call takes an explicit `now`, so tests drive the limiter with a fake clock.
The store guards prune-check-record and sweeps with one lock: an admission
check is atomic with respect to other checks for the same client and a sweep
can never drop a window that is being written.
"""

import asyncio
import threading
import time
from collections import deque
from enum import Enum
from typing import Callable, Deque, Dict, List, Optional

from .exceptions import RateLimitedError
from ..utils.logger import get_logger

RATE_LIMITED_MESSAGE = "Too many requests. Please wait a minute."


class Admission(Enum):
    """Outcome of an admission check"""
    ALLOWED = "allowed"
    REJECTED = "rejected"

    @property
    def allowed(self) -> bool:
        return self is Admission.ALLOWED


class RateLimitStore:
    """
    Mapping of client identity -> ordered admission timestamps

    Memory is bounded by the number of recently active clients: windows
    that prune down to nothing are removed by `sweep`.
    """

    def __init__(self):
        self._windows: Dict[str, Deque[float]] = {}
        self.lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._windows)

    def __contains__(self, client_id: str) -> bool:
        return client_id in self._windows

    def timestamps(self, client_id: str) -> List[float]:
        """Snapshot of a client's recorded timestamps, oldest first"""
        with self.lock:
            return list(self._windows.get(client_id, ()))

    def prune(self, client_id: str, now: float, window_seconds: float) -> Deque[float]:
        """
        Drop timestamps that fell out of the window and return the live window

        Must be called with `lock` held.
        """
        window = self._windows.setdefault(client_id, deque())
        while window and now - window[0] >= window_seconds:
            window.popleft()
        return window

    def sweep(self, now: float, window_seconds: float) -> int:
        """
        Prune every client and remove the ones left without timestamps

        Returns:
            Number of client entries removed
        """
        removed = 0
        with self.lock:
            for client_id in list(self._windows):
                if not self.prune(client_id, now, window_seconds):
                    del self._windows[client_id]
                    removed += 1
        return removed


class RateLimiter:
    """
    Fixed-window admission gate

    Args:
        store: Shared window store (a fresh one when omitted)
        max_requests: Admissions allowed per window
        window_seconds: Window length
        clock: Time source used when `now` is not given
    """

    def __init__(
        self,
        store: Optional[RateLimitStore] = None,
        max_requests: int = 10,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic
    ):
        self.store = store if store is not None else RateLimitStore()
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self.logger = get_logger(__name__)

    def admit(self, client_id: str, now: Optional[float] = None) -> Admission:
        """
        Decide whether a client may perform one more request

        Args:
            client_id: Client identity (remote address)
            now: Current instant, defaults to the limiter clock

        Returns:
            Admission.ALLOWED (timestamp recorded) or Admission.REJECTED
        """
        now = self.clock() if now is None else now

        with self.store.lock:
            window = self.store.prune(client_id, now, self.window_seconds)
            if len(window) >= self.max_requests:
                self.logger.info(f"Rate limit hit for {client_id} ({len(window)}/{self.max_requests})")
                return Admission.REJECTED
            window.append(now)

        return Admission.ALLOWED

    def check(self, client_id: str, now: Optional[float] = None) -> None:
        """
        Admit a client or raise

        Raises:
            RateLimitedError: The client has no admissions left in its window
        """
        if not self.admit(client_id, now).allowed:
            raise RateLimitedError(
                RATE_LIMITED_MESSAGE,
                details={'client_id': client_id, 'retry_after': self.window_seconds}
            )

    def sweep(self, now: Optional[float] = None) -> int:
        """Remove idle client entries, returns how many were removed"""
        now = self.clock() if now is None else now
        removed = self.store.sweep(now, self.window_seconds)
        if removed:
            self.logger.debug(f"Rate limit sweep removed {removed} idle clients, {len(self.store)} active")
        return removed

    async def run_sweeper(self, interval: float) -> None:
        """Sweep idle entries every `interval` seconds until cancelled"""
        while True:
            await asyncio.sleep(interval)
            self.sweep()
