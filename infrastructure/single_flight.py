# ============================================================================
# SINGLE-FLIGHT CALL COORDINATION
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Infrastructure - Concurrency control
# PURPOSE: At most one in-flight call per key within a process
# CREATED: 04 MAR 2026
# ============================================================================
"""
Single-Flight Call Coordination

Collapses concurrent calls for the same key into one execution:

- The first caller for a key (the leader) runs the function.
- Callers arriving while the leader is running wait for it and receive
  the leader's result, or re-raise the leader's exception.
- Once the leader finishes the key is released; the next call runs again.

Nothing is cached beyond the lifetime of the in-flight call. Durable
idempotence is the store's job; this only prevents duplicate concurrent
work (e.g. two requests fetching the same vocabulary term at once).

Usage:
    from infrastructure.single_flight import SingleFlight

    flights = SingleFlight()
    outcome = flights.do(term_uri, lambda: fetch_and_store(term_uri))
"""

import logging
import threading
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _Call(Generic[T]):
    """One in-flight execution shared by the leader and its waiters."""

    def __init__(self):
        self.done = threading.Event()
        self.result: Optional[T] = None
        self.error: Optional[BaseException] = None
        self.waiters = 0


class SingleFlight(Generic[T]):
    """
    Per-key in-flight call registry.

    Thread-safe; a single instance is shared by all request threads.
    """

    def __init__(self, name: str = "single-flight"):
        self.name = name
        self._lock = threading.Lock()
        self._calls: Dict[str, _Call[T]] = {}

    def do(self, key: str, fn: Callable[[], T]) -> T:
        """
        Run fn for key, or wait for the in-flight run of it.

        Args:
            key: Coordination key
            fn: Zero-argument callable executed by the leader only

        Returns:
            The leader's return value

        Raises:
            Whatever fn raised in the leader.
        """
        with self._lock:
            call = self._calls.get(key)
            if call is not None:
                call.waiters += 1
                leader = False
            else:
                call = _Call()
                self._calls[key] = call
                leader = True

        if not leader:
            logger.debug(f"[{self.name}] waiting on in-flight call for {key}")
            call.done.wait()
            if call.error is not None:
                raise call.error
            return call.result

        try:
            call.result = fn()
        except BaseException as e:
            call.error = e
            raise
        finally:
            with self._lock:
                del self._calls[key]
            call.done.set()
            if call.waiters:
                logger.debug(f"[{self.name}] shared result for {key} with {call.waiters} waiter(s)")

        return call.result

    def in_flight(self, key: str) -> bool:
        """Point-in-time check whether a call for key is running."""
        with self._lock:
            return key in self._calls

    def __len__(self) -> int:
        with self._lock:
            return len(self._calls)


__all__ = ["SingleFlight"]
