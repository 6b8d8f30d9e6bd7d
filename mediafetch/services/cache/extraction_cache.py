# mediafetch/services/cache/extraction_cache.py
from __future__ import annotations

import math
import threading
import time
from typing import Callable, Optional

from cachetools import TTLCache

from mediafetch.common.concurrency.rwlock import ReadWriteLock
from mediafetch.common.logging import get_logger
from mediafetch.common.settings import CacheConfig, get_settings
from mediafetch.domain.entities.extraction import ExtractionResult

logger = get_logger()


class ExtractionCache:
    """
    URL -> most recent ExtractionResult, valid for `ttl_sec`.

    Entry states
    ------------
    - fresh: age < ttl, returned by get()
    - stale: age >= ttl, never returned; removed by the get() that sees it or
      by the next sweep

    Sweeper lifecycle
    -----------------
    - started lazily by the first get() (or explicitly by start())
    - wakes every `sweep_interval_sec` (default 4 x ttl) and drops stale entries
    - exits on its own once the cache is empty; the next get() restarts it
    - stop() ends it and disables the lazy restart until start() is called

    The start decision is taken under `_control`, so concurrent readers can
    never start two sweepers. Lock order is always `_control` before `_rw`.
    """

    def __init__(
        self,
        ttl_sec: Optional[float] = None,
        sweep_interval_sec: Optional[float] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        cfg = get_settings().cache
        # overrides go through CacheConfig so the "None -> 4 x ttl" rule lives in one place
        policy = CacheConfig(
            ttl_sec=cfg.ttl_sec if ttl_sec is None else ttl_sec,
            sweep_interval_sec=cfg.sweep_interval_sec if sweep_interval_sec is None else sweep_interval_sec,
        )
        self.ttl_sec = float(policy.ttl_sec)
        self.sweep_interval_sec = float(policy.effective_sweep_interval_sec)

        # expiry (age >= ttl) is decided by TTLCache against the injected clock
        self._entries: TTLCache = TTLCache(maxsize=math.inf, ttl=self.ttl_sec, timer=clock)
        self._rw = ReadWriteLock()

        self._control = threading.Lock()
        self._sweeper: Optional[threading.Thread] = None
        self._sweeper_stop: Optional[threading.Event] = None
        self._stopped = False

    # -------------------------
    # Lifecycle
    # -------------------------
    def start(self) -> None:
        """Start the sweeper now and re-enable lazy restarts. Idempotent."""
        with self._control:
            self._stopped = False
            if self._sweeper is None:
                self._start_sweeper_locked()

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop the sweeper and keep it stopped until start(). Safe to call multiple times."""
        with self._control:
            self._stopped = True
            thread, ev = self._sweeper, self._sweeper_stop
            self._sweeper = None
            self._sweeper_stop = None
        if ev is not None:
            ev.set()
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def __enter__(self) -> "ExtractionCache":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    @property
    def sweeper_running(self) -> bool:
        with self._control:
            return self._sweeper is not None and self._sweeper.is_alive()

    # -------------------------
    # Entries
    # -------------------------
    def get(self, url: str) -> Optional[ExtractionResult]:
        self._ensure_sweeper()

        with self._rw.read_locked():
            # TTLCache.__getitem__ only reorders its LRU index; expiry pruning needs the write lock
            try:
                result = self._entries[url]
            except KeyError:
                result = None
        if result is not None:
            logger.debug("extraction cache hit: %s", url)
            return result

        # miss: drop whatever has gone stale, this key included
        with self._rw.write_locked():
            expired = self._entries.expire()
        if any(key == url for key, _ in expired):
            logger.debug("extraction cache expired: %s", url)
        else:
            logger.debug("extraction cache miss: %s", url)
        return None

    def set(self, url: str, result: ExtractionResult) -> None:
        with self._rw.write_locked():
            self._entries[url] = result

    def sweep(self) -> int:
        """Drop every stale entry now. Returns how many were removed."""
        with self._rw.write_locked():
            return len(self._entries.expire())

    def clear(self) -> None:
        with self._rw.write_locked():
            self._entries.clear()

    def __len__(self) -> int:
        # TTLCache.__len__ expires before counting
        with self._rw.write_locked():
            return len(self._entries)

    def __contains__(self, url: object) -> bool:
        with self._rw.read_locked():
            return url in self._entries

    # -------------------------
    # Internals
    # -------------------------
    def _ensure_sweeper(self) -> None:
        # unlocked fast path; the decision itself is re-checked under _control
        if self._sweeper is not None or self._stopped:
            return
        with self._control:
            if self._sweeper is None and not self._stopped:
                self._start_sweeper_locked()

    def _start_sweeper_locked(self) -> None:
        ev = threading.Event()
        t = threading.Thread(
            target=self._sweep_loop,
            args=(ev,),
            name="extraction-cache-sweeper",
            daemon=True,
        )
        self._sweeper, self._sweeper_stop = t, ev
        t.start()
        logger.debug("extraction cache sweeper started (every %.1fs)", self.sweep_interval_sec)

    def _sweep_loop(self, ev: threading.Event) -> None:
        while not ev.wait(self.sweep_interval_sec):
            removed = self.sweep()
            if removed:
                logger.debug("extraction cache sweep removed %d entries", removed)
            with self._control:
                if ev.is_set():
                    return
                if len(self) == 0:
                    self._sweeper = None
                    self._sweeper_stop = None
                    logger.debug("extraction cache empty; sweeper exiting")
                    return
