"""Inventory manager: the composition of scanner and cache.

The manager owns the published inventory. It serves the cached tree at
start-up, refreshes it in the background (stale-while-revalidate), runs
at most one scan at a time and pushes every new snapshot to its
subscribers. The inventory is only ever replaced as a whole.
"""

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from types import TracebackType

from appdeck.inventory.cache import InventoryCache
from appdeck.inventory.scanner import InventoryScanner
from appdeck.models.inventory import ApplicationItem, InventoryEntry
from appdeck.utils.shell import default_opener, spawn_detached

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class InventoryState:
    """Snapshot pushed to subscribers on every publication.

    Attributes:
        entries: Published inventory tree.
        is_loading: True while a scan runs with the loading indicator shown.
    """

    entries: tuple[InventoryEntry, ...]
    is_loading: bool


Subscriber = Callable[[InventoryState], None]
Dispatcher = Callable[[Callable[[], None]], None]


def _call_now(notify: Callable[[], None]) -> None:
    notify()


class InventoryManager:
    """Serves the application inventory to the UI layer.

    Args:
        scanner: Filesystem scanner producing inventory trees.
        cache: Persisted inventory cache.
        executor: Executor running scans. A single-worker pool owned by
            the manager is created when omitted.
        opener: Command used to launch bundles. Defaults to the platform
            opener.
        dispatch: Callable used to deliver notifications to the owning
            context. Defaults to calling subscribers on the scan thread.
    """

    def __init__(
        self,
        scanner: InventoryScanner,
        cache: InventoryCache,
        *,
        executor: Executor | None = None,
        opener: str | None = None,
        dispatch: Dispatcher | None = None,
    ) -> None:
        self._scanner = scanner
        self._cache = cache
        self._owns_executor = executor is None
        self._executor = (
            executor
            if executor is not None
            else ThreadPoolExecutor(max_workers=1, thread_name_prefix="appdeck-scan")
        )
        self._opener = opener or default_opener()
        self._dispatch = dispatch if dispatch is not None else _call_now

        self._lock = threading.Lock()
        self._entries: tuple[InventoryEntry, ...] = ()
        self._is_loading = False
        self._in_flight: Future[tuple[InventoryEntry, ...]] | None = None
        self._subscribers: list[Subscriber] = []
        # Bumped on every state change; older snapshots are never delivered
        self._version = 0
        self._published_version = 0
        self._notify_lock = threading.RLock()

    def __enter__(self) -> "InventoryManager":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Observable state
    # -------------------------------------------------------------------------

    def current_inventory(self) -> tuple[InventoryEntry, ...]:
        """Return the published inventory tree."""
        with self._lock:
            return self._entries

    @property
    def is_loading(self) -> bool:
        """True while a scan runs with the loading indicator shown."""
        with self._lock:
            return self._is_loading

    def state(self) -> InventoryState:
        """Return the current snapshot."""
        with self._lock:
            return self._snapshot()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback for every future publication.

        Snapshots are delivered in order; one superseded before delivery
        is skipped.

        Args:
            callback: Called with each new InventoryState.

        Returns:
            Function that removes the subscription.
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def start(self) -> Future[tuple[InventoryEntry, ...]] | None:
        """Publish the cached inventory, or scan when there is none.

        Returns:
            Future of the scan started on a cache miss, else None.
        """
        cached = self._cache.load()
        if cached is None:
            logger.debug("Inventory cache miss, scanning")
            return self._request_scan(show_loading=True)

        with self._lock:
            self._entries = tuple(cached)
            version, state = self._advance()
        logger.debug("Serving %d cached inventory entries", len(state.entries))
        self._publish(version, state)
        return None

    def refresh(self) -> Future[tuple[InventoryEntry, ...]]:
        """Rescan in the background.

        With a non-empty inventory the old tree stays published until the
        scan finishes. With an empty inventory the loading flag is raised
        for the duration of the scan. A call made while a scan is running
        joins that scan.

        Returns:
            Future resolving to the new inventory tree.
        """
        return self._request_scan(show_loading=False)

    def force_refresh(self) -> Future[tuple[InventoryEntry, ...]]:
        """Invalidate the persisted cache and rescan with the loading flag.

        A running scan is joined, never cancelled.

        Returns:
            Future resolving to the new inventory tree.
        """
        self._cache.invalidate()
        return self._request_scan(show_loading=True)

    def wait(self, timeout: float | None = None) -> tuple[InventoryEntry, ...]:
        """Block until the running scan (if any) completes.

        Args:
            timeout: Maximum seconds to wait.

        Returns:
            The published inventory after the wait.

        Raises:
            TimeoutError: If the scan does not finish within ``timeout``.
        """
        with self._lock:
            future = self._in_flight
        if future is not None:
            future.result(timeout=timeout)
        return self.current_inventory()

    def launch(self, item: ApplicationItem) -> bool:
        """Start an application as a detached process.

        Args:
            item: Application to launch.

        Returns:
            True if the start was requested, False if it failed.
        """
        if item.path is None:
            logger.warning("Cannot launch %s: no bundle path", item.name)
            return False

        try:
            pid = spawn_detached([self._opener, item.path])
        except OSError as e:
            logger.error("Failed to launch %s: %s", item.name, e)
            return False

        logger.info("Launched %s (pid %d)", item.name, pid)
        return True

    def close(self) -> None:
        """Wait for a running scan and release the owned executor."""
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _request_scan(self, *, show_loading: bool) -> Future[tuple[InventoryEntry, ...]]:
        """Start a scan unless one is running (single-flight)."""
        with self._lock:
            loading = show_loading or not self._entries
            raise_flag = loading and not self._is_loading
            if raise_flag:
                self._is_loading = True
                version, state = self._advance()

            if self._in_flight is not None:
                logger.debug("Scan already running, joining it")
                future = self._in_flight
            else:
                future = self._executor.submit(self._run_scan)
                self._in_flight = future

        if raise_flag:
            self._publish(version, state)
        return future

    def _run_scan(self) -> tuple[InventoryEntry, ...]:
        try:
            entries = tuple(self._scanner.scan())
        except Exception:
            logger.exception("Inventory scan failed")
            self._finish(None)
            raise

        # Persist before publishing; the disk write is atomic
        self._cache.store(entries)
        self._finish(entries)
        return entries

    def _finish(self, entries: tuple[InventoryEntry, ...] | None) -> None:
        with self._lock:
            if entries is not None:
                self._entries = entries
            self._is_loading = False
            self._in_flight = None
            version, state = self._advance()
        self._publish(version, state)

    def _snapshot(self) -> InventoryState:
        """Build a snapshot; caller holds the lock."""
        return InventoryState(entries=self._entries, is_loading=self._is_loading)

    def _advance(self) -> tuple[int, InventoryState]:
        """Record a state change; caller holds the lock."""
        self._version += 1
        return self._version, self._snapshot()

    def _publish(self, version: int, state: InventoryState) -> None:
        """Deliver a snapshot unless a newer one was already delivered."""
        with self._notify_lock:
            with self._lock:
                if version <= self._published_version:
                    logger.debug("Dropping superseded inventory state %d", version)
                    return
                self._published_version = version
                subscribers = list(self._subscribers)

            def notify() -> None:
                for callback in subscribers:
                    try:
                        callback(state)
                    except Exception:
                        logger.exception("Inventory subscriber failed")

            self._dispatch(notify)
