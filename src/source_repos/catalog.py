"""In-memory catalog of known source repositories."""

from __future__ import annotations

import itertools
import logging
import queue
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from source_repos.models import SourceRepo
from source_repos.types import CatalogEvent, CatalogEventKind

logger = logging.getLogger(__name__)

Observer = Callable[[CatalogEvent], None]

_STOP = object()


@dataclass(frozen=True)
class Subscription:
    """Handle returned by RepoCatalog.subscribe."""

    id: int
    observer: Observer = field(compare=False, repr=False)


class RepoCatalog:
    """Owns the canonical, deduplicated set of source repositories.

    All mutation happens under a single lock. Readers receive copies, so a
    snapshot never reflects a half-applied change. Change events are queued
    under the same lock and delivered in mutation order by one dedicated
    thread, so observers never race each other.
    """

    def __init__(self) -> None:
        """Initialize an empty catalog and start its delivery thread.

        Note:
            Prefer using factory method `create()` for construction.
        """
        self._lock = threading.RLock()
        self._repos: dict[str, SourceRepo] = {}
        self._subscriptions: dict[int, Subscription] = {}
        self._ids = itertools.count(1)
        self._events: queue.Queue[object] = queue.Queue()
        self._closed = False
        self._worker = threading.Thread(
            target=self._deliver_loop, name="repo-catalog-events", daemon=True
        )
        self._worker.start()

    @classmethod
    def create(cls) -> RepoCatalog:
        """Create an empty catalog.

        Returns:
            New RepoCatalog instance.
        """
        return cls()

    def __len__(self) -> int:
        with self._lock:
            return len(self._repos)

    def __contains__(self, address: object) -> bool:
        with self._lock:
            return address in self._repos

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_all(self) -> list[SourceRepo]:
        """Get a snapshot of the catalog in insertion order.

        Returns:
            Copies of every repo; mutating them does not touch the catalog.
        """
        with self._lock:
            return [repo.model_copy() for repo in self._repos.values()]

    def get(self, address: str) -> SourceRepo | None:
        """Get a snapshot of one repo.

        Args:
            address: Repository address.

        Returns:
            Copy of the repo, or None if absent.
        """
        with self._lock:
            repo = self._repos.get(address)
            return repo.model_copy() if repo is not None else None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def merge(self, discovered: Iterable[SourceRepo]) -> None:
        """Merge discovered repos into the catalog.

        New addresses are inserted. Known addresses get their display
        fields refreshed while keeping their live status. Nothing is
        removed.

        Args:
            discovered: Repos produced by an enumerator.
        """
        with self._lock:
            for incoming in discovered:
                existing = self._repos.get(incoming.address)
                if existing is None:
                    repo = incoming.model_copy(update={"is_updating": False})
                    self._repos[repo.address] = repo
                    self._publish(CatalogEventKind.ADDED, repo.address, (repo.model_copy(),))
                elif not existing.same_display(incoming):
                    existing.display_name = incoming.display_name
                    existing.display_address = incoming.display_address
                    existing.is_cocoapods_specs_like = incoming.is_cocoapods_specs_like
                    existing.path = incoming.path
                    self._publish(
                        CatalogEventKind.REFRESHED, existing.address, (existing.model_copy(),)
                    )

    def replace(self, discovered: Iterable[SourceRepo]) -> None:
        """Replace the whole catalog with a fresh discovery result.

        Live status is kept for addresses present both before and after.
        Duplicate addresses in the input keep their first occurrence.

        Args:
            discovered: Repos produced by a full discovery.
        """
        with self._lock:
            repos: dict[str, SourceRepo] = {}
            for incoming in discovered:
                if incoming.address in repos:
                    continue
                previous = self._repos.get(incoming.address)
                updating = previous.is_updating if previous is not None else False
                repos[incoming.address] = incoming.model_copy(update={"is_updating": updating})
            self._repos = repos
            snapshot = tuple(repo.model_copy() for repo in repos.values())
            self._publish(CatalogEventKind.REPLACED, None, snapshot)

    def set_updating(self, address: str, value: bool) -> None:
        """Set the live update status of one repo.

        No-op if the address is unknown or the value is unchanged.

        Args:
            address: Repository address.
            value: New status.
        """
        with self._lock:
            repo = self._repos.get(address)
            if repo is None or repo.is_updating == value:
                return
            repo.is_updating = value
            self._publish(CatalogEventKind.STATUS_CHANGED, address, (repo.model_copy(),))

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def subscribe(self, observer: Observer) -> Subscription:
        """Register an observer for change events.

        Args:
            observer: Callable invoked with each CatalogEvent on the
                catalog's delivery thread.

        Returns:
            Handle to pass to unsubscribe.
        """
        with self._lock:
            subscription = Subscription(id=next(self._ids), observer=observer)
            self._subscriptions[subscription.id] = subscription
            return subscription

    def unsubscribe(self, subscription: Subscription) -> bool:
        """Deregister an observer.

        Args:
            subscription: Handle returned by subscribe.

        Returns:
            True if removed, False if it was not registered.
        """
        with self._lock:
            return self._subscriptions.pop(subscription.id, None) is not None

    def flush(self, timeout: float | None = None) -> bool:
        """Block until every event queued so far has been delivered.

        Args:
            timeout: Maximum seconds to wait.

        Returns:
            True if delivery caught up, False on timeout, after close, or
            when called from an observer.
        """
        if self._closed:
            return False
        if self._on_delivery_thread():
            logger.debug("flush() called from an observer, not waiting")
            return False
        marker = threading.Event()
        self._events.put(marker)
        return marker.wait(timeout)

    def close(self, timeout: float | None = None) -> None:
        """Stop the delivery thread after draining queued events.

        From an observer, the thread stops once the current event has
        been delivered.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._events.put(_STOP)
        if not self._on_delivery_thread():
            self._worker.join(timeout)

    def _on_delivery_thread(self) -> bool:
        return threading.current_thread() is self._worker

    def _publish(
        self,
        kind: CatalogEventKind,
        address: str | None,
        repos: tuple[SourceRepo, ...],
    ) -> None:
        """Queue an event for the current subscribers. Caller must hold the lock."""
        if self._closed:
            logger.debug("Catalog closed, dropping %s event for %s", kind.value, address)
            return
        event = CatalogEvent(kind=kind, address=address, repos=repos)
        self._events.put((event, tuple(self._subscriptions.values())))

    def _deliver_loop(self) -> None:
        while True:
            item = self._events.get()
            if item is _STOP:
                return
            if isinstance(item, threading.Event):
                item.set()
                continue
            event, subscriptions = item  # type: ignore[misc]
            self._deliver(event, subscriptions)

    def _deliver(self, event: CatalogEvent, subscriptions: tuple[Subscription, ...]) -> None:
        for subscription in subscriptions:
            with self._lock:
                if subscription.id not in self._subscriptions:
                    continue
            try:
                subscription.observer(event)
            except Exception:
                logger.exception(
                    "Catalog observer %s failed on %s event", subscription.id, event.kind.value
                )
