"""Asynchronous discovery and per-repository updates."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from source_repos.errors import (
    AlreadyUpdatingError,
    DiscoveryFailedError,
    RepoNotFoundError,
    UpdateFailedError,
)
from source_repos.lifecycle import LifecycleSignal
from source_repos.types import UpdateResult

if TYPE_CHECKING:
    from source_repos.catalog import RepoCatalog
    from source_repos.lifecycle import LifecycleHub
    from source_repos.models import SourceRepo
    from source_repos.protocols import RepoEnumerator, RepoUpdateExecutor

logger = logging.getLogger(__name__)


class RefreshCoordinator:
    """Drives discovery into the catalog and runs repository updates.

    A repository is either idle or refreshing, and refreshing is tracked
    only by ``SourceRepo.is_updating`` in the catalog. All methods must be
    called from the event loop that owns the coordinator.
    """

    def __init__(
        self,
        catalog: RepoCatalog,
        enumerator: RepoEnumerator,
        updater: RepoUpdateExecutor,
    ) -> None:
        """Initialize the coordinator.

        Args:
            catalog: Catalog to populate and update.
            enumerator: Lists repositories from the environment.
            updater: Updates one repository.
        """
        self.catalog = catalog
        self.enumerator = enumerator
        self.updater = updater
        self._discovery: asyncio.Task[list[SourceRepo]] | None = None
        self._updating: set[str] = set()
        self._background: set[asyncio.Task[object]] = set()
        self._lifecycle_handlers: dict[LifecycleHub, Callable[[LifecycleSignal], None]] = {}

    @property
    def discovery_in_flight(self) -> bool:
        """Whether a discovery is currently running."""
        return self._discovery is not None

    def is_updating(self, address: str) -> bool:
        """Whether an update started by this coordinator is running."""
        return address in self._updating

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    async def discover_all(self, replace: bool = False) -> list[SourceRepo]:
        """Enumerate repositories and fold them into the catalog.

        Concurrent calls share one in-flight discovery: later callers get
        the same result and the enumerator runs once.

        Args:
            replace: Swap the whole catalog instead of merging. Ignored when
                joining a discovery that is already running.

        Returns:
            Catalog snapshot after the discovery was applied.

        Raises:
            DiscoveryFailedError: If the enumerator failed. The catalog is
                left unchanged.
        """
        return await asyncio.shield(self._start_discovery(replace))

    def _start_discovery(self, replace: bool) -> asyncio.Task[list[SourceRepo]]:
        if self._discovery is None:
            self._discovery = asyncio.create_task(self._discover(replace))
        return self._discovery

    async def _discover(self, replace: bool) -> list[SourceRepo]:
        try:
            try:
                discovered = list(await self.enumerator.enumerate())
            except Exception as e:
                logger.warning("Repository discovery failed: %s", e)
                raise DiscoveryFailedError(f"Repository discovery failed: {e}") from e

            if replace:
                self.catalog.replace(discovered)
            else:
                self.catalog.merge(discovered)
            # Entries re-inserted while an update runs must still show it.
            for address in self._updating:
                self.catalog.set_updating(address, True)
            logger.info("Discovered %d source repositories", len(discovered))
            return self.catalog.get_all()
        finally:
            self._discovery = None

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def update(self, address: str) -> asyncio.Task[UpdateResult]:
        """Start updating one repository.

        Args:
            address: Address of a catalog repository.

        Returns:
            Task resolving to UpdateResult, or raising UpdateFailedError.
            The catalog status is reset before the task resolves.

        Raises:
            RepoNotFoundError: If the address is not in the catalog.
            AlreadyUpdatingError: If an update is already running for it.
        """
        loop = asyncio.get_running_loop()
        repo = self.catalog.get(address)
        if repo is None:
            raise RepoNotFoundError(address)
        if address in self._updating:
            raise AlreadyUpdatingError(address)

        self._updating.add(address)
        self.catalog.set_updating(address, True)
        return loop.create_task(self._run_update(repo))

    def update_all(self) -> dict[str, asyncio.Task[UpdateResult]]:
        """Start updates for every repository that is not already updating.

        Returns:
            Map of address to update task.
        """
        tasks: dict[str, asyncio.Task[UpdateResult]] = {}
        for repo in self.catalog.get_all():
            if repo.address in self._updating:
                continue
            tasks[repo.address] = self.update(repo.address)
        return tasks

    async def _run_update(self, repo: SourceRepo) -> UpdateResult:
        logger.info("Updating %s", repo.display_name or repo.address)
        try:
            await self.updater.run_update(repo)
        except Exception as e:
            logger.exception("Update failed for %s", repo.address)
            raise UpdateFailedError(repo.address, str(e)) from e
        finally:
            self._updating.discard(repo.address)
            self.catalog.set_updating(repo.address, False)
        logger.info("Updated %s", repo.display_name or repo.address)
        return UpdateResult(address=repo.address, display_name=repo.display_name)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def watch_lifecycle(
        self,
        hub: LifecycleHub,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        """Run discovery whenever the process is ready or an install completes.

        Signals may be emitted from any thread. Discovery starts on the
        coordinator's loop: immediately when the signal is emitted on that
        loop, so a following discover_all() joins it, otherwise at the
        loop's next iteration.

        Args:
            hub: Lifecycle signal source.
            loop: Loop to schedule on. Defaults to the running loop.
        """
        target = loop or asyncio.get_running_loop()

        def on_signal(signal: LifecycleSignal) -> None:
            logger.debug("Lifecycle signal %s, scheduling discovery", signal.value)
            if _running_loop() is target:
                self._schedule_discovery()
            else:
                target.call_soon_threadsafe(self._schedule_discovery)

        self.unwatch_lifecycle(hub)
        self._lifecycle_handlers[hub] = on_signal
        hub.connect(LifecycleSignal.PROCESS_READY, on_signal)
        hub.connect(LifecycleSignal.INSTALL_COMPLETED, on_signal)

    def unwatch_lifecycle(self, hub: LifecycleHub) -> None:
        """Stop reacting to lifecycle signals."""
        handler = self._lifecycle_handlers.pop(hub, None)
        if handler is None:
            return
        hub.disconnect(LifecycleSignal.PROCESS_READY, handler)
        hub.disconnect(LifecycleSignal.INSTALL_COMPLETED, handler)

    def _schedule_discovery(self) -> None:
        task = self._start_discovery(replace=False)
        if task in self._background:
            return
        self._background.add(task)
        task.add_done_callback(self._background_done)

    def _background_done(self, task: asyncio.Task[object]) -> None:
        self._background.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            # Logged in _discover.
            logger.debug("Background discovery ended with %s", error)


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None
