"""Process-wide, reference-counted guard around map provider loading.

At most one provider load is in flight per provider. Views that mount
while a load is pending attach to it; the provider is unloaded when the
last view releases it.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
import itertools

from loguru import logger

from core.services.interfaces import MapProvider


class BootstrapState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"


class ProviderBootstrap:
    """Shares one provider load between all mounted map views."""

    _registry: dict[int, ProviderBootstrap] = {}

    def __init__(self, provider: MapProvider) -> None:
        self._provider = provider
        self._state = BootstrapState.IDLE
        self._refcount = 0
        self._tickets = itertools.count(1)
        self._waiters: dict[int, tuple[Callable[[], None], Callable[[Exception], None]]] = {}
        self._load_id = 0

    @classmethod
    def for_provider(cls, provider: MapProvider) -> ProviderBootstrap:
        """Return the shared bootstrap for `provider`, creating it on first use."""
        key = id(provider)
        bootstrap = cls._registry.get(key)
        if bootstrap is None or bootstrap._provider is not provider:
            bootstrap = cls(provider)
            cls._registry[key] = bootstrap
        return bootstrap

    @property
    def state(self) -> BootstrapState:
        return self._state

    @property
    def refcount(self) -> int:
        return self._refcount

    def acquire(
        self, on_ready: Callable[[], None], on_error: Callable[[Exception], None]
    ) -> int:
        """Register interest in a loaded provider.

        `on_ready` runs immediately when the provider is already loaded;
        otherwise one of the callbacks runs when the shared load settles.

        Returns:
            Ticket to pass to `release`.
        """
        ticket = next(self._tickets)
        self._refcount += 1

        if self._state is BootstrapState.READY:
            on_ready()
            return ticket

        self._waiters[ticket] = (on_ready, on_error)
        if self._state is BootstrapState.LOADING:
            logger.debug("Attaching to in-flight provider load (ticket {})", ticket)
            return ticket

        self._state = BootstrapState.LOADING
        self._load_id += 1
        load_id = self._load_id
        logger.info("Loading map provider")
        self._provider.load_provider(
            lambda: self._on_loaded(load_id),
            lambda ex: self._on_failed(load_id, ex),
        )
        return ticket

    def release(self, ticket: int) -> None:
        """Drop interest; unload the provider when nobody holds it."""
        self._waiters.pop(ticket, None)
        if self._refcount == 0:
            return
        self._refcount -= 1
        if self._refcount > 0:
            return

        self._waiters.clear()
        if self._state is BootstrapState.READY:
            logger.info("Unloading map provider")
            self._provider.unload_provider()
            self._state = BootstrapState.IDLE
        # A load still in flight stays LOADING so a remount attaches to it.
        if self._state is BootstrapState.IDLE:
            self._forget()

    def _on_loaded(self, load_id: int) -> None:
        if load_id != self._load_id or self._state is not BootstrapState.LOADING:
            return
        if self._refcount == 0:
            logger.info("Map provider loaded after last release, unloading")
            self._provider.unload_provider()
            self._state = BootstrapState.IDLE
            self._forget()
            return
        self._state = BootstrapState.READY
        logger.info("Map provider loaded")
        waiters, self._waiters = self._waiters, {}
        for on_ready, _ in waiters.values():
            on_ready()

    def _on_failed(self, load_id: int, error: Exception) -> None:
        if load_id != self._load_id or self._state is not BootstrapState.LOADING:
            return
        logger.error("Map provider failed to load: {}", error)
        # Back to idle so a later mount may try again.
        self._state = BootstrapState.IDLE
        waiters, self._waiters = self._waiters, {}
        for _, on_error in waiters.values():
            on_error(error)
        if self._refcount == 0:
            self._forget()

    def _forget(self) -> None:
        """Drop the shared registry entry so an unused provider can be collected."""
        key = id(self._provider)
        if ProviderBootstrap._registry.get(key) is self:
            del ProviderBootstrap._registry[key]
