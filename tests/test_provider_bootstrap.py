from __future__ import annotations

from core.services.provider_bootstrap import BootstrapState, ProviderBootstrap


def test_single_load_shared_by_concurrent_mounts(provider, bootstrap):
    ready = []
    bootstrap.acquire(lambda: ready.append("a"), lambda ex: None)
    bootstrap.acquire(lambda: ready.append("b"), lambda ex: None)

    assert provider.load_calls == 1
    provider.complete_load()
    assert ready == ["a", "b"]
    assert bootstrap.state is BootstrapState.READY


def test_acquire_after_load_is_immediate(provider, bootstrap):
    bootstrap.acquire(lambda: None, lambda ex: None)
    provider.complete_load()

    ready = []
    bootstrap.acquire(lambda: ready.append(True), lambda ex: None)
    assert ready == [True]
    assert provider.load_calls == 1


def test_unloads_when_last_reference_released(provider, bootstrap):
    t1 = bootstrap.acquire(lambda: None, lambda ex: None)
    t2 = bootstrap.acquire(lambda: None, lambda ex: None)
    provider.complete_load()

    bootstrap.release(t1)
    assert provider.unload_calls == 0
    bootstrap.release(t2)
    assert provider.unload_calls == 1
    assert bootstrap.state is BootstrapState.IDLE
    assert bootstrap.refcount == 0


def test_released_ticket_is_not_called_back(provider, bootstrap):
    called = []
    t1 = bootstrap.acquire(lambda: called.append("gone"), lambda ex: None)
    bootstrap.acquire(lambda: called.append("kept"), lambda ex: None)
    bootstrap.release(t1)
    provider.complete_load()
    assert called == ["kept"]


def test_remount_attaches_to_load_still_in_flight(provider, bootstrap):
    t1 = bootstrap.acquire(lambda: None, lambda ex: None)
    bootstrap.release(t1)

    ready = []
    bootstrap.acquire(lambda: ready.append(True), lambda ex: None)
    assert provider.load_calls == 1
    provider.complete_load()
    assert ready == [True]


def test_load_finishing_after_last_release_unloads(provider, bootstrap):
    t1 = bootstrap.acquire(lambda: None, lambda ex: None)
    bootstrap.release(t1)
    provider.complete_load()
    assert provider.unload_calls == 1
    assert bootstrap.state is BootstrapState.IDLE


def test_failure_notifies_waiters_and_allows_later_retry(provider, bootstrap):
    errors = []
    t1 = bootstrap.acquire(lambda: None, errors.append)
    provider.fail_load()
    assert len(errors) == 1
    assert bootstrap.state is BootstrapState.IDLE

    bootstrap.release(t1)
    bootstrap.acquire(lambda: None, errors.append)
    assert provider.load_calls == 2


def test_for_provider_returns_shared_instance(provider):
    assert ProviderBootstrap.for_provider(provider) is ProviderBootstrap.for_provider(provider)


def test_registry_entry_dropped_after_last_release(provider):
    shared = ProviderBootstrap.for_provider(provider)
    ticket = shared.acquire(lambda: None, lambda ex: None)
    provider.complete_load()
    assert ProviderBootstrap.for_provider(provider) is shared

    shared.release(ticket)

    assert id(provider) not in ProviderBootstrap._registry
    assert ProviderBootstrap.for_provider(provider) is not shared


def test_registry_keeps_entry_while_load_is_in_flight(provider):
    shared = ProviderBootstrap.for_provider(provider)
    shared.release(shared.acquire(lambda: None, lambda ex: None))
    assert ProviderBootstrap.for_provider(provider) is shared

    provider.complete_load()
    assert id(provider) not in ProviderBootstrap._registry
