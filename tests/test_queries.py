import asyncio

import pytest

from pkgsource.domain.models import Package, PackageIdentifier


def _packages():
    return [
        Package(id="Serilog", version="3.1.1"),
        Package(id="Serilog.Sinks.File", version="5.0.0"),
        Package(id="NUnit", version="4.0.1"),
    ]


def test_queries_resolve_lazily(services, store):
    assert not services.resolver.is_resolved

    assert services.queries.get_specific_package(PackageIdentifier(id="Serilog")) is None

    assert services.resolver.is_resolved
    assert store.loads == 1


def test_search_passes_arguments_through(services):
    source = services.queries.active_source
    source.packages = _packages()
    cancellation = asyncio.Event()

    results = asyncio.run(
        services.queries.search_async("serilog", include_prerelease=True, take=1, skip=1, cancellation=cancellation)
    )

    assert [p.id for p in results] == ["Serilog.Sinks.File"]
    assert source.search_calls == [("serilog", True, 1, 1, cancellation)]


def test_search_defaults(services):
    source = services.queries.active_source
    source.packages = _packages()

    results = asyncio.run(services.queries.search_async())

    assert len(results) == 3
    assert source.search_calls == [("", False, 15, 0, None)]


def test_cancellation_is_left_to_the_source(services):
    cancellation = asyncio.Event()
    cancellation.set()

    with pytest.raises(asyncio.CancelledError):
        asyncio.run(services.queries.search_async(cancellation=cancellation))


def test_get_updates_delegates(services):
    source = services.queries.active_source
    source.packages = _packages()
    installed = [PackageIdentifier(id="NUnit", version="3.0.0")]

    updates = services.queries.get_updates(installed, True, "net8.0", "[3.0,)")

    assert [p.id for p in updates] == ["NUnit"]
    assert source.update_calls == [(installed, True, "net8.0", "[3.0,)")]


def test_specific_package(services):
    services.queries.active_source.packages = _packages()

    found = services.queries.get_specific_package(PackageIdentifier(id="NUnit", version="4.0.1"))
    missing = services.queries.get_specific_package(PackageIdentifier(id="NUnit", version="9.9.9"))

    assert found.version == "4.0.1"
    assert missing is None


def test_source_errors_propagate(services, monkeypatch):
    source = services.queries.active_source

    def broken(identifier):
        raise ConnectionError("feed unreachable")

    monkeypatch.setattr(source, "get_specific_package", broken)

    with pytest.raises(ConnectionError, match="feed unreachable"):
        services.queries.get_specific_package(PackageIdentifier(id="NUnit"))


def test_queries_do_not_reresolve(services, store, notifier):
    services.queries.get_updates([])
    asyncio.run(services.queries.search_async())
    services.queries.get_specific_package(PackageIdentifier(id="x"))

    assert store.loads == 1
    assert notifier.calls == ["reinitialize_plugins"]


def test_queries_follow_reload(make_services):
    services = make_services(["-Source", "/srv/override"])
    assert services.queries.active_source.location == "/srv/override"

    services.resolver.args = []
    services.resolver.reload()

    assert services.queries.active_source.name == "nuget.org"
