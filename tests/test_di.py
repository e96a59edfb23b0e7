import pytest

from assetKeeper.application.services.catalog import AssetCatalog
from assetKeeper.application.services.library_service import LibraryService
from assetKeeper.di import Container, Lifetime
from assetKeeper.di.bootstrap import bootstrap
from assetKeeper.domain.models import Asset
from assetKeeper.domain.repositories import ILibraryStore
from assetKeeper.errors import CircularDependencyError, ResolutionError


class _Service:
    pass


class _Dependent:
    def __init__(self, service):
        self.service = service


def test_lifetimes():
    container = Container()
    container.register_singleton(_Service)
    container.register_transient(_Dependent, service=None)

    assert container.resolve(_Service) is container.resolve(_Service)
    assert container.resolve(_Dependent) is not container.resolve(_Dependent)


def test_scoped_instances_are_per_scope():
    container = Container()
    container.register_scoped(_Service)

    with container.create_scope() as first:
        assert first.resolve(_Service) is first.resolve(_Service)
        with container.create_scope() as second:
            assert second.resolve(_Service) is not first.resolve(_Service)


def test_factory_receives_container():
    container = Container()
    container.register_instance(_Service, _Service())
    container.register_factory(_Dependent, lambda c: _Dependent(c.resolve(_Service)), Lifetime.SINGLETON)

    assert container.resolve(_Dependent).service is container.resolve(_Service)
    assert container.is_registered(_Dependent)


def test_unknown_and_circular_registrations():
    container = Container()
    container.register_factory(_Service, lambda c: c.resolve(_Dependent))
    container.register_factory(_Dependent, lambda c: c.resolve(_Service))

    with pytest.raises(ResolutionError):
        container.resolve(int)
    with pytest.raises(CircularDependencyError):
        container.resolve(_Service)


def test_bootstrap_wires_library_service(tmp_path, clock):
    settings_path = tmp_path / "settings.json"
    library_path = tmp_path / "lib" / "library.json"
    container = Container()
    bootstrap(container, settings_path=settings_path, library_path=library_path, clock=clock)

    service = container.resolve(LibraryService)
    try:
        assert service.add_asset(Asset.create("Hat", at=clock())).success
        assert container.resolve(AssetCatalog).library_path == library_path
        assert container.resolve(ILibraryStore).flush(timeout=5)
        assert library_path.exists()
    finally:
        container.resolve(ILibraryStore).close(timeout=5)


def test_bootstrap_reads_sort_preferences(tmp_path, clock):
    settings_path = tmp_path / "settings.json"
    settings_path.write_text('{"search": {"default_sort": "file_size", "default_order": "DESC"}}', encoding="utf-8")
    library_path = tmp_path / "library.json"
    container = Container()
    bootstrap(container, settings_path=settings_path, library_path=library_path, clock=clock)

    service = container.resolve(LibraryService)
    try:
        small = Asset.create("Small", file_size_bytes=1, at=clock())
        big = Asset.create("Big", file_size_bytes=100, at=clock())
        service.add_asset(small)
        service.add_asset(big)

        assert service.list_assets().asset_ids == [big.asset_id, small.asset_id]
    finally:
        container.resolve(ILibraryStore).close(timeout=5)
