from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from .container import Container
from .lifetime import Lifetime
from assetKeeper.application.services.catalog import AssetCatalog
from assetKeeper.application.services.hierarchy_manager import HierarchyManager
from assetKeeper.application.services.library_service import LibraryService
from assetKeeper.application.services.maintenance import LibraryMaintenance
from assetKeeper.domain.models import SortCriteria, SortOrder, SortSettings
from assetKeeper.domain.repositories import IFileSystem, ILibraryStore
from assetKeeper.domain.services import SearchEngine, ValidationEngine
from assetKeeper.errors.handler import ErrorHandler
from assetKeeper.events.bus import EventBus
from assetKeeper.infrastructure.filesystem import LocalFileSystem
from assetKeeper.infrastructure.store import JsonLibraryStore
from assetKeeper.settings import SettingsManager
from assetKeeper.utils.logging import get_logger


def bootstrap(
    container: Container,
    settings_path: Optional[Path] = None,
    library_path: Optional[Path] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> None:
    """Register all application services in the DI container.

    *library_path* overrides the location resolved from the settings file.
    """

    settings = SettingsManager(settings_path)
    settings.load()
    resolved_path = Path(library_path) if library_path is not None else settings.library_path()

    container.register_instance(SettingsManager, settings)
    container.register_singleton(EventBus, EventBus)
    container.register_factory(
        ErrorHandler,
        lambda c: ErrorHandler(get_logger(), c.resolve(EventBus)),
        Lifetime.SINGLETON,
    )
    container.register_singleton(IFileSystem, LocalFileSystem)
    container.register_factory(
        ILibraryStore,
        lambda c: JsonLibraryStore(c.resolve(IFileSystem), clock=clock, event_bus=c.resolve(EventBus)),
        Lifetime.SINGLETON,
    )
    container.register_factory(
        AssetCatalog,
        lambda c: AssetCatalog(c.resolve(ILibraryStore), resolved_path, clock=clock),
        Lifetime.SINGLETON,
    )
    container.register_factory(
        HierarchyManager, lambda c: HierarchyManager(c.resolve(AssetCatalog)), Lifetime.SINGLETON,
    )
    container.register_factory(
        LibraryMaintenance, lambda c: LibraryMaintenance(c.resolve(AssetCatalog)), Lifetime.SINGLETON,
    )
    container.register_factory(
        SearchEngine,
        lambda c: SearchEngine(tags_case_sensitive=bool(settings.get("search.case_sensitive", False))),
        Lifetime.SINGLETON,
    )
    container.register_factory(
        ValidationEngine,
        lambda c: ValidationEngine(
            file_exists=c.resolve(IFileSystem).exists,
            clock=clock,
            large_file_threshold=settings.get("validation.large_file_threshold_bytes"),
        ),
        Lifetime.SINGLETON,
    )
    container.register_factory(
        LibraryService,
        lambda c: LibraryService(
            c.resolve(AssetCatalog),
            hierarchy=c.resolve(HierarchyManager),
            maintenance=c.resolve(LibraryMaintenance),
            search_engine=c.resolve(SearchEngine),
            validation_engine=c.resolve(ValidationEngine),
            event_bus=c.resolve(EventBus),
            error_handler=c.resolve(ErrorHandler),
            default_sort=default_sort(settings),
        ),
        Lifetime.SINGLETON,
    )


def default_sort(settings: SettingsManager) -> SortSettings:
    return SortSettings(
        primary=SortCriteria(settings.get("search.default_sort", "name")),
        primary_order=SortOrder(settings.get("search.default_order", "ASC")),
    )
