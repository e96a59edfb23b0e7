import logging
from collections import deque
from typing import Deque, Iterable, List, Optional

from assetKeeper.application.services.catalog import AssetCatalog, IdLike
from assetKeeper.application.services.hierarchy_manager import HierarchyManager
from assetKeeper.application.services.maintenance import LibraryMaintenance, OptimizeReport
from assetKeeper.application.use_cases.add_asset import AddAssetRequest, AddAssetResponse, AddAssetUseCase
from assetKeeper.application.use_cases.group_assets import (
    AddToGroupRequest,
    AddToGroupResponse,
    AddToGroupUseCase,
    CreateGroupRequest,
    CreateGroupResponse,
    CreateGroupUseCase,
    DisbandGroupRequest,
    DisbandGroupResponse,
    DisbandGroupUseCase,
    RemoveFromGroupRequest,
    RemoveFromGroupResponse,
    RemoveFromGroupUseCase,
)
from assetKeeper.application.use_cases.remove_asset import (
    RemoveAssetRequest,
    RemoveAssetResponse,
    RemoveAssetUseCase,
)
from assetKeeper.application.use_cases.tag_asset import TagAssetRequest, TagAssetResponse, TagAssetUseCase
from assetKeeper.application.use_cases.update_asset import (
    UpdateAssetRequest,
    UpdateAssetResponse,
    UpdateAssetUseCase,
)
from assetKeeper.domain.models import (
    AdvancedSearchCriteria,
    Asset,
    AssetId,
    BasicSearchCriteria,
    SearchHistoryItem,
    SearchResult,
    SortSettings,
    ValidationReport,
)
from assetKeeper.domain.services import LibraryStatistics, SearchEngine, ValidationEngine
from assetKeeper.errors import AssetNotFoundError
from assetKeeper.errors.handler import ErrorHandler
from assetKeeper.events.bus import EventBus

SEARCH_HISTORY_SIZE = 20


class LibraryService:
    """
    Application Service Facade for the asset library.
    Reads go straight to the catalog and the pure domain services; every
    externally exposed mutation is delegated to a Use Case.
    """

    def __init__(
        self,
        catalog: AssetCatalog,
        hierarchy: Optional[HierarchyManager] = None,
        maintenance: Optional[LibraryMaintenance] = None,
        search_engine: Optional[SearchEngine] = None,
        validation_engine: Optional[ValidationEngine] = None,
        event_bus: Optional[EventBus] = None,
        error_handler: Optional[ErrorHandler] = None,
        default_sort: Optional[SortSettings] = None,
    ):
        self._catalog = catalog
        self._hierarchy = hierarchy or HierarchyManager(catalog)
        self._maintenance = maintenance or LibraryMaintenance(catalog)
        self._search = search_engine or SearchEngine()
        self._validation = validation_engine or ValidationEngine()
        self._default_sort = default_sort
        self._history: Deque[SearchHistoryItem] = deque(maxlen=SEARCH_HISTORY_SIZE)
        self._logger = logging.getLogger(__name__)

        self._add_uc = AddAssetUseCase(catalog, event_bus, error_handler)
        self._update_uc = UpdateAssetUseCase(catalog, event_bus, error_handler)
        self._remove_uc = RemoveAssetUseCase(catalog, event_bus, error_handler)
        self._tag_uc = TagAssetUseCase(catalog, event_bus, error_handler)
        self._create_group_uc = CreateGroupUseCase(self._hierarchy, event_bus, error_handler)
        self._add_to_group_uc = AddToGroupUseCase(self._hierarchy, event_bus, error_handler)
        self._remove_from_group_uc = RemoveFromGroupUseCase(self._hierarchy, event_bus, error_handler)
        self._disband_uc = DisbandGroupUseCase(self._hierarchy, event_bus, error_handler)

    @property
    def catalog(self) -> AssetCatalog:
        return self._catalog

    @property
    def hierarchy(self) -> HierarchyManager:
        return self._hierarchy

    # ------------------------------------------------------------------
    # Asset mutations
    # ------------------------------------------------------------------
    def add_asset(self, asset: Asset, strict: bool = False) -> AddAssetResponse:
        return self._add_uc.execute(AddAssetRequest(asset=asset, strict=strict))

    def update_asset(self, asset: Asset) -> UpdateAssetResponse:
        return self._update_uc.execute(UpdateAssetRequest(asset=asset))

    def remove_asset(self, asset_id: IdLike) -> RemoveAssetResponse:
        return self._remove_uc.execute(RemoveAssetRequest(asset_id=str(asset_id)))

    def tag_asset(self, asset_id: IdLike, add: Iterable[str] = (), remove: Iterable[str] = ()) -> TagAssetResponse:
        return self._tag_uc.execute(TagAssetRequest(
            asset_id=str(asset_id), add=tuple(add), remove=tuple(remove),
        ))

    def add_tags_to_asset(self, asset_id: IdLike, tags: Iterable[str]) -> TagAssetResponse:
        return self.tag_asset(asset_id, add=tags)

    def remove_tag_from_asset(self, asset_id: IdLike, tag: str) -> TagAssetResponse:
        return self.tag_asset(asset_id, remove=(tag,))

    def toggle_favorite(self, asset_id: IdLike) -> bool:
        """Flip the favorite flag; returns the new value."""
        asset = self._catalog.get(asset_id)
        if asset is None:
            self._logger.warning(f"Cannot toggle favorite: asset {asset_id} not found")
            return False
        updated = asset.with_state(asset.state.with_favorite(not asset.state.is_favorite))
        response = self.update_asset(updated)
        return updated.state.is_favorite if response.success else asset.state.is_favorite

    def set_archived(self, asset_id: IdLike, archived: bool = True) -> bool:
        asset = self._catalog.get(asset_id)
        if asset is None:
            self._logger.warning(f"Cannot archive: asset {asset_id} not found")
            return False
        return self.update_asset(asset.with_state(asset.state.with_archived(archived))).success

    def touch(self, asset_id: IdLike) -> bool:
        """Record that the asset was just accessed."""
        asset = self._catalog.get(asset_id)
        if asset is None:
            return False
        return self.update_asset(asset.touched(self._catalog.now())).success

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------
    def create_group(self, name: str, child_ids: Iterable[IdLike] = ()) -> CreateGroupResponse:
        return self._create_group_uc.execute(CreateGroupRequest(
            name=name, child_ids=tuple(str(c) for c in child_ids),
        ))

    def add_to_group(self, child_id: IdLike, group_id: IdLike) -> AddToGroupResponse:
        return self._add_to_group_uc.execute(AddToGroupRequest(
            child_id=str(child_id), group_id=str(group_id),
        ))

    def remove_from_group(self, child_id: IdLike) -> RemoveFromGroupResponse:
        return self._remove_from_group_uc.execute(RemoveFromGroupRequest(child_id=str(child_id)))

    def disband_group(self, group_id: IdLike) -> DisbandGroupResponse:
        return self._disband_uc.execute(DisbandGroupRequest(group_id=str(group_id)))

    def group_children(self, group_id: IdLike, sort: Optional[SortSettings] = None) -> SearchResult:
        return self._search.group_children(
            self._catalog.snapshot(), AssetId.parse(group_id), sort or self._default_sort,
        )

    # ------------------------------------------------------------------
    # Registries and maintenance
    # ------------------------------------------------------------------
    def add_tag(self, tag: str) -> bool:
        return self._catalog.register_tag(tag)

    def remove_tag(self, tag: str) -> bool:
        return self._catalog.unregister_tag(tag)

    def clear_tags(self) -> bool:
        return self._catalog.clear_tags()

    def add_asset_type(self, asset_type: str) -> bool:
        return self._catalog.register_asset_type(asset_type)

    def remove_asset_type(self, asset_type: str) -> bool:
        return self._catalog.unregister_asset_type(asset_type)

    def clear_asset_types(self) -> bool:
        return self._catalog.clear_asset_types()

    def synchronize_tags(self) -> int:
        return self._maintenance.synchronize_tags()

    def synchronize_asset_types(self) -> int:
        return self._maintenance.synchronize_asset_types()

    def cleanup_unused_tags(self) -> int:
        return self._maintenance.cleanup_unused_tags()

    def cleanup_unused_asset_types(self) -> int:
        return self._maintenance.cleanup_unused_asset_types()

    def optimize(self) -> OptimizeReport:
        return self._maintenance.optimize()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_asset(self, asset_id: IdLike) -> Optional[Asset]:
        return self._catalog.get(asset_id)

    def get_all_assets(self) -> List[Asset]:
        return self._catalog.get_all()

    def list_assets(self, sort: Optional[SortSettings] = None) -> SearchResult:
        """Flat listing: every top-level asset, groups included."""
        return self._search.basic_search(
            self._catalog.snapshot(), BasicSearchCriteria(), sort or self._default_sort,
        )

    def search(self, criteria: BasicSearchCriteria, sort: Optional[SortSettings] = None) -> SearchResult:
        result = self._search.basic_search(self._catalog.snapshot(), criteria, sort or self._default_sort)
        if criteria.has_query:
            self._history.appendleft(SearchHistoryItem(
                query=criteria.query, fields=criteria.fields, result_count=result.result_count,
            ))
        return result

    def advanced_search(
        self, criteria: AdvancedSearchCriteria, sort: Optional[SortSettings] = None
    ) -> SearchResult:
        return self._search.advanced_search(self._catalog.snapshot(), criteria, sort or self._default_sort)

    def search_history(self) -> List[SearchHistoryItem]:
        return list(self._history)

    def clear_search_history(self) -> None:
        self._history.clear()

    def resolve(self, result: SearchResult) -> List[Asset]:
        """Map result ids back to assets from the current snapshot."""
        library = self._catalog.snapshot()
        return [library.get(asset_id) for asset_id in result.asset_ids if asset_id in library]

    def validate_asset(self, asset_id: IdLike) -> ValidationReport:
        library = self._catalog.snapshot()
        asset = library.get(AssetId.parse(asset_id))
        if asset is None:
            raise AssetNotFoundError(f"Asset not found: {asset_id}")
        return self._validation.validate_asset(asset, library)

    def validate_library(self) -> ValidationReport:
        return self._validation.validate_library(self._catalog.snapshot())

    def statistics(self) -> LibraryStatistics:
        return LibraryStatistics.from_library(self._catalog.snapshot())
