from dataclasses import dataclass

from .base import LibraryUseCase, UseCaseRequest, UseCaseResponse
from assetKeeper.application.services.catalog import AssetCatalog
from assetKeeper.errors import AssetKeeperError
from assetKeeper.events.library_events import AssetRemovedEvent, GroupChangedEvent


@dataclass(frozen=True)
class RemoveAssetRequest(UseCaseRequest):
    asset_id: str = ""


@dataclass(frozen=True)
class RemoveAssetResponse(UseCaseResponse):
    asset_id: str = ""
    name: str = ""


class RemoveAssetUseCase(LibraryUseCase):
    def __init__(self, catalog: AssetCatalog, event_bus=None, error_handler=None):
        super().__init__(event_bus, error_handler)
        self._catalog = catalog

    def execute(self, request: RemoveAssetRequest) -> RemoveAssetResponse:
        try:
            removed = self._catalog.remove(request.asset_id)
        except AssetKeeperError as exc:
            return self._failure(RemoveAssetResponse, exc, operation="remove_asset", asset_id=request.asset_id)

        asset_id = str(removed.asset_id)
        self._publish(AssetRemovedEvent(asset_id=asset_id))
        if removed.parent_group_id is not None:
            self._publish(GroupChangedEvent(
                group_id=str(removed.parent_group_id),
                child_ids=[asset_id],
                action="removed",
            ))
        return RemoveAssetResponse(asset_id=asset_id, name=removed.name)
