from dataclasses import dataclass
from typing import Optional

from .base import LibraryUseCase, UseCaseRequest, UseCaseResponse
from assetKeeper.application.services.catalog import AssetCatalog
from assetKeeper.domain.models import Asset
from assetKeeper.errors import AssetKeeperError, InvalidArgumentError
from assetKeeper.events.library_events import AssetAddedEvent, AssetUpdatedEvent


@dataclass(frozen=True)
class AddAssetRequest(UseCaseRequest):
    asset: Optional[Asset] = None
    strict: bool = False


@dataclass(frozen=True)
class AddAssetResponse(UseCaseResponse):
    asset_id: str = ""
    overwritten: bool = False


class AddAssetUseCase(LibraryUseCase):
    def __init__(self, catalog: AssetCatalog, event_bus=None, error_handler=None):
        super().__init__(event_bus, error_handler)
        self._catalog = catalog

    def execute(self, request: AddAssetRequest) -> AddAssetResponse:
        asset = request.asset
        try:
            if asset is None:
                raise InvalidArgumentError("No asset supplied")
            existed = self._catalog.get(asset.asset_id) is not None
            if request.strict:
                self._catalog.insert(asset)
            else:
                self._catalog.add(asset)
        except AssetKeeperError as exc:
            return self._failure(AddAssetResponse, exc, operation="add_asset")

        asset_id = str(asset.asset_id)
        if existed:
            self._publish(AssetUpdatedEvent(asset_id=asset_id, name=asset.name))
        else:
            self._publish(AssetAddedEvent(asset_id=asset_id, name=asset.name))
        return AddAssetResponse(asset_id=asset_id, overwritten=existed)
