from dataclasses import dataclass
from typing import Optional

from .base import LibraryUseCase, UseCaseRequest, UseCaseResponse
from assetKeeper.application.services.catalog import AssetCatalog
from assetKeeper.domain.models import Asset
from assetKeeper.errors import AssetKeeperError, InvalidArgumentError
from assetKeeper.events.library_events import AssetUpdatedEvent


@dataclass(frozen=True)
class UpdateAssetRequest(UseCaseRequest):
    asset: Optional[Asset] = None


@dataclass(frozen=True)
class UpdateAssetResponse(UseCaseResponse):
    asset_id: str = ""


class UpdateAssetUseCase(LibraryUseCase):
    def __init__(self, catalog: AssetCatalog, event_bus=None, error_handler=None):
        super().__init__(event_bus, error_handler)
        self._catalog = catalog

    def execute(self, request: UpdateAssetRequest) -> UpdateAssetResponse:
        asset = request.asset
        try:
            if asset is None:
                raise InvalidArgumentError("No asset supplied")
            self._catalog.update(asset)
        except AssetKeeperError as exc:
            return self._failure(UpdateAssetResponse, exc, operation="update_asset")

        self._publish(AssetUpdatedEvent(asset_id=str(asset.asset_id), name=asset.name))
        return UpdateAssetResponse(asset_id=str(asset.asset_id))
