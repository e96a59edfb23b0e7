from dataclasses import dataclass
from typing import Tuple

from .base import LibraryUseCase, UseCaseRequest, UseCaseResponse
from assetKeeper.application.services.catalog import AssetCatalog
from assetKeeper.errors import AssetKeeperError
from assetKeeper.events.library_events import AssetUpdatedEvent


@dataclass(frozen=True)
class TagAssetRequest(UseCaseRequest):
    asset_id: str = ""
    add: Tuple[str, ...] = ()
    remove: Tuple[str, ...] = ()


@dataclass(frozen=True)
class TagAssetResponse(UseCaseResponse):
    asset_id: str = ""
    tags: Tuple[str, ...] = ()


class TagAssetUseCase(LibraryUseCase):
    """Add and remove tags on one asset, registering new tags in the library."""

    def __init__(self, catalog: AssetCatalog, event_bus=None, error_handler=None):
        super().__init__(event_bus, error_handler)
        self._catalog = catalog

    def execute(self, request: TagAssetRequest) -> TagAssetResponse:
        try:
            asset = self._catalog.require(request.asset_id)
            now = self._catalog.now()
            metadata = asset.metadata
            for tag in request.add:
                metadata = metadata.add_tag(tag, at=now)
            for tag in request.remove:
                metadata = metadata.remove_tag(tag, at=now)

            if metadata is not asset.metadata:
                updated = asset.with_metadata(metadata)
                library = self._catalog.snapshot()
                known = library.tags + tuple(t for t in metadata.tags if t not in library.tags)
                self._catalog.commit(library.with_asset(updated).with_tags(known))
                asset = updated
        except AssetKeeperError as exc:
            return self._failure(TagAssetResponse, exc, operation="tag_asset", asset_id=request.asset_id)

        self._publish(AssetUpdatedEvent(asset_id=str(asset.asset_id), name=asset.name))
        return TagAssetResponse(asset_id=str(asset.asset_id), tags=asset.metadata.tags)
