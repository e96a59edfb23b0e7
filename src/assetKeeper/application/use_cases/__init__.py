from .add_asset import AddAssetRequest, AddAssetResponse, AddAssetUseCase
from .base import LibraryUseCase, UseCase, UseCaseRequest, UseCaseResponse
from .group_assets import (
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
from .remove_asset import RemoveAssetRequest, RemoveAssetResponse, RemoveAssetUseCase
from .tag_asset import TagAssetRequest, TagAssetResponse, TagAssetUseCase
from .update_asset import UpdateAssetRequest, UpdateAssetResponse, UpdateAssetUseCase

__all__ = [
    "AddAssetRequest",
    "AddAssetResponse",
    "AddAssetUseCase",
    "AddToGroupRequest",
    "AddToGroupResponse",
    "AddToGroupUseCase",
    "CreateGroupRequest",
    "CreateGroupResponse",
    "CreateGroupUseCase",
    "DisbandGroupRequest",
    "DisbandGroupResponse",
    "DisbandGroupUseCase",
    "LibraryUseCase",
    "RemoveAssetRequest",
    "RemoveAssetResponse",
    "RemoveAssetUseCase",
    "RemoveFromGroupRequest",
    "RemoveFromGroupResponse",
    "RemoveFromGroupUseCase",
    "TagAssetRequest",
    "TagAssetResponse",
    "TagAssetUseCase",
    "UpdateAssetRequest",
    "UpdateAssetResponse",
    "UpdateAssetUseCase",
    "UseCase",
    "UseCaseRequest",
    "UseCaseResponse",
]
