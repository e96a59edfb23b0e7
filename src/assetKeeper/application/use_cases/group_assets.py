from dataclasses import dataclass
from typing import Tuple

from .base import LibraryUseCase, UseCaseRequest, UseCaseResponse
from assetKeeper.application.services.hierarchy_manager import HierarchyManager
from assetKeeper.errors import AssetKeeperError
from assetKeeper.events.library_events import AssetAddedEvent, GroupChangedEvent


@dataclass(frozen=True)
class CreateGroupRequest(UseCaseRequest):
    name: str = ""
    child_ids: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CreateGroupResponse(UseCaseResponse):
    group_id: str = ""
    name: str = ""
    added: Tuple[str, ...] = ()


class CreateGroupUseCase(LibraryUseCase):
    def __init__(self, hierarchy: HierarchyManager, event_bus=None, error_handler=None):
        super().__init__(event_bus, error_handler)
        self._hierarchy = hierarchy

    def execute(self, request: CreateGroupRequest) -> CreateGroupResponse:
        try:
            group = self._hierarchy.create_group(request.name)
        except AssetKeeperError as exc:
            return self._failure(CreateGroupResponse, exc, operation="create_group")

        group_id = str(group.asset_id)
        self._publish(AssetAddedEvent(asset_id=group_id, name=group.name))

        added = []
        for child_id in request.child_ids:
            try:
                self._hierarchy.add_to_group(child_id, group.asset_id)
            except AssetKeeperError as exc:
                # The group exists already; report the child and keep going.
                self._logger.warning(f"Could not add {child_id} to new group {group_id}: {exc}")
                continue
            added.append(str(child_id))
        self._publish(GroupChangedEvent(group_id=group_id, child_ids=added, action="created"))
        return CreateGroupResponse(group_id=group_id, name=group.name, added=tuple(added))


@dataclass(frozen=True)
class AddToGroupRequest(UseCaseRequest):
    child_id: str = ""
    group_id: str = ""


@dataclass(frozen=True)
class AddToGroupResponse(UseCaseResponse):
    child_id: str = ""
    group_id: str = ""


class AddToGroupUseCase(LibraryUseCase):
    def __init__(self, hierarchy: HierarchyManager, event_bus=None, error_handler=None):
        super().__init__(event_bus, error_handler)
        self._hierarchy = hierarchy

    def execute(self, request: AddToGroupRequest) -> AddToGroupResponse:
        try:
            self._hierarchy.add_to_group(request.child_id, request.group_id)
        except AssetKeeperError as exc:
            return self._failure(
                AddToGroupResponse, exc,
                operation="add_to_group", child_id=request.child_id, group_id=request.group_id,
            )

        self._publish(GroupChangedEvent(
            group_id=str(request.group_id), child_ids=[str(request.child_id)], action="added",
        ))
        return AddToGroupResponse(child_id=str(request.child_id), group_id=str(request.group_id))


@dataclass(frozen=True)
class RemoveFromGroupRequest(UseCaseRequest):
    child_id: str = ""


@dataclass(frozen=True)
class RemoveFromGroupResponse(UseCaseResponse):
    child_id: str = ""
    former_group_id: str = ""


class RemoveFromGroupUseCase(LibraryUseCase):
    def __init__(self, hierarchy: HierarchyManager, event_bus=None, error_handler=None):
        super().__init__(event_bus, error_handler)
        self._hierarchy = hierarchy

    def execute(self, request: RemoveFromGroupRequest) -> RemoveFromGroupResponse:
        try:
            former = self._hierarchy.remove_from_group(request.child_id)
        except AssetKeeperError as exc:
            return self._failure(
                RemoveFromGroupResponse, exc, operation="remove_from_group", child_id=request.child_id,
            )

        if former is not None:
            self._publish(GroupChangedEvent(
                group_id=str(former), child_ids=[str(request.child_id)], action="removed",
            ))
        return RemoveFromGroupResponse(
            child_id=str(request.child_id),
            former_group_id=str(former) if former is not None else "",
        )


@dataclass(frozen=True)
class DisbandGroupRequest(UseCaseRequest):
    group_id: str = ""


@dataclass(frozen=True)
class DisbandGroupResponse(UseCaseResponse):
    group_id: str = ""
    released: Tuple[str, ...] = ()


class DisbandGroupUseCase(LibraryUseCase):
    def __init__(self, hierarchy: HierarchyManager, event_bus=None, error_handler=None):
        super().__init__(event_bus, error_handler)
        self._hierarchy = hierarchy

    def execute(self, request: DisbandGroupRequest) -> DisbandGroupResponse:
        try:
            released = self._hierarchy.disband(request.group_id)
        except AssetKeeperError as exc:
            return self._failure(DisbandGroupResponse, exc, operation="disband", group_id=request.group_id)

        released_ids = tuple(str(child) for child in released)
        self._publish(GroupChangedEvent(
            group_id=str(request.group_id), child_ids=list(released_ids), action="disbanded",
        ))
        return DisbandGroupResponse(group_id=str(request.group_id), released=released_ids)
