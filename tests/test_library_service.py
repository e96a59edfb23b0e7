from unittest.mock import MagicMock

from assetKeeper.application.use_cases import AddAssetRequest, AddAssetUseCase
from assetKeeper.domain.models import (
    AdvancedSearchCriteria,
    Asset,
    BasicSearchCriteria,
    LogicalOperator,
    SearchFields,
)
from assetKeeper.errors.handler import ErrorSeverity
from assetKeeper.events.library_events import (
    AssetAddedEvent,
    AssetRemovedEvent,
    AssetUpdatedEvent,
    GroupChangedEvent,
)


def _record(bus, *event_types):
    received = []
    for event_type in event_types:
        bus.subscribe(event_type, received.append)
    return received


def _names(service, result):
    return {asset.name for asset in service.resolve(result)}


def test_add_asset_publishes_and_round_trips(service, event_bus, clock):
    received = _record(event_bus, AssetAddedEvent, AssetUpdatedEvent)
    asset = Asset.create("Hat", asset_type="Accessory", tags=["cute"], at=clock())

    response = service.add_asset(asset)

    assert response.success
    assert response.overwritten is False
    assert service.get_asset(response.asset_id) == asset
    assert [type(e) for e in received] == [AssetAddedEvent]


def test_add_existing_asset_overwrites(service, event_bus, clock):
    asset = Asset.create("Hat", at=clock())
    service.add_asset(asset)
    received = _record(event_bus, AssetAddedEvent, AssetUpdatedEvent)

    response = service.add_asset(asset.with_metadata(asset.metadata.with_name("Cap", at=clock())))

    assert response.success and response.overwritten
    assert service.get_asset(asset.asset_id).name == "Cap"
    assert [type(e) for e in received] == [AssetUpdatedEvent]


def test_strict_add_fails_on_duplicate(service, clock):
    asset = Asset.create("Hat", at=clock())
    service.add_asset(asset)

    response = service.add_asset(asset, strict=True)

    assert not response.success
    assert "already exists" in response.error


def test_failed_use_case_reports_to_error_handler(catalog):
    handler = MagicMock()
    use_case = AddAssetUseCase(catalog, error_handler=handler)

    response = use_case.execute(AddAssetRequest(asset=None))

    assert response.success is False
    handler.handle.assert_called_once()
    assert handler.handle.call_args.args[1] is ErrorSeverity.WARNING


def test_update_and_remove(service, event_bus, clock):
    asset = Asset.create("Hat", at=clock())
    service.add_asset(asset)
    received = _record(event_bus, AssetRemovedEvent)

    assert not service.update_asset(Asset.create("Ghost", at=clock())).success
    removed = service.remove_asset(asset.asset_id)

    assert removed.success and removed.name == "Hat"
    assert service.get_asset(asset.asset_id) is None
    assert received[0].asset_id == str(asset.asset_id)
    assert not service.remove_asset(asset.asset_id).success


def test_tagging_registers_tags(service, clock):
    asset = Asset.create("Hat", tags=["cute"], at=clock())
    service.add_asset(asset)

    added = service.add_tags_to_asset(asset.asset_id, ["red", "cute"])
    removed = service.remove_tag_from_asset(asset.asset_id, "cute")

    assert added.tags == ("cute", "red")
    assert removed.tags == ("red",)
    assert set(service.catalog.snapshot().tags) == {"cute", "red"}


def test_tag_unknown_asset_fails(service):
    assert not service.tag_asset("0b0c4f7e-1111-4a6a-9c8e-3f7a3c1d2e4f", add=["x"]).success


def test_favorite_archive_and_touch(service, clock):
    asset = Asset.create("Hat", at=clock())
    service.add_asset(asset)

    assert service.toggle_favorite(asset.asset_id) is True
    assert service.toggle_favorite(asset.asset_id) is False
    assert service.set_archived(asset.asset_id) is True
    assert service.touch(asset.asset_id) is True

    stored = service.get_asset(asset.asset_id)
    assert stored.state.is_archived
    assert stored.last_accessed == clock()
    assert service.toggle_favorite("missing") is False


def test_tag_search_scenario(service, clock):
    service.add_asset(Asset.create("Hat", asset_type="Accessory", tags=["cute"], at=clock()))
    service.add_asset(Asset.create("Boots", asset_type="Accessory", tags=["cute", "leather"], at=clock()))

    any_cute = AdvancedSearchCriteria(tag_operator=LogicalOperator.OR).add_tag("cute")
    both = AdvancedSearchCriteria(tag_operator=LogicalOperator.AND).add_tag("cute").add_tag("leather")

    assert _names(service, service.advanced_search(any_cute)) == {"Hat", "Boots"}
    assert _names(service, service.advanced_search(both)) == {"Boots"}


def test_group_scenario(service, event_bus, clock):
    hat = Asset.create("Hat", asset_type="Accessory", tags=["cute"], at=clock())
    boots = Asset.create("Boots", asset_type="Accessory", tags=["cute", "leather"], at=clock())
    service.add_asset(hat)
    service.add_asset(boots)
    received = _record(event_bus, GroupChangedEvent)

    outfit = service.create_group("Outfit")
    assert service.add_to_group(hat.asset_id, outfit.group_id).success
    assert service.add_to_group(boots.asset_id, outfit.group_id).success

    assert _names(service, service.group_children(outfit.group_id)) == {"Hat", "Boots"}
    assert _names(service, service.list_assets()) == {"Outfit"}
    assert [e.action for e in received] == ["created", "added", "added"]

    rejected = service.add_to_group(outfit.group_id, hat.asset_id)
    assert not rejected.success
    assert "circular" in rejected.error


def test_create_group_with_children(service, clock):
    hat = Asset.create("Hat", at=clock())
    service.add_asset(hat)

    response = service.create_group("Outfit", [hat.asset_id, "not-an-id"])

    assert response.success
    assert response.added == (str(hat.asset_id),)
    assert service.hierarchy.ancestor_path(hat.asset_id) == [service.get_asset(response.group_id).asset_id]


def test_remove_and_disband(service, clock):
    hat = Asset.create("Hat", at=clock())
    boots = Asset.create("Boots", at=clock())
    service.add_asset(hat)
    service.add_asset(boots)
    outfit = service.create_group("Outfit", [hat.asset_id, boots.asset_id])

    removed = service.remove_from_group(hat.asset_id)
    disbanded = service.disband_group(outfit.group_id)

    assert removed.former_group_id == outfit.group_id
    assert disbanded.released == (str(boots.asset_id),)
    assert service.hierarchy.ancestor_path(boots.asset_id) == []
    assert _names(service, service.list_assets()) == {"Hat", "Boots", "Outfit"}


def test_search_records_history(service, clock):
    service.add_asset(Asset.create("Hat", at=clock()))

    service.search(BasicSearchCriteria("hat", SearchFields.NAME))
    service.search(BasicSearchCriteria(""))
    service.search(BasicSearchCriteria("boots"))

    history = service.search_history()
    assert [(h.query, h.result_count) for h in history] == [("boots", 0), ("hat", 1)]
    service.clear_search_history()
    assert service.search_history() == []


def test_registry_and_optimize_delegation(service, clock):
    service.add_asset(Asset.create("Hat", asset_type="Accessory", tags=["cute"], at=clock()))

    assert service.add_tag("spare") is True
    assert service.add_asset_type("Vehicle") is True
    assert service.synchronize_tags() == 1
    assert service.synchronize_asset_types() == 1
    assert service.cleanup_unused_tags() == 1
    assert service.cleanup_unused_asset_types() == 1
    assert service.optimize().total_changes == 0
    assert service.remove_tag("cute") is True
    assert service.remove_asset_type("Accessory") is True
    service.clear_tags()
    service.clear_asset_types()
    assert service.catalog.snapshot().tags == ()


def test_validation_and_statistics(service, clock):
    asset = Asset.create("Hat", at=clock())
    service.add_asset(asset)

    report = service.validate_asset(asset.asset_id)

    assert report.has_critical
    assert service.validate_library().has_critical
    assert service.statistics().total_assets == 1


def test_update_cannot_reparent_group_under_its_child(service, clock):
    outfit = service.get_asset(service.create_group("Outfit").group_id)
    sub = service.get_asset(service.create_group("Sub").group_id)
    assert service.add_to_group(sub.asset_id, outfit.asset_id).success

    response = service.update_asset(service.get_asset(outfit.asset_id).with_parent(sub.asset_id))

    assert not response.success
    assert "circular" in response.error
    assert service.hierarchy.ancestor_path(outfit.asset_id) == []
