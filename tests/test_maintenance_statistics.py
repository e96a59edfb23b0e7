import pytest

from assetKeeper.application.services.maintenance import LibraryMaintenance
from assetKeeper.domain.models import Asset, AssetId, Library
from assetKeeper.domain.services import LibraryStatistics


@pytest.fixture
def maintenance(catalog):
    return LibraryMaintenance(catalog)


def test_synchronize_registries(maintenance, catalog, clock):
    catalog.add(Asset.create("Hat", asset_type="Accessory", tags=["cute", "red"], at=clock()))
    catalog.add(Asset.create("Boots", asset_type="Shoes", tags=["cute"], at=clock()))
    catalog.register_tag("red")

    assert maintenance.synchronize_tags() == 1
    assert maintenance.synchronize_asset_types() == 2
    assert catalog.snapshot().tags == ("red", "cute")
    assert set(catalog.snapshot().asset_types) == {"Accessory", "Shoes"}
    assert maintenance.synchronize_tags() == 0


def test_cleanup_unused(maintenance, catalog, clock):
    catalog.add(Asset.create("Hat", asset_type="Accessory", tags=["cute"], at=clock()))
    for tag in ("cute", "stale", "old"):
        catalog.register_tag(tag)
    catalog.register_asset_type("Accessory")
    catalog.register_asset_type("Vehicle")

    assert maintenance.cleanup_unused_tags() == 2
    assert maintenance.cleanup_unused_asset_types() == 1
    assert catalog.snapshot().tags == ("cute",)
    assert catalog.snapshot().asset_types == ("Accessory",)


def test_optimize_repairs_dangling_links(maintenance, catalog, clock):
    ghost = AssetId.new()
    orphan = Asset.create("Orphan", tags=["x"], at=clock()).with_parent(ghost)
    group = Asset.create("Outfit", is_group=True, at=clock()).with_children([ghost])
    catalog.commit(catalog.snapshot().with_assets([orphan, group]))
    catalog.register_tag("unused")

    report = maintenance.optimize()

    assert report.tags_added == 1
    assert report.tags_removed == 1
    assert report.dangling_parents_cleared == 1
    assert report.dangling_children_dropped == 1
    assert report.total_changes == 4
    assert catalog.get(orphan.asset_id).parent_group_id is None
    assert catalog.get(group.asset_id).child_asset_ids == ()


def test_optimize_on_clean_library_changes_nothing(maintenance, catalog):
    assert maintenance.optimize().total_changes == 0


def test_statistics(clock):
    hat = Asset.create("Hat", asset_type="Accessory", tags=["cute"], author_name="Alice",
                       file_size_bytes=100, at=clock())
    boots = Asset.create("Boots", asset_type="Accessory", tags=["cute", "leather"], author_name="Bob",
                         file_size_bytes=50, at=clock())
    coat = Asset.create("Coat", asset_type="Clothing", author_name="Alice", at=clock())
    group = Asset.create("Outfit", is_group=True, at=clock())
    hat = hat.with_state(hat.state.with_favorite(True))
    coat = coat.with_state(coat.state.with_archived(True))
    library = Library.empty(clock()).with_assets([hat, boots, coat, group])

    stats = LibraryStatistics.from_library(library)

    assert stats.total_assets == 4
    assert stats.favorite_count == 1
    assert stats.group_count == 1
    assert stats.archived_count == 1
    assert stats.total_size_bytes == 150
    assert stats.most_common_asset_type == "Accessory"
    assert stats.most_active_author == "Alice"
    assert stats.top_tags(1) == [("cute", 2)]


def test_statistics_of_empty_library(clock):
    stats = LibraryStatistics.from_library(Library.empty(clock()))

    assert stats.total_assets == 0
    assert stats.most_common_asset_type is None
    assert stats.top_tags() == []
