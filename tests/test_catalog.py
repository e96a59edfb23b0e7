import pytest

from assetKeeper.domain.models import Asset, AssetId
from assetKeeper.errors import (
    AssetAlreadyExistsError,
    AssetNotFoundError,
    IntegrityViolationError,
    InvalidArgumentError,
)


def test_add_and_get_round_trip(catalog, clock):
    asset = Asset.create("Hat", asset_type="Clothing", tags=["hat"], at=clock())

    catalog.add(asset)

    assert catalog.get(asset.asset_id) == asset
    assert catalog.get(str(asset.asset_id)) == asset
    assert catalog.count() == 1


def test_get_unknown_or_malformed_id_returns_none(catalog):
    assert catalog.get(AssetId.new()) is None
    assert catalog.get("not-a-uuid") is None


def test_add_existing_id_overwrites(catalog, clock):
    asset = Asset.create("Hat", at=clock())
    catalog.add(asset)

    renamed = asset.with_metadata(asset.metadata.with_name("Top Hat", at=clock()))
    catalog.add(renamed)

    assert catalog.count() == 1
    assert catalog.get(asset.asset_id).name == "Top Hat"


def test_insert_rejects_duplicate(catalog, clock):
    asset = Asset.create("Hat", at=clock())
    catalog.insert(asset)

    with pytest.raises(AssetAlreadyExistsError):
        catalog.insert(asset)


def test_add_requires_name(catalog, clock):
    with pytest.raises(InvalidArgumentError):
        catalog.add(Asset.create("   ", at=clock()))


def test_unnamed_group_is_allowed(catalog, clock):
    group = Asset.create("", is_group=True, at=clock())

    catalog.add(group)

    assert catalog.get(group.asset_id).is_group


def test_update_missing_asset_raises(catalog, clock):
    with pytest.raises(AssetNotFoundError):
        catalog.update(Asset.create("Ghost", at=clock()))


def test_update_replaces_asset(catalog, clock):
    asset = catalog.add(Asset.create("Hat", at=clock()))
    favorite = asset.with_state(asset.state.with_favorite(True))

    catalog.update(favorite)

    assert catalog.get(asset.asset_id).state.is_favorite


def test_remove_returns_removed_asset(catalog, clock):
    asset = catalog.add(Asset.create("Hat", at=clock()))

    removed = catalog.remove(asset.asset_id)

    assert removed == asset
    assert catalog.get(asset.asset_id) is None
    with pytest.raises(AssetNotFoundError):
        catalog.remove(asset.asset_id)


def test_remove_group_orphans_children(catalog, clock):
    group = catalog.add(Asset.create("Outfit", is_group=True, at=clock()))
    child = catalog.add(Asset.create("Hat", at=clock()).with_parent(group.asset_id))

    catalog.remove(group.asset_id)

    assert catalog.get(child.asset_id).parent_group_id is None


def test_remove_child_updates_parent_order(catalog, clock):
    group = Asset.create("Outfit", is_group=True, at=clock())
    hat = Asset.create("Hat", at=clock()).with_parent(group.asset_id)
    boots = Asset.create("Boots", at=clock()).with_parent(group.asset_id)
    catalog.add(group.with_children([hat.asset_id, boots.asset_id]))
    catalog.add(hat)
    catalog.add(boots)

    catalog.remove(hat.asset_id)

    assert catalog.get(group.asset_id).child_asset_ids == (boots.asset_id,)


def test_lookups(catalog, clock):
    hat = catalog.add(Asset.create(
        "Red Hat", asset_type="Clothing", tags=["hat", "red"], author_name="Alice",
        description="A wide brim", at=clock(),
    ))
    boots = catalog.add(Asset.create(
        "Boots", asset_type="Shoes", tags=["leather"], author_name="Bob", at=clock(),
    ))
    catalog.update(boots.with_state(boots.state.with_favorite(True).with_archived(True)))

    assert catalog.find_by_name("red") == [hat]
    assert catalog.find_by_description("BRIM") == [hat]
    assert [a.asset_id for a in catalog.find_by_author("bo")] == [boots.asset_id]
    assert catalog.by_author("alice") == [hat]
    assert catalog.by_tag("hat") == [hat]
    assert [a.asset_id for a in catalog.by_asset_type("Shoes")] == [boots.asset_id]
    assert [a.asset_id for a in catalog.favorites()] == [boots.asset_id]
    assert [a.asset_id for a in catalog.archived()] == [boots.asset_id]
    assert catalog.visible() == [hat]
    assert catalog.search_text("alice") == [hat]
    assert catalog.available_asset_types() == ["Clothing", "Shoes"]
    assert catalog.available_authors() == ["Alice", "Bob"]


def test_tag_registry(catalog):
    assert catalog.register_tag("hat") is True
    assert catalog.register_tag("hat") is False
    assert catalog.register_tag("  ") is False
    assert catalog.snapshot().tags == ("hat",)

    assert catalog.unregister_tag("hat") is True
    assert catalog.unregister_tag("hat") is False

    catalog.register_tag("a")
    catalog.register_tag("b")
    catalog.clear_tags()
    assert catalog.snapshot().tags == ()


def test_asset_type_registry(catalog):
    assert catalog.register_asset_type("Clothing") is True
    assert catalog.register_asset_type("Clothing") is False
    assert catalog.snapshot().asset_types == ("Clothing",)
    assert catalog.unregister_asset_type("Clothing") is True
    catalog.register_asset_type("Shoes")
    catalog.clear_asset_types()
    assert catalog.snapshot().asset_types == ()


def test_changes_survive_reload(catalog, store, clock):
    asset = catalog.add(Asset.create("Hat", tags=["hat"], at=clock()))
    store.flush(timeout=5)

    store.clear_cache()

    assert catalog.get(asset.asset_id).metadata.tags == ("hat",)


def test_update_rejects_parent_that_closes_a_cycle(catalog, clock):
    outfit = catalog.add(Asset.create("Outfit", is_group=True, at=clock()))
    sub = catalog.add(Asset.create("Sub", is_group=True, at=clock()).with_parent(outfit.asset_id))

    with pytest.raises(IntegrityViolationError):
        catalog.update(outfit.with_parent(sub.asset_id))
    with pytest.raises(IntegrityViolationError):
        catalog.update(outfit.with_parent(outfit.asset_id))

    assert catalog.get(outfit.asset_id).parent_group_id is None


def test_parent_must_exist_and_be_a_group(catalog, clock):
    hat = catalog.add(Asset.create("Hat", at=clock()))

    with pytest.raises(IntegrityViolationError):
        catalog.add(Asset.create("Boots", at=clock()).with_parent(AssetId.new()))
    with pytest.raises(IntegrityViolationError):
        catalog.insert(Asset.create("Cape", at=clock()).with_parent(hat.asset_id))

    assert catalog.count() == 1


def test_unchanged_parent_is_accepted(catalog, clock):
    group = catalog.add(Asset.create("Outfit", is_group=True, at=clock()))
    hat = catalog.add(Asset.create("Hat", at=clock()).with_parent(group.asset_id))

    catalog.update(hat.with_metadata(hat.metadata.with_tags(["cute"])))

    assert catalog.get(hat.asset_id).parent_group_id == group.asset_id
