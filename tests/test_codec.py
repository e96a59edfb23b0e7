from datetime import datetime

import pytest

from assetKeeper.domain.models import Asset, AssetId, BoothItem, Library
from assetKeeper.errors import LibraryDocumentInvalidError
from assetKeeper.infrastructure.store.codec import (
    decode_library,
    encode_library,
    parse_timestamp,
    validate_document,
)

NOW = datetime(2024, 5, 15, 12, 0)


def _raw_asset(**overrides):
    raw = {
        "metadata": {"name": "Hat", "tags": ["cute"], "createdDate": "2024-01-02T03:04:05"},
        "fileInfo": {"filePath": "hat.zip", "fileSizeBytes": 10},
        "state": {"isFavorite": True},
    }
    raw.update(overrides)
    return raw


def test_encode_decode_preserves_fields():
    group = Asset.create("Outfit", is_group=True, at=NOW)
    hat = Asset.create("Hat", asset_type="Accessory", tags=["cute"], author_name="Alice",
                       file_path="hat.zip", file_size_bytes=10, at=NOW)
    hat = hat.with_parent(group.asset_id).with_booth_item(
        BoothItem(item_title="Hat", item_url="https://booth.pm/items/1", price="500")
    ).touched(NOW)
    library = Library.empty(NOW).with_assets([group, hat]).with_tags(["cute"])

    decoded = decode_library(encode_library(library), NOW)

    assert decoded.get(hat.asset_id) == hat
    assert decoded.get(group.asset_id).child_asset_ids == (hat.asset_id,)
    assert decoded.tags == ("cute",)


def test_encoded_children_follow_parent_links():
    group = Asset.create("Outfit", is_group=True, at=NOW).with_children([AssetId.new()])
    hat = Asset.create("Hat", at=NOW).with_parent(group.asset_id)

    document = encode_library(Library.empty(NOW).with_assets([group, hat]))

    assert document["assets"][str(group.asset_id)]["childAssetIds"] == [str(hat.asset_id)]
    assert document["assets"][str(hat.asset_id)]["parentGroupId"] == str(group.asset_id)


def test_decode_tolerates_missing_sections():
    asset_id = str(AssetId.new())

    library = decode_library({"assets": {asset_id: {"metadata": {"name": "Hat"}}}}, NOW)

    asset = library.get(AssetId(asset_id))
    assert asset.metadata.created_date == NOW
    assert asset.file_info.file_size_bytes == 0
    assert asset.parent_group_id is None


def test_decode_skips_malformed_ids_and_clamps_sizes():
    good = str(AssetId.new())
    negative = _raw_asset(fileInfo={"fileSizeBytes": -5}, parentGroupId="bogus")

    library = decode_library({"assets": {"bogus": _raw_asset(), good: negative}}, NOW)

    assert len(library) == 1
    asset = library.get(AssetId(good))
    assert asset.file_info.file_size_bytes == 0
    assert asset.parent_group_id is None
    assert asset.state.is_favorite


def test_invalid_documents_are_rejected():
    with pytest.raises(LibraryDocumentInvalidError):
        validate_document({"tags": []})
    with pytest.raises(LibraryDocumentInvalidError):
        validate_document({"assets": {"x": {"metadata": {"name": 5}}}})


def test_parse_timestamp_variants():
    assert parse_timestamp(None, NOW) == NOW
    assert parse_timestamp("garbage", NOW) == NOW
    assert parse_timestamp("2024-01-02T03:04:05.123456", NOW) == datetime(2024, 1, 2, 3, 4, 5, 123456)
    assert parse_timestamp("2024-01-02T03:04:05Z", NOW).tzinfo is None
    assert parse_timestamp("0001-01-01T00:00:00+14:00", NOW) == NOW
