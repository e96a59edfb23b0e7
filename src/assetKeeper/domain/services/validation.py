"""Rule-based, side-effect free checks over assets and libraries.

Validators never raise: every problem becomes a :class:`ValidationFinding`
and an empty report means fully valid.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union
from urllib.parse import urlparse

from assetKeeper.config import (
    AUTHOR_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    LARGE_FILE_THRESHOLD_BYTES,
    MAX_HIERARCHY_HOPS,
    NAME_MAX_LENGTH,
    TAG_MAX_LENGTH,
)

from ..models import (
    Asset,
    AssetFileInfo,
    AssetId,
    AssetMetadata,
    BoothItem,
    Library,
    ValidationFinding,
    ValidationLevel,
    ValidationReport,
)


def _finding(level, message, field_name="", suggestion="", asset_id=None) -> ValidationFinding:
    return ValidationFinding(
        level=level,
        message=message,
        field_name=field_name,
        suggestion=suggestion,
        asset_id=str(asset_id) if asset_id is not None else None,
    )


def _local_naive(value: datetime) -> datetime:
    """Return *value* as a naive local datetime."""
    if value.tzinfo is None:
        return value
    try:
        return value.astimezone().replace(tzinfo=None)
    except (ValueError, OverflowError, OSError):
        return value.replace(tzinfo=None)


def is_valid_url(url: str) -> bool:
    parsed = urlparse(url.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class ValidationEngine:
    def __init__(
        self,
        file_exists: Optional[Callable[[Path], bool]] = None,
        clock: Callable[[], datetime] = datetime.now,
        large_file_threshold: int = LARGE_FILE_THRESHOLD_BYTES,
    ):
        self._file_exists = file_exists or (lambda path: path.is_file())
        self._clock = clock
        self._large_file_threshold = large_file_threshold

    # ------------------------------------------------------------------
    # Per-section checks
    # ------------------------------------------------------------------
    def validate_asset_id(self, value: Union[AssetId, str, None]) -> List[ValidationFinding]:
        if value is None or (isinstance(value, str) and not value.strip()):
            return [_finding(ValidationLevel.CRITICAL, "Asset id is empty", "AssetId",
                             "Assign a generated asset id")]
        if AssetId.try_parse(value) is None:
            return [_finding(ValidationLevel.ERROR, f"Asset id is malformed: {value!r}", "AssetId",
                             "Use a UUID formatted asset id")]
        return []

    def validate_metadata(self, metadata: AssetMetadata, asset_id=None) -> List[ValidationFinding]:
        results: List[ValidationFinding] = []
        add = results.append

        name = metadata.name or ""
        if not name.strip():
            add(_finding(ValidationLevel.ERROR, "Name is empty", "Name",
                         "Enter a name for the asset", asset_id))
        elif len(name) > NAME_MAX_LENGTH:
            add(_finding(ValidationLevel.WARNING, "Name is too long", "Name",
                         f"Keep names within {NAME_MAX_LENGTH} characters", asset_id))

        if len(metadata.description or "") > DESCRIPTION_MAX_LENGTH:
            add(_finding(ValidationLevel.WARNING, "Description is too long", "Description",
                         f"Keep descriptions within {DESCRIPTION_MAX_LENGTH} characters", asset_id))

        author = metadata.author_name or ""
        if not author.strip():
            add(_finding(ValidationLevel.INFO, "Author is not set", "AuthorName",
                         "Recording the author is recommended", asset_id))
        elif len(author) > AUTHOR_MAX_LENGTH:
            add(_finding(ValidationLevel.WARNING, "Author name is too long", "AuthorName",
                         f"Keep author names within {AUTHOR_MAX_LENGTH} characters", asset_id))

        if any(not (tag or "").strip() for tag in metadata.tags):
            add(_finding(ValidationLevel.WARNING, "Tags contain an empty entry", "Tags",
                         "Remove empty tags", asset_id))
        long_tags = [tag for tag in metadata.tags if len(tag or "") > TAG_MAX_LENGTH]
        if long_tags:
            add(_finding(ValidationLevel.WARNING, f"Tags are too long: {', '.join(long_tags)}", "Tags",
                         f"Keep tags within {TAG_MAX_LENGTH} characters", asset_id))

        if any(not (dep or "").strip() for dep in metadata.dependencies):
            add(_finding(ValidationLevel.WARNING, "Dependencies contain an empty entry", "Dependencies",
                         "Remove empty dependencies", asset_id))

        created = _local_naive(metadata.created_date)
        if created > _local_naive(self._clock()):
            add(_finding(ValidationLevel.WARNING, "Created date is in the future", "CreatedDate",
                         "Set the correct creation date", asset_id))
        if _local_naive(metadata.modified_date) < created:
            add(_finding(ValidationLevel.ERROR, "Modified date is earlier than created date",
                         "ModifiedDate", "Set the correct modification date", asset_id))
        return results

    def validate_file_info(self, file_info: AssetFileInfo, asset_id=None) -> List[ValidationFinding]:
        results: List[ValidationFinding] = []
        add = results.append

        if not (file_info.file_path or "").strip():
            add(_finding(ValidationLevel.CRITICAL, "File path is not set", "FilePath",
                         "Set a valid file path", asset_id))
        else:
            try:
                present = self._file_exists(Path(file_info.file_path))
            except (OSError, ValueError):
                add(_finding(ValidationLevel.ERROR, "File path is malformed", "FilePath",
                             "Set a valid file path", asset_id))
            else:
                if not present:
                    add(_finding(ValidationLevel.ERROR, "Referenced file does not exist", "FilePath",
                                 "Point the asset at an existing file", asset_id))

        if file_info.file_size_bytes <= 0:
            add(_finding(ValidationLevel.WARNING, "File size is not set", "FileSize",
                         "Record the correct file size", asset_id))
        elif file_info.file_size_bytes > self._large_file_threshold:
            add(_finding(ValidationLevel.WARNING, "File is very large", "FileSize",
                         "Large files may slow down imports", asset_id))
        return results

    def validate_asset_type(self, asset_type: str, asset_id=None) -> List[ValidationFinding]:
        if not (asset_type or "").strip():
            return [_finding(ValidationLevel.WARNING, "Asset type is not set", "AssetType",
                             "Pick an asset type", asset_id)]
        return []

    def validate_group(self, asset: Asset, library: Optional[Library]) -> List[ValidationFinding]:
        """Re-walk the parent chain and check group naming."""
        results: List[ValidationFinding] = []
        asset_id = asset.asset_id

        if asset.parent_group_id is not None and library is not None:
            visited = {asset_id}
            current = asset.parent_group_id
            circular = False
            while current is not None:
                if current in visited or len(visited) > MAX_HIERARCHY_HOPS:
                    circular = True
                    break
                visited.add(current)
                parent = library.get(current)
                if parent is None:
                    results.append(_finding(ValidationLevel.ERROR, "Parent group not found",
                                            "ParentGroupId", "Assign an existing parent group", asset_id))
                    break
                current = parent.parent_group_id

            if circular:
                results.append(_finding(ValidationLevel.CRITICAL, "Group hierarchy is likely circular",
                                        "ParentGroupId", "Review the group hierarchy", asset_id))

        if asset.is_group and asset.parent_group_id is None and not (asset.name or "").strip():
            results.append(_finding(ValidationLevel.WARNING, "Top-level group has no name", "GroupName",
                                    "Give the group a name", asset_id))
        return results

    def validate_booth_item(self, booth_item: Optional[BoothItem], asset_id=None) -> List[ValidationFinding]:
        if booth_item is None or booth_item == BoothItem():
            return []
        results: List[ValidationFinding] = []
        url = booth_item.item_url or ""
        if not url.strip():
            results.append(_finding(ValidationLevel.WARNING, "Item URL is not set", "ItemUrl",
                                    "Set the marketplace item URL", asset_id))
        elif not is_valid_url(url):
            results.append(_finding(ValidationLevel.ERROR, "Item URL is malformed", "ItemUrl",
                                    "Use an http(s) item URL", asset_id))
        if not (booth_item.file_name or "").strip():
            results.append(_finding(ValidationLevel.WARNING, "Download file name is not set", "FileName",
                                    "Set the downloaded file name", asset_id))
        return results

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------
    def validate_asset(self, asset: Asset, library: Optional[Library] = None) -> ValidationReport:
        report = ValidationReport()
        asset_id = asset.asset_id
        report.extend(self.validate_asset_id(asset_id))
        report.extend(self.validate_metadata(asset.metadata, asset_id))
        # Groups are containers and carry no file of their own.
        if not asset.is_group:
            report.extend(self.validate_file_info(asset.file_info, asset_id))
            report.extend(self.validate_asset_type(asset.metadata.asset_type, asset_id))
        report.extend(self.validate_group(asset, library))
        report.extend(self.validate_booth_item(asset.booth_item, asset_id))
        return report

    def validate_library(self, library: Library) -> ValidationReport:
        report = ValidationReport()
        for key, asset in library.assets.items():
            if key != asset.asset_id:
                report.add(_finding(ValidationLevel.CRITICAL,
                                    f"Library key {key} does not match asset id {asset.asset_id}",
                                    "AssetId", "Re-save the asset under its own id", key))
            report.extend(self.validate_asset(asset, library))

        by_name: Dict[str, List[Asset]] = defaultdict(list)
        for asset in library:
            if asset.name.strip():
                by_name[asset.name.strip().lower()].append(asset)
        for same in by_name.values():
            if len(same) > 1:
                report.add(_finding(ValidationLevel.WARNING,
                                    f"Duplicate asset name: {same[0].name} ({len(same)} assets)",
                                    "Name", "Consider renaming duplicates"))
        return report
