"""Typer-based CLI entry point."""

from __future__ import annotations

import functools
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich import print
from rich.console import Console
from rich.table import Table

from assetKeeper.application.services.library_service import LibraryService
from assetKeeper.di.bootstrap import bootstrap
from assetKeeper.di.container import Container
from assetKeeper.domain.models import (
    AdvancedSearchCriteria,
    Asset,
    BasicSearchCriteria,
    LogicalOperator,
    SearchFields,
    SearchResult,
    SortCriteria,
    SortOrder,
    SortSettings,
    ValidationLevel,
)
from assetKeeper.domain.repositories import ILibraryStore
from assetKeeper.errors import AssetKeeperError, AssetNotFoundError, DomainError
from assetKeeper.utils.logging import set_level

app = typer.Typer(help="Local asset library: catalogue, group, validate and search assets")
group_app = typer.Typer(help="Manage asset groups")
app.add_typer(group_app, name="group")

_FIELD_NAMES = {
    "name": SearchFields.NAME,
    "description": SearchFields.DESCRIPTION,
    "author": SearchFields.AUTHOR,
    "tags": SearchFields.TAGS,
    "path": SearchFields.FILE_PATH,
    "type": SearchFields.ASSET_TYPE,
}


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DomainError as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except AssetKeeperError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


def _service(ctx: typer.Context) -> LibraryService:
    return ctx.obj.resolve(LibraryService)


def _check(response) -> None:
    if not response.success:
        typer.echo(f"Error: {response.error}", err=True)
        raise typer.Exit(1)


def _sort(sort_by: str, descending: bool) -> SortSettings:
    try:
        criteria = SortCriteria(sort_by)
    except ValueError as exc:
        choices = ", ".join(c.value for c in SortCriteria)
        raise typer.BadParameter(f"sort must be one of: {choices}") from exc
    return SortSettings(primary=criteria, primary_order=SortOrder.DESC if descending else SortOrder.ASC)


def _print_assets(service: LibraryService, result: SearchResult, title: str) -> None:
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Author")
    table.add_column("Tags")
    table.add_column("Size", justify="right")
    for asset in service.resolve(result):
        name = f"[bold]{asset.name}[/bold] (group)" if asset.is_group else asset.name
        if asset.state.is_favorite:
            name = f"★ {name}"
        table.add_row(
            str(asset.asset_id),
            name,
            asset.metadata.asset_type,
            asset.metadata.author_name,
            ", ".join(asset.metadata.tags),
            str(asset.file_info.file_size_bytes),
        )
    Console().print(table)
    print(f"{result.total_count} result(s)")


@app.callback()
def main(
    ctx: typer.Context,
    library: Optional[Path] = typer.Option(None, "--library", "-l", help="Library document to use"),
    settings: Optional[Path] = typer.Option(None, "--settings", help="Settings file to use"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output"),
) -> None:
    """Wire the services and make sure pending writes land before exit."""

    if verbose:
        set_level(logging.DEBUG)
    container = Container()
    try:
        bootstrap(container, settings_path=settings, library_path=library)
    except AssetKeeperError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc
    ctx.obj = container
    ctx.call_on_close(lambda: container.resolve(ILibraryStore).close())


@app.command()
@_handle_errors
def add(
    ctx: typer.Context,
    name: str,
    asset_type: str = typer.Option("", "--type", "-t", help="Asset type"),
    tag: List[str] = typer.Option([], "--tag", help="Tag (repeatable)"),
    author: str = typer.Option("", "--author", "-a"),
    description: str = typer.Option("", "--description", "-d"),
    file: str = typer.Option("", "--file", "-f", help="Source file path"),
    size: Optional[int] = typer.Option(None, "--size", help="File size in bytes"),
) -> None:
    """Add a new asset to the library."""

    if size is None and file and Path(file).is_file():
        size = Path(file).stat().st_size
    asset = Asset.create(
        name,
        asset_type=asset_type,
        tags=tag,
        author_name=author,
        description=description,
        file_path=file,
        file_size_bytes=size or 0,
    )
    response = _service(ctx).add_asset(asset)
    _check(response)
    print(f"[green]Added '{asset.name}' as {response.asset_id}")


@app.command()
@_handle_errors
def show(ctx: typer.Context, asset_id: str) -> None:
    """Show every recorded field of one asset."""

    service = _service(ctx)
    asset = service.get_asset(asset_id)
    if asset is None:
        raise AssetNotFoundError(f"Asset not found: {asset_id}")
    meta = asset.metadata
    print(f"[bold]{meta.name}[/bold] ({asset.asset_id})")
    print(f"  type: {meta.asset_type}")
    print(f"  author: {meta.author_name}")
    print(f"  description: {meta.description}")
    print(f"  tags: {', '.join(meta.tags)}")
    print(f"  dependencies: {', '.join(meta.dependencies)}")
    print(f"  created: {meta.created_date.isoformat()}  modified: {meta.modified_date.isoformat()}")
    print(f"  file: {asset.file_info.file_path} ({asset.file_info.file_size_bytes} bytes)")
    print(f"  favorite: {asset.state.is_favorite}  group: {asset.is_group}  archived: {asset.state.is_archived}")
    if asset.parent_group_id is not None:
        print(f"  parent group: {asset.parent_group_id}")
    if asset.booth_item is not None:
        print(f"  booth item: {asset.booth_item.item_title} <{asset.booth_item.item_url}>")


@app.command("list")
@_handle_errors
def list_assets(
    ctx: typer.Context,
    sort_by: str = typer.Option("name", "--sort", help="Sort criterion"),
    descending: bool = typer.Option(False, "--desc", help="Sort descending"),
) -> None:
    """List top-level assets (grouped assets are listed via 'group children')."""

    service = _service(ctx)
    _print_assets(service, service.list_assets(_sort(sort_by, descending)), "Assets")


@app.command()
@_handle_errors
def search(
    ctx: typer.Context,
    query: str = typer.Argument("", help="Free-text query"),
    field: List[str] = typer.Option([], "--field", help="Restrict to name/description/author/tags/path/type"),
    regex: bool = typer.Option(False, "--regex", help="Treat the query as a regular expression"),
    case_sensitive: bool = typer.Option(False, "--case-sensitive"),
    tag: List[str] = typer.Option([], "--tag", help="Required tag (repeatable)"),
    any_tag: bool = typer.Option(False, "--any-tag", help="Match any listed tag instead of all"),
    asset_type: List[str] = typer.Option([], "--type", help="Asset type (repeatable)"),
    favorites: bool = typer.Option(False, "--favorites", help="Only favorites"),
    include_groups: bool = typer.Option(False, "--include-groups"),
    match_any: bool = typer.Option(False, "--or", help="Combine conditions with OR"),
    sort_by: str = typer.Option("name", "--sort"),
    descending: bool = typer.Option(False, "--desc"),
) -> None:
    """Search by free text, or by tags, types and flags."""

    service = _service(ctx)
    sort = _sort(sort_by, descending)
    if tag or asset_type or favorites:
        criteria = AdvancedSearchCriteria(
            name_query=query,
            tag_operator=LogicalOperator.OR if any_tag else LogicalOperator.AND,
            favorites_only=favorites,
            exclude_groups=not include_groups,
            case_sensitive=case_sensitive,
            combine=LogicalOperator.OR if match_any else LogicalOperator.AND,
        )
        for value in tag:
            criteria.add_tag(value)
        for value in asset_type:
            criteria.add_asset_type(value)
        result = service.advanced_search(criteria, sort)
    else:
        fields = SearchFields.NONE
        for name in field:
            if name not in _FIELD_NAMES:
                raise typer.BadParameter(f"unknown field '{name}'")
            fields |= _FIELD_NAMES[name]
        criteria = BasicSearchCriteria(
            query=query,
            fields=fields or SearchFields.ALL,
            case_sensitive=case_sensitive,
            use_regex=regex,
        )
        result = service.search(criteria, sort)
    _print_assets(service, result, f"Search: {result.query}" if result.query else "Search")


@app.command()
@_handle_errors
def tag(
    ctx: typer.Context,
    asset_id: str,
    add: List[str] = typer.Option([], "--add", help="Tag to add (repeatable)"),
    remove: List[str] = typer.Option([], "--remove", help="Tag to remove (repeatable)"),
) -> None:
    """Add or remove tags on an asset."""

    response = _service(ctx).tag_asset(asset_id, add=add, remove=remove)
    _check(response)
    print(f"[green]Tags: {', '.join(response.tags) or '(none)'}")


@group_app.command("create")
@_handle_errors
def group_create(ctx: typer.Context, name: str, children: List[str] = typer.Argument(None)) -> None:
    """Create a group, optionally moving assets into it."""

    response = _service(ctx).create_group(name, children or [])
    _check(response)
    print(f"[green]Created group '{response.name}' as {response.group_id} ({len(response.added)} added)")


@group_app.command("add")
@_handle_errors
def group_add(ctx: typer.Context, child_id: str, group_id: str) -> None:
    """Move an asset into a group."""

    _check(_service(ctx).add_to_group(child_id, group_id))
    print(f"[green]Added {child_id} to {group_id}")


@group_app.command("remove")
@_handle_errors
def group_remove(ctx: typer.Context, child_id: str) -> None:
    """Take an asset out of its group."""

    response = _service(ctx).remove_from_group(child_id)
    _check(response)
    if response.former_group_id:
        print(f"[green]Removed {child_id} from {response.former_group_id}")
    else:
        print(f"[yellow]{child_id} was not in a group")


@group_app.command("disband")
@_handle_errors
def group_disband(ctx: typer.Context, group_id: str) -> None:
    """Release every child of a group without deleting them."""

    response = _service(ctx).disband_group(group_id)
    _check(response)
    print(f"[green]Released {len(response.released)} asset(s)")


@group_app.command("children")
@_handle_errors
def group_children(ctx: typer.Context, group_id: str) -> None:
    """List the direct children of a group."""

    service = _service(ctx)
    if service.get_asset(group_id) is None:
        raise AssetNotFoundError(f"Group not found: {group_id}")
    _print_assets(service, service.group_children(group_id), "Group children")


_LEVEL_STYLES = {
    ValidationLevel.INFO: "cyan",
    ValidationLevel.WARNING: "yellow",
    ValidationLevel.ERROR: "red",
    ValidationLevel.CRITICAL: "bold red",
}


@app.command()
@_handle_errors
def validate(ctx: typer.Context, asset_id: Optional[str] = typer.Argument(None)) -> None:
    """Audit one asset or the whole library."""

    service = _service(ctx)
    report = service.validate_asset(asset_id) if asset_id else service.validate_library()
    if report.is_valid:
        print("[green]No findings")
        return
    for finding in report:
        style = _LEVEL_STYLES[finding.level]
        where = f" {finding.asset_id}" if finding.asset_id else ""
        print(f"[{style}]{finding.level.name}[/{style}]{where} {finding.field_name}: {finding.message}")
    if report.has_errors:
        raise typer.Exit(1)


@app.command()
@_handle_errors
def stats(ctx: typer.Context, top: int = typer.Option(5, "--top", help="Number of top tags")) -> None:
    """Print library statistics."""

    statistics = _service(ctx).statistics()
    print(
        f"Assets: {statistics.total_assets}\n"
        f"Favorites: {statistics.favorite_count}\n"
        f"Groups: {statistics.group_count}\n"
        f"Archived: {statistics.archived_count}\n"
        f"Total size: {statistics.total_size_bytes} bytes\n"
        f"Most common type: {statistics.most_common_asset_type or '-'}\n"
        f"Most active author: {statistics.most_active_author or '-'}"
    )
    for name, count in statistics.top_tags(top):
        print(f"  #{name}: {count}")


@app.command()
@_handle_errors
def optimize(ctx: typer.Context) -> None:
    """Sync registries, drop unused entries and repair dangling links."""

    report = _service(ctx).optimize()
    print(
        f"[green]Optimized library: +{report.tags_added} tags, +{report.asset_types_added} types, "
        f"-{report.tags_removed} tags, -{report.asset_types_removed} types, "
        f"{report.dangling_parents_cleared} parents cleared, "
        f"{report.dangling_children_dropped} child ids dropped"
    )


if __name__ == "__main__":  # pragma: no cover
    app()
