import json

import pytest
from typer.testing import CliRunner

from assetKeeper.cli import app

runner = CliRunner()


@pytest.fixture
def invoke(tmp_path):
    library = tmp_path / "library.json"
    settings = tmp_path / "settings.json"

    def _invoke(*args):
        return runner.invoke(
            app,
            ["--library", str(library), "--settings", str(settings), *args],
            env={"COLUMNS": "200"},
        )

    _invoke.library = library
    return _invoke


def _added_id(result):
    assert result.exit_code == 0, result.output
    return result.output.strip().split()[-1]


def test_add_persists_asset(invoke):
    asset_id = _added_id(invoke("add", "Hat", "--type", "Accessory", "--tag", "cute", "--size", "10"))

    document = json.loads(invoke.library.read_text(encoding="utf-8"))
    assert document["assets"][asset_id]["metadata"]["tags"] == ["cute"]

    shown = invoke("show", asset_id)
    assert shown.exit_code == 0
    assert "Accessory" in shown.output


def test_show_unknown_asset_fails(invoke):
    result = invoke("show", "0b0c4f7e-1111-4a6a-9c8e-3f7a3c1d2e4f")

    assert result.exit_code == 1
    assert "Asset not found" in result.output


def test_group_workflow(invoke):
    hat = _added_id(invoke("add", "Hat", "--tag", "cute"))
    boots = _added_id(invoke("add", "Boots", "--tag", "cute", "--tag", "leather"))
    created = invoke("group", "create", "Outfit", hat)
    assert created.exit_code == 0, created.output
    group_id = created.output.split(" as ")[1].split()[0]

    assert invoke("group", "add", boots, group_id).exit_code == 0
    children = invoke("group", "children", group_id)
    assert "Hat" in children.output and "Boots" in children.output

    listing = invoke("list")
    assert "Outfit" in listing.output
    assert "Boots" not in listing.output

    assert invoke("group", "add", group_id, hat).exit_code == 1
    assert invoke("group", "remove", hat).exit_code == 0
    assert invoke("group", "disband", group_id).exit_code == 0
    assert "Boots" in invoke("list").output


def test_search_and_tag(invoke):
    hat = _added_id(invoke("add", "Hat", "--tag", "cute"))
    _added_id(invoke("add", "Boots", "--tag", "cute", "--tag", "leather"))

    tagged = invoke("tag", hat, "--add", "red", "--remove", "cute")
    assert tagged.exit_code == 0
    assert "red" in tagged.output

    by_text = invoke("search", "boo")
    assert "Boots" in by_text.output and "Hat" not in by_text.output

    by_tag = invoke("search", "--tag", "leather")
    assert "Boots" in by_tag.output and "1 result" in by_tag.output

    assert invoke("search", "x", "--field", "colour").exit_code != 0


def test_validate_stats_optimize(invoke):
    asset_id = _added_id(invoke("add", "Hat", "--type", "Accessory", "--tag", "cute"))

    validated = invoke("validate", asset_id)
    assert validated.exit_code == 1
    assert "CRITICAL" in validated.output

    stats = invoke("stats")
    assert stats.exit_code == 0
    assert "Assets: 1" in stats.output

    optimized = invoke("optimize")
    assert optimized.exit_code == 0
    assert "+1 tags" in optimized.output


def test_list_rejects_unknown_sort(invoke):
    assert invoke("list", "--sort", "colour").exit_code != 0


def test_broken_settings_file_exits_cleanly(tmp_path):
    settings = tmp_path / "settings.json"
    settings.write_text("[]", encoding="utf-8")

    result = runner.invoke(app, ["--settings", str(settings), "--library", str(tmp_path / "l.json"), "stats"])

    assert result.exit_code == 1
    assert "Error" in result.output
