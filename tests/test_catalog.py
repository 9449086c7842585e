import json

import pytest

from shinydex.catalog import CatalogError, load_catalog, parse_catalog


def test_parse_catalog_keeps_order():
    regions = parse_catalog(
        [
            {"name": "B", "items": ["003", "001"]},
            {"name": "A", "items": ["002"]},
        ]
    )
    assert [r.name for r in regions] == ["B", "A"]
    assert regions[0].items == ["003", "001"]


def test_parse_catalog_accepts_pokemons_key_and_numeric_ids():
    regions = parse_catalog([{"name": "Wild Zone", "pokemons": [1, "025"]}])
    assert regions[0].items == ["1", "025"]


@pytest.mark.parametrize(
    "raw",
    [None, {"name": "x"}, "regions", [1, 2], [{"name": "x"}], [{"items": ["001"]}]],
)
def test_parse_catalog_rejects_bad_shapes(raw):
    with pytest.raises(CatalogError):
        parse_catalog(raw)


def test_load_catalog_from_file(tmp_path):
    path = tmp_path / "regions.json"
    path.write_text(json.dumps([{"name": "Vert", "items": ["001"]}]), encoding="utf-8")
    assert load_catalog(path)[0].name == "Vert"


def test_load_catalog_missing_or_invalid(tmp_path):
    with pytest.raises(CatalogError):
        load_catalog(tmp_path / "nope.json")
    bad = tmp_path / "bad.json"
    bad.write_text("[{", encoding="utf-8")
    with pytest.raises(CatalogError):
        load_catalog(bad)


def test_bundled_catalog_loads():
    regions = load_catalog()
    assert regions
    assert all(r.items for r in regions)
