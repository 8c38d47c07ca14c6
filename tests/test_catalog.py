import json
import uuid

from tourguide.catalog.loader import AttractionCatalog, load_packaged_attractions


def test_packaged_catalog_has_unique_names_and_ids():
    attractions = load_packaged_attractions()

    assert len(attractions) == 26
    assert len({a.name for a in attractions}) == 26
    assert len({a.id for a in attractions}) == 26
    assert attractions[0].name == "Disneyland"


def test_from_file_keeps_file_order(tmp_path):
    rows = [
        {"id": str(uuid.uuid4()), "name": "Zion", "location": {"latitude": 37.3, "longitude": -113.0}},
        {"id": str(uuid.uuid4()), "name": "Arches", "location": {"latitude": 38.7, "longitude": -109.6}, "state": "UT"},
    ]
    path = tmp_path / "attractions.json"
    path.write_text(json.dumps(rows), encoding="utf-8")

    catalog = AttractionCatalog.from_file(path)

    assert len(catalog) == 2
    assert [a.name for a in catalog] == ["Zion", "Arches"]
    assert catalog.attractions[1].state == "UT"
