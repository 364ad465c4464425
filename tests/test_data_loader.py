import json

import pytest

from realmshards.core.errors import CatalogIntegrityError, DataLoadError, MoveNotFound, SpeciesNotFound
from realmshards.data.catalog import (
    Catalog,
    move_display_name,
    normalize_category,
    normalize_move_id,
)


def _record(species_id=900, name="Testmon", types=("normal",), moves=None, **extra):
    rec = {
        "id": species_id,
        "name": name,
        "types": list(types),
        "baseStats": {"hp": 50, "atk": 50, "def": 50, "spAtk": 50, "spDef": 50, "speed": 50},
        "captureRate": 120,
        "expYield": 70,
        "growthRateId": 2,
        "moves": moves if moves is not None else [
            {"name": "tackle", "level": 1, "method": 1, "type": "normal", "category": "physical",
             "power": 40, "accuracy": 100, "pp": 35, "target": "selected-pokemon", "effectChance": None,
             "effect": {"short_effect": "Inflicts regular damage with no additional effect."}},
        ],
    }
    rec.update(extra)
    return rec


def test_move_id_normalization():
    assert normalize_move_id("Thunder-Punch") == "thunder_punch"
    assert normalize_move_id("  thunder punch ") == "thunder_punch"
    assert move_display_name("thunder-punch") == "Thunder Punch"
    assert move_display_name("double_edge") == "Double Edge"


def test_category_normalization():
    assert normalize_category("special") == "special"
    assert normalize_category("SPECIAL") == "special"
    assert normalize_category("no-damage") == "status"
    assert normalize_category(None) == "physical"
    assert normalize_category("weird") == "physical"


def test_bundled_catalog_loads(catalog):
    assert len(catalog) >= 10
    charmander = catalog.require_species(4)
    assert charmander.name == "Charmander"
    assert charmander.types == ("fire",)
    assert charmander.base_stats == {"hp": 39, "atk": 52, "def": 43, "sp_atk": 60, "sp_def": 50, "speed": 65}
    assert catalog.find_species("pikachu").id == 25
    assert catalog.integrity_problems() == []


def test_move_records(catalog):
    growl = catalog.require_move("growl")
    assert growl.category == "status"
    assert growl.power == 0
    assert growl.target == "all-opponents"
    flamethrower = catalog.get_move("Flamethrower")
    assert flamethrower.name == "Flamethrower"
    assert [(e.status, e.chance) for e in flamethrower.parsed_effects] == [("burn", 10)]
    assert catalog.get_move("Vine Whip").id == "vine_whip"
    assert catalog.get_move("nope") is None


def test_missing_entities_raise(catalog):
    with pytest.raises(SpeciesNotFound):
        catalog.require_species(9999)
    with pytest.raises(KeyError):
        catalog.require_species(9999)
    with pytest.raises(MoveNotFound):
        catalog.require_move("nope")
    assert catalog.get_species(9999) is None


def test_level_up_moves_sorted_and_filtered(catalog):
    moves = catalog.species_level_up_moves(4)
    ids = [m.move_id for m in moves]
    assert "swords_dance" not in ids
    assert [m.level for m in moves] == sorted(m.level for m in moves)
    assert [m.move_id for m in catalog.moves_learned_at(4, 17)] == ["flamethrower"]


def test_admin_skill_slot(catalog):
    flamethrower = next(m for m in catalog.require_species(4).learnable_moves if m.move_id == "flamethrower")
    assert flamethrower.skill_tree_slot == ("sp_atk", 0)


def test_records_build_catalog():
    catalog = Catalog.from_records([_record()])
    assert catalog.require_species(900).base_stats["sp_atk"] == 50
    assert catalog.require_move("tackle").power == 40


def test_unknown_type_rejected():
    with pytest.raises(CatalogIntegrityError) as info:
        Catalog.from_records([_record(types=("plasma",))])
    assert any("plasma" in p for p in info.value.problems)


def test_unknown_growth_rate_rejected():
    with pytest.raises(CatalogIntegrityError) as info:
        Catalog.from_records([_record(growthRateId=9)])
    assert any("growth rate 9" in p for p in info.value.problems)


def test_duplicate_species_rejected():
    with pytest.raises(CatalogIntegrityError):
        Catalog.from_records([_record(), _record(name="Copymon")])


def test_missing_base_stat_rejected():
    rec = _record()
    del rec["baseStats"]["speed"]
    with pytest.raises(CatalogIntegrityError):
        Catalog.from_records([rec])


def test_validation_can_be_skipped():
    catalog = Catalog.from_records([_record(types=("plasma",))], validate=False)
    assert catalog.require_species(900).types == ("plasma",)


def test_from_file(tmp_path):
    path = tmp_path / "species.json"
    path.write_text(json.dumps({"species": [_record()]}), encoding="utf-8")
    assert Catalog.from_file(path).require_species(900).name == "Testmon"


def test_from_file_errors(tmp_path):
    with pytest.raises(DataLoadError):
        Catalog.from_file(tmp_path / "missing.json")
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(DataLoadError):
        Catalog.from_file(bad)
