import json

import pytest

from beltline.entities import (
    ItemKind,
    ProductionLine,
    ProductRecipe,
    SupplyEntry,
    WorkerPlacement,
    load_line,
    reference_line,
)
from beltline.errors import InvalidConfiguration


def _line(**overrides):
    fields = dict(
        name="Test line",
        slot_count=5,
        supply=[SupplyEntry("A", 50), SupplyEntry("B", 50), SupplyEntry(None, 50)],
        products=[ProductRecipe("P", ["A", "B"])],
        workers=[WorkerPlacement("W1", 1), WorkerPlacement("W2", 2)],
    )
    fields.update(overrides)
    return ProductionLine(**fields)


def test_item_kind_assembly_check_ignores_order():
    a = ItemKind("A", 1)
    b = ItemKind("B", 1)
    p = ItemKind("P", requires=(a, b))
    assert p.is_product and a.is_raw
    assert p.assembles_from([b, a])
    assert not p.assembles_from([a, None])
    assert not p.assembles_from([a, ItemKind("B", 1)])


def test_item_kind_without_requirements_cannot_be_assembled():
    with pytest.raises(InvalidConfiguration):
        ItemKind("A", 1).assembles_from([None, None])


def test_item_kind_rejects_negative_weight():
    with pytest.raises(InvalidConfiguration):
        ItemKind("A", -1)


def test_build_kinds_creates_fresh_linked_kinds():
    line = _line()
    first = line.build_kinds()
    second = line.build_kinds()
    assert list(first) == ["A", "B", "P"]
    assert first["P"].requires == (first["A"], first["B"])
    assert first["A"] is not second["A"]
    assert first["A"].weight == 50


@pytest.mark.parametrize(
    "overrides",
    [
        {"slot_count": 0},
        {"build_time": 0},
        {"products": [ProductRecipe("P", ["A", "C"])]},
        {"products": [ProductRecipe("P", [])]},
        {"products": [ProductRecipe("P", ["A"])]},
        {"products": [ProductRecipe("P", ["A", "A"])]},
        {"products": [ProductRecipe("P", ["A", "B", "C"])]},
        {"workers": [WorkerPlacement("W1", 5)]},
        {"supply": [SupplyEntry(None, 1), SupplyEntry(None, 1)]},
        {"supply": [SupplyEntry("A", -5), SupplyEntry("B", 5)]},
    ],
)
def test_invalid_lines_are_rejected(overrides):
    with pytest.raises(InvalidConfiguration):
        _line(**overrides)


def test_from_dict_and_load_line(tmp_path):
    definition = {
        "name": "From file",
        "slot_count": 4,
        "build_time": 3,
        "supply": [{"name": "A", "weight": 2}, {"name": "B", "weight": 2}, {"name": None, "weight": 1}],
        "products": [{"name": "P", "components": ["A", "B"]}],
        "workers": [{"position": 1}, {"name": "Lead", "position": 2, "weight": 3}],
    }
    path = tmp_path / "line.json"
    path.write_text(json.dumps(definition), encoding="utf-8")

    line = load_line(path)
    assert line.name == "From file"
    assert line.slot_count == 4
    assert line.build_time == 3
    assert [entry.name for entry in line.supply] == ["A", "B", None]
    assert line.workers[0].name == "Worker 1"
    assert line.workers[1].weight == 3


def test_from_dict_reports_missing_fields():
    with pytest.raises(InvalidConfiguration):
        ProductionLine.from_dict({"name": "Broken", "supply": []})


def test_reference_line_matches_the_classic_setup():
    line = reference_line()
    assert line.slot_count == 5
    assert line.build_time == 4
    assert [worker.position for worker in line.workers] == [1, 1, 2, 2, 3, 3]
    assert "[1:2] [2:2] [3:2]" in line.describe()


def test_products_cannot_be_built_from_other_products():
    supply = [SupplyEntry("A", 1), SupplyEntry("B", 1), SupplyEntry("C", 1)]
    with pytest.raises(InvalidConfiguration, match="not raw supply"):
        _line(supply=supply, products=[ProductRecipe("P", ["A", "B"]), ProductRecipe("Q", ["P", "C"])])


def test_three_part_recipe_is_rejected_even_when_all_parts_are_supplied():
    supply = [SupplyEntry("A", 1), SupplyEntry("B", 1), SupplyEntry("C", 1)]
    with pytest.raises(InvalidConfiguration, match="two different components"):
        _line(supply=supply, products=[ProductRecipe("P", ["A", "B", "C"])])


def test_build_kinds_links_a_product_that_is_also_supplied():
    line = _line(supply=[SupplyEntry("A", 1), SupplyEntry("B", 1), SupplyEntry("P", 1)])
    kinds = line.build_kinds()
    assert kinds["P"].requires == (kinds["A"], kinds["B"])
    assert kinds["P"].weight == 1
