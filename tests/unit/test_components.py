# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Component part categoriser and mapper tests.
"""

import pytest

from brickmatch.models.parts import ComponentPart, PartCategory


# ─── Helpers ─────────────────────────────────────────────────────────────────

def _part(part_id: str, name: str, color_id: int = 0) -> ComponentPart:
    return ComponentPart(part_id=part_id, name=name, color_id=color_id)


# ─── Categoriser ─────────────────────────────────────────────────────────────

@pytest.mark.parametrize("name, expected", [
    ("Minifig Head Lloyd Smirk", PartCategory.HEAD),
    ("Minifig Face Print", PartCategory.HEAD),
    ("Torso Ninjago Gi", PartCategory.TORSO),
    ("Body Wear", PartCategory.TORSO),
    ("Legs Old Gold", PartCategory.LEGS),
    ("Hips and Legs Dark Blue", PartCategory.HIPS),
    ("Minifig Hips", PartCategory.HIPS),
    ("Arm Left", PartCategory.ARMS),
    ("Minifig Hand", PartCategory.HANDS),
    ("Katana Sword", PartCategory.ACCESSORY),
    (None, PartCategory.OTHER),
    ("", PartCategory.OTHER),
])
def test_categorize_part(name, expected):
    from brickmatch.modules.components import categorize_part

    assert categorize_part(name) == expected


# ─── Mapper ──────────────────────────────────────────────────────────────────

def test_map_parts_prefers_colour_match():
    from brickmatch.modules.components import map_component_parts

    a_parts = [_part("3626", "Minifig Head", color_id=14)]
    b_parts = [
        _part("3626c", "Minifig Head", color_id=1),
        _part("3626b", "Minifig Head", color_id=14),
    ]

    mappings = map_component_parts(a_parts, b_parts)

    assert len(mappings) == 1
    m = mappings[0]
    assert m.catalog_b_part_id == "3626b"
    assert m.color_match
    assert m.confidence == pytest.approx(0.9)
    assert m.category == PartCategory.HEAD


def test_map_parts_sole_category_candidate():
    from brickmatch.modules.components import map_component_parts

    mappings = map_component_parts(
        [_part("973", "Torso Gi", color_id=2)],
        [_part("973pb", "Torso Gi Print", color_id=5)],
    )

    assert len(mappings) == 1
    assert not mappings[0].color_match
    assert mappings[0].confidence == pytest.approx(0.7)


def test_map_parts_ambiguous_category_left_unmapped():
    from brickmatch.modules.components import map_component_parts

    mappings = map_component_parts(
        [_part("970", "Legs", color_id=3)],
        [_part("970a", "Legs", color_id=1), _part("970b", "Legs", color_id=2)],
    )

    assert mappings == []


def test_map_parts_uses_each_catalog_b_part_once():
    from brickmatch.modules.components import map_component_parts

    mappings = map_component_parts(
        [_part("h1", "Head", color_id=14), _part("h2", "Head", color_id=14)],
        [_part("hb", "Head", color_id=14)],
    )

    assert [m.catalog_a_part_id for m in mappings] == ["h1"]


def test_map_parts_empty_inputs():
    from brickmatch.modules.components import map_component_parts

    assert map_component_parts([], [_part("x", "Head")]) == []
    assert map_component_parts([_part("x", "Head")], []) == []


# ─── Part Fingerprints ───────────────────────────────────────────────────────

def _inv(*specs) -> list[ComponentPart]:
    """specs: (part_id, color_id) or (part_id, color_id, quantity)."""
    return [
        ComponentPart(part_id=s[0], color_id=s[1], quantity=s[2] if len(s) > 2 else 1)
        for s in specs
    ]


@pytest.mark.parametrize("part_id, expected", [
    ("970c11", "970c00"),
    ("970c00", "970c00"),
    ("970cm01pr0001", "970cm00"),
    ("970cm00", "970cm00"),
    ("970c11pr0002", "970c11pr0002"),
    ("3626cpb1", "3626cpb1"),
])
def test_normalize_part_id(part_id, expected):
    from brickmatch.modules.components import normalize_part_id

    assert normalize_part_id(part_id) == expected


def test_compare_fingerprints_counts_quantities():
    from brickmatch.modules.components import compare_fingerprints

    match = compare_fingerprints(
        _inv(("3626c", 14), ("973", 1), ("970c11", 1), ("3846", 0, 2)),
        _inv(("3626c", 14), ("973", 1), ("970c22", 1), ("3846", 0, 1)),
    )

    # Both hips variants collapse to one mould; one shield is missing
    assert match.matched_parts == 4
    assert match.total_parts == 5
    assert match.score == pytest.approx(0.8)


def test_compare_fingerprints_empty_side():
    from brickmatch.modules.components import compare_fingerprints

    match = compare_fingerprints([], _inv(("3626c", 14)))

    assert match.score == 0.0
    assert match.matched_parts == 0


def test_fingerprint_confidence_bands():
    from brickmatch.modules.components import fingerprint_confidence

    base = [("p1", 1), ("p2", 1), ("p3", 1), ("p4", 1), ("p5", 1),
            ("p6", 1), ("p7", 1), ("p8", 1), ("p9", 1), ("p10", 1)]
    # All ten parts shared
    assert fingerprint_confidence(_inv(*base), _inv(*base)) == pytest.approx(0.95)

    # Eight of ten shared
    strong = base[:8] + [("x1", 1), ("x2", 1)]
    assert fingerprint_confidence(_inv(*base), _inv(*strong)) == pytest.approx(0.8)

    # Seven of ten in colour, all ten ignoring colour
    recoloured = base[:7] + [("p8", 2), ("p9", 2), ("p10", 2)]
    assert fingerprint_confidence(_inv(*base), _inv(*recoloured)) == pytest.approx(0.7)

    # Seven of ten, and the rest are different parts entirely
    unrelated = base[:7] + [("x1", 1), ("x2", 1), ("x3", 1)]
    assert fingerprint_confidence(_inv(*base), _inv(*unrelated)) is None
