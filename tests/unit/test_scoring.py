# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Name normalisation, similarity signals, weighted scorer and set-size
booster tests. All pure functions — no roster or logging setup needed.
"""

import pytest

from brickmatch.models.catalog import CatalogAEntry, CatalogBEntry


# ─── Helpers ─────────────────────────────────────────────────────────────────

def _a(name: str, part_count=None, image_ref=None, fig_id: str = "a1") -> CatalogAEntry:
    return CatalogAEntry(id=fig_id, display_name=name, part_count=part_count, image_ref=image_ref)


def _b(name: str, part_count=None, image_ref=None, fig_id: str = "b1") -> CatalogBEntry:
    return CatalogBEntry(id=fig_id, display_name=name, part_count=part_count, image_ref=image_ref)


# ─── Name Normalizer ─────────────────────────────────────────────────────────

def test_normalize_collapses_punctuation_and_case():
    from brickmatch.modules.normalization import normalize

    assert normalize("Lloyd - EVO Head Wrap") == "lloyd evo head wrap"
    assert normalize("  Kai (Core)!! ") == "kai core"


def test_normalize_empty_and_none():
    from brickmatch.modules.normalization import normalize

    assert normalize(None) == ""
    assert normalize("") == ""
    assert normalize(" -- ") == ""


def test_tokenize_returns_unique_tokens():
    from brickmatch.modules.normalization import tokenize

    assert tokenize("Jay - Jay's Hood") == {"jay", "s", "hood"}
    assert tokenize(None) == set()


def test_key_identifier_is_leading_token():
    from brickmatch.modules.normalization import extract_key_identifier

    assert extract_key_identifier("Overlord - Trans-Purple Head") == "overlord"
    assert extract_key_identifier("Lloyd (Core)") == "lloyd"


def test_key_identifier_too_short_is_empty():
    from brickmatch.modules.normalization import extract_key_identifier

    assert extract_key_identifier("Mr. Freeze") == ""
    assert extract_key_identifier("") == ""


def test_normalize_fig_id():
    from brickmatch.modules.normalization import normalize_fig_id

    assert normalize_fig_id("  FIG-001234 ") == "fig-001234"
    assert normalize_fig_id(None) == ""


# ─── Similarity Signals ──────────────────────────────────────────────────────

def test_token_jaccard():
    from brickmatch.modules.scoring import token_jaccard

    assert token_jaccard("Lloyd Core", "core lloyd") == pytest.approx(1.0)
    assert token_jaccard("Lloyd - EVO Head Wrap", "Lloyd - Core") == pytest.approx(0.2)
    assert token_jaccard("Lloyd", None) == 0.0


def test_longest_common_substring():
    from brickmatch.modules.scoring import longest_common_substring

    assert longest_common_substring("abcdef", "zcdez") == 3
    assert longest_common_substring("abc", "xyz") == 0
    assert longest_common_substring("", "abc") == 0
    assert longest_common_substring("lloyd", "lloyd") == 5


def test_lcs_ratio_uses_normalised_names():
    from brickmatch.modules.scoring import lcs_ratio

    # "lloyd " shared, longer name is 19 chars
    assert lcs_ratio("Lloyd - EVO Head Wrap", "Lloyd - Core") == pytest.approx(6 / 19)
    assert lcs_ratio("LLOYD", "lloyd") == pytest.approx(1.0)
    assert lcs_ratio(None, "lloyd") == 0.0


def test_key_identifier_match():
    from brickmatch.modules.scoring import key_identifier_match

    assert key_identifier_match("Lloyd - EVO", "Lloyd (Core)") == 1.0
    assert key_identifier_match("Lloyd", "Overlord") == 0.0
    assert key_identifier_match("Mr. Freeze", "Mr. Freeze") == 0.0


def test_part_count_similarity():
    from brickmatch.modules.scoring import part_count_similarity

    assert part_count_similarity(4, 4) == pytest.approx(1.0)
    assert part_count_similarity(4, 5) == pytest.approx(0.8)
    assert part_count_similarity(0, 0) == pytest.approx(1.0)
    assert part_count_similarity(None, 4) == 0.0


# ─── Weighted Scorer ─────────────────────────────────────────────────────────

def test_weight_sets_sum_to_one():
    from brickmatch.modules.scoring import WEIGHTS_WITH_IMAGE, WEIGHTS_WITHOUT_IMAGE

    for w in (WEIGHTS_WITH_IMAGE, WEIGHTS_WITHOUT_IMAGE):
        assert w.token + w.lcs + w.key + w.part_count + w.image == pytest.approx(1.0)


def test_weights_without_image_are_proportional():
    from brickmatch.modules.scoring import WEIGHTS_WITHOUT_IMAGE

    assert WEIGHTS_WITHOUT_IMAGE.token == pytest.approx(0.25)
    assert WEIGHTS_WITHOUT_IMAGE.lcs == pytest.approx(0.4375)
    assert WEIGHTS_WITHOUT_IMAGE.key == pytest.approx(0.25)
    assert WEIGHTS_WITHOUT_IMAGE.part_count == pytest.approx(0.0625)
    assert WEIGHTS_WITHOUT_IMAGE.image == 0.0


def test_weights_must_sum_to_one():
    from brickmatch.modules.scoring import SimilarityWeights

    with pytest.raises(ValueError, match="sum to 1.0"):
        SimilarityWeights(token=0.5, lcs=0.5, key=0.5, part_count=0.0)


def test_score_identical_entries_is_one():
    from brickmatch.modules.scoring import score

    assert score(_a("Lloyd", 4), _b("Lloyd", 4)) == pytest.approx(1.0)


def test_score_in_unit_interval():
    from brickmatch.modules.scoring import score

    pairs = [
        (_a("Lloyd - EVO Head Wrap"), _b("Lloyd - Core")),
        (_a("Zane", 4), _b("Cole", 9)),
        (_a(""), _b(None)),
    ]
    for a, b in pairs:
        assert 0.0 <= score(a, b) <= 1.0


def test_score_documented_lloyd_example():
    from brickmatch.modules.scoring import score_breakdown

    bd = score_breakdown(_a("Lloyd - EVO Head Wrap"), _b("Lloyd - Core"))
    assert bd.key == 1.0
    assert bd.image is None
    expected = 0.25 * 0.2 + 0.4375 * (6 / 19) + 0.25 * 1.0
    assert bd.combined == pytest.approx(expected)


def test_comparator_used_only_with_both_image_refs():
    from brickmatch.modules.scoring import score_breakdown

    calls = []

    def comparator(ref_a, ref_b):
        calls.append((ref_a, ref_b))
        return 1.0

    bd = score_breakdown(_a("Kai"), _b("Kai", image_ref="img/b.png"), comparator=comparator)
    assert bd.image is None
    assert calls == []

    bd = score_breakdown(
        _a("Kai", image_ref="img/a.png"),
        _b("Kai", image_ref="img/b.png"),
        comparator=comparator,
    )
    assert bd.image == 1.0
    assert calls == [("img/a.png", "img/b.png")]


def test_comparator_out_of_range_raises():
    from brickmatch.exceptions import InvalidConfidenceError
    from brickmatch.modules.scoring import score

    with pytest.raises(InvalidConfidenceError):
        score(
            _a("Kai", image_ref="a"),
            _b("Kai", image_ref="b"),
            comparator=lambda x, y: 1.5,
        )


def test_name_similarity_ignores_part_count():
    from brickmatch.modules.scoring import name_similarity

    assert name_similarity(_a("Kai", 2), _b("Kai", 40)) == pytest.approx(1.0)
    assert name_similarity(_a("Zane"), _b("Cole")) < 0.2


# ─── Set-Size Booster ────────────────────────────────────────────────────────

def test_boost_single_figure_is_certainty():
    from brickmatch.modules.scoring import boosted_confidence

    for base in (0.0, 0.3, 0.9):
        assert boosted_confidence(1, base) == pytest.approx(1.0)


def test_boost_bands():
    from brickmatch.modules.scoring import boost

    assert boost(2, 0.5) == pytest.approx(0.20)
    assert boost(3, 0.5) == pytest.approx(0.125)
    assert boost(4, 0.5) == pytest.approx(0.055)
    assert boost(5, 0.5) == pytest.approx(0.055)
    assert boost(6, 0.5) == pytest.approx(0.015)
    assert boost(40, 0.5) == pytest.approx(0.015)


def test_boost_monotonic_in_set_size():
    from brickmatch.modules.scoring import boosted_confidence

    for base in (0.0, 0.1, 0.25, 0.45, 0.6, 0.8, 1.0):
        sizes = [boosted_confidence(n, base) for n in (1, 2, 3, 4, 5, 6, 10)]
        assert sizes == sorted(sizes, reverse=True)
        assert boosted_confidence(2, base) >= boosted_confidence(6, base)


def test_boosted_confidence_capped_at_one():
    from brickmatch.modules.scoring import boosted_confidence

    assert boosted_confidence(2, 0.95) == 1.0


def test_boost_rejects_invalid_base():
    from brickmatch.exceptions import InvalidConfidenceError
    from brickmatch.modules.scoring import boost

    with pytest.raises(InvalidConfidenceError):
        boost(3, 1.2)
    with pytest.raises(ValueError):
        boost(3, -0.1)
