# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Post-Resolution Fallback Matchers
Second chances for catalog-A ids still unmapped once conflicts are
resolved. Both work on the global mapping, so a catalog-B entry claimed
anywhere in the batch is never offered again.

  part-fingerprint       part inventories overlap enough on their own
  cross-set-elimination  a set is down to one open figure on each side;
                         repeated until no set changes, because each new
                         pairing can leave another set at one-and-one
"""

from __future__ import annotations

from brickmatch.models.catalog import CatalogAEntry, CatalogBEntry, SetRoster
from brickmatch.models.mapping import GlobalMapping, GlobalMappingEntry
from brickmatch.models.pairing import MatchStage, Pairing
from brickmatch.modules.components.fingerprint import fingerprint_confidence
from brickmatch.modules.matching.stages import SINGLE_FIG_CONFIDENCE
from brickmatch.utils.logger import get_logger

log = get_logger(__name__)


def _open_entries(
    roster: SetRoster, mapping: GlobalMapping
) -> tuple[list[CatalogAEntry], list[CatalogBEntry]]:
    """Valid entries of one roster not yet in the mapping, each id once."""
    claimed = mapping.claimed_b_ids()
    open_a: dict[str, CatalogAEntry] = {}
    for a in roster.valid_catalog_a:
        if a.id not in mapping and a.id not in open_a:
            open_a[a.id] = a
    open_b: dict[str, CatalogBEntry] = {}
    for b in roster.valid_catalog_b:
        if b.id not in claimed and b.id not in open_b:
            open_b[b.id] = b
    return list(open_a.values()), list(open_b.values())


def _record(mapping: GlobalMapping, pairing: Pairing) -> Pairing:
    mapping.upsert(GlobalMappingEntry.from_pairing(pairing))
    log.info(
        "fallback_pairing_created",
        catalog_a_id=pairing.catalog_a_id,
        catalog_b_id=pairing.catalog_b_id,
        confidence=round(pairing.confidence, 3),
        stage=pairing.source.value,
        set_id=pairing.set_id,
    )
    return pairing


def match_by_fingerprint(
    mapping: GlobalMapping, rosters: dict[str, SetRoster]
) -> list[Pairing]:
    """
    Pair open catalog-A entries with the open catalog-B entry of the same
    set whose part inventory overlaps best. Entries without a part
    inventory are skipped. Mutates mapping; returns the new pairings.
    """
    created: list[Pairing] = []
    for roster in rosters.values():
        open_a, open_b = _open_entries(roster, mapping)
        for a in open_a:
            if not a.parts:
                continue
            best_conf, best_b = 0.0, None
            for b in open_b:
                if not b.parts:
                    continue
                conf = fingerprint_confidence(a.parts, b.parts)
                if conf is not None and conf > best_conf:
                    best_conf, best_b = conf, b
            if best_b is None:
                continue
            created.append(_record(mapping, Pairing(
                catalog_a_id=a.id,
                catalog_b_id=best_b.id,
                confidence=best_conf,
                source=MatchStage.PART_FINGERPRINT,
                set_id=roster.set_id,
            )))
            open_b = [b for b in open_b if b is not best_b]
    return created


def eliminate_across_sets(
    mapping: GlobalMapping, rosters: dict[str, SetRoster]
) -> list[Pairing]:
    """
    Pair the last open catalog-A entry of a set with its last open
    catalog-B entry. Nothing about the pair itself is known, so the
    pairing carries the single-fig confidence and goes to review.
    Mutates mapping; returns the new pairings.
    """
    created: list[Pairing] = []
    changed = True
    while changed:
        changed = False
        for roster in rosters.values():
            open_a, open_b = _open_entries(roster, mapping)
            if len(open_a) != 1 or len(open_b) != 1:
                continue
            created.append(_record(mapping, Pairing(
                catalog_a_id=open_a[0].id,
                catalog_b_id=open_b[0].id,
                confidence=SINGLE_FIG_CONFIDENCE,
                source=MatchStage.CROSS_SET_ELIMINATION,
                set_id=roster.set_id,
            )))
            changed = True
    return created
