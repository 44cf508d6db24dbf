# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Similarity Signals
Independent sub-scores between a catalog-A and a catalog-B figure,
each normalised to [0, 1]. Combined with fixed weights in scorer.py.

  token_jaccard          — shared words regardless of order
  lcs_ratio              — longest shared character run; catches a shared
                           character name even when descriptions diverge
                           ("lloyd evo head wrap" / "lloyd core")
  key_identifier_match   — leading character name equal on both sides
  part_count_similarity  — relative distance between part counts
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from brickmatch.modules.normalization.name_normalizer import (
    extract_key_identifier,
    normalize,
    tokenize,
)


def token_jaccard(name_a: Optional[str], name_b: Optional[str]) -> float:
    tokens_a = tokenize(name_a)
    tokens_b = tokenize(name_b)
    if not tokens_a or not tokens_b:
        return 0.0
    return len(tokens_a & tokens_b) / len(tokens_a | tokens_b)


def longest_common_substring(a: str, b: str) -> int:
    """
    Length of the longest contiguous run shared by a and b.

    Classic DP: cell (i, j) holds the length of the common suffix of
    a[:i] and b[:j]. Only the previous row is needed, so each row is
    computed in one vectorised step against all of b.
    """
    if not a or not b:
        return 0

    a_codes = np.array([ord(c) for c in a], dtype=np.int32)
    b_codes = np.array([ord(c) for c in b], dtype=np.int32)

    prev = np.zeros(len(b) + 1, dtype=np.int32)
    best = 0
    for ch in a_codes:
        cur = np.zeros_like(prev)
        cur[1:] = np.where(b_codes == ch, prev[:-1] + 1, 0)
        row_best = int(cur.max())
        if row_best > best:
            best = row_best
        prev = cur
    return best


def lcs_ratio(name_a: Optional[str], name_b: Optional[str]) -> float:
    a = normalize(name_a)
    b = normalize(name_b)
    if not a or not b:
        return 0.0
    return longest_common_substring(a, b) / max(len(a), len(b))


def key_identifier_match(name_a: Optional[str], name_b: Optional[str]) -> float:
    key_a = extract_key_identifier(name_a)
    key_b = extract_key_identifier(name_b)
    if not key_a or not key_b:
        return 0.0
    return 1.0 if key_a == key_b else 0.0


def part_count_similarity(count_a: Optional[int], count_b: Optional[int]) -> float:
    if count_a is None or count_b is None:
        return 0.0
    return 1.0 - abs(count_a - count_b) / max(count_a, count_b, 1)
