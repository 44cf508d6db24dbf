# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Name Normalizer
Canonicalises free-text minifigure names into comparable strings and tokens.

Both catalogs describe the same figure with different punctuation, casing
and ordering ("Lloyd - EVO Head Wrap" vs "Lloyd (Core)"), so every
comparison downstream runs on the normalised form only.
"""

from __future__ import annotations

import re
from typing import Optional

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

# Leading identifiers shorter than this ("mr", "dr") carry no signal
KEY_IDENTIFIER_MIN_LEN = 3


def normalize(name: Optional[str]) -> str:
    """Lower-case, collapse non-alphanumeric runs to one space, trim."""
    if not name:
        return ""
    return _NON_ALNUM.sub(" ", name.lower()).strip()


def tokenize(name: Optional[str]) -> set[str]:
    return {t for t in normalize(name).split(" ") if t}


def extract_key_identifier(name: Optional[str]) -> str:
    """
    Leading token before the first delimiter, usually the character name
    ("lloyd", "overlord"). Empty if shorter than KEY_IDENTIFIER_MIN_LEN.
    """
    norm = normalize(name)
    if not norm:
        return ""
    head = norm.split(" ", 1)[0]
    return head if len(head) >= KEY_IDENTIFIER_MIN_LEN else ""


def normalize_fig_id(fig_id: Optional[str]) -> str:
    """Identifier form used for mapping lookups."""
    return (fig_id or "").strip().lower()
