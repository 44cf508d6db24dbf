# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Normalization Module
Public API for name and identifier canonicalisation.
"""

from brickmatch.modules.normalization.name_normalizer import (
    extract_key_identifier,
    normalize,
    normalize_fig_id,
    tokenize,
)

__all__ = [
    "normalize",
    "tokenize",
    "extract_key_identifier",
    "normalize_fig_id",
]
