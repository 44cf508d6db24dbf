# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Roster Module
Public API for assembling set rosters from inventory variants.
"""

from brickmatch.modules.roster.roster_builder import (
    build_roster,
    merge_inventory_variants,
)

__all__ = [
    "build_roster",
    "merge_inventory_variants",
]
