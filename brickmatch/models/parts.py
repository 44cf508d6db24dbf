# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Component Part Models
Parts that make up a paired minifigure in each catalog, and the
part-level mappings derived once the figure pairing is known.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class PartCategory(str, Enum):
    HEAD = "head"
    TORSO = "torso"
    LEGS = "legs"
    HIPS = "hips"
    ARMS = "arms"
    HANDS = "hands"
    ACCESSORY = "accessory"
    OTHER = "other"


class ComponentPart(BaseModel):
    part_id: str
    color_id: int = 0
    name: Optional[str] = None
    quantity: int = Field(1, ge=1)


class PartMapping(BaseModel):
    catalog_a_part_id: str
    catalog_b_part_id: str
    category: PartCategory
    color_match: bool
    confidence: float = Field(..., ge=0.0, le=1.0)
