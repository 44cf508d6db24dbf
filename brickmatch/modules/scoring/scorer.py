# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Weighted Pair Scorer
Combines the similarity signals into one score per (catalog-A, catalog-B)
candidate pair.

Weight sets (each sums to 1.0):

              token   lcs     key    parts   image
  with image  0.20    0.35    0.20   0.05    0.20
  no image    0.25    0.4375  0.25   0.0625  —

The LCS ratio carries the most weight: marketplace names often keep only
the character name from the parts-database description, and a long shared
run is the most reliable trace of that.

Image similarity is an optional collaborator capability. It is used only
when both entries carry an image_ref AND a comparator is supplied; its
weight is otherwise redistributed proportionally over the other signals.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Union

from pydantic import BaseModel, Field, model_validator

from brickmatch.exceptions import check_unit_interval
from brickmatch.models.catalog import CatalogAEntry, CatalogBEntry
from brickmatch.modules.scoring.similarity import (
    key_identifier_match,
    lcs_ratio,
    part_count_similarity,
    token_jaccard,
)

# (image_ref_a, image_ref_b) → perceptual similarity in [0, 1]
ImageComparator = Callable[[str, str], float]

Entry = Union[CatalogAEntry, CatalogBEntry]


class SimilarityWeights(BaseModel):
    token: float = Field(..., ge=0.0)
    lcs: float = Field(..., ge=0.0)
    key: float = Field(..., ge=0.0)
    part_count: float = Field(..., ge=0.0)
    image: float = Field(0.0, ge=0.0)

    @model_validator(mode="after")
    def _check_sum(self) -> "SimilarityWeights":
        total = self.token + self.lcs + self.key + self.part_count + self.image
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"similarity weights must sum to 1.0, got {total:.4f}")
        return self

    def without_image(self) -> "SimilarityWeights":
        """Redistribute the image weight proportionally over the rest."""
        if self.image == 0.0:
            return self
        scale = 1.0 / (1.0 - self.image)
        return SimilarityWeights(
            token=self.token * scale,
            lcs=self.lcs * scale,
            key=self.key * scale,
            part_count=self.part_count * scale,
        )


WEIGHTS_WITH_IMAGE = SimilarityWeights(
    token=0.20, lcs=0.35, key=0.20, part_count=0.05, image=0.20
)
WEIGHTS_WITHOUT_IMAGE = WEIGHTS_WITH_IMAGE.without_image()


@dataclass
class SimilarityBreakdown:
    """Per-signal audit record for one candidate pair."""
    token: float
    lcs: float
    key: float
    part_count: float
    image: Optional[float]
    combined: float


def _image_available(
    a: Entry, b: Entry, comparator: Optional[ImageComparator]
) -> bool:
    return comparator is not None and bool(a.image_ref) and bool(b.image_ref)


def score_breakdown(
    a: Entry,
    b: Entry,
    weights: Optional[SimilarityWeights] = None,
    comparator: Optional[ImageComparator] = None,
) -> SimilarityBreakdown:
    """
    Compute every signal and the weighted combination.

    Raises InvalidConfidenceError if the comparator returns a value outside
    [0, 1]; a misbehaving collaborator must not skew the combined score.
    """
    use_image = _image_available(a, b, comparator)
    if weights is None:
        weights = WEIGHTS_WITH_IMAGE if use_image else WEIGHTS_WITHOUT_IMAGE
    elif not use_image:
        weights = weights.without_image()

    token = token_jaccard(a.display_name, b.display_name)
    lcs = lcs_ratio(a.display_name, b.display_name)
    key = key_identifier_match(a.display_name, b.display_name)
    parts = part_count_similarity(a.part_count, b.part_count)

    image: Optional[float] = None
    if use_image:
        image = check_unit_interval(
            float(comparator(a.image_ref, b.image_ref)), "image comparator"
        )

    combined = (
        weights.token * token
        + weights.lcs * lcs
        + weights.key * key
        + weights.part_count * parts
        + (weights.image * image if image is not None else 0.0)
    )
    # Float noise only; all inputs are already in [0, 1]
    combined = max(0.0, min(1.0, combined))

    return SimilarityBreakdown(
        token=token,
        lcs=lcs,
        key=key,
        part_count=parts,
        image=image,
        combined=combined,
    )


def score(
    a: Entry,
    b: Entry,
    weights: Optional[SimilarityWeights] = None,
    comparator: Optional[ImageComparator] = None,
) -> float:
    """Weighted similarity in [0, 1]. Deterministic, no I/O."""
    return score_breakdown(a, b, weights, comparator).combined


def name_similarity(a: Entry, b: Entry) -> float:
    """
    Name-only similarity: token, LCS and key signals with the
    no-image weights renormalised over those three.
    """
    w = WEIGHTS_WITHOUT_IMAGE
    name_total = w.token + w.lcs + w.key
    return (
        w.token * token_jaccard(a.display_name, b.display_name)
        + w.lcs * lcs_ratio(a.display_name, b.display_name)
        + w.key * key_identifier_match(a.display_name, b.display_name)
    ) / name_total
