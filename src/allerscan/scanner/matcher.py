# Copyright (c) 2026 Huynh Huy. All rights reserved.

"""
Allergen Match Filter
=====================

Case-insensitive substring matching of OCR text regions against the
allergen keyword list.

Example:
    >>> regions = [TextRegion("PEANUT butter", BoundingBox(0, 0, 80, 20))]
    >>> match_regions(regions, ["peanut", "milk"]).allergens
    ('peanut',)
"""

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box (x0, y0)-(x1, y1) in source image pixels."""
    x0: int
    y0: int
    x1: int
    y1: int

    @property
    def width(self) -> int:
        return self.x1 - self.x0

    @property
    def height(self) -> int:
        return self.y1 - self.y0

    def union(self, other: "BoundingBox") -> "BoundingBox":
        return BoundingBox(
            min(self.x0, other.x0),
            min(self.y0, other.y0),
            max(self.x1, other.x1),
            max(self.y1, other.y1),
        )


@dataclass(frozen=True)
class TextRegion:
    """One piece of recognized text and where it sits in the frame."""
    text: str
    bbox: BoundingBox
    confidence: float = -1.0


@dataclass(frozen=True)
class Annotation:
    """A matching region together with the keywords it matched."""
    region: TextRegion
    keywords: Tuple[str, ...]


@dataclass(frozen=True)
class MatchResult:
    allergens: Tuple[str, ...] = ()
    annotations: Tuple[Annotation, ...] = ()

    @property
    def found(self) -> bool:
        return bool(self.allergens)


EMPTY_MATCH = MatchResult()


def region_keywords(text: str, keywords: Iterable[str]) -> Tuple[str, ...]:
    """Keywords contained in ``text`` (case-insensitive), duplicates collapsed."""
    lowered = text.lower()
    hits: list[str] = []
    for keyword in keywords:
        needle = keyword.lower()
        # An empty needle would match every region
        if needle and needle in lowered and keyword not in hits:
            hits.append(keyword)
    return tuple(hits)


def match_regions(regions: Sequence[TextRegion], keywords: Sequence[str]) -> MatchResult:
    """Match every region against every keyword.

    Args:
        regions: Text regions returned by the OCR engine.
        keywords: Allergen keywords (expected lowercase).

    Returns:
        MatchResult with the deduplicated allergens in first-seen order and
        one annotation per matching region.
    """
    if not regions or not keywords:
        return EMPTY_MATCH

    allergens: list[str] = []
    annotations: list[Annotation] = []

    for region in regions:
        hits = region_keywords(region.text, keywords)
        if not hits:
            continue
        annotations.append(Annotation(region=region, keywords=hits))
        for keyword in hits:
            if keyword not in allergens:
                allergens.append(keyword)

    return MatchResult(allergens=tuple(allergens), annotations=tuple(annotations))
