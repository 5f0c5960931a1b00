"""Census region classification.

Each entity is looked up in four fixed, disjoint state sets.  Entities found
in none of them (the national aggregate ``"United States"``) keep their own
name as the region label, so the national rows form a pseudo-region of their
own instead of being dropped.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, FrozenSet, Optional, Set

import pandas as pd

from .config import (
    ENTITY_COL,
    MIDWEST_STATES,
    NORTHEAST_STATES,
    REGION_COL,
    SOUTH_STATES,
    WEST_STATES,
)

logger = logging.getLogger(__name__)


class Region(str, Enum):
    NORTHEAST = "Northeast"
    MIDWEST = "Midwest"
    SOUTH = "South"
    WEST = "West"


REGION_MEMBERS: Dict[Region, FrozenSet[str]] = {
    Region.NORTHEAST: NORTHEAST_STATES,
    Region.MIDWEST: MIDWEST_STATES,
    Region.SOUTH: SOUTH_STATES,
    Region.WEST: WEST_STATES,
}


def overlapping_entities() -> Set[str]:
    """Return entities listed under more than one region (expected empty)."""
    seen: Set[str] = set()
    overlap: Set[str] = set()
    for members in REGION_MEMBERS.values():
        overlap |= seen & members
        seen |= members
    return overlap


_overlap = overlapping_entities()
if _overlap:
    raise RuntimeError(f"Region lookup tables overlap: {sorted(_overlap)}")

_REGION_BY_ENTITY: Dict[str, Region] = {
    entity: region for region, members in REGION_MEMBERS.items() for entity in members
}


def region_of(entity: str) -> Optional[Region]:
    """Return the census region of ``entity``, or ``None`` when it has none."""
    return _REGION_BY_ENTITY.get(str(entity).strip())


def region_label(entity: str) -> str:
    """Return the region label for ``entity``.

    Named states map to their census region; anything else passes through
    unchanged as its own label.
    """
    region = region_of(entity)
    if region is None:
        return str(entity)
    return region.value


def classify(df: pd.DataFrame, *, entity_col: str = ENTITY_COL) -> pd.DataFrame:
    """Return a copy of ``df`` with a categorical ``region`` column appended.

    The lookup runs once per distinct entity rather than once per row.
    """
    out = df.copy()
    entities = out[entity_col].astype(str)
    labels = {entity: region_label(entity) for entity in entities.unique()}
    passthrough = sorted(e for e, label in labels.items() if label == e)
    if passthrough:
        logger.info("Entities without a census region (kept as own label): %s", passthrough)
    out[REGION_COL] = entities.map(labels).astype("category")
    return out
