"""
Cell set compaction.

Two passes shrink a committed cell set without changing the area it covers
(exact mode) or by accepting a small boundary overshoot (lossy mode):

1. Ancestor removal: a cell is redundant when one of its prefixes is present.
2. Sibling merge: from the finest precision upwards, a parent replaces its
   children once enough of its 32 children are present. Newly inserted
   parents can complete a group one level up, so merges cascade.
"""

import logging
from collections import Counter
from typing import Iterable, List, Set

from funcy import lmap

from geohashkit import constants
from geohashkit.grid import children, parent, validate_cell

logger = logging.getLogger(__name__)


def _has_ancestor(cell: str, cells: Set[str]) -> bool:
    return any(cell[:length] in cells for length in range(1, len(cell)))


def remove_ancestors(cells: Iterable[str]) -> List[str]:
    """Drop every cell whose strict prefix is also present."""
    unique = set(cells)
    return [c for c in unique if not _has_ancestor(c, unique)]


def merge_siblings(
    cells: Iterable[str],
    min_siblings: int = constants.EXACT_MIN_SIBLINGS,
    min_precision: int = constants.MIN_PRECISION,
) -> List[str]:
    """
    Replace sibling groups of at least `min_siblings` cells with their parent.

    Levels are processed from the finest present precision down to
    `min_precision + 1`, so no parent coarser than `min_precision` is ever
    created. With `min_siblings < 32` the parent can cover area that none of
    the merged children covered.
    """
    merged = set(cells)
    finest = max((len(c) for c in merged), default=0)

    for precision in range(finest, min_precision, -1):
        counts = Counter(parent(c) for c in merged if len(c) == precision)
        complete = [p for p, count in counts.items() if count >= min_siblings]
        for p in complete:
            merged.difference_update(children(p))
            merged.add(p)
        if complete:
            logger.debug(f"Merged {len(complete)} sibling groups at precision {precision}")

    # Lossy merges can leave deeper cells under a missing sibling
    return remove_ancestors(merged)


def compact(
    cells: Iterable[str],
    min_siblings: int = constants.EXACT_MIN_SIBLINGS,
    min_precision: int = constants.MIN_PRECISION,
) -> List[str]:
    """Ancestor removal followed by sibling merge; sorted output."""
    deduped = remove_ancestors(cells)
    return sorted(merge_siblings(deduped, min_siblings, min_precision))


def compact_cells(cells: Iterable[str], lossy: bool = False) -> List[str]:
    """
    Remove redundant cells and merge sibling groups.

    Exact mode merges only complete 32/32 groups, so the covered area is
    unchanged. Lossy mode also merges groups of 30 or 31 present children.

    Raises:
        InvalidCellError: If any cell contains characters outside the
                          geohash alphabet
    """
    validated = lmap(validate_cell, cells)
    min_siblings = constants.LOSSY_MIN_SIBLINGS if lossy else constants.EXACT_MIN_SIBLINGS
    return compact(validated, min_siblings)
