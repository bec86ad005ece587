"""
Color assignment for new annotation categories.

New colors are picked greedily: among a handful of random candidates, the one
farthest away from all existing colors wins.
"""

from typing import List, Optional, Sequence

import numpy as np

from annotator_core.config import Config

Color = List[int]


def color_dist(c1: Sequence[int], c2: Sequence[int]) -> float:
    """Euclidean distance in RGB space."""
    return float(
        np.sqrt(sum((float(c1[i]) - float(c2[i])) ** 2 for i in range(3)))
    )


def random_clr(rng: Optional[np.random.Generator] = None) -> Color:
    rng = rng if rng is not None else np.random.default_rng()
    return [int(v) for v in rng.integers(0, 256, size=3)]


def argmax_clr_dist(
    picklist: Sequence[Sequence[int]], legacylist: Sequence[Sequence[int]]
) -> Color:
    """
    Candidate from ``picklist`` with the largest minimal distance to ``legacylist``.

    With an empty ``legacylist`` all candidates score 0 and the first one wins.
    """
    best_idx = 0
    best_dist = -1.0
    for i, pickclr in enumerate(picklist):
        min_dist = min(
            (color_dist(legclr, pickclr) for legclr in legacylist), default=0.0
        )
        if min_dist > best_dist:
            best_idx, best_dist = i, min_dist
    return [int(v) for v in picklist[best_idx]]


def new_color(
    colors: Sequence[Sequence[int]],
    rng: Optional[np.random.Generator] = None,
    n_candidates: Optional[int] = None,
) -> Color:
    """Draw random candidates and keep the one most distinct from ``colors``."""
    rng = rng if rng is not None else np.random.default_rng()
    n_candidates = Config.N_COLOR_CANDIDATES if n_candidates is None else n_candidates
    proposals = [random_clr(rng) for _ in range(max(n_candidates, 1))]
    return argmax_clr_dist(proposals, colors)
