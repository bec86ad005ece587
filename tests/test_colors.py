import numpy as np

from annotator_core.colors import argmax_clr_dist, color_dist, new_color, random_clr

PICKLIST = [[200, 200, 200], [1, 7, 3], [0, 0, 1], [45, 43, 52], [1, 10, 15]]
LEGACYLIST = [[17, 16, 15], [199, 199, 201], [50, 50, 50], [255, 255, 255]]


def _min_dist(color, colors):
    return min(color_dist(color, c) for c in colors)


def test_argmax_clr_dist():
    assert argmax_clr_dist(PICKLIST, LEGACYLIST) == [0, 0, 1]


def test_argmax_clr_dist_without_legacy_takes_first():
    assert argmax_clr_dist(PICKLIST, []) == PICKLIST[0]


def test_color_dist():
    assert color_dist([0, 0, 0], [3, 4, 0]) == 5.0
    assert color_dist([1, 2, 3], [1, 2, 3]) == 0.0


def test_new_color_without_colors_is_valid_rgb():
    color = new_color([], rng=np.random.default_rng(0))
    assert len(color) == 3
    assert all(0 <= c <= 255 for c in color)


def test_new_color_is_deterministic_with_seed():
    assert new_color(LEGACYLIST, rng=np.random.default_rng(42)) == new_color(
        LEGACYLIST, rng=np.random.default_rng(42)
    )


def test_new_color_beats_every_candidate():
    n_candidates = 10
    rng = np.random.default_rng(7)
    candidates = [random_clr(rng) for _ in range(n_candidates)]
    color = new_color(LEGACYLIST, rng=np.random.default_rng(7), n_candidates=n_candidates)
    assert color in candidates
    best = _min_dist(color, LEGACYLIST)
    for candidate in candidates:
        assert best >= _min_dist(candidate, LEGACYLIST)
