"""
Shared fixtures for the annotation core tests.
"""

import numpy as np
import pytest

from annotator_core.geometry import BB, Shape
from annotator_core.history import History
from annotator_core.tools import make_tools_data_map, record
from annotator_core.world import World

FILE_PATH = "images/im.png"


@pytest.fixture
def shape_100():
    return Shape(w=100, h=100)


@pytest.fixture
def test_bbs():
    return [
        BB.from_arr([0, 0, 10, 10]),
        BB.from_arr([5, 5, 10, 10]),
        BB.from_arr([9, 9, 10, 10]),
    ]


@pytest.fixture
def im_orig():
    """Black 100x50 image."""
    return np.zeros((50, 100, 3), dtype=np.uint8)


@pytest.fixture
def world(im_orig):
    """World whose window matches the image, view and original coordinates coincide."""
    return World.from_real_im(im_orig, make_tools_data_map(), FILE_PATH, Shape(w=100, h=50))


@pytest.fixture
def history(world):
    return record(world, History(), "open")
