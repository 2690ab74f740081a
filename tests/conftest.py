"""
Pytest configuration and fixtures for extrema ROI tests
"""

import cv2
import numpy as np
import pytest


@pytest.fixture
def peak_grid():
    """5x5 zeros with a single 9 in the centre"""
    grid = np.zeros((5, 5), dtype=np.uint8)
    grid[2, 2] = 9
    return grid


@pytest.fixture
def pit_grid():
    """5x5 nines with a single 0 in the centre"""
    grid = np.full((5, 5), 9, dtype=np.uint8)
    grid[2, 2] = 0
    return grid


@pytest.fixture
def flat_grid():
    """5x5 constant image"""
    return np.full((5, 5), 7, dtype=np.uint8)


@pytest.fixture
def border_plateau_grid():
    """Plateau of 5s that reaches the left border"""
    return np.array(
        [
            [0, 0, 0, 0, 0],
            [5, 5, 5, 0, 0],
            [0, 5, 5, 0, 0],
            [0, 0, 0, 0, 0],
            [0, 0, 0, 0, 0],
        ],
        dtype=np.uint8,
    )


@pytest.fixture
def square_plateau_grid():
    """6x6 zeros with a 2x2 plateau of 5s in the middle"""
    grid = np.zeros((6, 6), dtype=np.uint8)
    grid[2:4, 2:4] = 5
    return grid


@pytest.fixture
def two_peaks_grid():
    """5 rows x 9 columns, a low peak at x=2 and a high peak at x=6"""
    grid = np.zeros((5, 9), dtype=np.uint8)
    grid[2, 2] = 5
    grid[2, 6] = 9
    return grid


@pytest.fixture
def cone_grid():
    """7x7 cone: 10 minus the Chebyshev distance to the centre"""
    ys, xs = np.mgrid[0:7, 0:7]
    return (10 - np.maximum(abs(xs - 3), abs(ys - 3))).astype(np.uint8)


@pytest.fixture
def peak_image_file(tmp_path):
    """7x7 grey PNG with a bright 3x3 square in the middle of a dark background"""
    image = np.zeros((7, 7), dtype=np.uint8)
    cv2.rectangle(image, (2, 2), (4, 4), 200, -1)
    path = tmp_path / "peak.png"
    cv2.imwrite(str(path), image)
    return path
