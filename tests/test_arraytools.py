"""A module for testing arraytools that restructure the arrays consumed by
the fused filtering kernels.

Typical usage example:
    !pytest test_arraytools.py::<TEST_NAME>
"""

import numpy as np
import pytest

from openfir.core import arraytools


@pytest.mark.parametrize('a, b, expected',
    [(0, 3, 0), (1, 3, 1), (3, 3, 1), (7, 2, 4), (-1, 2, 0), (-5, 2, -2)])
def test_ceil_div(a, b, expected):
    """Verifies ceil division for positive & negative numerators."""

    assert arraytools.ceil_div(a, b) == expected

def test_pad_axis(rng):
    """Verifies the correct number of zero pads are applied to each end of
    a 1-D array."""

    arr = rng.random(1013)
    pad = [43, 70]
    x = arraytools.pad_along_axis(arr, pad)

    assert x.shape == (1013 + 113,)
    assert np.allclose(x[:43], 0)
    assert np.allclose(x[-70:], 0)
    assert np.allclose(x[43:-70], arr)

def test_zero_stuff():
    """Validates zeros are inserted between but not after samples."""

    x = arraytools.zero_stuff(np.array([5, 6, 7]), 3)
    assert np.array_equal(x, [5, 0, 0, 6, 0, 0, 7])

def test_zero_stuff_edges():
    """Validates zero stuffing an empty array & by a factor of 1."""

    assert arraytools.zero_stuff(np.array([]), 4).size == 0
    assert np.array_equal(arraytools.zero_stuff(np.arange(4), 1),
                          np.arange(4))

def test_sliding_windows(rng):
    """Validates each window row is a consecutive run of samples and that
    the windows are read-only views."""

    arr = rng.random(50)
    windows = arraytools.sliding_windows(arr, 7)

    assert windows.shape == (44, 7)
    assert np.array_equal(windows[12], arr[12:19])
    assert not windows.flags.writeable

def test_polyphase_branches():
    """Validates branch p holds coeffecients p, p+l, ... reversed with zero
    padding past the last coeffecient."""

    branches = arraytools.polyphase(np.array([0., 1, 2, 3, 4]), 2)
    assert np.array_equal(branches, [[4, 2, 0], [0, 3, 1]])

def test_polyphase_single_branch(rng):
    """Validates that a single branch is the reversed coeffecients."""

    h = rng.random(11)
    branches = arraytools.polyphase(h, 1)
    assert branches.shape == (1, 11)
    assert np.allclose(branches[0], h[::-1])
