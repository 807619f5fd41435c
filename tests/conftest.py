import numpy as np
import pytest

from openfir.core.arraytools import zero_stuff


@pytest.fixture(scope='module')
def rng():
    """Returns a numpy default_rng instance for generating random but
    reproducible ndarrays."""

    seed = 0
    return np.random.default_rng(seed)

@pytest.fixture(scope='module')
def complex1D(rng):
    """Returns a random 1-D complex array."""

    return rng.standard_normal(2113) + 1j * rng.standard_normal(2113)

@pytest.fixture(scope='module', params=[1, 2, 3, 8, 31, 64])
def coeffs(rng, request):
    """Returns random real filter coeffecients of a variety of lengths
    including the single tap identity-like kernel."""

    return rng.standard_normal(request.param)

@pytest.fixture(scope='session')
def reference():
    """Returns a function computing every Mth sample of the convolution of
    x expanded by L with h by explicitly building the expanded sequence."""

    def expand_convolve(x, h, L, M, trim):
        """Samples past the end of the full convolution are zero."""

        m, n = len(x), len(h)
        full = np.convolve(zero_stuff(np.asarray(x, dtype=complex), L), h)

        offset = (n - 1) // 2 if trim else 0
        length = m * L if trim else len(full)
        size = -(-length // M)
        padded = np.concatenate((full, np.zeros(offset + size * M)))
        return padded[offset::M][:size]

    return expand_convolve
