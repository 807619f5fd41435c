"""A module for testing the free filtering functions and the default
resampling kernel design.

Typical usage example:
    !pytest test_resampling.py::<TEST_NAME>
"""

import itertools

import numpy as np
import pytest
import scipy.signal as sps

from openfir import (FilterKernel, Kaiser, SampleSequence, convolve,
                     decimate, design_kernel, interpolate, resample)


def resample_filter(L, M, fs, gpass=0.1, gstop=40):
    """Returns the unscaled Kaiser interpolating/antialiasing coeffecients
    matching openfir's default kernel."""

    g = np.gcd(L, M)
    L //= g
    M //= g
    fcut = fs / (2 * max(L, M))
    fstop = fcut + fcut / 10
    fpass = fcut - fcut / 10
    return Kaiser(fpass, fstop, fs, gpass, gstop).coeffs


def test_module_examples():
    """Validates the documented examples of each free function."""

    assert np.allclose(convolve([1, 2, 3, 4], [1, 1, 1]), [1, 3, 6, 9, 7, 4])
    assert np.allclose(convolve([1, 2, 3, 4], [1, 1, 1], trim_tails=True),
                       [3, 6, 9, 7])
    assert np.allclose(decimate([1, 2, 3, 4], [1, 1, 1], M=2), [1, 6, 7])
    assert np.allclose(interpolate([5, 6, 7], [1], L=2), [5, 0, 6, 0, 7])

def test_arrays_untouched(complex1D):
    """Validates ndarray inputs return new arrays & are never altered."""

    x = complex1D.copy()
    y = resample(x, [1, 2, 1], L=3, M=2)

    assert isinstance(y, np.ndarray)
    assert np.array_equal(x, complex1D)
    assert len(y) == -(-(len(x) * 3 + 2 - 2) // 2)

def test_sequences_in_place(complex1D):
    """Validates SampleSequence inputs are filtered in place & returned."""

    seq = SampleSequence(complex1D)
    result = decimate(seq, FilterKernel([1, 1]), M=3)

    assert result is seq
    expected = np.convolve(complex1D, [1, 1])[::3]
    assert np.allclose(seq.to_array(), expected)

@pytest.mark.parametrize('dtype, expected',
    [
        (np.float32, np.complex64),
        (np.float64, np.complex128),
        (np.int64, np.complex128),
        (np.complex64, np.complex64),
    ]
)
def test_array_dtypes(dtype, expected):
    """Validates array inputs are filtered at a matching complex
    precision."""

    x = np.arange(20).astype(dtype)
    assert convolve(x, [0.5, 0.5]).dtype == expected

def test_kernel_types(complex1D):
    """Validates kernels may be FilterKernels or coeffecient sequences."""

    coeffs = [0.25, 0.5, 0.25]
    a = interpolate(complex1D, coeffs, L=3)
    b = interpolate(complex1D, FilterKernel(coeffs), L=3)
    assert np.allclose(a, b)

def test_invalid_rates(complex1D):
    """Validates free functions validate their rates."""

    with pytest.raises(ValueError):
        decimate(complex1D, [1, 1], M=0)
    with pytest.raises(TypeError):
        resample(complex1D, [1, 1], L=1.5, M=2)

def test_design_kernel():
    """Validates the default kernel is an odd length Kaiser scaled by the
    reduced expansion factor."""

    kernel = design_kernel(L=3, M=2, fs=5000)
    h = resample_filter(3, 2, 5000)

    assert isinstance(kernel, FilterKernel)
    assert kernel.ntaps % 2 == 1
    assert np.allclose(kernel.coeffs, 3 * h)
    assert np.isclose(np.sum(kernel.coeffs), 3)

def test_design_kernel_reduces():
    """Validates the default kernel depends only on the reduced ratio."""

    a = design_kernel(L=6, M=4, fs=5000)
    b = design_kernel(L=3, M=2, fs=5000)
    assert np.allclose(a.coeffs, b.coeffs)

def test_design_kernel_kwargs():
    """Validates band edges & attenuations may be overridden."""

    default = design_kernel(L=1, M=4, fs=5000)
    wide = design_kernel(L=1, M=4, fs=5000, fpass=400, fstop=700, gstop=30)
    assert wide.ntaps < default.ntaps

@pytest.mark.parametrize('L, M', [(2, 3), (3, 2), (3, 5), (5, 3), (1, 4),
                                  (4, 1), (3, 10), (7, 2)])
def test_resample_poly(complex1D, L, M):
    """Validates trimmed resampling with the default kernel matches scipy's
    polyphase resampler for coprime rates."""

    fs = 5000
    y = resample(complex1D, design_kernel(L, M, fs), L, M, trim_tails=True)
    h = resample_filter(L, M, fs)
    expected = sps.resample_poly(complex1D, up=L, down=M, window=h)

    assert y.shape == expected.shape
    assert np.allclose(y, expected)

def test_resample_upfirdn(complex1D):
    """Validates untrimmed resampling matches scipy's upfirdn for
    combinations of rates."""

    h = resample_filter(2, 3, 5000)
    for L, M in itertools.permutations([1, 2, 3, 4], r=2):
        y = resample(complex1D, h, L, M)
        assert np.allclose(y, sps.upfirdn(h, complex1D, up=L, down=M))

def test_resample_tone():
    """Validates resampling a passband tone preserves its amplitude &
    frequency."""

    fs, freq = 5000, 60
    t = np.arange(10000) / fs
    x = np.exp(2j * np.pi * freq * t)

    L, M = 3, 10
    y = resample(x, design_kernel(L, M, fs), L, M, trim_tails=True)

    new_t = np.arange(len(y)) * M / (L * fs)
    expected = np.exp(2j * np.pi * freq * new_t)
    # ignore the edges where the kernel partially overlaps the tone
    assert np.allclose(y[200:-200], expected[200:-200], atol=0.05)
