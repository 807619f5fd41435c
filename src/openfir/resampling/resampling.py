"""Functions that convolve, downsample, upsample & resample sequences of
complex samples with a real FIR kernel in a single fused pass.

Each function is an alias of the corresponding FilterKernel method that
takes the data first. Data may be a SampleSequence, which is filtered in
place and returned, or any 1-D array-like, in which case a filtered
ndarray is returned and the input is left untouched. The kernel may be a
FilterKernel or a sequence of real coeffecients.

This module contains the following functions:

**convolve:**
Convolves data with a kernel returning the full or the trimmed, delay
centered convolution.

Examples:
    >>> convolve([1, 2, 3, 4], [1, 1, 1]).real
    array([1., 3., 6., 9., 7., 4.])
    >>> convolve([1, 2, 3, 4], [1, 1, 1], trim_tails=True).real
    array([3., 6., 9., 7.])

___
**decimate:**
Filters data with a kernel and keeps every Mth sample without computing
the discarded samples.

Examples:
    >>> decimate([1, 2, 3, 4], [1, 1, 1], M=2).real
    array([1., 6., 7.])

___
**interpolate:**
Expands data by inserting L-1 zeros between samples and filters with a
kernel without multiplying the inserted zeros.

Examples:
    >>> interpolate([5, 6, 7], [1], L=2).real
    array([5., 0., 6., 0., 7.])

___
**resample:**
Resamples data by a rational number L/M where L is the expansion factor
and M is the decimation factor.

Examples:
    >>> # resample a tone sampled at 5000 Hz to 1500 Hz
    >>> t = np.arange(10000) / 5000
    >>> x = np.exp(2j * np.pi * 60 * t)
    >>> kernel = design_kernel(L=3, M=10, fs=5000)
    >>> y = resample(x, kernel, L=3, M=10, trim_tails=True)
    >>> print(y.shape)
    (3000,)

___
"""

from typing import Union

import numpy as np
import numpy.typing as npt

from openfir.core.sequences import SampleSequence
from openfir.filtering.bases import FilterKernel, as_kernel
from openfir.filtering.fir import Kaiser

Data = Union[SampleSequence, npt.ArrayLike]
Kernel = Union[FilterKernel, npt.ArrayLike]


def _as_sequence(data: Data) -> SampleSequence:
    """Returns data if it is a SampleSequence or a new complex sequence
    holding a copy of data."""

    if isinstance(data, SampleSequence):
        return data

    arr = np.asarray(data)
    dtype = np.result_type(arr.dtype, np.complex64)
    if not np.issubdtype(dtype, np.complexfloating):
        dtype = np.complex128
    return SampleSequence(arr, dtype=dtype)


def _result(data: Data, seq: SampleSequence) -> Union[SampleSequence,
                                                      np.ndarray]:
    """Returns seq if data was a SampleSequence & an array otherwise."""

    return seq if isinstance(data, SampleSequence) else seq.to_array()


def convolve(data: Data,
             kernel: Kernel,
             trim_tails: bool = False,
) -> Union[SampleSequence, np.ndarray]:
    """Convolves data with a real FIR kernel.

    Args:
        data:
            A SampleSequence or 1-D array-like of samples.
        kernel:
            A FilterKernel or 1-D sequence of real coeffecients.
        trim_tails:
            If False (default) returns the full convolution of length
            len(data) + ntaps - 1. If True the kernel's transient tails are
            trimmed returning len(data) samples.

    Returns:
        The convolved SampleSequence (data itself) or a new ndarray
        depending on the type of data.
    """

    seq = _as_sequence(data)
    as_kernel(kernel).convolve(seq, trim_tails)
    return _result(data, seq)


def decimate(data: Data,
             kernel: Kernel,
             M: int,
             trim_tails: bool = False,
) -> Union[SampleSequence, np.ndarray]:
    """Filters data with a real FIR kernel keeping every Mth sample.

    Args:
        data:
            A SampleSequence or 1-D array-like of samples.
        kernel:
            A FilterKernel or 1-D sequence of real coeffecients. This
            kernel should be an antialiasing filter with a cutoff at or
            below the new Nyquist frequency.
        M:
            The decimation factor describing which Mth samples of the
            filtered data survive decimation. (E.g. M=10 -> every 10th
            sample survives)
        trim_tails:
            If False (default) the full convolution is decimated. If True
            the trimmed convolution is decimated returning
            ceil(len(data) / M) samples.

    Returns:
        The decimated SampleSequence (data itself) or a new ndarray
        depending on the type of data.
    """

    seq = _as_sequence(data)
    as_kernel(kernel).decimate(seq, M, trim_tails)
    return _result(data, seq)


def interpolate(data: Data,
                kernel: Kernel,
                L: int,
                trim_tails: bool = False,
) -> Union[SampleSequence, np.ndarray]:
    """Expands data by L and filters it with a real FIR kernel.

    Args:
        data:
            A SampleSequence or 1-D array-like of samples.
        kernel:
            A FilterKernel or 1-D sequence of real coeffecients. This
            kernel should be an interpolation filter with a gain of L to
            restore the amplitude lost to the inserted zeros.
        L:
            The expansion factor. L-1 zeros are conceptually inserted
            between consecutive samples of data.
        trim_tails:
            If False (default) returns the full convolution of the
            expanded data. If True returns len(data) * L samples centered
            on the kernel's delay.

    Returns:
        The interpolated SampleSequence (data itself) or a new ndarray
        depending on the type of data.
    """

    seq = _as_sequence(data)
    as_kernel(kernel).interpolate(seq, L, trim_tails)
    return _result(data, seq)


def resample(data: Data,
             kernel: Kernel,
             L: int,
             M: int,
             trim_tails: bool = False,
) -> Union[SampleSequence, np.ndarray]:
    """Resamples data by the rational factor L / M with a real FIR kernel.

    Args:
        data:
            A SampleSequence or 1-D array-like of samples.
        kernel:
            A FilterKernel or 1-D sequence of real coeffecients acting as
            the combined interpolation & antialiasing filter. See
            design_kernel.
        L:
            The expansion factor. L-1 zeros are conceptually inserted
            between consecutive samples of data.
        M:
            The decimation factor describing which Mth samples of the
            expanded & filtered data survive decimation.
        trim_tails:
            If False (default) returns every Mth sample of the full
            expanded convolution. If True returns ceil(len(data) * L / M)
            samples with the kernel's delay removed.

    Returns:
        The resampled SampleSequence (data itself) or a new ndarray
        depending on the type of data.

    Note:
        L/M is not reduced. Expanding by 2L & decimating by 2M selects a
        different grid of output samples than L & M so reduction is left
        to the caller.
    """

    seq = _as_sequence(data)
    as_kernel(kernel).resample(seq, L, M, trim_tails)
    return _result(data, seq)


def design_kernel(L: int, M: int, fs: float, **kwargs) -> FilterKernel:
    """Returns the default Kaiser interpolation & antialiasing kernel for
    resampling data sampled at fs by L / M.

    Args:
        L:
            The expansion factor.
        M:
            The decimation factor.
        fs:
            The sampling rate of the data to be resampled.
        kwargs:
            Any valid keyword for a Kaiser lowpass filter. The default
            values are:

            - fstop: float
                The stop band edge frequency.
                Defaults to cutoff + cutoff / 10 where cutoff =
                fs / (2 * max(L,M)) of the reduced ratio L/M.
            - fpass: float
                The pass band edge frequency. Must be less than fstop.
                Defaults to cutoff - cutoff / 10.
            - gpass: float
                The pass band attenuation in dB. Defaults to a max loss
                in the passband of 0.1 dB = ~1.1% amplitude loss.
            - gstop: float
                The max attenuation in the stop band in dB. Defaults to
                40 dB or 99%  amplitude attenuation.

    Returns:
        A FilterKernel of the Kaiser coeffecients scaled by the reduced
        expansion factor so interpolated data keeps its amplitude.

    References:
        1. Porat, B. (1997). A Course In Digital Signal Processing. John
           Wiley & Sons. Chapter 12 "Multirate Signal Processing"
        2. Polyphase implementation: scipy.signal.resample_poly
    """

    # reduce the rational L/M
    g = np.gcd(L, M)
    l = L // g
    m = M // g

    cutoff = fs / (2 * max(l, m))
    fstop = kwargs.pop('fstop', cutoff + cutoff / 10)
    fpass = kwargs.pop('fpass', cutoff - cutoff / 10)
    gpass, gstop = kwargs.pop('gpass', 0.1), kwargs.pop('gstop', 40)
    kaiser = Kaiser(fpass, fstop, fs, gpass, gstop)

    return FilterKernel(kaiser.coeffs * l)
