"""
The real-valued FIR filter kernel applied by all of openfir's filtering
operations.
"""

import operator
from typing import Callable, Sequence, Tuple, Union

import numpy as np
import numpy.typing as npt

from openfir.core import mixins
from openfir.core import numerical as nm
from openfir.core.sequences import SampleSequence


def validate_rate(rate: int, name: str) -> int:
    """Returns rate as an int if it is a positive integer.

    Raises:
        TypeError: An error if rate is not an integer.
        ValueError: An error if rate is not positive.
    """

    if isinstance(rate, bool):
        msg = '{} must be an integer, got {!r}'
        raise TypeError(msg.format(name, rate))

    rate = operator.index(rate)
    if rate <= 0:
        msg = '{} must be a positive integer, got {}'
        raise ValueError(msg.format(name, rate))

    return rate


class FilterKernel(mixins.ViewInstance):
    """An immutable finite impulse response filter of real coeffecients.

    A kernel filters SampleSequences in place by convolution, decimation,
    interpolation or rational resampling. The rate converting operations
    are fused with the convolution so no expanded intermediate sequence is
    built and no discarded sample is computed.

    Attributes:
        coeffs (np.ndarray):
            A read-only 1-D array of the filter's coeffecients (taps).

    Examples:
        >>> kernel = FilterKernel([1, 1, 1])
        >>> seq = SampleSequence([1, 2, 3, 4])
        >>> kernel.convolve(seq).to_array().real
        array([1., 3., 6., 9., 7., 4.])
        >>> seq = SampleSequence([1, 2, 3, 4])
        >>> kernel.convolve(seq, trim_tails=True).to_array().real
        array([3., 6., 9., 7.])
    """

    def __init__(self, coeffs: Union[Sequence[float], np.ndarray]) -> None:
        """Initialize this kernel with a copy of coeffs.

        Args:
            coeffs:
                A 1-D sequence of at least one real coeffecient.

        Raises:
            ValueError: An error if coeffs is empty, complex or not 1-D.
        """

        arr = np.array(coeffs)
        if arr.ndim != 1:
            msg = '{} coeffs must be 1-D, got shape {}'
            raise ValueError(msg.format(type(self).__name__, arr.shape))

        if arr.size == 0:
            msg = '{} requires at least one coeffecient'
            raise ValueError(msg.format(type(self).__name__))

        if np.iscomplexobj(arr):
            msg = '{} coeffs must be real, got dtype {}'
            raise ValueError(msg.format(type(self).__name__, arr.dtype))

        if not np.issubdtype(arr.dtype, np.floating):
            arr = arr.astype(float)

        arr.flags.writeable = False
        self.coeffs = arr

    @property
    def ntaps(self) -> int:
        """Returns the number of coeffecients of this kernel."""

        return len(self.coeffs)

    @property
    def delay(self) -> int:
        """Returns the number of leading samples trimmed from the full
        convolution to center this kernel's delay."""

        return nm.initial_trim(self.ntaps)

    def __len__(self):
        return self.ntaps

    def _apply(self,
               data: SampleSequence,
               length: int,
               trim_tails: bool,
               func: Callable,
               **kwargs,
    ) -> SampleSequence:
        """Snapshots data, resizes it to length and overwrites it with the
        output of one of the fused numerical kernels.

        Args:
            data:
                The sequence to filter in place.
            length:
                The validated output length.
            trim_tails:
                Boolean selecting the trimmed or full output.
            func:
                A fused kernel from openfir.core.numerical.
            kwargs:
                Rate arguments passed to func.

        Returns: data
        """

        if not isinstance(data, SampleSequence):
            msg = '{} filters SampleSequence instances, got {}'
            raise TypeError(msg.format(type(self).__name__, type(data)))

        offset = self.delay if trim_tails else 0
        # accumulate in the precision of the sample components
        h = self.coeffs.astype(data.precision, copy=False)

        with data.snapshot() as frozen:
            out = data.resize(length)
            func(frozen, h, out, offset=offset, **kwargs)

        return data

    def convolve(self,
                 data: SampleSequence,
                 trim_tails: bool = False,
    ) -> SampleSequence:
        """Convolves a sequence with this kernel in place.

        Args:
            data:
                The sequence to filter.
            trim_tails:
                If False (default) data becomes the full convolution of
                length len(data) + ntaps - 1. If True the first delay and
                last ntaps - 1 - delay samples of the full convolution are
                dropped so data keeps its length.

        Returns: data
        """

        length = nm.convolved_length(len(data), self.ntaps, trim_tails)
        return self._apply(data, length, trim_tails, nm.convolve_into)

    __call__ = convolve

    def decimate(self,
                 data: SampleSequence,
                 M: int,
                 trim_tails: bool = False,
    ) -> SampleSequence:
        """Filters a sequence with this kernel & keeps every Mth sample.

        Equivalent to convolve followed by keeping samples 0, M, 2M, ...
        but only the kept samples are computed.

        Args:
            data:
                The sequence to filter.
            M:
                The decimation factor, a positive integer.
            trim_tails:
                If False (default) the full convolution is decimated giving
                ceil((len(data) + ntaps - 1) / M) samples. If True the
                trimmed convolution is decimated giving ceil(len(data) / M)
                samples.

        Returns: data

        Raises:
            ValueError: An error if M is not positive. data is unchanged.
        """

        M = validate_rate(M, 'Decimation factor M')
        length = nm.decimated_length(len(data), self.ntaps, M, trim_tails)
        return self._apply(data, length, trim_tails, nm.decimate_into, M=M)

    def interpolate(self,
                    data: SampleSequence,
                    L: int,
                    trim_tails: bool = False,
    ) -> SampleSequence:
        """Expands a sequence by L & filters it with this kernel.

        Equivalent to inserting L-1 zeros between consecutive samples and
        convolving, but products against the inserted zeros are skipped.

        Args:
            data:
                The sequence to filter.
            L:
                The expansion factor, a positive integer.
            trim_tails:
                If False (default) data becomes the full convolution of
                len(data) * L + ntaps - 1 - (L - 1) samples. If True data
                becomes len(data) * L samples centered on the kernel's
                delay.

        Returns: data

        Raises:
            ValueError: An error if L is not positive. data is unchanged.
        """

        L = validate_rate(L, 'Expansion factor L')
        length = nm.interpolated_length(len(data), self.ntaps, L, trim_tails)
        return self._apply(data, length, trim_tails, nm.interpolate_into,
                           L=L)

    def resample(self,
                 data: SampleSequence,
                 L: int,
                 M: int,
                 trim_tails: bool = False,
    ) -> SampleSequence:
        """Resamples a sequence by the rational factor L / M.

        Equivalent to expanding by L, convolving with this kernel and
        keeping every Mth sample, performed in a single fused pass.

        Args:
            data:
                The sequence to filter.
            L:
                The expansion factor, a positive integer.
            M:
                The decimation factor, a positive integer.
            trim_tails:
                If False (default) data becomes every Mth sample of the
                full expanded convolution. If True data becomes
                ceil(len(data) * L / M) samples with the kernel's delay
                removed in the expanded sample space.

        Returns: data

        Raises:
            ValueError: An error if L or M is not positive. data is
                unchanged.
        """

        L = validate_rate(L, 'Expansion factor L')
        M = validate_rate(M, 'Decimation factor M')
        length = nm.resampled_length(len(data), self.ntaps, L, M, trim_tails)
        return self._apply(data, length, trim_tails, nm.resample_into,
                           L=L, M=M)

    # descriptive statistics of the coeffecients

    def mean(self) -> float:
        """Returns the mean of this kernel's coeffecients."""

        return float(np.mean(self.coeffs))

    def var(self) -> float:
        """Returns the sample variance (N-1 denominator) of this kernel's
        coeffecients.

        Raises:
            ValueError: An error if this kernel has fewer than 2 taps.
        """

        if self.ntaps < 2:
            msg = 'variance requires at least 2 coeffecients, got {}'
            raise ValueError(msg.format(self.ntaps))

        return float(np.var(self.coeffs, ddof=1))

    def std(self) -> float:
        """Returns the sample standard deviation of the coeffecients."""

        return float(np.sqrt(self.var()))

    def median(self) -> float:
        """Returns the median coeffecient.

        For an even number of taps this is the mean of the two middle
        coeffecients.
        """

        return float(np.median(self.coeffs))

    def max(self, return_index: bool = False
    ) -> Union[float, Tuple[float, int]]:
        """Returns the largest coeffecient.

        Args:
            return_index:
                If True, also return the index of the first occurrence of
                the largest coeffecient.

        Returns:
            The max value or a (value, index) tuple.
        """

        index = int(np.argmax(self.coeffs))
        value = float(self.coeffs[index])
        return (value, index) if return_index else value

    def min(self, return_index: bool = False
    ) -> Union[float, Tuple[float, int]]:
        """Returns the smallest coeffecient.

        Args:
            return_index:
                If True, also return the index of the first occurrence of
                the smallest coeffecient.

        Returns:
            The min value or a (value, index) tuple.
        """

        index = int(np.argmin(self.coeffs))
        value = float(self.coeffs[index])
        return (value, index) if return_index else value

    def saturate(self, limit: float) -> 'FilterKernel':
        """Returns a new kernel whose coeffecients are clipped to
        [-limit, limit]."""

        return FilterKernel(np.clip(self.coeffs, -limit, limit))

    def power(self, exponent: float) -> 'FilterKernel':
        """Returns a new kernel of coeffecients raised to exponent."""

        return FilterKernel(np.power(self.coeffs, exponent))


def as_kernel(kernel: Union[FilterKernel, npt.ArrayLike]) -> FilterKernel:
    """Returns kernel if it is a FilterKernel and otherwise builds one
    from a sequence of coeffecients."""

    if isinstance(kernel, FilterKernel):
        return kernel

    return FilterKernel(kernel)
