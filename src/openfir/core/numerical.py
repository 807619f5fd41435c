"""Fused convolution, decimation, interpolation & resampling of 1-D complex
arrays by real-valued FIR filter coeffecients.

Each kernel reads a frozen input array x and writes into a preallocated
output array. Conceptually x is expanded by L (L-1 zeros inserted between
samples), convolved with the coeffecients h and every Mth sample of the
convolution is kept, starting from an offset that is 0 for the full
convolution or (len(h) - 1) // 2 when the filter's transient tails are
trimmed. None of the intermediate sequences are materialized; products
against inserted zeros and samples dropped by decimation are never
computed.

Outputs are computed in three regions:

    initial partial overlap: the filter window extends before x[0]
    middle full overlap: every tap of the filter overlaps x
    final partial overlap: the filter window extends past x[-1]

The partial regions are short (about len(h) / M outputs each) and are
summed output-by-output. The middle region holds the bulk of the work and
is vectorized in blocks that gather at most chunksize input samples.
"""

import numpy as np

from openfir.core.arraytools import ceil_div, polyphase, sliding_windows

# max number of windowed input samples gathered per vectorized block
CHUNKSIZE = 2**20


def initial_trim(ntaps):
    """Returns the number of leading transient samples dropped from the
    full convolution by a trimmed operation."""

    return (ntaps - 1) // 2


def resampled_length(m, n, L, M, trim):
    """Returns the number of output samples of a fused resampling.

    Args:
        m: int
            The number of input samples.
        n: int
            The number of filter coeffecients.
        L: int
            The expansion factor.
        M: int
            The decimation factor.
        trim: bool
            If True the length of the trimmed output, ceil(m * L / M).
            Otherwise the length of the full output,
            ceil((m * L + n - 1 - (L - 1)) / M).

    Returns: A non-negative integer length.

    Raises:
        ValueError: An error if the full output length would be negative.
            This occurs only for empty inputs expanded by more than the
            number of filter coeffecients.
    """

    length = m * L if trim else m * L + n - 1 - (L - 1)
    if length < 0:
        msg = ('Cannot expand {} samples by L={} with {} coeffecients; '
               'the output length would be {}')
        raise ValueError(msg.format(m, L, n, length))

    return ceil_div(length, M)


def convolved_length(m, n, trim):
    """Returns the output length of a full or trimmed convolution."""

    return resampled_length(m, n, 1, 1, trim)


def decimated_length(m, n, M, trim):
    """Returns the output length of a full or trimmed decimation."""

    return resampled_length(m, n, 1, M, trim)


def interpolated_length(m, n, L, trim):
    """Returns the output length of a full or trimmed interpolation."""

    return resampled_length(m, n, L, 1, trim)


def full_overlap(m, n, L, M, offset, size):
    """Returns the range of output indices whose filter windows lie
    entirely within the input.

    Args:
        m: int
            The number of input samples.
        n: int
            The number of filter coeffecients.
        L: int
            The expansion factor.
        M: int
            The decimation factor.
        offset: int
            The index of the expanded convolution stored at output 0.
        size: int
            The number of output samples.

    Returns:
        A start, stop tuple. Outputs before start belong to the initial
        partial overlap and outputs from stop on belong to the final
        partial overlap. The range is empty when the input is shorter than
        the filter.
    """

    start = min(max(0, ceil_div(n - 1 - offset, M)), size)
    stop = min(max(start, ceil_div(m * L - offset, M)), size)
    return start, stop


def _partial(x, h, pos):
    """Returns sample pos of the full convolution of x with h summing only
    the coeffecients that overlap x."""

    first = max(0, pos - len(h) + 1)
    last = min(pos, len(x) - 1)
    if last < first:
        return 0

    # coeffecients run from h[pos - first] down to h[pos - last]
    return np.dot(x[first:last + 1], h[pos - last:pos - first + 1][::-1])


def _strided_partial(x, h, data_start, filter_start, L):
    """Returns a sample of the convolution of x expanded by L with h.

    The sum begins at input sample data_start against coeffecient
    filter_start and steps one input sample & L coeffecients at a time
    until the coeffecients or the input are exhausted.
    """

    count = min(filter_start // L + 1, len(x) - data_start)
    if count <= 0:
        return 0

    taps = h[filter_start::-L][:count]
    return np.dot(x[data_start:data_start + count], taps)


def _cursor(pos, n, L):
    """Returns the first input sample & its coeffecient index contributing
    to sample pos of the convolution of x expanded by L with n
    coeffecients."""

    data_start = max(0, ceil_div(pos - n + 1, L))
    return data_start, pos - data_start * L


def _polyphase_overlap(x, h, out, L, M, offset, start, stop, chunksize):
    """Fills out[start:stop], a full overlap region of a fused resampling,
    using the polyphase branches of h.

    Output i is sample p = offset + i * M of the expanded convolution. Its
    nonzero products pair x[p // L - j] with h[p % L + j * L] for j in
    [0, ceil(n / L)), so each output is the dot product of a window of x
    with the (p % L)th polyphase branch.
    """

    branches = polyphase(h, L)
    q = branches.shape[1]
    windows = sliding_windows(x, q)
    block = max(1, chunksize // q)

    for first in range(start, stop, block):
        last = min(first + block, stop)
        positions = offset + np.arange(first, last) * M
        base, phase = np.divmod(positions, L)
        out[first:last] = np.einsum('ij,ij->i', windows[base - q + 1],
                                    branches[phase])


def convolve_into(x, h, out, offset=0, chunksize=CHUNKSIZE):
    """Convolves a 1-D array with filter coeffecients.

    Args:
        x: 1-D array
            The frozen input samples. Never written to.
        h: 1-D array
            The real filter coeffecients, len(h) >= 1.
        out: 1-D array
            The destination whose length is the convolved length of x.
        offset: int
            The index of the full convolution stored at out[0]. 0 for the
            full convolution and initial_trim(len(h)) for a trimmed one.
        chunksize: int
            The maximum number of windowed input samples gathered per
            vectorized block of the full overlap region.

    Returns: out
    """

    m, n = len(x), len(h)
    start, stop = full_overlap(m, n, 1, 1, offset, len(out))

    # initial partial overlap
    for idx in range(start):
        out[idx] = _partial(x, h, offset + idx)

    # middle full overlap; window row r holds x[r : r + n]
    if stop > start:
        windows = sliding_windows(x, n)
        reverse = h[::-1]
        shift = offset - (n - 1)
        block = max(1, chunksize // n)
        for first in range(start, stop, block):
            last = min(first + block, stop)
            out[first:last] = windows[first + shift:last + shift] @ reverse

    # final partial overlap
    for idx in range(stop, len(out)):
        out[idx] = _partial(x, h, offset + idx)

    return out


def decimate_into(x, h, out, M, offset=0, chunksize=CHUNKSIZE):
    """Convolves a 1-D array with filter coeffecients keeping only every
    Mth sample of the convolution.

    Args:
        x: 1-D array
            The frozen input samples. Never written to.
        h: 1-D array
            The real filter coeffecients, len(h) >= 1.
        out: 1-D array
            The destination whose length is the decimated length of x.
        M: int
            The decimation factor, a positive integer.
        offset: int
            The index of the full convolution stored at out[0].
        chunksize: int
            The maximum number of windowed input samples gathered per
            vectorized block of the full overlap region.

    Returns: out
    """

    m, n = len(x), len(h)
    start, stop = full_overlap(m, n, 1, M, offset, len(out))

    # initial partial overlap
    for idx in range(start):
        out[idx] = _partial(x, h, offset + idx * M)

    # middle full overlap; the window start advances M samples per output
    if stop > start:
        windows = sliding_windows(x, n)
        reverse = h[::-1]
        shift = offset - (n - 1)
        block = max(1, chunksize // n)
        for first in range(start, stop, block):
            last = min(first + block, stop)
            rows = slice(first * M + shift, (last - 1) * M + shift + 1, M)
            out[first:last] = windows[rows] @ reverse

    # final partial overlap
    for idx in range(stop, len(out)):
        out[idx] = _partial(x, h, offset + idx * M)

    return out


def interpolate_into(x, h, out, L, offset=0, chunksize=CHUNKSIZE):
    """Expands a 1-D array by L and convolves it with filter coeffecients
    without multiplying the inserted zeros.

    Args:
        x: 1-D array
            The frozen input samples. Never written to.
        h: 1-D array
            The real filter coeffecients, len(h) >= 1.
        out: 1-D array
            The destination whose length is the interpolated length of x.
        L: int
            The expansion factor, a positive integer.
        offset: int
            The index of the expanded convolution stored at out[0].
        chunksize: int
            The maximum number of windowed input samples gathered per
            vectorized block of the full overlap region.

    Returns: out
    """

    m, n = len(x), len(h)
    start, stop = full_overlap(m, n, L, 1, offset, len(out))

    # initial partial overlap
    data_start, filter_start = _cursor(offset, n, L)
    for idx in range(start):
        out[idx] = _strided_partial(x, h, data_start, filter_start, L)
        filter_start += 1
        if filter_start >= n:
            # filter no longer overlaps data_start; move to next sample
            filter_start -= L
            data_start += 1

    # middle full overlap
    if stop > start:
        _polyphase_overlap(x, h, out, L, 1, offset, start, stop, chunksize)
        data_start, filter_start = _cursor(offset + stop, n, L)

    # final partial overlap
    for idx in range(stop, len(out)):
        out[idx] = _strided_partial(x, h, data_start, filter_start, L)
        filter_start += 1
        if filter_start >= n:
            filter_start -= L
            data_start += 1

    return out


def resample_into(x, h, out, L, M, offset=0, chunksize=CHUNKSIZE):
    """Expands a 1-D array by L, convolves it with filter coeffecients and
    keeps every Mth sample in a single fused pass.

    Args:
        x: 1-D array
            The frozen input samples. Never written to.
        h: 1-D array
            The real filter coeffecients, len(h) >= 1.
        out: 1-D array
            The destination whose length is the resampled length of x.
        L: int
            The expansion factor, a positive integer.
        M: int
            The decimation factor, a positive integer.
        offset: int
            The index of the expanded convolution stored at out[0]. For a
            trimmed resampling this is initial_trim(len(h)) measured in
            the expanded index space.
        chunksize: int
            The maximum number of windowed input samples gathered per
            vectorized block of the full overlap region.

    Returns: out

    Notes:
        The running (data_start, filter_start) cursor advances M expanded
        samples per output. Since M may exceed L the cursor can wrap past
        several input samples between consecutive outputs.
    """

    m, n = len(x), len(h)
    start, stop = full_overlap(m, n, L, M, offset, len(out))

    # initial partial overlap
    data_start, filter_start = _cursor(offset, n, L)
    for idx in range(start):
        out[idx] = _strided_partial(x, h, data_start, filter_start, L)
        filter_start += M
        while filter_start >= n:
            filter_start -= L
            data_start += 1

    # middle full overlap
    if stop > start:
        _polyphase_overlap(x, h, out, L, M, offset, start, stop, chunksize)
        data_start, filter_start = _cursor(offset + stop * M, n, L)

    # final partial overlap
    for idx in range(stop, len(out)):
        out[idx] = _strided_partial(x, h, data_start, filter_start, L)
        filter_start += M
        while filter_start >= n:
            filter_start -= L
            data_start += 1

    return out
