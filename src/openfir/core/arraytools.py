"""Tools for slicing, padding and restructuring the 1-D arrays consumed by
openfir's fused filtering kernels."""

import numpy as np


def ceil_div(a, b):
    """Returns the ceiling of the integer division a / b.

    Works for negative numerators which is needed when a filtering region
    lies entirely before the start of an output.
    """

    return -(-a // b)


def pad_along_axis(arr, pad, axis=-1, **kwargs):
    """Wrapper for numpy pad allowing before and after padding along
    a single axis.

    Args:
        arr (ndarray):              ndarray to pad
        pad (int or array-like):    number of pads to apply before the 0th
                                    and after the last index of array along
                                    axis. If int, pad number of pads will be
                                    added to both
        axis (int):                 axis of arr along which to apply pad.
                                    Default pads along last axis.
        **kwargs:                   any valid kwarg for np.pad
    """

    #convert int pad to seq. of pads & place along axis of pads
    pad = [pad, pad] if isinstance(pad, int) else pad
    pads = [(0,0)] * arr.ndim
    pads[axis] = pad
    return np.pad(arr, pads, **kwargs)


def zero_stuff(arr, l):
    """Inserts l-1 zeros between consecutive samples of a 1-D array.

    Args:
        arr: 1-D array
            The array to expand.
        l: int
            The expansion factor.

    Returns:
        A 1-D array of length (len(arr) - 1) * l + 1 holding arr's samples
        at every lth index. No zeros trail the last sample. An empty array
        stays empty.

    Typical Usage Example:

    >>> zero_stuff(np.array([5, 6, 7]), 2)
    array([5, 0, 6, 0, 7])
    """

    if arr.size == 0:
        return arr.copy()

    result = np.zeros((len(arr) - 1) * l + 1, dtype=arr.dtype)
    result[::l] = arr
    return result


def sliding_windows(arr, size):
    """Returns a read-only strided view of all windows of size consecutive
    samples in a 1-D array.

    Row r of the view holds arr[r : r + size]. No data is copied.
    """

    return np.lib.stride_tricks.sliding_window_view(arr, size)


def polyphase(coeffs, l):
    """Splits filter coeffecients into l polyphase branches.

    Args:
        coeffs: 1-D array
            The filter coeffecients of length n.
        l: int
            The number of branches, the expansion factor of an
            interpolator.

    Returns:
        An l x ceil(n/l) array whose pth row holds coeffecients p, p+l,
        p+2l, ... in reversed order. Coeffecients past n are zero. The
        reversal lets a row be dotted directly against a window of
        ascending input samples.
    """

    q = ceil_div(len(coeffs), l)
    padded = pad_along_axis(coeffs, [0, q * l - len(coeffs)])
    return padded.reshape(q, l).T[:, ::-1]
