"""Estimates of the virtual memory needed to grow SampleSequences.

A sequence growing to hold the output of an interpolation or resampling
may need far more memory than its input. These tools let a sequence
refuse the growth before it allocates or alters anything.
"""

from typing import Optional, Tuple

import numpy as np
import numpy.typing as npt
import psutil

# headroom left free when deciding if an allocation fits
HEADROOM = int(50e6)


def required_bytes(shape: Tuple[int, ...], dtype: npt.DTypeLike) -> int:
    """Returns the number of bytes of an array of shape and dtype."""

    return int(np.prod(shape)) * np.dtype(dtype).itemsize


def available_bytes() -> int:
    """Returns the virtual memory available to this process in bytes."""

    return psutil.virtual_memory().available


def assignable(shape: Tuple[int, ...],
               dtype: npt.DTypeLike = complex,
               limit: Optional[int] = None,
               msg: bool = True,
) -> bool:
    """Estimates if an array of shape and dtype fits in virtual memory.

    Args:
        shape:
            The shape of the array to allocate.
        dtype:
            A python or numpy data type of the array's items.
        limit:
            The number of bytes that may be used. If None, the limit is
            all available virtual memory.
        msg:
            If True and the array does not fit, print the required and
            the available memory.

    Returns:
        True if the array fits with HEADROOM bytes to spare and False
        otherwise.
    """

    limit = limit if limit else available_bytes()
    required = required_bytes(shape, dtype)
    if required < limit - HEADROOM:
        return True

    if msg:
        name = np.dtype(dtype).name
        print(f'An array of shape {shape} and dtype {name} requires '
              f'{required / 1e9:.2f} GB but only {limit / 1e9:.1f} GB is '
              'available')
    return False
