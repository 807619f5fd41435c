"""Containers for the complex samples filtered in place by openfir's FIR
kernels.

This module contains the following classes:

**ScratchBuffer:**
Reusable storage for snapshots of a sequence's samples. A single buffer
may be shared by many sequences to avoid reallocating snapshot storage on
every filtering call.

**SampleSequence:**
A resizable 1-D sequence of complex samples. Filtering operations take a
snapshot of its samples and then overwrite & resize it with their output.

Examples:
    >>> scratch = ScratchBuffer()
    >>> seq = SampleSequence([1, 2, 3, 4], scratch=scratch)
    >>> with seq.snapshot() as frozen:
    ...     values = seq.resize(6)
    >>> print(len(seq))
    6

Notes:
    ScratchBuffer provides no locking. A buffer may be shared only by
    sequences that are filtered sequentially by a single thread. Sequences
    filtered concurrently on different threads must each have their own
    buffer (or none).
"""

import operator
from contextlib import contextmanager
from typing import Iterator, Optional

import numpy as np
import numpy.typing as npt

from openfir.core import resources
from openfir.core.mixins import ViewContainer


class ScratchBuffer(ViewContainer):
    """Reusable storage for read-only snapshots of complex samples.

    Attributes:
        capacity (int):
            The number of samples the buffer holds without reallocating.
        dtype (np.dtype):
            The dtype of the current storage. The storage adopts the dtype
            of the values it is asked to hold.
        held (bool):
            True while a snapshot is held.
    """

    def __init__(self,
                 capacity: int = 0,
                 dtype: npt.DTypeLike = np.complex128,
    ) -> None:
        """Initialize this buffer with uninitialized storage.

        Args:
            capacity:
                The initial number of samples of storage.
            dtype:
                The initial dtype of the storage.
        """

        self._storage = np.empty(operator.index(capacity), dtype=dtype)
        self._held = False

    @property
    def capacity(self) -> int:
        """Returns the number of samples of storage."""

        return len(self._storage)

    @property
    def dtype(self) -> np.dtype:
        """Returns the dtype of the storage."""

        return self._storage.dtype

    @property
    def held(self) -> bool:
        """Returns True if a snapshot is currently held."""

        return self._held

    @contextmanager
    def hold(self, values: np.ndarray) -> Iterator[np.ndarray]:
        """Copies values into this buffer for the duration of a with block.

        The storage grows (and adopts values' dtype) only when needed.

        Args:
            values:
                A 1-D array to snapshot.

        Yields:
            A read-only view of the buffer holding a copy of values. The
            view's contents are only valid inside the with block.

        Raises:
            RuntimeError: An error if this buffer already holds a snapshot.
        """

        if self._held:
            msg = ('{} already holds a snapshot; a buffer may only be '
                   'used by one filtering call at a time')
            raise RuntimeError(msg.format(type(self).__name__))

        n = len(values)
        if n > self.capacity or values.dtype != self.dtype:
            self._storage = np.empty(max(n, self.capacity), values.dtype)

        frozen = self._storage[:n]
        frozen[:] = values
        frozen.flags.writeable = False

        self._held = True
        try:
            yield frozen
        finally:
            self._held = False


class SampleSequence(ViewContainer):
    """A resizable 1-D sequence of complex samples.

    Attributes:
        scratch (ScratchBuffer):
            An optional caller-owned buffer that holds snapshots of this
            sequence's samples. If None, each snapshot is a private copy
            discarded when the snapshot is released.
    """

    def __init__(self,
                 data: npt.ArrayLike = (),
                 dtype: npt.DTypeLike = np.complex128,
                 scratch: Optional[ScratchBuffer] = None,
    ) -> None:
        """Initialize this sequence with a copy of data.

        Args:
            data:
                A 1-D array-like of samples. Real samples are stored with
                zero imaginary parts.
            dtype:
                A complex floating dtype for the samples, one of
                complex64, complex128 or clongdouble.
            scratch:
                An optional ScratchBuffer used for snapshots.

        Raises:
            ValueError: An error if dtype is not a complex floating dtype
                or if data is not 1-D.
        """

        dtype = np.dtype(dtype)
        if not np.issubdtype(dtype, np.complexfloating):
            msg = 'SampleSequence requires a complex dtype, got {}'
            raise ValueError(msg.format(dtype))

        values = np.array(data, dtype=dtype)
        if values.ndim != 1:
            msg = 'SampleSequence data must be 1-D, got shape {}'
            raise ValueError(msg.format(values.shape))

        self._values = values
        self.scratch = scratch

    @property
    def dtype(self) -> np.dtype:
        """Returns the complex dtype of this sequence."""

        return self._values.dtype

    @property
    def precision(self) -> np.dtype:
        """Returns the real dtype of each sample's components."""

        return np.finfo(self.dtype).dtype

    @property
    def values(self) -> np.ndarray:
        """Returns the writeable array backing this sequence.

        The array is replaced whenever the sequence changes length so it
        should not be held across filtering calls.
        """

        return self._values

    def __len__(self):
        return len(self._values)

    def __getitem__(self, index):
        return self._values[index]

    def __setitem__(self, index, value):
        self._values[index] = value

    def __iter__(self):
        return iter(self._values)

    def __array__(self, dtype=None, copy=None):
        if dtype is None:
            return self._values.copy() if copy else self._values
        return self._values.astype(dtype)

    def to_array(self) -> np.ndarray:
        """Returns a copy of this sequence's samples."""

        return self._values.copy()

    def resize(self, size: int) -> np.ndarray:
        """Changes the number of samples in this sequence.

        Samples common to the old & new lengths are kept and any added
        samples are zero. Resizing to the current length keeps the current
        storage.

        Args:
            size:
                The new non-negative number of samples.

        Returns:
            The array now backing this sequence.

        Raises:
            ValueError: An error if size is negative.
            MemoryError: An error if the new samples do not fit in the
                available virtual memory. The sequence is unchanged.
        """

        size = operator.index(size)
        if size < 0:
            msg = 'Cannot resize {} to a negative length {}'
            raise ValueError(msg.format(type(self).__name__, size))

        current = len(self._values)
        if size == current:
            return self._values

        if size > current and not resources.assignable((size,), self.dtype,
                                                        msg=False):
            msg = 'Resizing to {} {} samples exceeds the available memory'
            raise MemoryError(msg.format(size, self.dtype))

        values = np.zeros(size, dtype=self.dtype)
        keep = min(size, current)
        values[:keep] = self._values[:keep]
        self._values = values
        return values

    @contextmanager
    def snapshot(self) -> Iterator[np.ndarray]:
        """Freezes a read-only copy of this sequence's samples for the
        duration of a with block.

        The copy lives in this sequence's scratch buffer if one was given
        and in a private array otherwise. Either is released on every exit
        from the with block.

        Yields:
            A read-only 1-D array of the samples at entry.
        """

        if self.scratch is None:
            frozen = self._values.copy()
            frozen.flags.writeable = False
            yield frozen

        else:
            with self.scratch.hold(self._values) as frozen:
                yield frozen
