"""openfir: fused FIR convolution, decimation, interpolation & rational
resampling of complex sample sequences."""

from openfir.core.sequences import SampleSequence, ScratchBuffer
from openfir.filtering.bases import FilterKernel
from openfir.filtering.fir import Kaiser
from openfir.resampling.resampling import (convolve, decimate, design_kernel,
                                           interpolate, resample)

__all__ = ['SampleSequence', 'ScratchBuffer', 'FilterKernel', 'Kaiser',
           'convolve', 'decimate', 'interpolate', 'resample',
           'design_kernel']
