"""A module for designing FilterKernels from pass & stop band criteria.

This module contains the following classes:

**Kaiser:**
A FilterKernel whose coeffecients are a Kaiser-windowed FIR designed to
meet the stricter of the pass and stop band attenuation criteria.

Examples:
    >>> # design a low pass kernel with a max ripple of 1 dB and minimum
    ... # attenuation of 40 dB
    >>> kaiser = Kaiser(fpass=300, fstop=350, fs=5000, gpass=1, gstop=40)
    >>> kaiser.btype
    'lowpass'
    >>> # filter & decimate a 100 Hz complex tone from 5 kHz to 1.25 kHz
    >>> from openfir import SampleSequence
    >>> t = np.arange(5000) / 5000
    >>> seq = SampleSequence(np.exp(2j * np.pi * 100 * t))
    >>> len(kaiser.decimate(seq, M=4, trim_tails=True))
    1250
"""

from typing import Sequence, Union

import numpy as np
import scipy.signal as sps

from openfir.filtering.bases import FilterKernel


class Kaiser(FilterKernel):
    """A Type I FIR FilterKernel using the parametric Kaiser window.

    A parameterized window allows Kaiser filters to be designed to meet
    the stricter of user supplied pass or stop band attenuation criteria.

    Attributes:
        fpass (np.ndarray):
            1-D numpy array of start and stop edge frequencies of this
            filter's passband(s).
        fstop (np.ndarray):
            1-D numpy array of start and stop edge frequencies of this
            filter's stopband(s).
        fs (float):
            The sampling rate of the digital system.
        gpass (float):
            Maximum ripple in the passband(s) in dB.
        gstop (float):
            Minimum attenuation in the stopbands in dB.
        nyq (float):
            The nyquist rate of the digital system, fs/2.
        width (float):
            The minimum transition width between the pass and stopbands.
        coeffs (np.ndarray):
            A read-only 1-D array of the designed coeffecients.

    References:
        1. Ifeachor E.C. and Jervis, B.W. (2002). Digital Signal Processing:
           A Practical Approach. Prentice Hall
        2. Oppenheim, A.V. and Schafer, R.W. (2009) "Discrete-Time Signal
           Processing" 3rd Edition. Pearson.
    """

    def __init__(self,
                 fpass: Union[float, Sequence[float]],
                 fstop: Union[float, Sequence[float]],
                 fs: float,
                 gpass: float = 1.0,
                 gstop: float = 40.0
    ) -> None:
        """Initialize this Kaiser windowed kernel.

        Args:
            fpass:
                The pass band edge frequency in the same units as fs OR
                a 2-el sequence of edge frequencies that are monotonically
                increasing and in [0, fs/2].
            fstop:
                The stop band edge frequency in the same units as fs OR
                a 2-el sequence of edge frequencies that are monotonically
                increasing and in [0, fs/2].
            fs:
                The sampling rate of the digital system.
            gpass:
                The maximum allowable ripple in the pass band in dB.
                Default of 1.0 dB is ~ 11% amplitude ripple.
            gstop:
                The minimum attenuation required in the stop band in dB.
                Default of 40 dB is a 99% amplitude attenuation.

        Raises:
            ValueError: An error if pass & stop bands lens are unequal.
        """

        self.fpass = np.atleast_1d(fpass)
        self.fstop = np.atleast_1d(fstop)

        #validate lens of bands
        if len(self.fpass) != len(self.fstop):
            msg = 'fpass and fstop must have the same shape, got {} and {}'
            raise ValueError(msg.format(self.fpass.shape, self.fstop.shape))

        self.fs = fs
        self.gpass = gpass
        self.gstop = gstop
        self.nyq = fs / 2
        self.width = np.min(np.abs(self.fstop - self.fpass))
        super().__init__(self._build())

    @property
    def btype(self) -> str:
        """Returns the string band type of this filter."""

        fp, fs = self.fpass, self.fstop
        if len(fp) < 2:
            btype = 'lowpass' if fp[0] < fs[0] else 'highpass'

        elif len(fp) == 2:
            btype = 'bandstop' if fp[0] < fs[0] else 'bandpass'

        else:
            msg = '{} supports only lowpass, highpass, bandpass & bandstop.'
            raise ValueError(msg.format(type(self).__name__))

        return btype

    @property
    def pass_attenuation(self) -> float:
        """Converts the max passband ripple, gpass, into a pass band
        attenuation in dB."""

        return -20 * np.log10(1 - 10 ** (-self.gpass / 20))

    @property
    def cutoff(self) -> np.ndarray:
        """Returns an ndarray of the -6 dB points of each transition
        band."""

        delta = abs(self.fstop - self.fpass) / 2
        return delta + np.min(np.stack((self.fpass, self.fstop)), axis=0)

    @property
    def ripple(self) -> float:
        """Returns the stricter of the pass & stop band attenuations."""

        return max(self.pass_attenuation, self.gstop)

    @property
    def numtaps(self) -> int:
        """Returns the number of taps needed to meet the stricter of the
        pass and stop band criteria."""

        ntaps, _ = sps.kaiserord(self.ripple, self.width / self.nyq)
        # odd tap number to ensure group delay is integer samples
        return ntaps + 1 if ntaps % 2 == 0 else ntaps

    def _build(self) -> np.ndarray:
        """Returns the ndarray of this kernel's coeffecients."""

        window = ('kaiser', sps.kaiser_beta(self.ripple))
        return sps.firwin(self.numtaps, cutoff=self.cutoff, width=None,
                          window=window, pass_zero=self.btype,
                          scale=True, fs=self.fs)
