"""
Per-attribute discrete distribution and entropy.
"""

import numpy as np

from .errors import ConstructionError, InvalidIndexError


def entropy_bits(pdf: np.ndarray) -> float:
    """
    Shannon entropy in bits, skipping zero-probability bins.

    Parameters:
    -----------
    pdf : np.ndarray
        Probability mass function

    Returns:
    --------
    entropy : float
    """
    populated = pdf[pdf > 0]
    return float(-np.sum(populated * np.log2(populated)))


class AttributeHistogram:
    """
    Probability mass function over integer codes 0..max_code of one attribute.

    Codes below the maximum that never occur are kept as zero bins; codes
    above the maximum are not represented.

    Parameters:
    -----------
    pdf : array-like
        Probability of each code
    """

    def __init__(self, pdf):
        self._pdf = np.array(pdf, dtype=np.float64)
        self._pdf.flags.writeable = False
        self._entropy = entropy_bits(self._pdf)

    @classmethod
    def from_codes(cls, codes) -> 'AttributeHistogram':
        """
        Build the histogram of a finite sequence of non-negative codes.

        Parameters:
        -----------
        codes : array-like of non-negative int
            Observed codes of one attribute

        Returns:
        --------
        histogram : AttributeHistogram
        """
        codes = np.asarray(codes)
        if codes.size == 0:
            raise ConstructionError("cannot build a histogram from an empty code sequence")
        if np.issubdtype(codes.dtype, np.signedinteger) and codes.min() < 0:
            raise ConstructionError("codes must be non-negative")
        counts = np.bincount(codes.astype(np.intp, copy=False))
        return cls(counts / codes.size)

    @property
    def pdf(self) -> np.ndarray:
        return self._pdf

    @property
    def entropy(self) -> float:
        return self._entropy

    def num_values(self) -> int:
        return self._pdf.size

    def marginal_probability(self, code: int) -> float:
        if not 0 <= code < self._pdf.size:
            raise InvalidIndexError(
                f"code {code} outside histogram with {self._pdf.size} values"
            )
        return float(self._pdf[code])

    def __repr__(self):
        return f"AttributeHistogram(num_values={self.num_values()}, entropy={self._entropy:.6f})"
