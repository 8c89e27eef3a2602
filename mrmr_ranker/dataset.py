"""
Discretized dataset with cached per-attribute histograms.

Codes are stored attribute-major so that every attribute is one contiguous
run, which keeps the histogram and mutual information scans linear.
"""

import io
import logging
from typing import List, Optional, Sequence, TextIO

import numpy as np
import pandas as pd

from .config import DEFAULT_CODE_WIDTH, DEFAULT_DELIMITER, DiscretizationMethod, code_dtype_for
from .discretization import discretize_values
from .errors import ConstructionError, FormatError, InvalidIndexError, RepresentationError
from .histogram import AttributeHistogram
from .matrix import DelimiterTokenizer, DenseMatrix

logger = logging.getLogger(__name__)


class Dataset:
    """
    Attribute-major matrix of discrete codes, attribute names and histograms.

    Use one of the constructors ``read``, ``discretize``, ``from_values`` or
    ``from_dataframe`` rather than calling this directly.

    Parameters:
    -----------
    names : sequence of str
        Attribute names
    data : DenseMatrix
        Codes with one row per attribute and one column per instance
    histograms : sequence of AttributeHistogram
        One histogram per attribute, aligned with ``names``
    """

    def __init__(self, names: Sequence[str], data: DenseMatrix,
                 histograms: Sequence[AttributeHistogram]):
        if not (len(names) == len(histograms) == data.rows):
            raise ConstructionError(
                f"{len(names)} names and {len(histograms)} histograms "
                f"do not match {data.rows} attributes"
            )
        self._names = list(names)
        self._data = data
        self._histograms = list(histograms)

    @classmethod
    def discretize(cls, raw: DenseMatrix, names: Sequence[str],
                   method=DiscretizationMethod.ROUND,
                   code_width: int = DEFAULT_CODE_WIDTH,
                   first_line: int = 1) -> 'Dataset':
        """
        Discretize an instance-major raw matrix into a dataset.

        Parameters:
        -----------
        raw : DenseMatrix, shape (n_instances, n_attributes)
            Real-valued cells
        names : sequence of str
            Attribute names, one per column of ``raw``
        method : DiscretizationMethod
            Per-cell transform
        code_width : int
            Largest code value; also bounds every discretized magnitude
        first_line : int
            Line number reported for instance 0 in overflow errors

        Returns:
        --------
        dataset : Dataset

        Raises:
        -------
        CodeOverflowError
            A discretized value's magnitude exceeds ``code_width``
        RepresentationError
            An attribute's discretized range exceeds ``code_width``
        """
        if len(names) != raw.cols:
            raise ConstructionError(
                f"{len(names)} names supplied for {raw.cols} attributes"
            )
        if raw.rows == 0:
            raise ConstructionError("dataset contains no instances")
        code_dtype = code_dtype_for(code_width)

        # transform pass
        values = discretize_values(raw.to_numpy(), method, code_width, first_line=first_line)
        minima = values.min(axis=0)
        maxima = values.max(axis=0)

        # representability check
        for attribute_num, name in enumerate(names):
            if maxima[attribute_num] - minima[attribute_num] > code_width:
                raise RepresentationError(name, code_width)

        # translate pass, stored attribute-major
        codes = DenseMatrix.from_array((values - minima).astype(code_dtype)).transpose()

        # histogram pass
        histograms = [
            AttributeHistogram.from_codes(codes.row(attribute_num))
            for attribute_num in range(codes.rows)
        ]
        logger.debug(f"Discretized {raw.rows} instances x {raw.cols} attributes "
                     f"using {getattr(method, 'value', method)} into {code_dtype} codes")
        return cls(names, codes, histograms)

    @classmethod
    def read(cls, stream: TextIO, delimiter: str = DEFAULT_DELIMITER,
             method=DiscretizationMethod.ROUND,
             code_width: int = DEFAULT_CODE_WIDTH) -> 'Dataset':
        """
        Read a header line of names followed by one line of values per instance.

        Parameters:
        -----------
        stream : text stream
            Input text
        delimiter : str
            Field boundary characters
        method : DiscretizationMethod
            Per-cell transform
        code_width : int
            Largest code value

        Returns:
        --------
        dataset : Dataset

        Raises:
        -------
        FormatError
            Missing header newline, no instances, bad token or column count
        """
        tokenizer = DelimiterTokenizer(delimiter)
        header = stream.readline()
        if not header.endswith('\n'):
            raise FormatError("missing required newline after header")
        names = tokenizer.split(header)

        raw = DenseMatrix.parse(stream, tokenizer, line_offset=1)
        if raw.rows == 0:
            raise FormatError("dataset contains no instances")
        if raw.cols != len(names):
            # every row matched the first one, so the first data line is at fault
            raise FormatError(
                f"expected {len(names)} columns from header but found {raw.cols}", line=2
            )
        logger.info(f"Read {raw.rows} instances of {len(names)} attributes")
        return cls.discretize(raw, names, method, code_width, first_line=2)

    @classmethod
    def from_values(cls, values, num_instances: int, num_attributes: int,
                    column_major: bool = False,
                    names: Optional[Sequence[str]] = None,
                    method=DiscretizationMethod.ROUND,
                    code_width: int = DEFAULT_CODE_WIDTH) -> 'Dataset':
        """
        Build a dataset from a flat sequence of raw values.

        Parameters:
        -----------
        values : sequence of numbers
            num_instances * num_attributes raw cells
        num_instances, num_attributes : int
            Declared dimensions
        column_major : bool
            Whether ``values`` lists attribute by attribute instead of
            instance by instance
        names : sequence of str, optional
            Attribute names; when omitted or empty, defaults to "attr0", "attr1", ...
        method : DiscretizationMethod
            Per-cell transform
        code_width : int
            Largest code value

        Returns:
        --------
        dataset : Dataset
        """
        values = np.asarray(values, dtype=np.float64).reshape(-1)
        if values.size != num_instances * num_attributes:
            raise ConstructionError(
                f"{values.size} values supplied for {num_instances} instances "
                f"x {num_attributes} attributes"
            )
        if names is None or len(names) == 0:
            names = [f"attr{attribute_num}" for attribute_num in range(num_attributes)]
        elif len(names) != num_attributes:
            raise ConstructionError(
                f"{len(names)} names supplied for {num_attributes} attributes"
            )
        if column_major:
            block = values.reshape(num_attributes, num_instances).T
        else:
            block = values.reshape(num_instances, num_attributes)
        return cls.discretize(DenseMatrix.from_array(block), list(names), method, code_width)

    @classmethod
    def from_dataframe(cls, frame: pd.DataFrame,
                       method=DiscretizationMethod.ROUND,
                       code_width: int = DEFAULT_CODE_WIDTH) -> 'Dataset':
        """Build a dataset from a numeric DataFrame, one column per attribute."""
        try:
            block = frame.to_numpy(dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise ConstructionError(f"DataFrame contains non-numeric data: {e}") from e
        names = [str(column) for column in frame.columns]
        return cls.discretize(DenseMatrix.from_array(block), names, method, code_width)

    @property
    def num_instances(self) -> int:
        return self._data.cols

    @property
    def num_attributes(self) -> int:
        return len(self._names)

    @property
    def attribute_names(self) -> List[str]:
        return list(self._names)

    def _check_attribute(self, attribute_num: int):
        if not 0 <= attribute_num < self.num_attributes:
            raise InvalidIndexError(
                f"attribute {attribute_num} outside dataset with {self.num_attributes} attributes"
            )

    def attribute_name(self, attribute_num: int) -> str:
        self._check_attribute(attribute_num)
        return self._names[attribute_num]

    def histogram(self, attribute_num: int) -> AttributeHistogram:
        self._check_attribute(attribute_num)
        return self._histograms[attribute_num]

    def num_values(self, attribute_num: int) -> int:
        return self.histogram(attribute_num).num_values()

    def codes(self, attribute_num: int) -> np.ndarray:
        """Read-only view of one attribute's codes across all instances."""
        self._check_attribute(attribute_num)
        return self._data.row(attribute_num)

    def attribute_entropy(self, attribute_num: int) -> float:
        return self.histogram(attribute_num).entropy

    def mutual_information(self, attribute1: int, attribute2: int) -> float:
        """
        Mutual information in bits between two attributes.

        Not cached; one joint histogram is built per call.

        Parameters:
        -----------
        attribute1, attribute2 : int
            Attribute indices

        Returns:
        --------
        mi : float
        """
        histogram1 = self.histogram(attribute1)
        histogram2 = self.histogram(attribute2)
        num_values1 = histogram1.num_values()
        num_values2 = histogram2.num_values()
        if num_values1 == 1 or num_values2 == 1:
            return 0.0

        bins = self._data.row(attribute1).astype(np.intp) * num_values2
        bins += self._data.row(attribute2)
        joint = np.bincount(bins, minlength=num_values1 * num_values2) / self.num_instances

        populated = np.flatnonzero(joint)
        joint_probability = joint[populated]
        marginal1 = histogram1.pdf[populated // num_values2]
        marginal2 = histogram2.pdf[populated % num_values2]
        return float(np.sum(
            joint_probability * np.log2(joint_probability / (marginal1 * marginal2))
        ))

    def write(self, stream: TextIO, delimiter: str = DEFAULT_DELIMITER):
        """Write the header and discretized codes in original column order."""
        if self.num_attributes == 0:
            return
        separator = DelimiterTokenizer(delimiter).separator
        stream.write(separator.join(self._names))
        stream.write('\n')
        self._data.transpose().serialize(stream, separator)

    def to_string(self, delimiter: str = DEFAULT_DELIMITER) -> str:
        output = io.StringIO()
        self.write(output, delimiter)
        return output.getvalue()

    def to_frame(self) -> pd.DataFrame:
        """Discretized codes as a DataFrame, one column per attribute."""
        return pd.DataFrame(self._data.transpose().to_numpy(), columns=self._names)

    def __repr__(self):
        return (f"Dataset(num_instances={self.num_instances}, "
                f"num_attributes={self.num_attributes})")
