"""
Dense rectangular matrix with delimiter-separated text ingestion.

Storage is a flat numpy buffer in row-major order. Parsing grows the buffer
geometrically and trims it to the exact size once the last row is read.
"""

import io
import logging
import re
from typing import Iterable, List, TextIO, Tuple, Union

import numpy as np

from .errors import FormatError, InvalidIndexError

logger = logging.getLogger(__name__)

INITIAL_CAPACITY = 256


class DelimiterTokenizer:
    """
    Splits text lines on runs of one or more delimiter characters.

    Parameters:
    -----------
    delimiters : str
        Every character of this string is a field boundary
    """

    def __init__(self, delimiters: str = '\t'):
        if not delimiters:
            raise ValueError("at least one delimiter character is required")
        self.delimiters = delimiters
        self._pattern = re.compile('[' + re.escape(delimiters) + ']+')

    def split(self, line: str) -> List[str]:
        line = line.rstrip('\r\n')
        return [token for token in self._pattern.split(line) if token]

    @property
    def separator(self) -> str:
        """Character used when writing fields back out."""
        return self.delimiters[0]

    def __repr__(self):
        return f"DelimiterTokenizer({self.delimiters!r})"


def _as_tokenizer(delimiter: Union[str, DelimiterTokenizer]) -> DelimiterTokenizer:
    if isinstance(delimiter, DelimiterTokenizer):
        return delimiter
    return DelimiterTokenizer(delimiter)


def _format_float(value) -> str:
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


class DenseMatrix:
    """
    Rectangular numeric matrix with fixed shape.

    Parameters:
    -----------
    rows : int
        Number of rows
    cols : int
        Number of columns
    dtype : numpy dtype
        Element type
    fill : scalar
        Initial value of every cell
    """

    def __init__(self, rows: int = 0, cols: int = 0, dtype=np.float64, fill=0):
        self._rows = int(rows)
        self._cols = int(cols)
        self._data = np.full(self._rows * self._cols, fill, dtype=dtype)

    @classmethod
    def from_array(cls, array) -> 'DenseMatrix':
        """Copy a 2-D array-like into a new matrix, keeping its dtype."""
        array = np.asarray(array)
        if array.ndim != 2:
            raise ValueError(f"expected a 2-D array, got {array.ndim} dimensions")
        matrix = cls(0, 0, dtype=array.dtype)
        matrix._rows, matrix._cols = array.shape
        matrix._data = np.ascontiguousarray(array).reshape(-1).copy()
        return matrix

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> Tuple[int, int]:
        return self._rows, self._cols

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    def _offset(self, row: int, col: int) -> int:
        if not (0 <= row < self._rows and 0 <= col < self._cols):
            raise InvalidIndexError(
                f"cell ({row}, {col}) outside matrix of shape {self.shape}"
            )
        return row * self._cols + col

    def at(self, row: int, col: int):
        return self._data[self._offset(row, col)]

    def __getitem__(self, index):
        row, col = index
        return self.at(row, col)

    def __setitem__(self, index, value):
        row, col = index
        self._data[self._offset(row, col)] = value

    def row(self, row: int) -> np.ndarray:
        """Read-only view of one contiguous row."""
        if not 0 <= row < self._rows:
            raise InvalidIndexError(f"row {row} outside matrix with {self._rows} rows")
        view = self._data[row * self._cols:(row + 1) * self._cols]
        view.flags.writeable = False
        return view

    def to_numpy(self) -> np.ndarray:
        """Copy of the contents as a (rows, cols) array."""
        return self._data.reshape(self._rows, self._cols).copy()

    def transpose(self) -> 'DenseMatrix':
        """New matrix where element (r, c) moves to (c, r)."""
        return DenseMatrix.from_array(self._data.reshape(self._rows, self._cols).T)

    def __eq__(self, other):
        if not isinstance(other, DenseMatrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    def __repr__(self):
        return f"DenseMatrix(rows={self._rows}, cols={self._cols}, dtype={self.dtype})"

    @classmethod
    def parse(cls, stream: Union[TextIO, Iterable[str]],
              delimiter: Union[str, DelimiterTokenizer] = '\t',
              dtype=np.float64, line_offset: int = 0) -> 'DenseMatrix':
        """
        Read delimiter-separated numeric rows until the stream is exhausted.

        The first row fixes the column count. The buffer starts at
        INITIAL_CAPACITY elements and doubles whenever the next row would not
        fit; it is trimmed to rows * cols at the end.

        Parameters:
        -----------
        stream : text stream or iterable of lines
            Source of rows, one per line
        delimiter : str or DelimiterTokenizer
            Field boundary characters
        dtype : numpy dtype
            Element type of the result
        line_offset : int
            Number of lines already consumed from the stream, so that errors
            report line numbers of the whole text

        Returns:
        --------
        matrix : DenseMatrix

        Raises:
        -------
        FormatError
            On a token that is not a number or a row whose column count
            differs from the first row's
        """
        tokenizer = _as_tokenizer(delimiter)
        dtype = np.dtype(dtype)
        convert = int if np.issubdtype(dtype, np.integer) else float

        buffer = np.zeros(INITIAL_CAPACITY, dtype=dtype)
        rows = 0
        cols = 0
        for line_number, line in enumerate(stream, start=line_offset + 1):
            tokens = tokenizer.split(line)
            if rows == 0:
                cols = len(tokens)
            elif len(tokens) != cols:
                raise FormatError("inconsistent number of columns", line=line_number)

            needed = (rows + 1) * cols
            if needed > buffer.size:
                capacity = buffer.size
                while capacity < needed:
                    capacity *= 2
                grown = np.zeros(capacity, dtype=dtype)
                grown[:buffer.size] = buffer
                buffer = grown
                logger.debug(f"Grew parse buffer to {capacity} elements")

            start = rows * cols
            for offset, token in enumerate(tokens):
                try:
                    buffer[start + offset] = convert(token)
                except (ValueError, OverflowError):
                    raise FormatError(f"invalid value '{token}'", line=line_number) from None
            rows += 1

        matrix = cls(0, 0, dtype=dtype)
        matrix._rows = rows
        matrix._cols = cols
        matrix._data = buffer[:rows * cols].copy()
        return matrix

    def serialize(self, stream: TextIO, delimiter: Union[str, DelimiterTokenizer] = '\t'):
        """Write one line per row, values joined by the delimiter."""
        separator = _as_tokenizer(delimiter).separator
        if np.issubdtype(self.dtype, np.integer):
            formatter = str
        else:
            formatter = _format_float
        for row in range(self._rows):
            values = self._data[row * self._cols:(row + 1) * self._cols].tolist()
            stream.write(separator.join(formatter(value) for value in values))
            stream.write('\n')

    def to_string(self, delimiter: Union[str, DelimiterTokenizer] = '\t') -> str:
        output = io.StringIO()
        self.serialize(output, delimiter)
        return output.getvalue()
