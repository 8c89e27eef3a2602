"""
Run configuration for attribute ranking.

The configuration bundle is passed explicitly to ingestion and selection
instead of living in process-wide state.
"""

from dataclasses import dataclass
from enum import Enum

import numpy as np

DEFAULT_DELIMITER = '\t'
DEFAULT_CODE_WIDTH = 255


class DiscretizationMethod(Enum):
    """Per-cell mapping from real values to integer codes."""

    ROUND = 'round'
    FLOOR = 'floor'
    CEILING = 'ceiling'
    TRUNCATE = 'truncate'

    @classmethod
    def from_name(cls, name: str) -> 'DiscretizationMethod':
        """
        Look up a method by name, falling back to TRUNCATE.

        Parameters:
        -----------
        name : str
            Case-insensitive method name

        Returns:
        --------
        method : DiscretizationMethod
            Matching method, or TRUNCATE for an unrecognized name
        """
        try:
            return cls(name.strip().lower())
        except ValueError:
            return cls.TRUNCATE

    @classmethod
    def names(cls):
        return [method.value for method in cls]


def code_dtype_for(capacity: int) -> np.dtype:
    """Narrowest unsigned integer dtype able to hold codes up to ``capacity``."""
    if capacity < 1:
        raise ValueError(f"code capacity must be positive, got {capacity}")
    for dtype in (np.uint8, np.uint16, np.uint32, np.uint64):
        if capacity <= np.iinfo(dtype).max:
            return np.dtype(dtype)
    raise ValueError(f"code capacity {capacity} exceeds the widest unsigned type")


@dataclass(frozen=True)
class RankingConfig:
    """
    Configuration bundle consumed by ingestion and selection.

    Parameters:
    -----------
    delimiter : str
        Field separator; every character acts as a field boundary
    class_attribute_index : int
        0-based index of the class attribute
    discretization : DiscretizationMethod
        Per-cell discretization method
    code_width : int
        Maximum code value, bounding the number of categories per attribute
    """

    delimiter: str = DEFAULT_DELIMITER
    class_attribute_index: int = 0
    discretization: DiscretizationMethod = DiscretizationMethod.TRUNCATE
    code_width: int = DEFAULT_CODE_WIDTH

    def __post_init__(self):
        if not self.delimiter:
            raise ValueError("delimiter must contain at least one character")
        if self.class_attribute_index < 0:
            raise ValueError(
                f"class attribute index must be non-negative, got {self.class_attribute_index}"
            )
        # validates the capacity as a side effect
        code_dtype_for(self.code_width)

    @property
    def code_dtype(self) -> np.dtype:
        return code_dtype_for(self.code_width)

    @classmethod
    def from_user_selector(cls, class_number: int, **kwargs) -> 'RankingConfig':
        """
        Build a configuration from the 1-based class selector shown to users.

        Parameters:
        -----------
        class_number : int
            1-based class attribute number
        **kwargs : dict
            Remaining RankingConfig fields

        Returns:
        --------
        config : RankingConfig
        """
        if class_number < 1:
            raise ValueError(f"class attribute number must be at least 1, got {class_number}")
        return cls(class_attribute_index=class_number - 1, **kwargs)
