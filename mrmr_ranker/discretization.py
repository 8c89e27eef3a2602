"""
Discretization of real-valued cells into signed integer values.

The transform pass only needs one cell at a time; translation into unsigned
codes happens afterwards in the dataset, once per-attribute minima are known.
"""

import logging

import numpy as np

from .config import DiscretizationMethod
from .errors import CodeOverflowError

logger = logging.getLogger(__name__)


def round_half_away_from_zero(values: np.ndarray) -> np.ndarray:
    """Round to nearest integer with halves going away from zero (not to even)."""
    whole = np.trunc(values)
    with np.errstate(invalid='ignore'):
        fraction = values - whole
        return whole + np.where(np.abs(fraction) >= 0.5, np.sign(values), 0.0)


_TRANSFORMS = {
    DiscretizationMethod.ROUND: round_half_away_from_zero,
    DiscretizationMethod.FLOOR: np.floor,
    DiscretizationMethod.CEILING: np.ceil,
    DiscretizationMethod.TRUNCATE: np.trunc,
}


def transform_values(values: np.ndarray, method) -> np.ndarray:
    """
    Apply the per-cell discretization transform.

    Parameters:
    -----------
    values : np.ndarray
        Real-valued cells
    method : DiscretizationMethod or str
        Transform to apply, or its name; anything unrecognized is treated as TRUNCATE

    Returns:
    --------
    transformed : np.ndarray
        Integral values, still stored as floats
    """
    if isinstance(method, str):
        method = DiscretizationMethod.from_name(method)
    transform = _TRANSFORMS.get(method, np.trunc)
    return transform(np.asarray(values, dtype=np.float64))


def discretize_values(values: np.ndarray, method, capacity: int,
                      first_line: int = 1) -> np.ndarray:
    """
    Transform an instance-major block and check every cell against the capacity.

    Parameters:
    -----------
    values : np.ndarray, shape (n_instances, n_attributes)
        Raw cells
    method : DiscretizationMethod
        Per-cell transform
    capacity : int
        Largest magnitude a discretized value may have
    first_line : int
        Line number reported for instance 0

    Returns:
    --------
    discretized : np.ndarray of int64, shape (n_instances, n_attributes)

    Raises:
    -------
    CodeOverflowError
        For the first non-finite or oversized cell in instance-major order
    """
    transformed = transform_values(values, method)
    with np.errstate(invalid='ignore'):
        overflow = ~np.isfinite(transformed) | (np.abs(transformed) > capacity)
    if overflow.any():
        instance, attribute = np.argwhere(overflow)[0]
        value = transformed[instance, attribute]
        logger.debug(f"Overflow at instance {instance}, attribute {attribute}: {value}")
        raise CodeOverflowError(
            line=first_line + int(instance),
            column=int(attribute) + 1,
            value=value.item(),
            capacity=capacity,
        )
    return transformed.astype(np.int64)
