"""
Logging helpers and ranking summaries.
"""

import logging
import time
from contextlib import contextmanager
from typing import List, Sequence

import numpy as np

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

VERBOSITY_LEVELS = {
    '0': logging.CRITICAL,
    'quiet': logging.CRITICAL,
    '1': logging.WARNING,
    'warning': logging.WARNING,
    '2': logging.INFO,
    'info': logging.INFO,
    '3': logging.DEBUG,
    'debug': logging.DEBUG,
}


def parse_verbosity(text: str) -> int:
    """Map a verbosity name or number to a logging level."""
    try:
        return VERBOSITY_LEVELS[text.strip().lower()]
    except KeyError:
        raise ValueError(
            f"verbosity must be one of {{0,1,2,3,quiet,warning,info,debug}}, got '{text}'"
        ) from None


def configure_logging(level: int = logging.WARNING):
    """Configure root logging with the project format."""
    logging.basicConfig(level=level, format=LOG_FORMAT)


@contextmanager
def log_step(message: str, logger: logging.Logger, level: int = logging.INFO):
    """
    Log the start of a step and its elapsed time when it finishes.

    Parameters:
    -----------
    message : str
        Description of the step
    logger : logging.Logger
        Logger to write to
    level : int
        Logging level of both messages
    """
    logger.log(level, message)
    start = time.perf_counter()
    yield
    logger.log(level, f"DONE ({time.perf_counter() - start:.6f} seconds)")


def select_top_attributes(records: Sequence, n_features: int) -> List[int]:
    """
    Indices of the first ``n_features`` ranked attributes.

    The class attribute (rank 0) and zero-entropy attributes are never selected.
    """
    ranked = [record.attribute_index for record in records
              if record.rank > 0 and np.isfinite(record.score)]
    return ranked[:max(n_features, 0)]


def ranking_summary(records: Sequence, top: int = 20) -> str:
    """
    Create a text summary of a ranking.

    Parameters:
    -----------
    records : sequence of RankRecord
        Ranking output
    top : int
        Number of ranked attributes to list

    Returns:
    --------
    summary : str
    """
    informative = [record for record in records
                   if record.rank > 0 and np.isfinite(record.score)]
    useless = [record for record in records if np.isneginf(record.score)]

    summary = "mRMR Ranking Results\n"
    summary += "=" * 50 + "\n"
    if records:
        summary += f"Class attribute: {records[0].name} (entropy {records[0].entropy:.6f})\n"
    summary += f"Ranked {len(informative)} attributes, {len(useless)} with zero entropy\n\n"

    if informative:
        summary += f"Top {min(top, len(informative))} attributes:\n"
        summary += "-" * 50 + "\n"
        for record in informative[:top]:
            summary += (f"{record.rank:3d}. {record.name:30s} | "
                        f"MI: {record.relevance:.6f} | mRMR: {record.score:.6f}\n")
    return summary
