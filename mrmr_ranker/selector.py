"""
Minimum-Redundancy-Maximum-Relevance (mRMR) attribute ranking.

Every attribute except the class is ranked greedily by

    score(f) = I(f; class) - 1/|S| * sum_{s in S} I(f; s)

where S is the set of attributes already selected. Redundancy sums are
accumulated incrementally: each round adds only the mutual information with
the attribute selected in the previous round.

References:
-----------
Peng, H., Long, F., & Ding, C. (2005). Feature selection based on mutual
information criteria of max-dependency, max-relevance, and min-redundancy.
IEEE Transactions on pattern analysis and machine intelligence, 27(8), 1226-1238.
"""

import logging
from dataclasses import asdict, dataclass
from typing import List, Sequence, TextIO

import numpy as np
import pandas as pd
from tqdm import tqdm

from .errors import InvalidIndexError

logger = logging.getLogger(__name__)

_EPSILON = np.finfo(np.float64).eps

RANKING_COLUMNS = ['Rank', 'Index', 'Name', 'Entropy', 'MutualInformation', 'mRMRScore']


@dataclass(frozen=True)
class RankRecord:
    """One row of the ranking output."""

    rank: int
    attribute_index: int
    name: str
    entropy: float
    relevance: float
    score: float


class MrmrSelector:
    """
    Greedy mRMR ranker over a discretized Dataset.

    The output always starts with the class attribute at rank 0 (score NaN),
    followed by informative attributes in selection order, followed by
    zero-entropy attributes in index order (score -inf).

    Parameters:
    -----------
    class_attribute_index : int
        0-based index of the class attribute
    verbose : int
        Verbosity level (0: silent, 1: progress bar)
    """

    def __init__(self, class_attribute_index=0, verbose=0):
        self.class_attribute_index = class_attribute_index
        self.verbose = verbose

        self.records = []
        self.relevance = None
        self.redundancy = None
        self.useless_attributes = []

    def fit(self, dataset):
        """
        Rank every attribute of the dataset.

        Parameters:
        -----------
        dataset : Dataset
            Discretized dataset; it is only read

        Returns:
        --------
        self : object
            Returns self
        """
        n_attributes = dataset.num_attributes
        class_index = self.class_attribute_index
        if not 0 <= class_index < n_attributes:
            raise InvalidIndexError(
                f"class attribute {class_index} outside dataset with {n_attributes} attributes"
            )

        # initializing: relevance of every informative attribute
        relevance = np.zeros(n_attributes)
        redundancy = np.zeros(n_attributes)
        pool = []
        useless = []
        for attribute_index in range(n_attributes):
            if attribute_index == class_index:
                continue
            if dataset.attribute_entropy(attribute_index) > 0:
                relevance[attribute_index] = dataset.mutual_information(class_index, attribute_index)
                pool.append(attribute_index)
            else:
                useless.append(attribute_index)
        relevance[class_index] = -np.inf
        logger.info(f"Computed relevance of {len(pool)} attributes; "
                    f"{len(useless)} attributes have zero entropy")

        # seeding: class attribute, then the most relevant attribute
        class_entropy = dataset.attribute_entropy(class_index)
        records = [RankRecord(0, class_index, dataset.attribute_name(class_index),
                              class_entropy, class_entropy, float('nan'))]

        if pool:
            best_position = 0
            for position, attribute_index in enumerate(pool):
                if relevance[attribute_index] > relevance[pool[best_position]]:
                    best_position = position
            last_selected = pool.pop(best_position)
            best_relevance = float(relevance[last_selected])
            records.append(self._record(dataset, 1, last_selected, best_relevance, best_relevance))

        # selecting
        rank = len(records)
        progress = tqdm(total=len(pool), desc="mRMR selection", disable=self.verbose < 1)
        while pool:
            best_score = -np.inf
            best_position = None
            for position, attribute_index in enumerate(pool):
                redundancy[attribute_index] += dataset.mutual_information(last_selected, attribute_index)
                score = relevance[attribute_index] - redundancy[attribute_index] / (rank - 1)
                logger.debug(f"rank {rank}: candidate {attribute_index} "
                             f"({dataset.attribute_name(attribute_index)}) score {score:.6e}")
                if score - best_score > _EPSILON:
                    best_score = score
                    best_position = position

            last_selected = pool.pop(best_position)
            records.append(self._record(dataset, rank, last_selected,
                                        float(relevance[last_selected]), float(best_score)))
            rank += 1
            progress.update(1)
        progress.close()

        # finalizing: zero-entropy attributes in index order
        for attribute_index in sorted(useless):
            records.append(RankRecord(rank, attribute_index, dataset.attribute_name(attribute_index),
                                      0.0, 0.0, float('-inf')))
            rank += 1

        self.records = records
        self.relevance = relevance
        self.redundancy = redundancy
        self.useless_attributes = sorted(useless)
        logger.info(f"Ranked {len(records)} attributes")
        return self

    @staticmethod
    def _record(dataset, rank, attribute_index, relevance, score):
        return RankRecord(rank, attribute_index, dataset.attribute_name(attribute_index),
                          dataset.attribute_entropy(attribute_index), relevance, score)

    def rank(self, dataset) -> List[RankRecord]:
        """Fit and return the ranking records."""
        return self.fit(dataset).records

    def get_support(self):
        """
        Indices of the ranked informative attributes, best first.

        Returns:
        --------
        support : np.ndarray
            Attribute indices excluding the class and zero-entropy attributes
        """
        if not self.records:
            raise ValueError("Must call fit first")
        return np.array([record.attribute_index for record in self.records[1:]
                         if np.isfinite(record.score)], dtype=int)

    def get_feature_importance(self):
        """
        Get ranking details.

        Returns:
        --------
        importance : dict
            Dictionary with selected indices, relevance, redundancy and scores
        """
        if not self.records:
            raise ValueError("Must call fit first")
        return {
            'selected_features': self.get_support(),
            'mi_with_target': self.relevance.copy(),
            'redundancy': self.redundancy.copy(),
            'feature_scores': {record.attribute_index: record.score for record in self.records},
            'useless_features': list(self.useless_attributes),
        }

    def __repr__(self):
        return (f"MrmrSelector(class_attribute_index={self.class_attribute_index}, "
                f"verbose={self.verbose})")


def rank_attributes(dataset, class_attribute_index=0, verbose=0) -> List[RankRecord]:
    """
    Quick mRMR ranking.

    Parameters:
    -----------
    dataset : Dataset
        Discretized dataset
    class_attribute_index : int
        0-based class attribute index
    verbose : int
        Verbosity level

    Returns:
    --------
    records : list of RankRecord
    """
    return MrmrSelector(class_attribute_index, verbose=verbose).rank(dataset)


def _format_number(value: float) -> str:
    return f"{value:e}"


def format_ranking_table(records: Sequence[RankRecord]) -> str:
    """Render records as the tab-separated ranking table, header included."""
    lines = ['\t'.join(RANKING_COLUMNS)]
    for record in records:
        lines.append('\t'.join([
            str(record.rank),
            str(record.attribute_index),
            record.name,
            _format_number(record.entropy),
            _format_number(record.relevance),
            _format_number(record.score),
        ]))
    return '\n'.join(lines) + '\n'


def write_ranking(stream: TextIO, records: Sequence[RankRecord]):
    stream.write(format_ranking_table(records))


def records_to_frame(records: Sequence[RankRecord]) -> pd.DataFrame:
    """Ranking records as a DataFrame with the ranking table's columns."""
    frame = pd.DataFrame([asdict(record) for record in records],
                         columns=['rank', 'attribute_index', 'name', 'entropy', 'relevance', 'score'])
    frame.columns = RANKING_COLUMNS
    return frame
