"""
Attribute ranking by minimum-Redundancy-Maximum-Relevance (mRMR).

This package ranks the attributes of a tabular dataset against a class
attribute using discrete information-theoretic measures:
1. DenseMatrix: numeric storage with delimited text ingestion
2. AttributeHistogram: per-attribute distribution and entropy
3. Dataset: discretization and pairwise mutual information
4. MrmrSelector: greedy mRMR ranking
"""

__version__ = "1.0.0"

from .config import DiscretizationMethod, RankingConfig
from .dataset import Dataset
from .errors import (
    CodeOverflowError,
    ConstructionError,
    FormatError,
    InvalidIndexError,
    MrmrError,
    RepresentationError,
)
from .histogram import AttributeHistogram
from .matrix import DelimiterTokenizer, DenseMatrix
from .selector import (
    MrmrSelector,
    RankRecord,
    format_ranking_table,
    rank_attributes,
    records_to_frame,
    write_ranking,
)

__all__ = [
    "AttributeHistogram",
    "CodeOverflowError",
    "ConstructionError",
    "Dataset",
    "DelimiterTokenizer",
    "DenseMatrix",
    "DiscretizationMethod",
    "FormatError",
    "InvalidIndexError",
    "MrmrError",
    "MrmrSelector",
    "RankRecord",
    "RankingConfig",
    "RepresentationError",
    "format_ranking_table",
    "rank_attributes",
    "records_to_frame",
    "write_ranking",
]
