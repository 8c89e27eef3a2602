import io

import pytest

from mrmr_ranker import Dataset, DiscretizationMethod

TOY_TEXT = (
    "class\tattr1\tattr2\n"
    "0\t0\t1\n"
    "0\t1\t1\n"
    "0\t0\t0\n"
    "1\t1\t1\n"
    "1\t0\t1\n"
    "1\t1\t1\n"
)


class TableDataset:
    """Dataset stand-in answering entropy and MI queries from fixed tables."""

    def __init__(self, entropies, mutual_information):
        self.entropies = list(entropies)
        self.table = mutual_information
        self.calls = []

    @property
    def num_attributes(self):
        return len(self.entropies)

    def attribute_name(self, attribute_num):
        return f"a{attribute_num}"

    def attribute_entropy(self, attribute_num):
        return self.entropies[attribute_num]

    def mutual_information(self, attribute1, attribute2):
        self.calls.append((attribute1, attribute2))
        return self.table[frozenset((attribute1, attribute2))]


@pytest.fixture
def toy_text():
    return TOY_TEXT


@pytest.fixture
def toy_dataset():
    return Dataset.read(io.StringIO(TOY_TEXT), method=DiscretizationMethod.ROUND)
