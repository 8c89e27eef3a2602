import logging

import pytest

from mrmr_ranker import Dataset, rank_attributes
from mrmr_ranker.utils import log_step, parse_verbosity, ranking_summary, select_top_attributes


@pytest.mark.parametrize("text, level", [
    ("0", logging.CRITICAL),
    ("quiet", logging.CRITICAL),
    ("1", logging.WARNING),
    ("info", logging.INFO),
    ("3", logging.DEBUG),
    ("DEBUG", logging.DEBUG),
])
def test_parse_verbosity(text, level):
    assert parse_verbosity(text) == level


def test_parse_verbosity_rejects_unknown():
    with pytest.raises(ValueError):
        parse_verbosity("loud")


def test_log_step_reports_duration(caplog):
    logger = logging.getLogger("mrmr_ranker.test")
    with caplog.at_level(logging.INFO, logger="mrmr_ranker.test"):
        with log_step("Working...", logger):
            pass
    messages = [record.getMessage() for record in caplog.records]
    assert messages[0] == "Working..."
    assert messages[1].startswith("DONE (") and messages[1].endswith(" seconds)")


def test_select_top_attributes_skips_class_and_useless():
    dataset = Dataset.from_values([0, 0, 4, 1, 1, 4, 0, 1, 4, 1, 0, 4], 4, 3)
    records = rank_attributes(dataset, 0)
    assert select_top_attributes(records, 5) == [1]
    assert select_top_attributes(records, 0) == []


def test_ranking_summary(toy_dataset):
    summary = ranking_summary(rank_attributes(toy_dataset, 0))
    assert "Class attribute: class" in summary
    assert "Ranked 2 attributes, 0 with zero entropy" in summary
    assert "attr2" in summary
