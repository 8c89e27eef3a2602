import io

import numpy as np
import pandas as pd
import pytest
from scipy.stats import entropy as scipy_entropy
from sklearn.metrics import mutual_info_score

from mrmr_ranker import (
    CodeOverflowError,
    ConstructionError,
    Dataset,
    DiscretizationMethod,
    FormatError,
    InvalidIndexError,
    RepresentationError,
)


def test_round_trip_reproduces_input(toy_dataset, toy_text):
    assert toy_dataset.to_string() == toy_text


def test_shape_and_names(toy_dataset):
    assert toy_dataset.num_instances == 6
    assert toy_dataset.num_attributes == 3
    assert toy_dataset.attribute_names == ["class", "attr1", "attr2"]
    assert toy_dataset.attribute_name(2) == "attr2"


def test_attribute_entropy(toy_dataset):
    assert toy_dataset.attribute_entropy(0) == 1.0
    assert toy_dataset.attribute_entropy(1) == 1.0
    assert round(toy_dataset.attribute_entropy(2) * 1e12) == 650022421648


def test_mutual_information(toy_dataset):
    assert round(toy_dataset.mutual_information(0, 1) * 1e7) == 817042
    assert round(toy_dataset.mutual_information(0, 2) * 1e7) == 1908745


def test_mutual_information_is_symmetric(toy_dataset):
    assert toy_dataset.mutual_information(1, 2) == pytest.approx(toy_dataset.mutual_information(2, 1))


def test_mutual_information_with_itself_is_entropy(toy_dataset):
    assert toy_dataset.mutual_information(2, 2) == pytest.approx(toy_dataset.attribute_entropy(2))


def test_matches_reference_estimators():
    rng = np.random.default_rng(7)
    block = rng.integers(0, 5, size=(200, 3)).astype(float)
    block[:, 2] = block[:, 0] + rng.integers(0, 2, size=200)
    dataset = Dataset.from_values(block.ravel(), 200, 3)

    for attribute in range(3):
        _, counts = np.unique(block[:, attribute], return_counts=True)
        assert dataset.attribute_entropy(attribute) == pytest.approx(scipy_entropy(counts, base=2))

    expected = mutual_info_score(block[:, 0], block[:, 2]) / np.log(2)
    assert dataset.mutual_information(0, 2) == pytest.approx(expected)


def test_constant_attribute_has_zero_information():
    dataset = Dataset.from_values([0, 3, 1, 3, 0, 3, 1, 3], 4, 2)
    assert dataset.num_values(1) == 1
    assert dataset.attribute_entropy(1) == 0.0
    assert dataset.mutual_information(0, 1) == 0.0
    assert dataset.mutual_information(1, 0) == 0.0


def test_codes_are_translated_to_start_at_zero():
    dataset = Dataset.from_values([5, -3, 7, -1, 6, -2], 3, 2)
    assert dataset.codes(0).tolist() == [0, 2, 1]
    assert dataset.codes(1).tolist() == [0, 2, 1]
    assert dataset.codes(0).dtype == np.uint8


def test_gap_codes_do_not_produce_nan():
    dataset = Dataset.from_values([0, 0, 2, 1, 2, 1, 0, 0], 4, 2)
    assert dataset.num_values(0) == 3
    assert dataset.histogram(0).marginal_probability(1) == 0.0
    assert np.isfinite(dataset.attribute_entropy(0))
    assert np.isfinite(dataset.mutual_information(0, 1))


def test_discretization_method_is_applied():
    text = "a\tb\n0.6\t1\n1.4\t0\n"
    rounded = Dataset.read(io.StringIO(text), method=DiscretizationMethod.ROUND)
    truncated = Dataset.read(io.StringIO(text), method=DiscretizationMethod.TRUNCATE)
    assert rounded.num_values(0) == 1
    assert truncated.codes(0).tolist() == [0, 1]


def test_alternative_delimiter(toy_text):
    dataset = Dataset.read(io.StringIO(toy_text.replace('\t', ',')), delimiter=',')
    assert dataset.attribute_names == ["class", "attr1", "attr2"]
    assert dataset.to_string(',') == toy_text.replace('\t', ',')


def test_missing_header_newline():
    with pytest.raises(FormatError, match="newline after header"):
        Dataset.read(io.StringIO("class\tattr1"))


def test_header_only_input_has_no_instances():
    with pytest.raises(FormatError, match="no instances"):
        Dataset.read(io.StringIO("class\tattr1\n"))


def test_column_count_differs_from_header():
    with pytest.raises(FormatError) as excinfo:
        Dataset.read(io.StringIO("a\tb\tc\n0\t1\n0\t1\n"))
    assert excinfo.value.line == 2


def test_inconsistent_row_names_file_line():
    with pytest.raises(FormatError) as excinfo:
        Dataset.read(io.StringIO("a\tb\n0\t1\n0\t1\n0\n"))
    assert excinfo.value.line == 4


def test_overflow_names_file_line_and_column():
    with pytest.raises(CodeOverflowError) as excinfo:
        Dataset.read(io.StringIO("a\tb\n0\t1\n0\t256\n"))
    assert excinfo.value.line == 3
    assert excinfo.value.column == 2


def test_range_wider_than_capacity_is_rejected():
    with pytest.raises(RepresentationError) as excinfo:
        Dataset.read(io.StringIO("a\twide\n0\t-200\n1\t200\n"))
    assert excinfo.value.attribute == "wide"


def test_wider_code_width_accepts_wide_range():
    dataset = Dataset.read(io.StringIO("a\twide\n0\t-200\n1\t200\n"), code_width=1000)
    assert dataset.num_values(1) == 401
    assert dataset.codes(1).dtype == np.uint16


def test_from_values_column_major_matches_row_major():
    row_major = Dataset.from_values([0, 1, 1, 1, 0, 0], 3, 2, names=["x", "y"])
    column_major = Dataset.from_values([0, 1, 0, 1, 1, 0], 3, 2, column_major=True,
                                       names=["x", "y"])
    assert row_major.to_string() == column_major.to_string()


def test_from_values_default_names():
    assert Dataset.from_values([0, 1], 1, 2).attribute_names == ["attr0", "attr1"]
    assert Dataset.from_values([0, 1], 1, 2, names=[]).attribute_names == ["attr0", "attr1"]


def test_method_given_by_name():
    text = "class\tlevel\n0\t2.5\n1\t3.2\n"
    by_name = Dataset.read(io.StringIO(text), method="round")
    by_member = Dataset.read(io.StringIO(text), method=DiscretizationMethod.ROUND)
    assert by_name.to_string() == by_member.to_string() == "class\tlevel\n0\t0\n1\t0\n"


def test_from_values_dimension_mismatch():
    with pytest.raises(ConstructionError):
        Dataset.from_values([0, 1, 2], 2, 2)
    with pytest.raises(ConstructionError):
        Dataset.from_values([0, 1, 2, 3], 2, 2, names=["only"])


def test_from_dataframe_and_to_frame():
    frame = pd.DataFrame({"class": [0, 0, 1, 1], "level": [2.2, 3.1, 3.9, 4.4]})
    dataset = Dataset.from_dataframe(frame)
    assert dataset.attribute_names == ["class", "level"]
    codes = dataset.to_frame()
    assert list(codes.columns) == ["class", "level"]
    assert codes["level"].tolist() == [0, 1, 2, 2]


def test_from_dataframe_rejects_text_columns():
    with pytest.raises(ConstructionError):
        Dataset.from_dataframe(pd.DataFrame({"a": ["x", "y"]}))


def test_invalid_attribute_index(toy_dataset):
    with pytest.raises(InvalidIndexError):
        toy_dataset.attribute_entropy(3)
    with pytest.raises(InvalidIndexError):
        toy_dataset.mutual_information(0, 7)
    with pytest.raises(InvalidIndexError):
        toy_dataset.attribute_name(-1)
