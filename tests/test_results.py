import numpy as np

from csvinference.model.results import ResultRecord, format_output, format_summary


def test_format_output_floats_keep_one_decimal():
    assert format_output(np.float32(3.0)) == "3.0"
    assert format_output(np.float32(7.0)) == "7.0"
    assert format_output(0.25) == "0.25"


def test_format_output_float32_uses_shortest_repr():
    assert format_output(np.float32(0.1)) == "0.1"


def test_format_output_integers_and_bools():
    assert format_output(np.int64(2)) == "2"
    assert format_output(np.bool_(True)) == "True"


def test_format_summary():
    records = [ResultRecord("A", "1.0"), ResultRecord("B", "2.0")]
    assert format_summary(records) == "Processed 2 rows"
    assert format_summary([]) == "Processed 0 rows"
