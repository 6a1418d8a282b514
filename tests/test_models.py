import json

import pytest
from pydantic import ValidationError

from models import (
    ComparisonConfig,
    ComparisonResult,
    Verdict,
    format_percentage,
    get_json_schema_str,
    verdict_for,
)


@pytest.mark.parametrize(
    "ratio,expected",
    [(0.0, "0.00%"), (1.0, "100.00%"), (2 / 3, "66.67%"), (0.5, "50.00%"), (1 / 3, "33.33%")],
)
def test_format_percentage(ratio, expected):
    assert format_percentage(ratio) == expected


@pytest.mark.parametrize(
    "score,expected",
    [
        (1.0, Verdict.HIGH_PLAGIARISM),
        (0.7, Verdict.HIGH_PLAGIARISM),
        (0.5, Verdict.SUSPICIOUS),
        (0.2, Verdict.NEEDS_REVIEW),
        (0.1, Verdict.likely_clean),
    ],
)
def test_verdict_thresholds(score, expected):
    assert verdict_for(score) == expected


def test_config_defaults():
    config = ComparisonConfig()
    assert config.tuple_size == 3
    assert config.synonyms_path is None
    assert config.encoding == "utf-8"


@pytest.mark.parametrize("size", [0, -3, True, "abc"])
def test_config_rejects_bad_tuple_size(size):
    with pytest.raises(ValidationError):
        ComparisonConfig(tuple_size=size)


def test_result_rejects_out_of_range_score():
    with pytest.raises(ValidationError):
        ComparisonResult(document="a", reference="b", tuple_size=3, score=1.5)


def test_result_dump_includes_percentage_and_verdict():
    result = ComparisonResult(
        document="a", reference="b", tuple_size=3, score=2 / 3, total_tuples=3, matched_tuples=2
    )
    data = json.loads(result.model_dump_json())
    assert data["percentage"] == "66.67%"
    assert data["verdict"] == "SUSPICIOUS"
    assert data["errors"] == []


def test_json_schema_export():
    schema = json.loads(get_json_schema_str())
    assert "summary" in schema["properties"]
