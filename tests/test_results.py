from __future__ import annotations

import json
from pathlib import Path

import pytest

from quiz import ValidationError
from results import ResultLog, ResultLogError, validate_result


def _result(**overrides) -> dict:
    result = {"title": "math/algebra.json", "score": 3, "total": 5, "answers": {"0": ["A"], "1": ["B", "C"]}}
    result.update(overrides)
    return result


def test_load_without_file(tmp_path: Path):
    assert ResultLog(tmp_path / "results.json").load() == []


def test_append_then_load(tmp_path: Path):
    log = ResultLog(tmp_path / "results.json")

    stored = log.append(_result())
    history = log.load()

    assert history[-1] == stored
    assert stored["date"]
    assert {k: v for k, v in stored.items() if k != "date"} == _result()


def test_append_keeps_earlier_entries(tmp_path: Path):
    log = ResultLog(tmp_path / "results.json")
    first = log.append(_result(title="first"))
    second = log.append(_result(title="second"))

    assert log.load() == [first, second]


def test_append_drops_unknown_fields(tmp_path: Path):
    log = ResultLog(tmp_path / "results.json")
    stored = log.append(_result(date="1999-01-01", extra="ignored"))
    assert "extra" not in stored
    assert stored["date"] != "1999-01-01"


def test_append_creates_parent_directory(tmp_path: Path):
    log = ResultLog(tmp_path / "data" / "results.json")
    log.append(_result())
    assert json.loads((tmp_path / "data" / "results.json").read_text(encoding="utf-8"))[0]["title"] == "math/algebra.json"


def test_corrupt_file_is_not_overwritten(tmp_path: Path):
    path = tmp_path / "results.json"
    path.write_text("[{broken", encoding="utf-8")
    log = ResultLog(path)

    with pytest.raises(ResultLogError):
        log.load()
    with pytest.raises(ResultLogError):
        log.append(_result())
    assert path.read_text(encoding="utf-8") == "[{broken"


def test_non_list_file_is_rejected(tmp_path: Path):
    path = tmp_path / "results.json"
    path.write_text('{"title": "x"}', encoding="utf-8")
    with pytest.raises(ResultLogError):
        ResultLog(path).load()


def test_unwritable_location(tmp_path: Path):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    with pytest.raises(ResultLogError):
        ResultLog(blocker / "results.json").append(_result())


@pytest.mark.parametrize(
    "data",
    [
        None,
        [],
        _result(title=""),
        _result(title="   "),
        _result(title=7),
        _result(score=-1),
        _result(score=6),
        _result(score="3"),
        _result(total=True),
        _result(answers=["A"]),
        _result(answers={"0": "A"}),
        _result(answers={"0": [1]}),
        _result(score=float("nan")),
        _result(score=float("inf"), total=float("inf")),
        _result(total=float("nan")),
        _result(answers={"first": ["A"]}),
        _result(answers={"-1": ["A"]}),
    ],
)
def test_validate_result_rejects(data):
    with pytest.raises(ValidationError):
        validate_result(data)


def test_validate_result_accepts_edges():
    assert validate_result(_result(score=0, total=0))["score"] == 0
    assert validate_result(_result(score=5, total=5, answers={}))["answers"] == {}


def test_validate_result_cleans_fields():
    clean = validate_result(_result(title="  Combined-All-6  ", score=2.5))
    assert clean == {"title": "Combined-All-6", "score": 2.5, "total": 5, "answers": {"0": ["A"], "1": ["B", "C"]}}
    assert isinstance(validate_result(_result())["score"], int)


def test_validate_result_reports_field():
    with pytest.raises(ValidationError) as excinfo:
        validate_result(_result(title=""))
    assert "title" in str(excinfo.value)
