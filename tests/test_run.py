"""
tests/test_run.py — Tests for the command-line runner.
"""

import json

import run


def test_search_prints_response(capsys, catalog_path):
    assert run.main(["--catalog", catalog_path, "I feel nausea"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert [r["plant"]["name"] for r in out["results"]] == ["Ginger"]
    assert out["searchInsights"]["conditions"] == ["nausea"]


def test_insights_only(capsys):
    assert run.main(["--insights-only", "suffering from diabetes"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["extractedKeywords"] == ["suffer", "diabetes"]


def test_min_keyword_length(capsys):
    assert run.main(["--insights-only", "--min-keyword-length", "4", "tea for bp"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["extractedKeywords"] == ["hypertension"]


def test_missing_catalog(tmp_path):
    assert run.main(["--catalog", str(tmp_path / "missing.json"), "headache"]) == 2


def test_undecodable_catalog(tmp_path):
    path = tmp_path / "plants.json"
    path.write_bytes(b'\xff\xfe[{"name": "Sage"}]')
    assert run.main(["--catalog", str(path), "headache"]) == 2
