import pandas as pd

from core.config import TriangleConfig
from data_prep.merger import merge_claims
from data_prep.validators import validate_claims


def test_clean_table_passes(merged_claims):
    result = validate_claims(merged_claims)
    assert result.is_valid
    assert result.warnings == []
    assert result.summary() == f"{len(merged_claims):,} claim rows checked, no issues."


def test_missing_columns_is_an_error():
    result = validate_claims(pd.DataFrame({"paid": [1.0]}))
    assert not result.is_valid
    assert "Missing required columns" in result.errors[0]


def test_empty_table_is_a_warning():
    result = validate_claims(merge_claims([]))
    assert result.is_valid
    assert result.warnings == ["Claim table is empty (0 rows)."]


def test_evaluation_before_origin_is_an_error():
    df = pd.DataFrame({"file_year": [2010, 2009], "accident_year": [2010, 2011], "paid": [1.0, 2.0]})
    result = validate_claims(df)
    assert not result.is_valid
    assert any("file_year before accident_year" in e and "(2011, 2009)" in e for e in result.errors)


def test_null_and_fractional_years():
    df = pd.DataFrame({
        "file_year": [2010.0, None],
        "accident_year": [2009.5, 2010.0],
        "paid": [1.0, 2.0],
    })
    result = validate_claims(df)
    assert "1 rows have null/unparseable file_year." in result.errors
    assert "1 rows have non-integral accident_year." in result.errors


def test_value_and_duplicate_warnings():
    df = pd.DataFrame({
        "file_year": [2010, 2010, 2010, 2010],
        "accident_year": [2010, 2010, 2010, 2010],
        "paid": [5.0, 5.0, -1.0, None],
    })
    result = validate_claims(df)
    assert result.is_valid
    assert "1 rows have null/unparseable paid." in result.warnings
    assert "1 rows have negative paid." in result.warnings
    assert any("duplicate" in w for w in result.warnings)
    assert result.has_warnings
    summary = result.summary().splitlines()
    assert summary[0] == "4 claim rows checked:"
    assert "  warning: 1 rows have negative paid." in summary


def test_uses_configured_value_column():
    cfg = TriangleConfig(
        required_columns=("file_year", "accident_year", "incurred"),
        value_column="incurred",
    )
    df = pd.DataFrame({"file_year": [2010], "accident_year": [2010], "incurred": [-3.0]})
    result = validate_claims(df, cfg)
    assert result.warnings == ["1 rows have negative incurred."]


def test_summary_lists_errors_before_warnings():
    df = pd.DataFrame({"file_year": [2009, 2010], "accident_year": [2010, 2010], "paid": [-1.0, 2.0]})
    result = validate_claims(df)
    lines = result.summary().splitlines()
    assert lines[0] == "2 claim rows checked:"
    assert lines[1].startswith("  error: ") and "file_year before accident_year" in lines[1]
    assert lines[-1] == "  warning: 1 rows have negative paid."
