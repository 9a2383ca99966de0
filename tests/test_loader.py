import logging

import pandas as pd
import pytest

from conftest import write_listing
from core.schema import CLAIM_COLUMNS, SchemaError
from data_prep.loader import (
    canonicalize_columns,
    list_claim_files,
    load_claim_files,
    load_claims,
    read_claims_file,
)


def test_load_claims_keeps_only_required_columns_in_order(claims_dir):
    df = load_claims(claims_dir / "claims_2010.xlsx")
    assert list(df.columns) == list(CLAIM_COLUMNS)
    assert df["paid"].tolist() == [100.0, 50.0]
    assert df["accident_year"].tolist() == [2010, 2010]


def test_load_claims_resolves_header_aliases(claims_dir):
    df = load_claims(claims_dir / "claims_2011.xlsx")
    assert list(df.columns) == ["file_year", "accident_year", "paid"]
    assert df["paid"].tolist() == [200.0, 80.0]


def test_load_claims_reads_csv(claims_dir):
    df = load_claims(claims_dir / "claims_2012.csv")
    assert len(df) == 4
    assert str(df["file_year"].dtype) == "Int64"
    assert df["paid"].dtype == float


def test_load_claims_missing_column_raises_schema_error(tmp_path):
    path = write_listing(
        tmp_path / "no_paid.xlsx",
        pd.DataFrame({"file_year": [2010], "accident_year": [2010], "incurred": [5.0]}),
    )
    with pytest.raises(SchemaError) as exc:
        load_claims(path)
    assert exc.value.missing == ["paid"]
    assert exc.value.source == "no_paid.xlsx"
    assert isinstance(exc.value, ValueError)


def test_load_claims_non_numeric_values_become_missing(tmp_path, caplog):
    path = write_listing(
        tmp_path / "text.csv",
        pd.DataFrame({"file_year": [2010, 2010], "accident_year": [2010, 2010], "paid": ["10", "abc"]}),
    )
    with caplog.at_level(logging.WARNING):
        df = load_claims(path)
    assert df["paid"].iloc[0] == 10.0
    assert pd.isna(df["paid"].iloc[1])
    assert "non-numeric paid" in caplog.text


def test_read_claims_file_rejects_unknown_suffix(tmp_path):
    path = tmp_path / "claims.json"
    path.write_text("{}")
    with pytest.raises(ValueError, match="Unsupported"):
        read_claims_file(path)


def test_canonicalize_columns_coalesces_duplicates():
    df = pd.DataFrame({"Paid": [1.0, None], "Paid Loss": [9.0, 2.0]})
    out = canonicalize_columns(df)
    assert list(out.columns) == ["paid"]
    assert out["paid"].tolist() == [1.0, 2.0]


def test_list_claim_files_sorted_and_filtered(claims_dir):
    (claims_dir / "~$claims_2010.xlsx").write_bytes(b"lock")
    (claims_dir / "notes.txt").write_text("ignore me")
    names = [p.name for p in list_claim_files(claims_dir)]
    assert names == ["claims_2010.xlsx", "claims_2011.xlsx", "claims_2012.csv"]


def test_list_claim_files_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        list_claim_files(tmp_path / "nope")


def test_load_claim_files_skips_bad_file(claims_dir, caplog):
    bad = write_listing(
        claims_dir / "claims_2009.xlsx",
        pd.DataFrame({"file_year": [2009], "paid": [1.0]}),
    )
    paths = list_claim_files(claims_dir)
    with caplog.at_level(logging.WARNING):
        tables, failures = load_claim_files(paths)
    assert len(tables) == 3
    assert [f.path for f in failures] == [str(bad)]
    assert failures[0].error.missing == ["accident_year"]
    assert "Skipping claims_2009.xlsx" in caplog.text


def test_load_claim_files_raise_mode(claims_dir):
    write_listing(claims_dir / "claims_2009.xlsx", pd.DataFrame({"file_year": [2009]}))
    with pytest.raises(SchemaError):
        load_claim_files(list_claim_files(claims_dir), on_error="raise")


def test_load_claim_files_thread_pool_keeps_order(claims_dir):
    paths = list_claim_files(claims_dir)
    seq, _ = load_claim_files(paths)
    par, _ = load_claim_files(paths, max_workers=3)
    assert len(seq) == len(par) == 3
    for a, b in zip(seq, par):
        pd.testing.assert_frame_equal(a, b)


def test_load_claim_files_rejects_unknown_policy(claims_dir):
    with pytest.raises(ValueError):
        load_claim_files(list_claim_files(claims_dir), on_error="ignore")


def test_load_claims_matches_requested_names_like_headers(tmp_path):
    path = write_listing(
        tmp_path / "incurred.csv",
        pd.DataFrame({"File Year": [2010, 2011], "Accident Year": [2010, 2010], "Incurred": [100.0, 250.0]}),
    )
    df = load_claims(path, ("file_year", "accident_year", "Incurred"), numeric_columns=("Incurred",))
    assert list(df.columns) == ["file_year", "accident_year", "Incurred"]
    assert df["Incurred"].tolist() == [100.0, 250.0]
