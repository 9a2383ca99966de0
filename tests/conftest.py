import sys
from pathlib import Path

import pandas as pd
import pytest

# Make project root importable
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))


def write_listing(path: Path, df: pd.DataFrame) -> Path:
    """Write a claim listing as .xlsx or .csv depending on the suffix."""
    if path.suffix == ".csv":
        df.to_csv(path, index=False)
    else:
        df.to_excel(path, index=False, engine="openpyxl")
    return path


@pytest.fixture
def listings():
    """
    Three evaluation years of claim listings.

    Expected paid triangle (sum):
                 0      12     24
        2010   150     200    300
        2011    80     120
        2012     0
    """
    fy2010 = pd.DataFrame({
        "claim_id": ["C1", "C2"],
        "file_year": [2010, 2010],
        "accident_year": [2010, 2010],
        "paid": [100.0, 50.0],
        "status": ["open", "closed"],
    })
    # Different header spellings and an extra column
    fy2011 = pd.DataFrame({
        "Claim ID": ["C1", "C3"],
        "File Year": [2011, 2011],
        "Accident Year": [2010, 2011],
        "Paid Loss": [200.0, 80.0],
        "Incurred": [250.0, 90.0],
    })
    fy2012 = pd.DataFrame({
        "file_year": [2012, 2012, 2012, 2012],
        "accident_year": [2010, 2011, 2011, 2012],
        "paid": [300.0, 70.0, 50.0, 0.0],
        "adjuster": ["A", "B", "B", "C"],
    })
    return {"claims_2010.xlsx": fy2010, "claims_2011.xlsx": fy2011, "claims_2012.csv": fy2012}


@pytest.fixture
def claims_dir(tmp_path, listings):
    d = tmp_path / "claims"
    d.mkdir()
    for name, df in listings.items():
        write_listing(d / name, df)
    return d


@pytest.fixture
def merged_claims():
    return pd.DataFrame({
        "file_year": [2010, 2010, 2011, 2011, 2012, 2012, 2012],
        "accident_year": [2010, 2010, 2010, 2011, 2010, 2011, 2012],
        "paid": [100.0, 50.0, 200.0, 80.0, 300.0, 120.0, 0.0],
    })


@pytest.fixture
def expected_cells():
    return {
        (2010, 0): 150.0,
        (2010, 12): 200.0,
        (2010, 24): 300.0,
        (2011, 0): 80.0,
        (2011, 12): 120.0,
        (2012, 0): 0.0,
    }
