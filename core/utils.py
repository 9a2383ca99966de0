from __future__ import annotations

from typing import Iterable, Optional

import pandas as pd

from .schema import SchemaError


def require_columns(df: pd.DataFrame, cols: Iterable[str], *, source: Optional[str] = None) -> None:
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise SchemaError(missing, source=source)


def normalize_header(name) -> str:
    """'Accident Year ' -> 'accident_year'."""
    text = str(name).strip().lower()
    for ch in (" ", "-", "."):
        text = text.replace(ch, "_")
    while "__" in text:
        text = text.replace("__", "_")
    return text.strip("_")


def is_integral(values: pd.Series) -> pd.Series:
    """Elementwise: True where the value is a finite whole number (NaN -> False)."""
    num = pd.to_numeric(values, errors="coerce").astype(float)
    return num.notna() & (num % 1 == 0)
