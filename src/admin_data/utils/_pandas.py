# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Internal pandas helpers"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

import pandas as pd


def records_to_dataframe(records: Sequence[Dict[str, Any]]) -> pd.DataFrame:
    """Build a DataFrame from loosely-typed records.

    Columns are the union of keys in first-seen order; missing fields become NaN.
    Nested dicts and lists are kept as cell objects, not flattened.
    """
    columns: List[str] = []
    seen = set()
    for record in records:
        for k in record:
            if k not in seen:
                seen.add(k)
                columns.append(k)
    return pd.DataFrame.from_records(list(records), columns=columns)


def dataframe_to_records(df: pd.DataFrame, na_as_null: bool = False) -> List[Dict[str, Any]]:
    """Convert a DataFrame to a list of dicts, converting Timestamps to ISO strings.

    :param df: Input DataFrame.
    :param na_as_null: When False (default), missing values are omitted from each dict.
        When True, missing values are included as None.
    """
    records = []
    for row in df.to_dict(orient="records"):
        clean = {}
        for k, v in row.items():
            if _is_missing(v):
                if na_as_null:
                    clean[k] = None
                continue
            clean[k] = v.isoformat() if isinstance(v, pd.Timestamp) else v
        records.append(clean)
    return records


def _is_missing(value: Any) -> bool:
    # pd.notna on list/dict cells returns an array, not a bool
    if isinstance(value, (list, dict, tuple)):
        return False
    return bool(pd.isna(value))
