# share_io.py - build and reshape (name, parent, value) row tables
from __future__ import annotations
import logging
from typing import Sequence

import pandas as pd

from share_aggregator import MalformedTableError, Row

logger = logging.getLogger(__name__)

DEFAULT_ROOT = "Sales"


def _numify(v):
    """Plain int/float from a cell; integral values stay ints."""
    x = pd.to_numeric(v, errors="coerce")
    if pd.isna(x):
        return None
    x = float(x)
    return int(x) if x.is_integer() else x


def as_rows(table) -> list[Row]:
    """Normalise a DataFrame (first three columns) or a sequence of triples into Rows."""
    if isinstance(table, pd.DataFrame):
        if table.shape[1] < 3:
            raise MalformedTableError(f"Need 3 columns (name, parent, value), got {list(table.columns)}")
        records = table.iloc[:, :3].itertuples(index=False, name=None)
    else:
        records = table

    out = []
    for i, rec in enumerate(records):
        try:
            name, parent, value = rec
        except (TypeError, ValueError):
            raise MalformedTableError(f"Row {i} is not a (name, parent, value) record: {rec!r}") from None
        num = _numify(value)
        if num is None:
            raise MalformedTableError(f"Row {i} ({name!r}) has a non-numeric value: {value!r}")
        out.append(Row("" if pd.isna(name) else str(name), "" if pd.isna(parent) else str(parent), num))
    return out


def rows_from_frame(
    df: pd.DataFrame,
    category: str,
    item: str,
    value: str,
    root: str = DEFAULT_ROOT,
) -> list[Row]:
    """
    Turn a long sales frame into an ordered treemap table:
    root first, then every category (value 0), then items by value desc within category.
    """
    need = {category, item, value}
    missing = need - set(df.columns)
    if missing:
        raise ValueError(f"Missing required columns: {missing}")

    d = df[[category, item, value]].copy()
    d[category] = d[category].astype(str).str.strip()
    d[item] = d[item].astype(str).str.strip()
    d[value] = pd.to_numeric(d[value], errors="coerce").fillna(0)

    agg = (
        d.groupby([category, item], as_index=False)[value]
        .sum()
        .sort_values([category, value], ascending=[True, False])
    )

    if root in set(agg[category]):
        raise MalformedTableError(f"Category {root!r} has the same name as the root")
    clash = set(agg[item]) & (set(agg[category]) | {root})
    if clash:
        raise MalformedTableError(f"Item names collide with category/root names: {sorted(clash)}")

    rows = [Row(root, "", 0)]
    rows += [Row(c, root, 0) for c in agg[category].drop_duplicates()]
    rows += [Row(r[item], r[category], _numify(r[value])) for _, r in agg.iterrows()]
    logger.debug("Built %d rows (%d categories) from frame", len(rows), agg[category].nunique())
    return rows


def collapse_others(rows: Sequence, top_n: int) -> list[Row]:
    """
    Keep the top_n largest items of each category and fold the rest into one
    '(Others: k items)' row per category. top_n <= 0 keeps every item.
    """
    rows = as_rows(rows)
    if not rows or not top_n or top_n <= 0:
        return rows

    root = rows[0].name
    head = [r for r in rows if r.name == root or r.parent == root]
    items = pd.DataFrame([r for r in rows if not (r.name == root or r.parent == root)], columns=Row._fields)
    if items.empty:
        return rows

    items["_rank"] = (
        items.sort_values("value", ascending=False, kind="stable")
        .groupby("parent", sort=False)
        .cumcount()
    )
    keep = items[items["_rank"] < top_n]
    rest = items[items["_rank"] >= top_n]

    out = head + [Row(r.name, r.parent, _numify(r.value)) for r in keep.itertuples(index=False)]
    if not rest.empty:
        folded = rest.groupby("parent", sort=False).agg(n=("name", "size"), value=("value", "sum"))
        for parent, r in folded.iterrows():
            out.append(Row(f"(Others: {int(r['n'])} items)", parent, _numify(r["value"])))
        logger.debug("Folded %d items into %d Others rows", len(rest), len(folded))
    return out
