# share_aggregator.py - per-node totals and tooltip text for the sales-share treemap
from __future__ import annotations
import logging
import math
import numbers
import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Iterator, NamedTuple, Optional, Sequence

logger = logging.getLogger(__name__)

OTHERS_LABEL = "(Others)"
_OTHERS_PAT = re.compile(r"\(Others:")


class MalformedTableError(ValueError):
    """The row table breaks a precondition (no root, unknown parent, bad row)."""


class Row(NamedTuple):
    name: str
    parent: str
    value: float


class TotalsMap(Mapping):
    """Read-only node name → summed item value, for the root and every category."""

    def __init__(self, root: str, totals: dict):
        self.root = root
        self._totals = MappingProxyType(dict(totals))

    def __getitem__(self, name: str) -> float:
        return self._totals[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._totals)

    def __len__(self) -> int:
        return len(self._totals)

    def __repr__(self) -> str:
        return f"TotalsMap(root={self.root!r}, totals={dict(self._totals)!r})"


def _check_row(row, idx: int) -> Row:
    try:
        name, parent, value = row
    except (TypeError, ValueError):
        raise MalformedTableError(f"Row {idx} is not a (name, parent, value) record: {row!r}") from None
    if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value):
        raise MalformedTableError(f"Row {idx} ({name!r}) has a non-numeric or non-finite value: {value!r}")
    return Row(name, parent, value)


def build_totals(rows: Sequence) -> TotalsMap:
    """
    Sum item values into their category and into the root.

    rows[0] is the root. A row whose parent is the root registers a category the
    first time it is seen (its own value is not counted). Every other row is an
    item and must name a category registered earlier in the table.
    """
    if not rows:
        raise MalformedTableError("Empty table: the first row must be the root")

    root = _check_row(rows[0], 0).name
    totals = {root: 0}

    for i in range(1, len(rows)):
        name, parent, value = _check_row(rows[i], i)

        if name == root:
            continue

        if parent == root and name not in totals:
            totals[name] = 0
            continue

        if parent not in totals:
            raise MalformedTableError(
                f"Row {i} ({name!r}) references parent {parent!r} before it was declared under {root!r}"
            )
        totals[root] += value
        totals[parent] += value

    logger.debug("Built totals for %d nodes (root %r = %s)", len(totals), root, totals[root])
    return TotalsMap(root, totals)


def is_others_label(name) -> bool:
    return bool(_OTHERS_PAT.search(str(name)))


def format_thousands(x) -> str:
    """Group digits in threes with commas, independent of locale (1234567 → '1,234,567')."""
    if isinstance(x, float) and x.is_integer():
        x = int(x)
    return f"{x:,}"


def share_percent(size, parent_total) -> str:
    if not parent_total:
        return "0.00"
    return f"{round(100 * size / parent_total, 2):.2f}"


def tooltip(rows: Sequence, totals: TotalsMap, row_index: int, size) -> Optional[str]:
    """
    Hover panel for one row of the table, or None for the root.

    size is the node's displayed (aggregated) value as sized on the chart; the
    percentage is its share of the parent's total.
    """
    root = rows[0][0]
    name, parent, _ = rows[row_index]

    if name == root:
        return None

    label = OTHERS_LABEL if is_others_label(name) else name

    if parent not in totals:
        raise MalformedTableError(f"Row {row_index} ({name!r}) has no totals for parent {parent!r}")
    percentage = share_percent(size, totals[parent])

    kind = "Category" if parent == root else "Item"
    category_line = f"<br>Category: <b>{parent}</b>" if kind == "Item" else ""

    return (
        f"<b>{label}</b>"
        "<br>"
        "<br>"
        f"Type: <b>{kind}</b>"
        f"{category_line}"
        "<br>"
        f"Share: <b>{format_thousands(size)}</b> (<b>{percentage}%</b>)"
    )
