"""Tests for row-table helpers."""

import pandas as pd
import pytest

from share_aggregator import MalformedTableError, Row, build_totals
from share_io import as_rows, collapse_others, rows_from_frame


class TestAsRows:
    """Tests for as_rows."""

    def test_from_tuples(self):
        rows = as_rows([("A", "", 0), ("B", "A", "12")])
        assert rows == [Row("A", "", 0), Row("B", "A", 12)]

    def test_from_frame_uses_first_three_columns(self):
        df = pd.DataFrame({"n": ["A", "B"], "p": ["", "A"], "v": [0, 2.5], "extra": [1, 2]})
        assert as_rows(df) == [Row("A", "", 0), Row("B", "A", 2.5)]

    def test_frame_with_too_few_columns(self):
        with pytest.raises(MalformedTableError):
            as_rows(pd.DataFrame({"n": ["A"], "p": [""]}))

    def test_bad_value(self):
        with pytest.raises(MalformedTableError, match="non-numeric"):
            as_rows([("A", "", "n/a")])


class TestRowsFromFrame:
    """Tests for rows_from_frame."""

    @pytest.fixture
    def sales(self):
        return pd.DataFrame(
            {
                "category": ["Food", "Food", "Toys", "Food", "Toys"],
                "item": ["Bread", "Milk", "Ball", "Bread", "Kite"],
                "sold": [100, 750, 1000, 150, 30],
            }
        )

    def test_root_then_categories_then_items(self, sales):
        rows = rows_from_frame(sales, "category", "item", "sold", root="Sales")
        assert rows[0] == Row("Sales", "", 0)
        assert rows[1:3] == [Row("Food", "Sales", 0), Row("Toys", "Sales", 0)]
        assert rows[3:] == [
            Row("Milk", "Food", 750),
            Row("Bread", "Food", 250),
            Row("Ball", "Toys", 1000),
            Row("Kite", "Toys", 30),
        ]

    def test_feeds_build_totals(self, sales):
        totals = build_totals(rows_from_frame(sales, "category", "item", "sold"))
        assert totals["Sales"] == 2030
        assert totals["Food"] == 1000
        assert totals["Toys"] == 1030

    def test_missing_columns(self, sales):
        with pytest.raises(ValueError, match="Missing required columns"):
            rows_from_frame(sales, "category", "item", "revenue")

    def test_category_named_like_root(self):
        df = pd.DataFrame({"c": ["Sales", "Toys"], "i": ["Bread", "Ball"], "v": [5, 7]})
        with pytest.raises(MalformedTableError, match="same name as the root"):
            rows_from_frame(df, "c", "i", "v", root="Sales")

    def test_item_named_like_category(self):
        df = pd.DataFrame({"c": ["Food", "Toys"], "i": ["Toys", "Ball"], "v": [1, 2]})
        with pytest.raises(MalformedTableError, match="collide"):
            rows_from_frame(df, "c", "i", "v")


class TestCollapseOthers:
    """Tests for collapse_others."""

    @pytest.fixture
    def rows(self):
        return [
            Row("Sales", "", 0),
            Row("Food", "Sales", 0),
            Row("Toys", "Sales", 0),
            Row("a", "Food", 50),
            Row("b", "Food", 10),
            Row("c", "Food", 30),
            Row("d", "Food", 20),
            Row("e", "Toys", 5),
        ]

    def test_keeps_top_n_per_category(self, rows):
        out = collapse_others(rows, 2)
        names = [r.name for r in out]
        assert names[:3] == ["Sales", "Food", "Toys"]
        assert "a" in names and "c" in names and "e" in names
        assert "b" not in names and "d" not in names

    def test_folded_row(self, rows):
        out = collapse_others(rows, 2)
        others = [r for r in out if r.name.startswith("(Others:")]
        assert others == [Row("(Others: 2 items)", "Food", 30)]

    def test_totals_unchanged(self, rows):
        assert dict(build_totals(collapse_others(rows, 1))) == dict(build_totals(rows))

    def test_zero_keeps_everything(self, rows):
        assert collapse_others(rows, 0) == rows

    def test_no_items(self):
        rows = [Row("Sales", "", 0), Row("Food", "Sales", 0)]
        assert collapse_others(rows, 3) == rows
