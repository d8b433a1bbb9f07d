"""Pytest configuration and shared fixtures for the sales-share treemap tests."""

import pytest

from share_aggregator import Row


@pytest.fixture
def sales_rows():
    """Root 'Sales', two categories, three items (Food = 250 + 750, Toys = 1000)."""
    return [
        Row("Sales", "", 0),
        Row("Food", "Sales", 0),
        Row("Toys", "Sales", 0),
        Row("Bread", "Food", 250),
        Row("Milk", "Food", 750),
        Row("Ball", "Toys", 1000),
    ]


class FakeStreamlitContainer:
    """Records figures passed to plotly_chart."""

    def __init__(self):
        self.charts = []

    def plotly_chart(self, fig, **kwargs):
        self.charts.append(fig)


class FakeDisplayHandle:
    """Records figures passed to update, like IPython's DisplayHandle."""

    def __init__(self):
        self.shown = []

    def update(self, obj, **kwargs):
        self.shown.append(obj)


@pytest.fixture
def st_container():
    return FakeStreamlitContainer()


@pytest.fixture
def display_handle():
    return FakeDisplayHandle()
