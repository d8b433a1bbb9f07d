# share_router.py - page configuration kept in the URL query string
from urllib.parse import urlencode
import streamlit as st

from share_io import DEFAULT_ROOT
from share_treemap import DEFAULT_HEIGHT, DEFAULT_WIDTH

DEFAULTS = {
    "root": DEFAULT_ROOT,
    "category": "item_category_name",
    "item": "item_name",
    "value": "item_cnt_day",
    "width": str(DEFAULT_WIDTH),
    "height": str(DEFAULT_HEIGHT),
    "top_n": "0",     # 0 = keep every item
}

INT_KEYS = ("width", "height", "top_n")
INT_RANGES = {
    "width": (100, 4000),
    "height": (100, 4000),
    "top_n": (0, 500),
}
TOP_N_MAX = INT_RANGES["top_n"][1]


def _qp_get() -> dict:
    out = {}
    for k, v in dict(st.query_params).items():
        if isinstance(v, list):
            out[k] = (v[0] if v else "")
        else:
            out[k] = "" if v is None else str(v)
    return out


def _qp_set(d: dict) -> None:
    d2 = {k: ("" if v is None else str(v)) for k, v in d.items()}
    st.query_params.clear()
    st.query_params.update(d2)


def coerce_state(q: dict) -> dict:
    s = {**DEFAULTS, **{k: q.get(k, DEFAULTS[k]) or DEFAULTS[k] for k in DEFAULTS}}
    for k in INT_KEYS:
        try:
            s[k] = int(s[k])
        except (TypeError, ValueError):
            s[k] = int(DEFAULTS[k])
        lo, hi = INT_RANGES[k]
        s[k] = min(max(s[k], lo), hi)
    return s


def get_state() -> dict:
    return coerce_state(_qp_get())


def set_state(**updates) -> None:
    s = get_state()
    for k, v in updates.items():
        if v is None:
            s.pop(k, None)
        else:
            s[k] = v
    _qp_set(s)


def share_url(**overrides) -> str:
    """Query string reproducing the current page settings, for a shareable link."""
    s = {**get_state(), **overrides}
    q = urlencode({k: ("" if v is None else str(v)) for k, v in s.items() if v is not None})
    return f"?{q}" if q else "."
