# share_page.py - Sales share treemap page (streamlit run share_page.py)
from __future__ import annotations
import logging

import pandas as pd
import streamlit as st

from common_header import top_nav
from share_aggregator import MalformedTableError
from share_io import collapse_others, rows_from_frame
from share_router import TOP_N_MAX, get_state, set_state, share_url
from share_treemap import LibraryNotReadyError, ShareTreemapOptions, load_backend, render_share_treemap

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

top_nav("Sales Share")
st.title("Sales share - Category > Item")
st.caption("Hover a tile for its share of the parent category. Small items can be folded into (Others).")


@st.cache_resource(show_spinner=False)
def _backend():
    return load_backend()


state = get_state()

upload = st.file_uploader("Sales CSV", type=["csv"])
if upload is None:
    st.info("Upload a CSV with a category, an item and a numeric value column.")
    st.stop()

df = pd.read_csv(upload)
df.columns = df.columns.str.strip()
cols = list(df.columns)


def _idx(name: str) -> int:
    return cols.index(name) if name in cols else 0


c1, c2, c3, c4 = st.columns([1.0, 1.0, 1.0, 0.6], gap="small")
with c1:
    st.caption("Category column")
    category = st.selectbox("", cols, index=_idx(state["category"]), key="sh_category", label_visibility="collapsed")
with c2:
    st.caption("Item column")
    item = st.selectbox("", cols, index=_idx(state["item"]), key="sh_item", label_visibility="collapsed")
with c3:
    st.caption("Value column")
    value = st.selectbox("", cols, index=_idx(state["value"]), key="sh_value", label_visibility="collapsed")
with c4:
    st.caption("Top-N per category (0 = All)")
    top_n = int(st.number_input("", min_value=0, max_value=TOP_N_MAX, value=state["top_n"], step=5,
                                key="sh_topn", label_visibility="collapsed"))

set_state(category=category, item=item, value=value, top_n=top_n)
st.caption(f"Link to this view: `{share_url()}`")

try:
    rows = rows_from_frame(df, category, item, value, root=state["root"])
    rows = collapse_others(rows, top_n)
    render_share_treemap(
        st.container(),
        rows,
        state["width"],
        state["height"],
        backend=_backend(),
        options=ShareTreemapOptions(title=f"{state['root']} share by category"),
    )
except (ValueError, LibraryNotReadyError) as e:
    kind = "Malformed table" if isinstance(e, MalformedTableError) else "Cannot render"
    st.error(f"{kind}: {e}")
    st.stop()
