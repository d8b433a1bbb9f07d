# share_treemap.py - Sales-share treemap rendered with Plotly into a notebook / Streamlit container
from __future__ import annotations
import importlib
import json
import logging
import threading
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from colors_tokens import TOKENS, three_stop_scale
from share_aggregator import TotalsMap, build_totals, tooltip
from share_io import as_rows

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 960
DEFAULT_HEIGHT = 400


class LibraryNotReadyError(RuntimeError):
    """Render was attempted before the charting library finished loading."""


class PlotlyBackend:
    """Explicit handle on plotly.graph_objects, with a readiness signal."""

    module = "plotly.graph_objects"

    def __init__(self):
        self._ready = threading.Event()
        self.go = None

    def load(self) -> "PlotlyBackend":
        if not self._ready.is_set():
            self.go = importlib.import_module(self.module)
            self._ready.set()
            logger.info("Chart backend %s loaded", self.module)
        return self

    @property
    def is_ready(self) -> bool:
        return self._ready.is_set()

    def wait_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until load() has completed (or timeout seconds pass)."""
        return self._ready.wait(timeout)

    def require_ready(self) -> None:
        if not self._ready.is_set():
            raise LibraryNotReadyError(
                f"{self.module} is not loaded; call load() (or load_backend()) before rendering"
            )


def load_backend() -> PlotlyBackend:
    return PlotlyBackend().load()


@dataclass(frozen=True)
class ShareTreemapOptions:
    highlight_on_mouse_over: bool = False
    max_depth: int = 1
    max_post_depth: int = 2
    min_color: str = TOKENS["share"]["Low"]
    mid_color: str = TOKENS["share"]["Mid"]
    max_color: str = TOKENS["share"]["High"]
    header_height: int = 15
    font_color: str = TOKENS["text"]["Label"]
    show_scale: bool = False
    use_weighted_average_for_aggregation: bool = True
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    title: str = ""

    @property
    def colorscale(self):
        return three_stop_scale(self.min_color, self.mid_color, self.max_color)


# ===================== Colour values =====================
def node_color_values(rows: Sequence, totals: TotalsMap, weighted: bool = True) -> List[float]:
    """
    Colour value per row. Items are keyed by their own value; the root and each
    category take the average of their items' values, weighted by value when
    `weighted` is set. A group without items gets 0.
    """
    root = totals.root
    by_parent: Dict[str, List[float]] = {}
    for name, parent, value in rows:
        if name == root or (parent == root and name in totals):
            continue
        by_parent.setdefault(parent, []).append(float(value))
    every = [v for vs in by_parent.values() for v in vs]

    def _avg(vals: List[float]) -> float:
        if not vals:
            return 0.0
        arr = np.asarray(vals, dtype=float)
        if weighted and arr.sum() > 0:
            return float(np.average(arr, weights=arr))
        return float(arr.mean())

    out = []
    for name, parent, value in rows:
        if name == root:
            out.append(_avg(every))
        elif parent == root and name in totals:
            out.append(_avg(by_parent.get(name, [])))
        else:
            out.append(float(value))
    return out


# ===================== Figure =====================
def _path_id(*parts: str) -> str:
    """Unambiguous Plotly id for a node path (root, category, item)."""
    return json.dumps(list(parts), ensure_ascii=False)


def _node_id(name: str, parent: str, root: str, totals: TotalsMap) -> str:
    if name == root:
        return _path_id(root)
    if parent == root and name in totals:
        return _path_id(root, name)
    return _path_id(root, parent, name)


def _parent_id(name: str, parent: str, root: str, totals: TotalsMap) -> str:
    if name == root:
        return ""
    if parent == root and name in totals:
        return _path_id(root)
    return _path_id(root, parent)


def build_share_figure(
    rows: Sequence,
    totals: Optional[TotalsMap] = None,
    *,
    backend: PlotlyBackend,
    options: Optional[ShareTreemapOptions] = None,
):
    """
    One go.Treemap trace over the row table. Root and category rows are sized 0
    with branchvalues="remainder" so their area is the sum of their items.
    """
    backend.require_ready()
    go = backend.go
    opts = options or ShareTreemapOptions()
    rows = as_rows(rows)
    totals = totals if totals is not None else build_totals(rows)
    root = totals.root

    if opts.highlight_on_mouse_over:
        logger.warning("highlight_on_mouse_over is not supported by plotly treemaps; ignored")

    colors = node_color_values(rows, totals, weighted=opts.use_weighted_average_for_aggregation)

    ids, labels, parents, values, sizes, hover, hoverinfo, marker_colors = [], [], [], [], [], [], [], []
    seen = set()
    for i, (name, parent, value) in enumerate(rows):
        nid = _node_id(name, parent, root, totals)
        if nid in seen:
            logger.warning("Row %d (%r) repeats node %r; skipped on the chart", i, name, nid)
            continue
        seen.add(nid)

        is_group = name == root or (parent == root and name in totals)
        size = totals[name] if is_group else value
        tip = tooltip(rows, totals, i, size)

        ids.append(nid)
        labels.append(name)
        parents.append(_parent_id(name, parent, root, totals))
        values.append(0 if is_group else value)
        sizes.append(size)
        hover.append(tip or "")
        hoverinfo.append("text" if tip is not None else "none")
        marker_colors.append(colors[i])

    fig = go.Figure(
        go.Treemap(
            ids=ids,
            labels=labels,
            parents=parents,
            values=values,
            branchvalues="remainder",
            customdata=sizes,
            hovertext=hover,
            hoverinfo=hoverinfo,
            maxdepth=opts.max_depth + opts.max_post_depth,
            marker=dict(
                colors=marker_colors,
                colorscale=opts.colorscale,
                showscale=opts.show_scale,
                pad=dict(t=opts.header_height),
            ),
            textfont=dict(color=opts.font_color),
            root_color=TOKENS["root"],
            tiling=dict(pad=2),
        )
    )
    fig.update_layout(
        width=opts.width,
        height=opts.height,
        margin=dict(t=24 if opts.title else 4, l=4, r=4, b=4),
        uniformtext=dict(minsize=10, mode="hide"),
    )
    if opts.title:
        fig.update_layout(title=dict(text=opts.title, x=0.01, y=0.98))

    logger.debug("Built share treemap: %d nodes, %dx%d", len(ids), opts.width, opts.height)
    return fig


# ===================== Render =====================
def _draw(container: Any, fig) -> None:
    if hasattr(container, "plotly_chart"):
        container.plotly_chart(fig)  # Streamlit container / DeltaGenerator
    elif hasattr(container, "update"):
        container.update(fig)  # IPython DisplayHandle
    else:
        raise TypeError(f"Cannot draw into {type(container).__name__}: expected a Streamlit container or display handle")


def render_share_treemap(
    container: Any,
    rows,
    width: Optional[int] = None,
    height: Optional[int] = None,
    *,
    backend: PlotlyBackend,
    options: Optional[ShareTreemapOptions] = None,
):
    """
    container: display surface owned by the host (Streamlit container or IPython display handle)
    rows: (name, parent, value) table, root first
    backend: a loaded PlotlyBackend
    """
    backend.require_ready()
    rows = as_rows(rows)
    totals = build_totals(rows)

    opts = options or ShareTreemapOptions()
    opts = replace(opts, width=width or opts.width, height=height or opts.height)

    fig = build_share_figure(rows, totals, backend=backend, options=opts)
    _draw(container, fig)
    return fig
