# colors_tokens.py - Single Source of Truth for colors

# Discrete tokens
TOKENS = {
    "share": {
        "Low":  "#009688",   # Teal
        "Mid":  "#f7f7f7",   # Off-white
        "High": "#ee8100",   # Orange
    },
    "text": {
        "Label": "black",
    },
    "root": "rgba(240,240,240,1)",
}

# Continuous color scale keyed by value: Low → Mid → High
SCALES = {
    "share": [(0.0, TOKENS["share"]["Low"]), (0.5, TOKENS["share"]["Mid"]), (1.0, TOKENS["share"]["High"])],
}


def three_stop_scale(low: str, mid: str, high: str):
    """Build a Plotly colorscale from three stops."""
    return [(0.0, low), (0.5, mid), (1.0, high)]
