"""
chronograph.viz
===============

Minimal plotting helper used by the CLI ``show --png`` option and the
README screenshots.  Importing this module pulls in *matplotlib*, so the
core package never imports it.

Outputs are PNGs written to the *images/* folder (auto‑created if
needed).  Filenames can be overridden via keyword argument.
"""
from __future__ import annotations

import os
from pathlib import Path

import matplotlib

matplotlib.use("Agg")  # headless: we only ever write files

import matplotlib.pyplot as plt  # noqa: E402
import networkx as nx  # noqa: E402

from .graph import PropertyGraph  # noqa: E402
from .settings import settings  # noqa: E402

# default output dir
_IMG_DIR = Path("images")

_COLOURS = {
    "entity": "#2b9348",
    "state": "#8d99ae",
    "reference": "#e76f51",
    "other": "#adb5bd",
}


def _node_kind(graph: PropertyGraph, node: int) -> str:
    if graph.has_label(node, settings.entity_label):
        return "entity"
    if graph.has_label(node, settings.state_label):
        return "state"
    if graph.has_label(node, settings.reference_label):
        return "reference"
    return "other"


# ---------------------------------------------------------------------
# Plot – force‑directed property graph, edges labelled by type
# ---------------------------------------------------------------------
def plot_property_graph(
    graph: PropertyGraph,
    out_path: str | os.PathLike = _IMG_DIR / "property_graph.png",
) -> Path:
    """
    Draw a NetworkX spring‑layout picture of *graph*.

    Entities, States and reference nodes get distinct colours; edge labels
    show the relationship type.

    Parameters
    ----------
    graph : PropertyGraph
        The populated graph.
    out_path : str or Path, default='images/property_graph.png'
        Where to save the PNG.

    Returns
    -------
    pathlib.Path
        Final image path.
    """
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    plt.figure(figsize=(6, 6))
    simple = nx.DiGraph(graph.g)  # parallel edges collapse into one arrow
    pos = nx.spring_layout(simple, seed=42)

    # nodes
    colours = [_COLOURS[_node_kind(graph, n)] for n in simple.nodes()]
    nx.draw_networkx_nodes(simple, pos, node_color=colours, node_size=600)
    nx.draw_networkx_labels(simple, pos, font_size=8, font_color="white")

    # edges + labels; parallel edges share one label
    nx.draw_networkx_edges(simple, pos, arrowstyle="->", arrowsize=15)
    edge_labels = {}
    for rel in graph.relationships():
        key = (rel.start, rel.end)
        edge_labels[key] = f"{edge_labels[key]}\n{rel.type}" if key in edge_labels else rel.type
    nx.draw_networkx_edge_labels(simple, pos, edge_labels=edge_labels, font_size=6)

    plt.title("Entity History Graph")
    plt.axis("off")
    plt.tight_layout()

    plt.savefig(out_path, dpi=120, bbox_inches="tight")
    plt.close()
    return out_path
