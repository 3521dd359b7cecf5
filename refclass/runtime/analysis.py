"""Graph views of inheritance chains and instance scopes."""
from __future__ import annotations

from pathlib import Path

try:
    import networkx as nx
except ModuleNotFoundError:  # pragma: no cover
    nx = None

try:
    import matplotlib.pyplot as plt
except ModuleNotFoundError:  # pragma: no cover
    plt = None

try:
    import pydot
except ModuleNotFoundError:  # pragma: no cover
    pydot = None

from ..constants import SCOPE_COLORS
from .chain import resolve_chain
from .core import Instance
from .definition import ClassDefinition


def _require_networkx():
    if nx is None:
        raise RuntimeError("Graph views require networkx to be installed")


def _label(name):
    return name or "<anonymous>"


def chain_graph(definition: ClassDefinition):
    """Directed graph of the resolved chain, each class pointing at its parent."""

    _require_networkx()
    graph = nx.DiGraph()
    chain = resolve_chain(definition)
    previous = None
    for depth, level in enumerate(chain):
        node = f"{depth}:{_label(level.name)}"
        graph.add_node(
            node,
            label=_label(level.name),
            depth=depth,
            kind="definition",
            color=SCOPE_COLORS["definition"],
            members=level.describe(),
        )
        if previous is not None:
            graph.add_edge(node, previous, relation="inherits")
        previous = node
    return graph


def scope_graph(instance: Instance):
    """Directed graph of the scopes an instance's methods are bound against.

    One node per chain level points at the shared public scope (``self``),
    the private scope when present (``private``) and the next older level
    (``super``).
    """

    _require_networkx()
    origin = instance._scope_origin
    if origin is None:
        raise RuntimeError("scope_graph requires an instance built by refclass")

    graph = nx.DiGraph()
    graph.add_node(
        "public",
        label=f"{origin.plan.name} (public)",
        kind="public",
        color=SCOPE_COLORS["public"],
        members=sorted(dir(instance)),
    )
    if origin.private is not None:
        graph.add_node(
            "private",
            label=f"{origin.plan.name} (private)",
            kind="private",
            color=SCOPE_COLORS["private"],
            members=sorted(dir(origin.private)),
        )

    previous = None
    for depth, level in enumerate(origin.plan.levels):
        node = f"level:{depth}"
        graph.add_node(
            node,
            label=_label(level.name),
            kind="level",
            color=SCOPE_COLORS["level"],
            members=sorted(
                [*level.public_methods, *level.private_methods, *level.active]
            ),
        )
        graph.add_edge(node, "public", relation="self")
        if origin.private is not None:
            graph.add_edge(node, "private", relation="private")
        if previous is not None:
            graph.add_edge(node, previous, relation="super")
        previous = node
    return graph


def _graph_for(obj):
    if isinstance(obj, ClassDefinition):
        return chain_graph(obj)
    if isinstance(obj, Instance):
        return scope_graph(obj)
    raise TypeError("Expected a class definition or an instance")


def export_graphviz(obj, output_path, fmt="dot"):
    """Write the graph of a definition or instance through pydot.

    ``fmt="dot"`` writes DOT source; any other format is rendered by the
    Graphviz binaries, which must then be installed.
    """

    if pydot is None:
        raise RuntimeError("Graphviz export requires pydot to be installed")

    graph = _graph_for(obj)
    dot = pydot.Dot("refclass", graph_type="digraph", rankdir="BT", fontname="Helvetica")
    for node, data in graph.nodes(data=True):
        dot.add_node(
            pydot.Node(
                f'"{node}"',
                label=f'"{data["label"]}"',
                shape="box",
                style="filled",
                fillcolor=data["color"],
                fontname="Helvetica",
            )
        )
    for src, dst, data in graph.edges(data=True):
        dot.add_edge(
            pydot.Edge(
                f'"{src}"',
                f'"{dst}"',
                label=data["relation"],
                style="dashed" if data["relation"] == "super" else "solid",
            )
        )

    output_path = Path(output_path)
    if output_path.parent and not output_path.parent.exists():
        output_path.parent.mkdir(parents=True, exist_ok=True)

    if fmt == "dot":
        dot.write(str(output_path), format="raw")
    else:  # pragma: no cover - needs the Graphviz binaries
        dot.write(str(output_path), format=fmt)
    return output_path


def visualize_graph(obj):  # pragma: no cover
    """Draw the graph of a definition or instance with matplotlib."""
    if nx is None or plt is None:
        raise RuntimeError("Visualization requires networkx and matplotlib to be installed")

    graph = _graph_for(obj)
    pos = nx.spring_layout(graph, seed=42)
    nx.draw(
        graph,
        pos,
        with_labels=True,
        labels={n: graph.nodes[n]["label"] for n in graph.nodes},
        node_color=[graph.nodes[n]["color"] for n in graph.nodes],
        edgecolors="black",
        font_size=8,
    )
    nx.draw_networkx_edge_labels(
        graph,
        pos,
        edge_labels={(u, v): d["relation"] for u, v, d in graph.edges(data=True)},
        font_size=7,
    )
    plt.title("refclass scopes")
    plt.show()


__all__ = [
    "chain_graph",
    "export_graphviz",
    "scope_graph",
    "visualize_graph",
]
