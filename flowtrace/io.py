"""Graph input parsing and serialization.

Graphs arrive in three shapes:

- YAML or JSON documents validated against the packaged schema
  ``flowtrace/schemas/graph.json``::

      nodes: [S, A, T]
      source: S
      sink: T
      edges:
        - {source: S, target: A, capacity: 5}
        - [A, T, 3]

- Plain text form fields: comma-separated nodes and capacities, and edges as
  ``"S,A;A,T"``.
- Python lists, handled directly by :meth:`FlowGraph.from_lists`.
"""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Union

import jsonschema
import yaml

from flowtrace.exceptions import GraphValidationError
from flowtrace.logging import get_logger
from flowtrace.model.graph import Edge, FlowGraph
from flowtrace.types.base import Capacity

logger = get_logger(__name__)

_SCHEMA_CACHE: Dict[str, Any] = {}


def _graph_schema() -> Dict[str, Any]:
    if "graph" not in _SCHEMA_CACHE:
        with (
            resources.files("flowtrace.schemas")
            .joinpath("graph.json")
            .open("r", encoding="utf-8")
        ) as f:
            _SCHEMA_CACHE["graph"] = json.load(f)
    return _SCHEMA_CACHE["graph"]


def _normalize_name(value: Any) -> Any:
    # YAML 1.1 turns bare yes/no/on/off into booleans and digits into numbers
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, (int, float)):
        return str(value)
    return value


def normalize_yaml_names(data: Dict[str, Any]) -> Dict[str, Any]:
    """Coerce scalar node names parsed by YAML back to strings.

    ``nodes: [1, 2]`` or ``source: yes`` parse as numbers and booleans; node
    names are always strings, so they are converted with ``str()`` (booleans
    become ``"True"``/``"False"``). Capacities are left untouched.
    """
    if isinstance(data.get("nodes"), list):
        data["nodes"] = [_normalize_name(n) for n in data["nodes"]]
    for key in ("source", "sink"):
        if key in data:
            data[key] = _normalize_name(data[key])
    if isinstance(data.get("edges"), list):
        for entry in data["edges"]:
            if isinstance(entry, dict):
                for key in ("source", "target"):
                    if key in entry:
                        entry[key] = _normalize_name(entry[key])
            elif isinstance(entry, list) and len(entry) >= 2:
                entry[0] = _normalize_name(entry[0])
                entry[1] = _normalize_name(entry[1])
    return data


def validate_graph_dict(data: Any) -> Dict[str, Any]:
    """Validate a decoded graph document against the packaged schema.

    Raises:
        GraphValidationError: If the document does not match the schema.
    """
    if not isinstance(data, dict):
        raise GraphValidationError("The graph document must map to a dictionary at top-level.")
    try:
        jsonschema.validate(data, _graph_schema())
    except jsonschema.ValidationError as exc:
        location = "/".join(str(p) for p in exc.absolute_path) or "<root>"
        raise GraphValidationError(
            f"Graph document is invalid at '{location}': {exc.message}"
        ) from exc
    return data


def load_graph_yaml(yaml_str: str) -> Dict[str, Any]:
    """Parse and validate a YAML (or JSON) graph document.

    Returns the validated dictionary; use :func:`graph_from_dict` to build the
    graph itself.
    """
    try:
        data = yaml.safe_load(yaml_str)
    except yaml.YAMLError as exc:
        raise GraphValidationError(f"Graph document is not valid YAML: {exc}") from exc
    if data is None:
        data = {}
    if isinstance(data, dict):
        data = normalize_yaml_names(data)
    return validate_graph_dict(data)


def graph_from_dict(data: Dict[str, Any]) -> FlowGraph:
    """Build a :class:`FlowGraph` from a schema-shaped dictionary.

    Edges may be mappings ``{source, target, capacity}`` or triples
    ``[source, target, capacity]``.
    """
    edges: List[Edge] = []
    for i, entry in enumerate(data.get("edges", [])):
        if isinstance(entry, dict):
            edges.append(Edge(entry["source"], entry["target"], entry["capacity"]))
        elif isinstance(entry, (list, tuple)) and len(entry) == 3:
            edges.append(Edge(entry[0], entry[1], entry[2]))
        else:
            raise GraphValidationError(
                f"Edge #{i} must be a mapping or a [source, target, capacity] triple."
            )
    return FlowGraph(
        tuple(data.get("nodes", ())), tuple(edges), data.get("source"), data.get("sink")
    )


def load_graph(path: Union[str, Path]) -> FlowGraph:
    """Read, validate and build a graph from a YAML or JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        OSError: If the file cannot be read, e.g. it is a directory.
        GraphValidationError: If the document or the graph is invalid.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    graph = graph_from_dict(load_graph_yaml(text))
    logger.debug(
        "Loaded graph from %s: %d nodes, %d edges", path, graph.size, len(graph.edges)
    )
    return graph


def _parse_capacity(token: str, position: int) -> Capacity:
    try:
        return int(token)
    except ValueError:
        pass
    try:
        return float(token)
    except ValueError:
        raise GraphValidationError(
            f"Capacity #{position} is not a number: '{token}'."
        ) from None


def _split(text: str, separator: str) -> List[str]:
    return [token.strip() for token in text.split(separator) if token.strip()]


def parse_form_fields(
    nodes: str, edges: str, capacities: str, source: str, sink: str
) -> FlowGraph:
    """Build a graph from the text fields of a graph-entry form.

    Args:
        nodes: Comma-separated node names, e.g. ``"S,A,B,T"``.
        edges: Semicolon-separated ``source,target`` pairs, e.g. ``"S,A;A,T"``.
        capacities: Comma-separated capacities aligned with ``edges``.
        source: Source node name.
        sink: Sink node name.

    Raises:
        GraphValidationError: If any field is malformed or the resulting graph
            is invalid.

    Examples:
        >>> g = parse_form_fields("S,A,T", "S,A;A,T", "5,3", "S", "T")
        >>> [e.capacity for e in g.edges]
        [5, 3]
    """
    node_list = _split(nodes, ",")
    edge_list = []
    for i, chunk in enumerate(_split(edges, ";")):
        pair = _split(chunk, ",")
        if len(pair) != 2:
            raise GraphValidationError(
                f"Edge #{i} must be written as 'source,target', got '{chunk}'."
            )
        edge_list.append((pair[0], pair[1]))
    capacity_list = [
        _parse_capacity(token, i) for i, token in enumerate(_split(capacities, ","))
    ]
    return FlowGraph.from_lists(
        node_list, edge_list, capacity_list, source.strip(), sink.strip()
    )


def graph_to_dict(graph: FlowGraph) -> Dict[str, Any]:
    """Return a schema-conformant dictionary for ``graph``."""
    return {
        "nodes": list(graph.nodes),
        "edges": [
            {"source": e.source, "target": e.target, "capacity": e.capacity}
            for e in graph.edges
        ],
        "source": graph.source,
        "sink": graph.sink,
    }
