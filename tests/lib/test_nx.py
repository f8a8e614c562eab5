"""Tests for flowtrace.lib.nx NetworkX conversion utilities."""

import networkx as nx
import pytest

from flowtrace.algorithms.max_flow import calc_max_flow
from flowtrace.exceptions import GraphValidationError
from flowtrace.lib.nx import from_networkx, to_networkx
from flowtrace.model.graph import Edge


class TestFromNetworkx:
    """Tests for from_networkx conversion."""

    def test_digraph(self):
        """DiGraph edges become FlowGraph edges in insertion order."""
        G = nx.DiGraph()
        G.add_edge("S", "A", capacity=10)
        G.add_edge("A", "T", capacity=5)

        graph = from_networkx(G, "S", "T")

        assert graph.nodes == ("S", "A", "T")
        assert graph.edges == (Edge("S", "A", 10), Edge("A", "T", 5))
        assert calc_max_flow(graph).max_flow == 5

    def test_multidigraph_keeps_parallel_edges(self):
        """Parallel MultiDiGraph edges stay separate."""
        G = nx.MultiDiGraph()
        G.add_edge("S", "T", capacity=2)
        G.add_edge("S", "T", capacity=3)

        graph = from_networkx(G, "S", "T")

        assert len(graph.edges) == 2
        assert calc_max_flow(graph).max_flow == 5

    def test_undirected_graph_adds_both_directions(self):
        """Undirected edges contribute one edge per direction."""
        G = nx.Graph()
        G.add_edge("S", "T", capacity=4)

        graph = from_networkx(G, "S", "T")

        assert graph.edges == (Edge("S", "T", 4), Edge("T", "S", 4))

    def test_numeric_nodes_become_strings(self):
        G = nx.DiGraph()
        G.add_edge(1, 2, capacity=3)

        graph = from_networkx(G, 1, 2)

        assert graph.nodes == ("1", "2")
        assert (graph.source, graph.sink) == ("1", "2")

    def test_sort_nodes(self):
        G = nx.DiGraph()
        G.add_edge("T", "A", capacity=1)
        G.add_edge("S", "T", capacity=1)

        assert from_networkx(G, "S", "T").nodes == ("T", "A", "S")
        assert from_networkx(G, "S", "T", sort_nodes=True).nodes == ("A", "S", "T")

    def test_custom_capacity_attr(self):
        G = nx.DiGraph()
        G.add_edge("S", "T", bandwidth=7)

        graph = from_networkx(G, "S", "T", capacity_attr="bandwidth")

        assert graph.capacities == (7,)

    def test_missing_capacity(self):
        """Edges without capacity are rejected unless a default is given."""
        G = nx.DiGraph()
        G.add_edge("S", "T")

        with pytest.raises(ValueError, match="no 'capacity' attribute"):
            from_networkx(G, "S", "T")
        assert from_networkx(G, "S", "T", default_capacity=1).capacities == (1,)

    def test_invalid_graph(self):
        G = nx.DiGraph()
        G.add_edge("S", "T", capacity=-1)

        with pytest.raises(GraphValidationError):
            from_networkx(G, "S", "T")

    def test_not_a_graph(self):
        with pytest.raises(TypeError, match="Expected NetworkX graph"):
            from_networkx({"S": ["T"]}, "S", "T")


class TestToNetworkx:
    """Tests for to_networkx conversion."""

    def test_structure(self, parallel_edges):
        """Edge keys are edge indices and graph attributes carry source/sink."""
        G = to_networkx(parallel_edges)

        assert isinstance(G, nx.MultiDiGraph)
        assert list(G.nodes) == ["S", "A", "B", "T"]
        assert G.number_of_edges() == 6
        assert G.edges["S", "A", 1]["capacity"] == 2
        assert G.graph == {"source": "S", "sink": "T"}
        assert G.nodes["S"]["is_source"] is True

    def test_annotated_with_step(self, two_paths):
        """Step annotations are copied onto nodes, edges and the graph."""
        step = calc_max_flow(two_paths).steps[1]

        G = to_networkx(two_paths, step)

        assert G.graph["step"] == 1
        assert G.graph["phase"] == "PATH_FOUND"
        assert G.graph["total_flow"] == 0
        assert G.nodes["A"]["is_in_path"] is True
        assert G.nodes["B"]["is_in_path"] is False
        attrs = G.edges["S", "A", 0]
        assert attrs["is_in_path"] is True
        assert attrs["label"] == "0/10"
        assert attrs["flow"] == 0

    def test_round_trip_through_networkx(self, textbook):
        """The final flows from a round-tripped graph satisfy networkx's value."""
        G = to_networkx(textbook)
        back = from_networkx(G, "s", "t")

        assert back == textbook
        simple = nx.DiGraph(G)
        assert nx.maximum_flow_value(simple, "s", "t") == calc_max_flow(back).max_flow
