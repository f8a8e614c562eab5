import pytest

from flowtrace.algorithms.max_flow import calc_max_flow
from flowtrace.algorithms.residual import ResidualState
from flowtrace.config import TraceConfig
from flowtrace.trace.recorder import TraceRecorder, format_quantity
from flowtrace.types.base import FlowPhase


@pytest.mark.parametrize(
    "value, expected",
    [
        (5, "5"),
        (0, "0"),
        (2.5, "2.5"),
        (10.0, "10"),
        (0.1 + 0.2, "0.3"),
        (1.23456, "1.235"),
        (-0.0001, "-0.0001"),
        (0.0004, "0.0004"),
        (1e-11, "1e-11"),
        (2.5e-7, "2.5e-07"),
        (0.0, "0"),
    ],
)
def test_format_quantity(value, expected):
    assert format_quantity(value) == expected


def test_format_quantity_precision():
    assert format_quantity(1.23456, precision=1) == "1.2"


class TestDescriptions:
    def test_two_paths_narrative(self, two_paths):
        result = calc_max_flow(two_paths)
        assert [s.description for s in result.steps] == [
            "Initial state: all flows are zero",
            "Augmenting path found: S→A→T, bottleneck 10",
            "Flows updated, cumulative flow = 10",
            "Augmenting path found: S→B→T, bottleneck 10",
            "Flows updated, cumulative flow = 20",
            "Final state, flow = 20 after 2 iterations",
        ]

    def test_singular_iteration(self, single_edge):
        result = calc_max_flow(single_edge)
        assert result.steps[-1].description == "Final state, flow = 5 after 1 iteration"

    def test_custom_separator(self, single_edge):
        config = TraceConfig(path_separator=" -> ")
        result = calc_max_flow(single_edge, config=config)
        assert result.steps[1].description == "Augmenting path found: S -> T, bottleneck 5"

    def test_float_description(self):
        from flowtrace.model.graph import FlowGraph

        graph = FlowGraph.from_lists(["S", "T"], [("S", "T")], [2.5], "S", "T")
        result = calc_max_flow(graph)
        assert result.steps[1].description.endswith("bottleneck 2.5")
        assert result.steps[-1].edges[0].label == "2.5/2.5"


class TestEdgeAnnotations:
    def test_initial_labels_and_flags(self, parallel_edges):
        step = calc_max_flow(parallel_edges).steps[0]
        assert [e.label for e in step.edges] == ["0/3", "0/2", "0/4", "0/2", "0/6", "0/0"]
        assert [e.id for e in step.edges] == ["S-A", "S-A#1", "A-B", "B-A", "B-T", "S-T"]
        # A zero-capacity edge is both blocked and saturated
        zero = step.edges[5]
        assert zero.blocked and zero.saturated
        assert not any(e.blocked for e in step.edges[:5])
        assert not any(e.is_in_path for e in step.edges)
        assert step.path == ()

    def test_parallel_edges_filled_in_order(self, parallel_edges):
        final = calc_max_flow(parallel_edges).final_graph
        first, second = final.edges[0], final.edges[1]
        assert (first.flow, first.label, first.saturated) == (3, "3/3", True)
        assert (second.flow, second.label, second.saturated) == (1, "1/2", False)
        assert final.edges[2].saturated

    def test_path_found_flags(self, two_paths):
        step = calc_max_flow(two_paths).steps[1]
        assert step.phase == FlowPhase.PATH_FOUND
        assert step.path == ("S", "A", "T")
        in_path = {e.id for e in step.edges if e.is_in_path}
        assert in_path == {"S-A", "A-T"}
        nodes = {n.id: n for n in step.nodes}
        assert nodes["S"].is_source and nodes["T"].is_sink
        assert nodes["A"].is_in_path
        assert not nodes["B"].is_in_path

    def test_backward_edge_flagged(self, needs_cancellation):
        result = calc_max_flow(needs_cancellation)
        second_path = result.steps[3]
        assert second_path.path == ("S", "R", "Y", "X", "P", "Q", "T")
        edges = {e.id: e for e in second_path.edges}
        assert edges["X-Y"].is_backward_edge
        assert not edges["X-Y"].is_in_path
        assert edges["X-Y"].flow == 1
        assert not any(
            e.is_backward_edge for e in second_path.edges if e.id != "X-Y"
        )
        # Flags clear once the flow has been cancelled
        assert not any(e.is_backward_edge for s in result.steps[4:] for e in s.edges)

    def test_first_path_has_no_backward_edges(self, needs_cancellation):
        step = calc_max_flow(needs_cancellation).steps[1]
        assert not any(e.is_backward_edge for e in step.edges)


class TestRecorder:
    def test_indices_increase(self, single_edge):
        recorder = TraceRecorder(single_edge)
        state = ResidualState.from_graph(single_edge)
        first = recorder.record(state, FlowPhase.INITIAL)
        second = recorder.record(state, FlowPhase.FINAL)
        assert (first.index, second.index) == (0, 1)

    def test_record_reads_state_only(self, single_edge):
        recorder = TraceRecorder(single_edge)
        state = ResidualState.from_graph(single_edge)
        before = [row[:] for row in state.residual]
        recorder.record(state, FlowPhase.PATH_FOUND, path=[0, 1], path_flow=5)
        assert state.residual == before

    def test_edge_flows_ignores_reverse_direction(self, parallel_edges):
        recorder = TraceRecorder(parallel_edges)
        state = ResidualState.from_graph(parallel_edges)
        a = parallel_edges.index_of("A")
        b = parallel_edges.index_of("B")
        state.push_flow([b, a], 2)
        assert recorder.edge_flows(state) == (0, 0, 0, 2, 0, 0)


class TestSerialization:
    def test_to_elements(self, two_paths):
        step = calc_max_flow(two_paths).steps[1]
        elements = step.to_elements()
        assert len(elements) == 4 + 4
        assert elements[0] == {
            "data": {"id": "S", "isSource": True, "isSink": False, "isInPath": True}
        }
        edge = elements[4]["data"]
        assert edge["id"] == "S-A"
        assert edge["label"] == "0/10"
        assert edge["isInPath"] is True
        assert edge["pathFlow"] == 10
        assert edge["isBackwardEdge"] is False
        assert elements[5]["data"]["pathFlow"] == 0

    def test_step_to_dict(self, single_edge):
        data = calc_max_flow(single_edge).steps[1].to_dict()
        assert data["phase"] == "PATH_FOUND"
        assert data["path"] == ["S", "T"]
        assert data["flows"] == [0]
        assert data["path_flow"] == 5
        assert data["edges"][0]["label"] == "0/5"

    def test_result_to_dict(self, single_edge):
        result = calc_max_flow(single_edge)
        data = result.to_dict()
        assert data["max_flow"] == 5
        assert data["is_final"] is True
        assert data["reachable"] == ["S"]
        assert data["min_cut"] == [0]
        assert len(data["steps"]) == 4
        assert data["final_graph"]["phase"] == "FINAL"
        assert "steps" not in result.to_dict(include_steps=False)


def test_phase_from_string():
    assert FlowPhase.from_string("path_found") is FlowPhase.PATH_FOUND
    with pytest.raises(ValueError, match="Invalid phase 'DONE'"):
        FlowPhase.from_string("DONE")
