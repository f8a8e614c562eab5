"""Command-line interface for flowtrace."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from time import perf_counter
from typing import Any, List, Optional, Sequence

from flowtrace.algorithms.max_flow import calc_max_flow
from flowtrace.config import TraceConfig
from flowtrace.exceptions import (
    FlowTraceError,
    GraphValidationError,
    IterationCapExceededError,
)
from flowtrace.io import load_graph, parse_form_fields
from flowtrace.logging import configure_verbosity, get_logger
from flowtrace.model.graph import FlowGraph
from flowtrace.trace.recorder import format_quantity
from flowtrace.types.base import FlowPhase
from flowtrace.types.dto import MaxFlowResult

logger = get_logger(__name__)


def _format_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[Any]],
    numeric: Sequence[int] = (),
) -> str:
    """Render rows as an indented ASCII table.

    Columns whose positions are listed in ``numeric`` are right-aligned.
    Returns an empty string when there are no rows.
    """
    if not rows:
        return ""

    cells = [[str(h) for h in headers]] + [[str(c) for c in row] for row in rows]
    widths = [max(len(row[i]) for row in cells) for i in range(len(headers))]

    def render(row: List[str]) -> str:
        parts = [
            cell.rjust(widths[i]) if i in numeric else cell.ljust(widths[i])
            for i, cell in enumerate(row)
        ]
        return "   " + " | ".join(parts).rstrip()

    rule = "   " + "-+-".join("-" * w for w in widths)
    return "\n".join([render(cells[0]), rule] + [render(r) for r in cells[1:]])


def _format_duration(seconds: float) -> str:
    """Return a concise human-readable duration string.

    Examples:
        0.123 -> "123.0 ms"; 1.234 -> "1.23 s".
    """
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f} ms"
    return f"{seconds:.2f} s"


def _plural(n: int, singular: str, plural: Optional[str] = None) -> str:
    if n == 1:
        return singular
    return plural or (singular + "s")


def _config_from_args(args: argparse.Namespace) -> TraceConfig:
    return TraceConfig(max_iterations=getattr(args, "max_iterations", None))


def _phase_arg(value: str) -> FlowPhase:
    try:
        return FlowPhase.from_string(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _print_summary(
    graph: FlowGraph,
    result: MaxFlowResult,
    show_steps: bool,
    phases: Optional[Sequence[FlowPhase]] = None,
) -> None:
    print("\n" + "=" * 60)
    print(f"MAX FLOW {graph.source} -> {graph.sink}")
    print("=" * 60)
    print(f"   Max flow:   {format_quantity(result.max_flow)}")
    print(
        f"   Iterations: {result.iterations} "
        f"{_plural(result.iterations, 'augmenting path')}"
    )
    print(f"   Steps:      {len(result.steps)}")
    if result.min_cut:
        cut = ", ".join(
            f"{graph.edges[i].source}->{graph.edges[i].target}" for i in result.min_cut
        )
        print(f"   Min cut:    {cut}")

    if show_steps:
        print("\nSTEPS")
        print("-" * 30)
        rows = [
            [str(step.index), step.phase.name, step.description]
            for step in result.steps
            if not phases or step.phase in phases
        ]
        print(_format_table(["#", "Phase", "Description"], rows, numeric=(0,)))

    final = result.final_graph
    if final is not None:
        print("\nFINAL FLOWS")
        print("-" * 30)
        rows = [
            [
                edge.source,
                edge.target,
                edge.label,
                "yes" if edge.saturated else "",
            ]
            for edge in final.edges
        ]
        print(_format_table(["Source", "Target", "Flow", "Saturated"], rows))


def _emit_result(
    result: MaxFlowResult,
    results_path: Optional[Path],
    stdout: bool,
    include_steps: bool = True,
) -> None:
    payload = result.to_dict(include_steps=include_steps)
    json_str = json.dumps(payload, indent=2, ensure_ascii=False)
    if results_path is not None:
        results_path.parent.mkdir(parents=True, exist_ok=True)
        results_path.write_text(json_str, encoding="utf-8")
        logger.info(f"Results written to: {results_path}")
        print(f"Results written to: {results_path}")
    if stdout:
        print(json_str)


def _solve(
    graph: FlowGraph,
    config: TraceConfig,
    results_path: Optional[Path],
    stdout: bool,
    show_steps: bool,
    frames_dir: Optional[Path] = None,
    phases: Optional[Sequence[FlowPhase]] = None,
) -> None:
    _start_time = perf_counter()
    try:
        result = calc_max_flow(graph, config=config)
    except IterationCapExceededError as e:
        logger.error(f"Run aborted: {e}")
        print(f"ERROR: {e}")
        if results_path is not None:
            _emit_result(e.partial_result, results_path, stdout=False)
        sys.exit(2)

    if not stdout:
        _print_summary(graph, result, show_steps or bool(phases), phases)
    _emit_result(result, results_path, stdout)

    if frames_dir is not None:
        from flowtrace.viz import render_frames

        written = render_frames(graph, result, frames_dir)
        print(f"Wrote {len(written)} {_plural(len(written), 'frame')} to: {frames_dir}")

    logger.info(f"Max-flow run completed in {_format_duration(perf_counter() - _start_time)}")


def _run_graph(args: argparse.Namespace) -> None:
    path: Path = args.graph
    logger.info(f"Loading graph from: {path}")
    try:
        graph = load_graph(path)
    except FileNotFoundError:
        logger.error(f"Graph file not found: {path}")
        print(f"ERROR: Graph file not found: {path}")
        sys.exit(1)
    except OSError as e:
        logger.error(f"Cannot read graph file {path}: {e}")
        print(f"ERROR: Cannot read graph file: {path}: {e.strerror or e}")
        sys.exit(1)
    except GraphValidationError as e:
        logger.error(f"Invalid graph: {e}")
        print(f"ERROR: Invalid graph: {e}")
        sys.exit(1)

    if args.source or args.sink:
        try:
            graph = FlowGraph(
                graph.nodes,
                graph.edges,
                args.source or graph.source,
                args.sink or graph.sink,
            )
        except GraphValidationError as e:
            print(f"ERROR: Invalid graph: {e}")
            sys.exit(1)

    results_path = None
    if not args.no_results:
        results_path = args.results or Path(f"{path.stem}.results.json")

    _solve(
        graph,
        _config_from_args(args),
        results_path,
        args.stdout,
        args.steps,
        args.frames,
        args.phase,
    )


def _inspect_graph(path: Path) -> None:
    try:
        graph = load_graph(path)
    except FileNotFoundError:
        print(f"ERROR: Graph file not found: {path}")
        sys.exit(1)
    except OSError as e:
        logger.error(f"Cannot read graph file {path}: {e}")
        print(f"ERROR: Cannot read graph file: {path}: {e.strerror or e}")
        sys.exit(1)
    except GraphValidationError as e:
        print(f"ERROR: Invalid graph: {e}")
        sys.exit(1)

    total = sum((edge.capacity for edge in graph.edges), 0)
    print("\n" + "=" * 60)
    print("FLOWTRACE GRAPH INSPECTION")
    print("=" * 60)
    print(f"   Nodes:          {graph.size}")
    print(f"   Edges:          {len(graph.edges)}")
    print(f"   Source:         {graph.source}")
    print(f"   Sink:           {graph.sink}")
    print(f"   Total capacity: {format_quantity(total)}")
    print("\nNODES")
    print("-" * 30)
    roles = {graph.source: "source", graph.sink: "sink"}
    node_rows = [[i, name, roles.get(name, "")] for i, name in enumerate(graph.nodes)]
    print(_format_table(["#", "Node", "Role"], node_rows, numeric=(0,)))
    if graph.edges:
        print("\nEDGES")
        print("-" * 30)
        edge_rows = [
            [i, e.source, e.target, format_quantity(e.capacity)]
            for i, e in enumerate(graph.edges)
        ]
        print(
            _format_table(
                ["#", "Source", "Target", "Capacity"], edge_rows, numeric=(0, 3)
            )
        )


def _solve_form(args: argparse.Namespace) -> None:
    try:
        graph = parse_form_fields(
            args.nodes, args.edges, args.capacities, args.source, args.sink
        )
    except GraphValidationError as e:
        print(f"ERROR: Invalid graph: {e}")
        sys.exit(1)
    _solve(
        graph,
        _config_from_args(args),
        args.results,
        args.stdout,
        args.steps,
        phases=args.phase,
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``flowtrace`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="flowtrace",
        description="Compute maximum flow and trace every step of the algorithm.",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Only log warnings and errors"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{run,inspect,solve}",
        help="Available commands",
    )

    run_parser = subparsers.add_parser("run", help="Compute max flow for a graph file")
    run_parser.add_argument("graph", type=Path, help="Path to graph YAML/JSON")
    run_parser.add_argument(
        "--results",
        "-r",
        type=Path,
        default=None,
        help="Export results to JSON file (default: <graph_name>.results.json)",
    )
    run_parser.add_argument(
        "--no-results", action="store_true", help="Disable results file generation"
    )
    run_parser.add_argument("--source", help="Override the source node")
    run_parser.add_argument("--sink", help="Override the sink node")
    run_parser.add_argument(
        "--frames",
        type=Path,
        default=None,
        help="Write one PNG per step into this directory",
    )

    inspect_parser = subparsers.add_parser(
        "inspect", help="Validate a graph file and show its nodes and edges"
    )
    inspect_parser.add_argument("graph", type=Path, help="Path to graph YAML/JSON")

    solve_parser = subparsers.add_parser(
        "solve", help="Compute max flow for a graph given as form fields"
    )
    solve_parser.add_argument("--nodes", required=True, help='e.g. "S,A,B,T"')
    solve_parser.add_argument("--edges", required=True, help='e.g. "S,A;A,T;S,B;B,T"')
    solve_parser.add_argument("--capacities", required=True, help='e.g. "10,10,5,5"')
    solve_parser.add_argument("--source", required=True, help="Source node")
    solve_parser.add_argument("--sink", required=True, help="Sink node")
    solve_parser.add_argument(
        "--results", "-r", type=Path, default=None, help="Export results to JSON file"
    )

    for p in (run_parser, solve_parser):
        p.add_argument(
            "--stdout", action="store_true", help="Print results JSON to stdout"
        )
        p.add_argument(
            "--steps", action="store_true", help="Print the step-by-step trace"
        )
        p.add_argument(
            "--phase",
            type=_phase_arg,
            action="append",
            default=None,
            help="List only steps of this phase (repeatable, implies --steps)",
        )
        p.add_argument(
            "--max-iterations",
            type=int,
            default=None,
            help="Abort after this many augmenting paths",
        )

    effective_args = sys.argv[1:] if argv is None else argv
    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)
    configure_verbosity(verbose=args.verbose, quiet=args.quiet)
    logger.debug("Debug logging enabled")

    try:
        if args.command == "run":
            _run_graph(args)
        elif args.command == "inspect":
            _inspect_graph(args.graph)
        elif args.command == "solve":
            _solve_form(args)
    except FlowTraceError as e:
        logger.error(f"{type(e).__name__}: {e}")
        print(f"ERROR: {type(e).__name__}: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
