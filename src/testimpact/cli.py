import argparse
import json
import logging
import sys
from typing import List, Optional

from .analysis.impact_analyzer import ImpactAnalyzer
from .analysis.selection_planner import TestSelectionPlanner
from .config import Settings, load_settings, parse_aliases
from .fetcher.change_detector import GitChangeDetector
from .graph.builder import DependencyGraphBuilder
from .models.dependency_graph import DependencyGraph
from .models.impact_analysis import ChangedFile
from .parser.path_resolver import normalize_path
from .storage.graph_store import GraphStore

logger = logging.getLogger(__name__)


def create_builder(settings: Settings) -> DependencyGraphBuilder:
    return DependencyGraphBuilder(
        project_root=settings.project_root,
        extensions=settings.resolve_extensions,
        aliases=settings.path_aliases,
        max_workers=settings.max_workers,
    )


def discover_project_files(settings: Settings, builder: DependencyGraphBuilder) -> List[str]:
    files = builder.file_reader.discover_files(settings.include_extensions)
    graph_file = normalize_path(settings.graph_path, settings.project_root)
    return [path for path in files if path != graph_file]


def load_or_build_graph(settings: Settings,
                        rebuild: bool = False,
                        cached: Optional[DependencyGraph] = None) -> DependencyGraph:
    """
    Return an up to date graph, refreshing the cached one when possible.

    A missing cache or ``rebuild`` triggers a full build. ``cached`` is a graph
    already loaded from the store; it is refreshed in place. The result is saved back.
    """
    builder = create_builder(settings)
    store = GraphStore(settings.graph_path)
    files = discover_project_files(settings, builder)

    graph = cached
    if graph is None and not rebuild:
        graph = store.load()

    if graph is None:
        graph = builder.build(files)
    else:
        graph = builder.refresh(graph, files)

    if not store.save(graph):
        logger.warning(f"Could not save dependency graph to {settings.graph_path}")
    return graph


def collect_changes(settings: Settings, args) -> List[ChangedFile]:
    if args.changed:
        return [ChangedFile(path=path) for path in args.changed]

    detector = GitChangeDetector(settings.project_root)
    return detector.detect(settings.base_branch, include_working_directory=not args.committed_only)


def apply_overrides(settings: Settings, args) -> Settings:
    if args.root:
        settings.project_root = args.root
    if args.graph_file:
        settings.graph_file = args.graph_file
    if args.workers:
        settings.max_workers = args.workers
    if args.alias:
        settings.path_aliases.update(parse_aliases(','.join(args.alias)))
    if getattr(args, 'base', None):
        settings.base_branch = args.base
    return settings


def run_build(settings: Settings, args) -> dict:
    graph = load_or_build_graph(settings, rebuild=True)
    return {
        "graph_file": settings.graph_path,
        "stats": graph.stats(),
        "diagnostics": len(graph.diagnostics),
    }


def run_stats(settings: Settings, args) -> dict:
    graph = load_or_build_graph(settings, rebuild=False)
    return {"stats": graph.stats()}


def run_analyze(settings: Settings, args) -> dict:
    changes = collect_changes(settings, args)

    # Refreshing drops deleted files together with their importers' edges,
    # so keep the cached graph around to look those importers up
    cached = None if args.rebuild else GraphStore(settings.graph_path).load()
    previous = cached.copy() if cached is not None else None
    graph = load_or_build_graph(settings, rebuild=args.rebuild, cached=cached)

    analyzer = ImpactAnalyzer(project_root=settings.project_root)
    analysis = analyzer.analyze(graph, changes, previous_graph=previous)
    plan = TestSelectionPlanner(force_full_run=args.full).plan(graph, analysis)

    result = {"impact": analysis.to_dict(), "plan": plan.to_dict()}
    if args.diagnostics:
        result["diagnostics"] = [
            {"path": d.path, "kind": d.kind, "message": d.message, "specifier": d.specifier}
            for d in graph.diagnostics
        ]
    return result


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Select the tests affected by a set of changed files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
    Examples:
      testimpact build --root ./web
      testimpact analyze --changed src/utils/format.ts
      testimpact analyze --base develop --diagnostics
        """
    )
    parser.add_argument("--root", help="Project root (default: TESTIMPACT_ROOT or the current directory)")
    parser.add_argument("--graph-file", help="Where the dependency graph is cached")
    parser.add_argument("--workers", type=int, help="Number of file reader threads")
    parser.add_argument("--alias", action="append",
                        help="Path alias as PREFIX=DIR, e.g. @/=src/ (repeatable)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("build", help="Scan the project and rebuild the dependency graph")
    subparsers.add_parser("stats", help="Print dependency graph statistics")

    analyze = subparsers.add_parser("analyze", help="Compute affected files and tests")
    analyze.add_argument("--changed", nargs="+", help="Changed files; detected with git when omitted")
    analyze.add_argument("--base", help="Base branch for git change detection")
    analyze.add_argument("--committed-only", action="store_true",
                         help="Ignore staged, unstaged and untracked files")
    analyze.add_argument("--full", action="store_true", help="Select every test regardless of changes")
    analyze.add_argument("--rebuild", action="store_true", help="Ignore the cached graph")
    analyze.add_argument("--diagnostics", action="store_true", help="Include per-file extraction diagnostics")

    return parser


COMMANDS = {
    "build": run_build,
    "stats": run_stats,
    "analyze": run_analyze,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the command line tool."""
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )

    try:
        settings = apply_overrides(load_settings(), args)
        result = COMMANDS[args.command](settings, args)
        print(json.dumps(result, indent=2))
        return 0
    except Exception as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
