"""Build ordering of resolved crates.

Crates are emitted so that every crate comes after the crates it depends
on (normal and build dependencies). Dev-dependencies never appear in a
CrateDerivation, so the graph is normally acyclic; if it is not, the
edges inside each strongly connected component are dropped and the
members are ordered by package id.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Tuple

import networkx as nx

from cratenix.resolve.models import CrateDerivation

logger = logging.getLogger("cratenix.export.order")


def dependency_graph(crates: Iterable[CrateDerivation]) -> nx.DiGraph:
    """Build a graph with an edge ``dependency -> dependent`` per dependency.

    Dependencies on crates outside ``crates`` (e.g. skipped ones) are
    ignored.
    """
    graph = nx.DiGraph()
    crates = list(crates)
    for crate in crates:
        graph.add_node(crate.package_id, crate_name=crate.crate_name)

    for crate in crates:
        for kind, deps in (
            ("normal", crate.dependencies),
            ("build", crate.build_dependencies),
        ):
            for dep in deps:
                if not graph.has_node(dep.package_id):
                    logger.debug(
                        "Ignoring edge %s -> %s: not in crate set",
                        crate.package_id,
                        dep.package_id,
                    )
                    continue
                graph.add_edge(dep.package_id, crate.package_id, kind=kind)
    return graph


def break_cycles(graph: nx.DiGraph) -> Tuple[nx.DiGraph, int]:
    """Remove every edge inside a strongly connected component.

    Returns:
        Tuple[nx.DiGraph, int]: (Acyclic copy of the graph, number of removed edges).
    """
    dag = graph.copy()
    removed_edges = 0

    for scc in nx.strongly_connected_components(graph):
        members = sorted(scc)
        if len(members) == 1:
            node = members[0]
            if dag.has_edge(node, node):
                dag.remove_edge(node, node)
                removed_edges += 1
            continue

        logger.warning("Dependency cycle between crates: %s", ", ".join(members))
        member_set = set(members)
        for source in members:
            for target in list(dag.successors(source)):
                if target in member_set:
                    dag.remove_edge(source, target)
                    removed_edges += 1

    return dag, removed_edges


def build_order(crates: Iterable[CrateDerivation]) -> List[CrateDerivation]:
    """Return ``crates`` with dependencies before dependents.

    Ties are broken by package id so the output is deterministic.
    """
    crates = list(crates)
    by_id: Dict[str, CrateDerivation] = {c.package_id: c for c in crates}

    graph = dependency_graph(crates)
    if not nx.is_directed_acyclic_graph(graph):
        graph, removed = break_cycles(graph)
        logger.warning("Removed %d edges to break dependency cycles", removed)

    return [by_id[pkg_id] for pkg_id in nx.lexicographical_topological_sort(graph)]


__all__ = ["break_cycles", "build_order", "dependency_graph"]
