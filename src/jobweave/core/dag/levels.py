# src/jobweave/core/dag/levels.py
"""Execution levels by longest-path layering.

A node's level is 0 when nothing feeds it and otherwise one more than
the highest level among its direct predecessors. Kahn-style topological
generations compute exactly this layering without recursion.
"""

from __future__ import annotations

import networkx as nx

from jobweave.contracts.errors import CyclicWorkflowError
from jobweave.contracts.types import ExecutionLevels, NodeID
from jobweave.core.dag.models import Workflow


def _cyclic_subgraphs(workflow: Workflow, graph: nx.DiGraph) -> list[list[str]]:
    """Node ids of every cyclic strongly connected component, in workflow order."""
    order = {node.node_id: index for index, node in enumerate(workflow.nodes)}
    components = [
        sorted(component, key=order.__getitem__)
        for component in nx.strongly_connected_components(graph)
        if len(component) > 1 or any(graph.has_edge(node_id, node_id) for node_id in component)
    ]
    return sorted(components, key=lambda component: order[component[0]])


def compute_execution_levels(workflow: Workflow) -> ExecutionLevels:
    """Assign every node its execution level.

    Returns:
        Mapping of node id to level, in workflow node order.

    Raises:
        CyclicWorkflowError: If the workflow has a cycle; the error lists
            every cyclic subgraph instead of guessing levels for them.
    """
    graph = workflow.to_networkx()
    try:
        generations = list(nx.topological_generations(graph))
    except nx.NetworkXUnfeasible:
        raise CyclicWorkflowError(_cyclic_subgraphs(workflow, graph)) from None

    by_node: dict[NodeID, int] = {}
    for level, generation in enumerate(generations):
        for node_id in generation:
            by_node[node_id] = level
    return {node.node_id: by_node[node.node_id] for node in workflow.nodes}


def level_positions(workflow: Workflow, levels: ExecutionLevels | None = None) -> dict[NodeID, float]:
    """Centered index of each node among the nodes sharing its level.

    Nodes of one level keep workflow order; a level with three nodes
    yields positions -1.0, 0.0 and 1.0. Renderers lay nodes out by
    ``(level, position)``.
    """
    if levels is None:
        levels = compute_execution_levels(workflow)

    members: dict[int, list[NodeID]] = {}
    for node in workflow.nodes:
        members.setdefault(levels[node.node_id], []).append(node.node_id)

    positions: dict[NodeID, float] = {}
    for node_ids in members.values():
        offset = (len(node_ids) - 1) / 2
        for index, node_id in enumerate(node_ids):
            positions[node_id] = index - offset
    return positions
