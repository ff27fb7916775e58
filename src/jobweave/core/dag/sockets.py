# src/jobweave/core/dag/sockets.py
"""Input socket ordering for crossing-free rendering.

A consumer's input roles are sorted by the vertical position of the node
producing each role, so edges fan in without crossing each other.
"""

from __future__ import annotations

from jobweave.contracts.types import ExecutionLevels, NodeID, RoleName
from jobweave.core.dag.levels import level_positions
from jobweave.core.dag.models import Workflow


def optimized_input_order(
    workflow: Workflow,
    node_id: str,
    *,
    levels: ExecutionLevels | None = None,
    positions: dict[NodeID, float] | None = None,
) -> list[RoleName]:
    """Return the node's declared input roles ordered by producer position.

    Roles without a resolvable producer edge go last in their declared
    order. The sort is stable, so producers sharing a position keep the
    declared order of their roles.

    Args:
        workflow: Workflow containing the node
        node_id: Consumer node id
        levels: Precomputed execution levels (computed when omitted)
        positions: Precomputed level positions (computed when omitted)

    Raises:
        KeyError: If ``node_id`` is not in the workflow
    """
    node = workflow.get_node(node_id)
    if positions is None:
        positions = level_positions(workflow, levels)

    incoming = workflow.get_edges_to(node.node_id)
    placed: list[tuple[float, RoleName]] = []
    unplaced: list[RoleName] = []
    for role in node.job.inputs:
        producer = next((edge.source for edge in incoming if role in edge.data_flow), None)
        if producer is None:
            unplaced.append(role)
        else:
            placed.append((positions[producer], role))

    placed.sort(key=lambda item: item[0])
    return [role for _, role in placed] + unplaced
