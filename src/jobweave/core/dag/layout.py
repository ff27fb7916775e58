# src/jobweave/core/dag/layout.py
"""Per-workflow layout plan handed to rendering and binding layers."""

from __future__ import annotations

from dataclasses import dataclass

from jobweave.contracts.types import ExecutionLevels, NodeID, RoleName
from jobweave.core.dag.levels import compute_execution_levels, level_positions
from jobweave.core.dag.models import Workflow
from jobweave.core.dag.sockets import optimized_input_order


@dataclass(frozen=True)
class WorkflowLayout:
    """Execution levels, level positions and socket order for one workflow."""

    levels: ExecutionLevels
    positions: dict[NodeID, float]
    input_order: dict[NodeID, tuple[RoleName, ...]]

    @property
    def level_count(self) -> int:
        return max(self.levels.values(), default=-1) + 1

    def nodes_at_level(self, level: int) -> list[NodeID]:
        """Node ids on one level, ordered by position."""
        return sorted(
            (node_id for node_id, node_level in self.levels.items() if node_level == level),
            key=self.positions.__getitem__,
        )


def plan_layout(workflow: Workflow) -> WorkflowLayout:
    """Compute the full layout plan for a workflow.

    Raises:
        CyclicWorkflowError: If the workflow is cyclic
    """
    levels = compute_execution_levels(workflow)
    positions = level_positions(workflow, levels)
    input_order = {node.node_id: tuple(optimized_input_order(workflow, node.node_id, positions=positions)) for node in workflow.nodes}
    return WorkflowLayout(levels=levels, positions=positions, input_order=input_order)
