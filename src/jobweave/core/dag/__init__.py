# src/jobweave/core/dag/__init__.py
"""Workflow graph resolution and layering.

Package re-exports for the dataflow-graph resolver: auto-wiring,
partitioning, execution levels and socket ordering.
"""

from jobweave.contracts.errors import CyclicWorkflowError, GraphValidationError
from jobweave.core.dag.layout import WorkflowLayout, plan_layout
from jobweave.core.dag.levels import compute_execution_levels, level_positions
from jobweave.core.dag.models import Job, RoleRef, Workflow, WorkflowEdge, WorkflowNode, ensure_unique_ids
from jobweave.core.dag.partition import WorkflowResolver, find_starter_jobs, resolve_workflows
from jobweave.core.dag.sockets import optimized_input_order
from jobweave.core.dag.wiring import GraphAutoWirer, SyntheticIdAllocator

__all__ = [
    "CyclicWorkflowError",
    "GraphAutoWirer",
    "GraphValidationError",
    "Job",
    "RoleRef",
    "SyntheticIdAllocator",
    "Workflow",
    "WorkflowEdge",
    "WorkflowLayout",
    "WorkflowNode",
    "WorkflowResolver",
    "compute_execution_levels",
    "ensure_unique_ids",
    "find_starter_jobs",
    "level_positions",
    "optimized_input_order",
    "plan_layout",
    "resolve_workflows",
]
