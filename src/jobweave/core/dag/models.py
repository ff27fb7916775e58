# src/jobweave/core/dag/models.py
"""Job and workflow data model.

Leaf module of the dag package: no imports of sibling modules, so the
wirer, partitioner and scheduler can all depend on it without cycles.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import networkx as nx

from jobweave.contracts.errors import DuplicateJobIdError, GraphValidationError
from jobweave.contracts.types import JobID, NodeID, RoleName
from jobweave.core.registry import ResourceType

if TYPE_CHECKING:
    from jobweave.core.registry import ResourceTypeRegistry

RoleRef = str | ResourceType
"""A role given either by name or by a full ResourceType reference."""


def _role_names(refs: Iterable[RoleRef]) -> tuple[RoleName, ...]:
    """Normalize role references to role names, dropping duplicates in order."""
    names: list[RoleName] = []
    for ref in refs:
        name = RoleName(ref.display_name if isinstance(ref, ResourceType) else ref)
        if name not in names:
            names.append(name)
    return tuple(names)


@dataclass(frozen=True, slots=True)
class Job:
    """A unit of work with named input and output roles.

    Role references are normalized to names at construction, so plain
    strings and ResourceType instances can be mixed freely.
    """

    id: JobID
    display_name: str
    inputs: tuple[RoleName, ...] = ()
    outputs: tuple[RoleName, ...] = ()
    description: str = ""
    url: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Job id must be a non-empty string")
        # frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "inputs", _role_names(self.inputs))
        object.__setattr__(self, "outputs", _role_names(self.outputs))

    @classmethod
    def typed(
        cls,
        registry: ResourceTypeRegistry,
        job_id: str,
        *,
        inputs: Sequence[str] = (),
        outputs: Sequence[str] = (),
        display_name: str | None = None,
        description: str = "",
        url: str = "",
    ) -> Job:
        """Build a job whose roles are resolved through a registry.

        Raises:
            ResourceTypeNotFoundError: If any role name is undefined
        """
        return cls(
            id=JobID(job_id),
            display_name=display_name or job_id,
            inputs=tuple(registry.get(name) for name in inputs),  # type: ignore[arg-type]
            outputs=tuple(registry.get(name) for name in outputs),  # type: ignore[arg-type]
            description=description,
            url=url,
        )


def ensure_unique_ids(jobs: Iterable[Job]) -> None:
    """Fail fast when a job pool repeats an id.

    Raises:
        DuplicateJobIdError: Listing every repeated id
    """
    counts = Counter(job.id for job in jobs)
    duplicates = [job_id for job_id, count in counts.items() if count > 1]
    if duplicates:
        raise DuplicateJobIdError(duplicates)


@dataclass(frozen=True, slots=True)
class WorkflowNode:
    """A job placed in a workflow.

    Synthetic nodes wrap an auto-generated zero-input job standing in for
    an externally supplied resource.
    """

    job: Job
    is_synthetic: bool = False

    @property
    def node_id(self) -> NodeID:
        return NodeID(self.job.id)


@dataclass(frozen=True, slots=True)
class WorkflowEdge:
    """Directed edge carrying one or more roles from producer to consumer."""

    source: NodeID
    target: NodeID
    data_flow: tuple[RoleName, ...]


@dataclass(frozen=True)
class Workflow:
    """A connected graph of workflow nodes and the edges between them.

    Nodes appear in registration order. The workflow owns its nodes and
    edges; jobs are only referenced.
    """

    nodes: tuple[WorkflowNode, ...] = ()
    edges: tuple[WorkflowEdge, ...] = ()
    _index: dict[NodeID, WorkflowNode] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_index", {node.node_id: node for node in self.nodes})

    @property
    def node_count(self) -> int:
        """Number of nodes in the workflow."""
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        """Number of edges in the workflow."""
        return len(self.edges)

    def has_node(self, node_id: str) -> bool:
        """Check if node exists."""
        return node_id in self._index

    def get_node(self, node_id: str) -> WorkflowNode:
        """Find a node by id.

        Raises:
            KeyError: If the node is not part of this workflow
        """
        return self._index[NodeID(node_id)]

    def get_edges_from(self, node_id: str) -> list[WorkflowEdge]:
        """Get all edges originating from a node."""
        return [edge for edge in self.edges if edge.source == node_id]

    def get_edges_to(self, node_id: str) -> list[WorkflowEdge]:
        """Get all edges pointing to a node."""
        return [edge for edge in self.edges if edge.target == node_id]

    def synthetic_nodes(self) -> list[WorkflowNode]:
        return [node for node in self.nodes if node.is_synthetic]

    def job_ids(self) -> list[JobID]:
        """Ids of the pool jobs in this workflow (synthetic nodes excluded)."""
        return [node.job.id for node in self.nodes if not node.is_synthetic]

    def external_inputs(self) -> list[RoleName]:
        """Roles the caller must supply, i.e. those fed by synthetic nodes."""
        return [role for node in self.synthetic_nodes() for role in node.job.outputs]

    def to_networkx(self) -> nx.DiGraph:
        """Return a frozen DiGraph view of the workflow.

        Node attributes hold the WorkflowNode under ``node``; edge attributes
        hold the carried roles under ``data_flow``.
        """
        graph: nx.DiGraph = nx.DiGraph()
        for node in self.nodes:
            graph.add_node(node.node_id, node=node)
        for edge in self.edges:
            graph.add_edge(edge.source, edge.target, data_flow=edge.data_flow)
        return nx.freeze(graph)  # type: ignore[no-any-return]

    def validate(self) -> None:
        """Validate the workflow structure.

        Validates:
        1. Every edge endpoint is a node of this workflow
        2. At most one edge per ordered node pair
        3. Every carried role is an output of the source and an input of the target
        4. The workflow is one connected component
        5. The workflow is acyclic

        Raises:
            GraphValidationError: If validation fails
        """
        seen_pairs: set[tuple[NodeID, NodeID]] = set()
        for edge in self.edges:
            for endpoint in (edge.source, edge.target):
                if endpoint not in self._index:
                    raise GraphValidationError(f"Edge {edge.source} -> {edge.target} references unknown node '{endpoint}'")
            pair = (edge.source, edge.target)
            if pair in seen_pairs:
                raise GraphValidationError(f"Duplicate edge {edge.source} -> {edge.target}; roles between one pair must share an edge")
            seen_pairs.add(pair)
            if not edge.data_flow:
                raise GraphValidationError(f"Edge {edge.source} -> {edge.target} carries no roles")
            source_job = self._index[edge.source].job
            target_job = self._index[edge.target].job
            for role in edge.data_flow:
                if role not in source_job.outputs:
                    raise GraphValidationError(f"Edge {edge.source} -> {edge.target} carries '{role}' which '{edge.source}' does not output")
                if role not in target_job.inputs:
                    raise GraphValidationError(f"Edge {edge.source} -> {edge.target} carries '{role}' which '{edge.target}' does not consume")

        if not self.nodes:
            return

        graph = self.to_networkx()
        if not nx.is_weakly_connected(graph):
            components = sorted(sorted(component) for component in nx.weakly_connected_components(graph))
            raise GraphValidationError(f"Workflow is not connected: {len(components)} components {components}")

        if not nx.is_directed_acyclic_graph(graph):
            try:
                cycle = nx.find_cycle(graph)
                cycle_str = " -> ".join(f"{edge[0]}" for edge in cycle)
                raise GraphValidationError(f"Workflow contains a cycle: {cycle_str}")
            except nx.NetworkXNoCycle:
                raise GraphValidationError("Workflow contains a cycle") from None
