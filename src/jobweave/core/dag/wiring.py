# src/jobweave/core/dag/wiring.py
"""Greedy auto-wiring of one workflow from a starter job.

The wirer processes the starter, then repeatedly pulls in the first pool
job (in pool order) that consumes a role the workflow already produces.
Inputs nobody produces yet are fed by synthetic source nodes, so every
wired job ends up with a producer edge for each of its inputs.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from jobweave.contracts.enums import ProducerPolicy
from jobweave.contracts.errors import AmbiguousProducerError, UnwiredInputError
from jobweave.contracts.types import JobID, NodeID, RoleName
from jobweave.core.dag.models import Job, Workflow, WorkflowEdge, WorkflowNode
from jobweave.core.logging import get_logger

logger = get_logger(__name__)


class SyntheticIdAllocator:
    """Hands out deterministic ids for synthetic source jobs.

    The first source for role ``x`` is ``load_x``; later ones, or ones
    whose natural id collides with a pool job, get ``_2``, ``_3``, ...
    suffixes. One allocator is shared across a whole resolution run.
    """

    def __init__(self, taken: Iterable[str], prefix: str = "load_") -> None:
        self._taken: set[str] = set(taken)
        self.prefix = prefix

    def display_name(self, role: RoleName) -> str:
        return f"{self.prefix}{role}"

    def allocate(self, role: RoleName) -> JobID:
        base = self.display_name(role)
        candidate = base
        suffix = 2
        while candidate in self._taken:
            candidate = f"{base}_{suffix}"
            suffix += 1
        self._taken.add(candidate)
        return JobID(candidate)


@dataclass
class _WiringState:
    """Mutable scratch state for building one workflow."""

    nodes: list[WorkflowNode] = field(default_factory=list)
    produced: set[RoleName] = field(default_factory=set)
    # role -> producing node ids in registration order
    producers: dict[RoleName, list[NodeID]] = field(default_factory=dict)
    # (source, target) -> carried roles; dict order is edge creation order
    edges: dict[tuple[NodeID, NodeID], list[RoleName]] = field(default_factory=dict)

    def add_node(self, node: WorkflowNode) -> None:
        self.nodes.append(node)

    def register_outputs(self, node: WorkflowNode) -> None:
        for role in node.job.outputs:
            self.producers.setdefault(role, []).append(node.node_id)
            self.produced.add(role)

    def connect(self, source: NodeID, target: NodeID, role: RoleName) -> None:
        data_flow = self.edges.setdefault((source, target), [])
        if role not in data_flow:
            data_flow.append(role)

    def freeze(self) -> Workflow:
        return Workflow(
            nodes=tuple(self.nodes),
            edges=tuple(WorkflowEdge(source=source, target=target, data_flow=tuple(roles)) for (source, target), roles in self.edges.items()),
        )


class GraphAutoWirer:
    """Builds connected workflows out of a job pool.

    The ``used`` set is shared with the caller: every job the wirer
    processes is added to it, so successive ``build`` calls never reuse a
    job.

    Args:
        pool: All jobs of the resolution run, in caller order
        used: Ids of jobs already consumed; mutated in place
        allocator: Synthetic id source shared across the run
        policy: Producer tie-break policy
    """

    def __init__(
        self,
        pool: Sequence[Job],
        used: set[JobID],
        *,
        allocator: SyntheticIdAllocator,
        policy: ProducerPolicy = ProducerPolicy.FIRST,
    ) -> None:
        self._pool = pool
        self._used = used
        self._allocator = allocator
        self._policy = policy

    def build(self, starter: Job) -> Workflow:
        """Build one workflow grown from ``starter``.

        Returns:
            The frozen workflow; its nodes are in registration order.
        """
        state = _WiringState()
        self._process(starter, state)
        while (job := self._next_chainable(state)) is not None:
            self._process(job, state)
        workflow = state.freeze()
        logger.debug(
            "workflow_wired",
            starter_id=starter.id,
            node_count=workflow.node_count,
            edge_count=workflow.edge_count,
        )
        return workflow

    def _next_chainable(self, state: _WiringState) -> Job | None:
        """First unused pool job consuming a role the workflow produces.

        Zero-input jobs never chain; they always start their own workflow.
        """
        for job in self._pool:
            if job.id in self._used:
                continue
            if any(role in state.produced for role in job.inputs):
                return job
        return None

    def _process(self, job: Job, state: _WiringState) -> None:
        synthesized: list[RoleName] = []
        for role in job.inputs:
            if role in state.produced:
                continue
            source = WorkflowNode(
                job=Job(
                    id=self._allocator.allocate(role),
                    display_name=self._allocator.display_name(role),
                    outputs=(role,),
                    description=f"Supplies externally provided '{role}'",
                ),
                is_synthetic=True,
            )
            state.add_node(source)
            state.register_outputs(source)
            synthesized.append(role)

        node = WorkflowNode(job=job)
        state.add_node(node)

        unwired: list[RoleName] = []
        for role in job.inputs:
            producer = self._select_producer(role, job, state)
            if producer is None:
                unwired.append(role)
                continue
            state.connect(producer, node.node_id, role)
        if unwired:
            raise UnwiredInputError(job.id, unwired)

        # Outputs become visible only after inputs are wired, so a job never feeds itself
        state.register_outputs(node)
        self._used.add(job.id)
        logger.debug("job_wired", job_id=job.id, synthesized=synthesized)

    def _select_producer(self, role: RoleName, consumer: Job, state: _WiringState) -> NodeID | None:
        candidates = state.producers.get(role, [])
        if not candidates:
            return None
        if self._policy is ProducerPolicy.FIRST:
            return candidates[0]
        if self._policy is ProducerPolicy.LATEST:
            return candidates[-1]
        if len(candidates) > 1:
            raise AmbiguousProducerError(role, consumer.id, candidates)
        return candidates[0]
