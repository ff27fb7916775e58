"""Observability events for workflow resolution.

These domain events are emitted by the partitioner and consumed by CLI
formatters or callers that want to surface diagnostics, most importantly
the forced-adoption fallback that signals a cyclic job pool.
"""

from dataclasses import dataclass

from jobweave.contracts.types import JobID, RoleName


@dataclass(frozen=True, slots=True)
class StarterForced:
    """Emitted when no starter job exists and one is adopted anyway.

    Every remaining job's inputs are produced by some other remaining job,
    which means the pool contains a cycle or a modelling error. The forced
    job's unmet inputs become synthetic source nodes.

    Attributes:
        job_id: The job adopted as an ad-hoc starter
        remaining: Ids of all unused jobs at the time of adoption
        synthesized_roles: Input roles that will be fed by synthetic nodes
    """

    job_id: JobID
    remaining: tuple[JobID, ...]
    synthesized_roles: tuple[RoleName, ...]


@dataclass(frozen=True, slots=True)
class ProgressForced:
    """Emitted when an iteration consumed no jobs and one was marked used.

    This is a termination guard. Correct wiring never triggers it.
    """

    job_id: JobID
    iteration: int


@dataclass(frozen=True, slots=True)
class WorkflowResolved:
    """Emitted once per constructed workflow."""

    index: int
    starter_id: JobID
    job_ids: tuple[JobID, ...]
    synthetic_count: int
    edge_count: int


@dataclass(frozen=True, slots=True)
class ResolutionCompleted:
    """Emitted when the whole pool has been partitioned."""

    workflow_count: int
    job_count: int
    forced_starters: int
