# src/jobweave/core/dag/partition.py
"""Partitioning a job pool into independent workflows.

WorkflowResolver drives GraphAutoWirer across the whole pool. Each
iteration recomputes the starter jobs among the unused ones and grows
one workflow per starter. When a cyclic remainder leaves no starter,
the first unused job is adopted anyway and a StarterForced event is
emitted. Every pool job ends up in exactly one workflow.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from jobweave.contracts.enums import ResolutionPhase
from jobweave.contracts.events import (
    ProgressForced,
    ResolutionCompleted,
    StarterForced,
    WorkflowResolved,
)
from jobweave.contracts.types import JobID, RoleName
from jobweave.core.config import ResolverSettings
from jobweave.core.dag.layout import WorkflowLayout, plan_layout
from jobweave.core.dag.models import Job, Workflow, ensure_unique_ids
from jobweave.core.dag.wiring import GraphAutoWirer, SyntheticIdAllocator
from jobweave.core.events import EventBusProtocol, NullEventBus
from jobweave.core.logging import get_logger, run_context
from jobweave.core.registry import ResourceTypeRegistry

logger = get_logger(__name__)


def find_starter_jobs(candidates: Sequence[Job]) -> list[Job]:
    """Return the jobs whose inputs no *other* candidate produces.

    A job that only feeds itself (same role in and out) still counts as
    a starter. Order follows ``candidates``.
    """
    producer_counts: Counter[RoleName] = Counter(role for job in candidates for role in job.outputs)
    starters = []
    for job in candidates:
        produced_elsewhere = any(producer_counts[role] - (1 if role in job.outputs else 0) > 0 for role in job.inputs)
        if not produced_elsewhere:
            starters.append(job)
    return starters


class WorkflowResolver:
    """Resolves a job pool into connected, acyclic workflows.

    Args:
        settings: Resolver settings (defaults apply when omitted)
        registry: Registry used to check role names when
            ``settings.require_registered_roles`` is set
        event_bus: Receives resolution events; a NullEventBus by default

    Example:
        resolver = WorkflowResolver(settings=ResolverSettings(producer_policy="reject"))
        for workflow in resolver.resolve(jobs):
            levels = compute_execution_levels(workflow)
    """

    def __init__(
        self,
        settings: ResolverSettings | None = None,
        *,
        registry: ResourceTypeRegistry | None = None,
        event_bus: EventBusProtocol | None = None,
    ) -> None:
        self._settings = settings or ResolverSettings()
        self._registry = registry
        self._events: EventBusProtocol = event_bus or NullEventBus()
        if self._settings.require_registered_roles and registry is None:
            raise ValueError("require_registered_roles is set but no registry was provided")

    @property
    def settings(self) -> ResolverSettings:
        return self._settings

    def resolve(self, jobs: Sequence[Job]) -> list[Workflow]:
        """Partition ``jobs`` into workflows.

        Raises:
            DuplicateJobIdError: If two jobs share an id
            ResourceTypeNotFoundError: If registered roles are required and one is missing
            AmbiguousProducerError: Under the 'reject' producer policy
            GraphValidationError: If a built workflow fails validation
        """
        pool = list(jobs)
        with run_context(job_count=len(pool)):
            return self._resolve(pool)

    def _resolve(self, pool: list[Job]) -> list[Workflow]:
        logger.debug("resolution_started", phase=ResolutionPhase.VALIDATING)
        self._validate_pool(pool)

        used: set[JobID] = set()
        allocator = SyntheticIdAllocator((job.id for job in pool), prefix=self._settings.synthetic_prefix)
        wirer = GraphAutoWirer(pool, used, allocator=allocator, policy=self._settings.producer_policy)

        logger.debug("wiring_started", phase=ResolutionPhase.WIRING, policy=self._settings.producer_policy)
        workflows: list[Workflow] = []
        forced_starters = 0
        iteration = 0
        while len(used) < len(pool):
            iteration += 1
            remaining = [job for job in pool if job.id not in used]
            consumed_before = len(used)

            starters = find_starter_jobs(remaining)
            if starters:
                for starter in starters:
                    # An earlier starter's workflow may already have chained this one
                    if starter.id in used:
                        continue
                    workflows.append(self._build(wirer, starter, len(workflows)))
            else:
                forced = remaining[0]
                forced_starters += 1
                event = StarterForced(
                    job_id=forced.id,
                    remaining=tuple(job.id for job in remaining),
                    synthesized_roles=forced.inputs,
                )
                logger.warning(
                    "starter_forced",
                    job_id=forced.id,
                    remaining=len(remaining),
                    synthesized_roles=list(forced.inputs),
                    hint="job pool contains a dependency cycle",
                )
                self._events.emit(event)
                workflows.append(self._build(wirer, forced, len(workflows)))

            if len(used) == consumed_before:
                stuck = remaining[0]
                used.add(stuck.id)
                logger.warning("progress_forced", job_id=stuck.id, iteration=iteration)
                self._events.emit(ProgressForced(job_id=stuck.id, iteration=iteration))

        logger.info(
            "resolution_completed",
            workflow_count=len(workflows),
            forced_starters=forced_starters,
        )
        self._events.emit(
            ResolutionCompleted(
                workflow_count=len(workflows),
                job_count=len(pool),
                forced_starters=forced_starters,
            )
        )
        return workflows

    def resolve_with_layout(self, jobs: Sequence[Job]) -> list[tuple[Workflow, WorkflowLayout]]:
        """Resolve the pool and plan the layout of every workflow."""
        workflows = self.resolve(jobs)
        logger.debug("layout_started", phase=ResolutionPhase.LAYERING, workflow_count=len(workflows))
        return [(workflow, plan_layout(workflow)) for workflow in workflows]

    def _validate_pool(self, pool: list[Job]) -> None:
        ensure_unique_ids(pool)
        if not self._settings.require_registered_roles:
            return
        registry = self._registry
        if registry is None:
            raise ValueError("require_registered_roles is set but no registry was provided")
        for job in pool:
            for role in (*job.inputs, *job.outputs):
                registry.get(role)

    def _build(self, wirer: GraphAutoWirer, starter: Job, index: int) -> Workflow:
        workflow = wirer.build(starter)
        if self._settings.validate_workflows:
            workflow.validate()
        self._events.emit(
            WorkflowResolved(
                index=index,
                starter_id=starter.id,
                job_ids=tuple(workflow.job_ids()),
                synthetic_count=len(workflow.synthetic_nodes()),
                edge_count=workflow.edge_count,
            )
        )
        return workflow


def resolve_workflows(
    jobs: Sequence[Job],
    settings: ResolverSettings | None = None,
    *,
    registry: ResourceTypeRegistry | None = None,
    event_bus: EventBusProtocol | None = None,
) -> list[Workflow]:
    """Partition a job pool into workflows. See WorkflowResolver.resolve()."""
    return WorkflowResolver(settings, registry=registry, event_bus=event_bus).resolve(jobs)
