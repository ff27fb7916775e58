"""Shared contracts: semantic types, enums, errors, and events.

Leaf package with no imports from jobweave.core, so every layer can
depend on it without cycles.
"""

from jobweave.contracts.enums import ProducerPolicy, ResolutionPhase
from jobweave.contracts.errors import (
    AmbiguousProducerError,
    CyclicWorkflowError,
    DuplicateJobIdError,
    GraphValidationError,
    JobCatalogError,
    JobweaveError,
    ResourceTypeNotFoundError,
    UnwiredInputError,
)
from jobweave.contracts.events import (
    ProgressForced,
    ResolutionCompleted,
    StarterForced,
    WorkflowResolved,
)
from jobweave.contracts.types import ExecutionLevels, JobID, NodeID, RoleName

__all__ = [
    "AmbiguousProducerError",
    "CyclicWorkflowError",
    "DuplicateJobIdError",
    "ExecutionLevels",
    "GraphValidationError",
    "JobCatalogError",
    "JobID",
    "JobweaveError",
    "NodeID",
    "ProducerPolicy",
    "ProgressForced",
    "ResolutionCompleted",
    "ResolutionPhase",
    "ResourceTypeNotFoundError",
    "RoleName",
    "StarterForced",
    "UnwiredInputError",
    "WorkflowResolved",
]
