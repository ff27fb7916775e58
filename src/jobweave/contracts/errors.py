"""Exception hierarchy for job pool resolution.

Every error raised by jobweave derives from JobweaveError so callers can
catch the family in one place. Errors are never recovered internally:
they indicate a caller bug (unknown role, duplicate id) or a broken
invariant in graph construction.
"""

from collections.abc import Iterable, Sequence


class JobweaveError(Exception):
    """Base class for all jobweave errors."""


class ResourceTypeNotFoundError(JobweaveError, KeyError):
    """Raised when a registry lookup names a resource type never defined."""

    def __init__(self, display_name: str, *, suggestions: Sequence[str] = ()) -> None:
        self.display_name = display_name
        self.suggestions = tuple(suggestions)
        message = f"ResourceType '{display_name}' not found in registry. Did you forget to define it?"
        if self.suggestions:
            message += f" Similar: {', '.join(self.suggestions)}"
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])


class DuplicateJobIdError(JobweaveError, ValueError):
    """Raised when a job pool contains the same job id more than once."""

    def __init__(self, duplicates: Iterable[str]) -> None:
        self.duplicates = tuple(sorted(set(duplicates)))
        super().__init__(f"Job pool contains duplicate job ids: {', '.join(self.duplicates)}")


class AmbiguousProducerError(JobweaveError):
    """Raised under the 'reject' producer policy when a role has several producers."""

    def __init__(self, role: str, consumer: str, producers: Sequence[str]) -> None:
        self.role = role
        self.consumer = consumer
        self.producers = tuple(producers)
        super().__init__(
            f"Role '{role}' consumed by '{consumer}' has {len(self.producers)} candidate producers: {', '.join(self.producers)}"
        )


class UnwiredInputError(JobweaveError):
    """Raised when a wired job is left with an input role no edge carries.

    The synthesis policy guarantees a producer for every input, so this
    signals a construction bug rather than a modelling problem.
    """

    def __init__(self, job_id: str, roles: Sequence[str]) -> None:
        self.job_id = job_id
        self.roles = tuple(roles)
        super().__init__(f"Job '{job_id}' has input roles without a producer edge: {', '.join(self.roles)}")


class GraphValidationError(JobweaveError, ValueError):
    """Raised when workflow validation fails."""


class CyclicWorkflowError(GraphValidationError):
    """Raised when execution levels are requested for a cyclic workflow.

    Attributes:
        cycles: Node ids of each cyclic subgraph (strongly connected
            components with more than one node, plus self-loops).
    """

    def __init__(self, cycles: Sequence[Sequence[str]]) -> None:
        self.cycles = tuple(tuple(component) for component in cycles)
        rendered = "; ".join(" <-> ".join(component) for component in self.cycles)
        super().__init__(f"Workflow contains {len(self.cycles)} cyclic subgraph(s): {rendered}")


class JobCatalogError(JobweaveError, ValueError):
    """Raised when a job pool file cannot be parsed or validated."""
