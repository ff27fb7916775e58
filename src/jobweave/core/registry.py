"""Registry of reusable resource types.

Resource types are defined once and reused across all jobs of a pool.
The registry is an explicit instance handed to whoever needs it; there is
no module-level singleton.
"""

from __future__ import annotations

import difflib
import threading
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from jobweave.contracts.errors import ResourceTypeNotFoundError

# Types every default registry starts with
COMMON_RESOURCE_TYPES: tuple[str, ...] = ("number", "character")


@dataclass(frozen=True, slots=True)
class ResourceType:
    """A named, typed data kind flowing between jobs.

    ``display_name`` is the registry key and doubles as the role name
    used when wiring jobs together.
    """

    display_name: str
    description: str = ""
    format: str = "json"
    schema: Mapping[str, Any] | None = None
    embedding: tuple[float, ...] = ()
    id: str = field(default_factory=lambda: str(uuid.uuid4()))


class ResourceTypeRegistry:
    """Deduplicated store of resource types keyed by display name.

    ``define`` is idempotent: defining an existing name returns the stored
    instance unchanged. All mutation goes through ``define``/``define_many``.
    Thread-safe, though callers are expected to finish defining before
    resolution starts reading.

    Example:
        registry = ResourceTypeRegistry()
        registry.define("candidate", "Candidate ligand", format="pdb")
        job = Job.typed(registry, "generate", inputs=["anchor"], outputs=["candidate"])
    """

    def __init__(self) -> None:
        self._types: dict[str, ResourceType] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._types)

    def __contains__(self, display_name: object) -> bool:
        return display_name in self._types

    def define(
        self,
        display_name: str,
        description: str = "",
        format: str = "json",
        schema: Mapping[str, Any] | None = None,
        embedding: Iterable[float] = (),
    ) -> ResourceType:
        """Define a resource type, or return the existing one with that name.

        Args:
            display_name: Unique key for the type
            description: Human-readable description
            format: Serialization format (e.g., "json", "pdb")
            schema: Optional JSON schema for validation
            embedding: Optional semantic embedding vector

        Returns:
            The stored ResourceType
        """
        with self._lock:
            existing = self._types.get(display_name)
            if existing is not None:
                return existing
            resource_type = ResourceType(
                display_name=display_name,
                description=description,
                format=format,
                schema=schema,
                embedding=tuple(embedding),
            )
            self._types[display_name] = resource_type
            return resource_type

    def define_many(self, definitions: Iterable[Mapping[str, Any]]) -> list[ResourceType]:
        """Bulk define resource types from mappings.

        Each mapping needs ``display_name``; ``description``, ``format``,
        ``schema`` and ``embedding`` are optional.
        """
        return [
            self.define(
                definition["display_name"],
                definition.get("description") or "",
                definition.get("format") or "json",
                definition.get("schema"),
                definition.get("embedding") or (),
            )
            for definition in definitions
        ]

    def get(self, display_name: str) -> ResourceType:
        """Get a resource type by display name.

        Raises:
            ResourceTypeNotFoundError: If the name was never defined
        """
        resource_type = self._types.get(display_name)
        if resource_type is None:
            suggestions = difflib.get_close_matches(display_name, list(self._types), n=3, cutoff=0.6)
            raise ResourceTypeNotFoundError(display_name, suggestions=suggestions)
        return resource_type

    def has(self, display_name: str) -> bool:
        """Check whether a resource type is defined."""
        return display_name in self._types

    def get_all(self) -> list[ResourceType]:
        """Return all resource types in definition order."""
        with self._lock:
            return list(self._types.values())

    def find_by_format(self, format: str) -> list[ResourceType]:
        """Return resource types with the given serialization format."""
        return [resource_type for resource_type in self.get_all() if resource_type.format == format]

    def find_by_display_name(self, partial_name: str) -> list[ResourceType]:
        """Return resource types whose name contains ``partial_name``, ignoring case."""
        needle = partial_name.lower()
        return [resource_type for resource_type in self.get_all() if needle in resource_type.display_name.lower()]


def default_registry() -> ResourceTypeRegistry:
    """Create a fresh registry pre-populated with the common resource types."""
    registry = ResourceTypeRegistry()
    registry.define_many({"display_name": name} for name in COMMON_RESOURCE_TYPES)
    return registry
