# src/jobweave/core/catalog.py
"""Loading job pools from YAML or JSON files.

A pool file follows one canonical, versioned schema:

    schema_version: 1
    resource_types:
      - display_name: candidate
        format: pdb
    jobs:
      - id: generate_candidate
        inputs: [anchor, target]
        outputs: [candidate]

Older job shapes are migrated before validation so callers only ever see
the canonical one:

- ``name`` instead of ``display_name``/``id``
- ``displayName`` with ``syntacticSpec.inputs``/``outputs`` holding
  resource-type objects and ``semanticSpec.description``
- role objects of the form ``{role: {name: ...}}``
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from jobweave.contracts.errors import JobCatalogError
from jobweave.contracts.types import JobID
from jobweave.core.dag.models import Job
from jobweave.core.registry import ResourceTypeRegistry

CURRENT_SCHEMA_VERSION = 1


def _role_name(ref: Any) -> Any:
    """Extract a role name from any historical role shape.

    Unknown shapes are returned untouched so pydantic reports them.
    """
    if isinstance(ref, Mapping):
        if isinstance(ref.get("role"), Mapping):
            return _role_name(ref["role"])
        for key in ("display_name", "displayName", "name"):
            if key in ref:
                return ref[key]
    return ref


def _migrate_job(raw: Any) -> Any:
    if not isinstance(raw, Mapping):
        return raw
    data = dict(raw)
    syntactic = data.pop("syntacticSpec", None) or {}
    semantic = data.pop("semanticSpec", None) or {}

    # Pop both so neither survives as an unknown field
    camel_name = data.pop("displayName", None)
    plain_name = data.pop("name", None)
    display_name = camel_name or plain_name
    if display_name is not None:
        data.setdefault("display_name", display_name)
    if "id" not in data and "display_name" in data:
        data["id"] = data["display_name"]
    if "display_name" not in data and "id" in data:
        data["display_name"] = data["id"]

    for direction in ("inputs", "outputs"):
        roles = data.get(direction, syntactic.get(direction, []))
        if isinstance(roles, list):
            roles = [_role_name(ref) for ref in roles]
        data[direction] = roles

    if "description" not in data and "description" in semantic:
        data["description"] = semantic["description"]
    return data


class ResourceTypeSpec(BaseModel):
    """Resource type declaration in a pool file."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    display_name: str = Field(min_length=1, alias="displayName")
    description: str = ""
    format: str = "json"
    json_schema: dict[str, Any] | None = Field(default=None, alias="schema")
    embedding: list[float] = Field(default_factory=list)


class JobSpec(BaseModel):
    """Canonical job declaration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1)
    display_name: str = Field(min_length=1)
    description: str = ""
    url: str = ""
    inputs: list[str] = Field(default_factory=list)
    outputs: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def migrate_legacy_shapes(cls, data: Any) -> Any:
        """Rewrite historical job shapes into the canonical one."""
        return _migrate_job(data)

    def to_job(self) -> Job:
        return Job(
            id=JobID(self.id),
            display_name=self.display_name,
            inputs=tuple(self.inputs),  # type: ignore[arg-type]
            outputs=tuple(self.outputs),  # type: ignore[arg-type]
            description=self.description,
            url=self.url,
        )


class JobPoolFile(BaseModel):
    """Top-level pool file schema."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    schema_version: Literal[1] = CURRENT_SCHEMA_VERSION
    resource_types: list[ResourceTypeSpec] = Field(default_factory=list)
    jobs: list[JobSpec]


@dataclass(frozen=True)
class JobPool:
    """Jobs loaded from a pool file plus a registry of the declared types."""

    jobs: tuple[Job, ...]
    registry: ResourceTypeRegistry


def parse_job_pool(data: Any) -> JobPool:
    """Validate an already-decoded pool document.

    A bare list is accepted as a list of jobs.

    Raises:
        JobCatalogError: If the document does not match the schema
    """
    if isinstance(data, list):
        data = {"jobs": data}
    try:
        document = JobPoolFile.model_validate(data)
    except ValidationError as e:
        details = [f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in e.errors()]
        raise JobCatalogError("Invalid job pool:\n  " + "\n  ".join(details)) from e

    registry = ResourceTypeRegistry()
    for spec in document.resource_types:
        registry.define(spec.display_name, spec.description, spec.format, spec.json_schema, spec.embedding)
    return JobPool(jobs=tuple(spec.to_job() for spec in document.jobs), registry=registry)


def load_job_pool(path: Path) -> JobPool:
    """Load a pool file (YAML or JSON).

    Raises:
        FileNotFoundError: If the file doesn't exist
        JobCatalogError: If the file is malformed or fails validation
    """
    if not path.exists():
        raise FileNotFoundError(f"Job pool file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise JobCatalogError(f"Failed to parse {path.name}: {e}") from e
    return parse_job_pool(data)
