# tests/conftest.py
"""Shared test fixtures and helpers.

Job Factory:
- make_job: builds a Job whose display name defaults to its id, so
  scenario tests read like the pools they describe:

      make_job("b", inputs=["x"], outputs=["y"])

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import os
from collections.abc import Sequence

import pytest
from hypothesis import Phase, Verbosity, settings

from jobweave.contracts import JobID
from jobweave.core.dag import Job
from jobweave.core.registry import ResourceTypeRegistry


def make_job(
    job_id: str,
    *,
    inputs: Sequence[str] = (),
    outputs: Sequence[str] = (),
    display_name: str | None = None,
) -> Job:
    """Build a job for tests; display name defaults to the id."""
    return Job(
        id=JobID(job_id),
        display_name=display_name or job_id,
        inputs=tuple(inputs),  # type: ignore[arg-type]
        outputs=tuple(outputs),  # type: ignore[arg-type]
    )


@pytest.fixture
def registry() -> ResourceTypeRegistry:
    """Isolated registry per test."""
    return ResourceTypeRegistry()


@pytest.fixture
def docking_jobs() -> list[Job]:
    """Two-step ligand docking pool: candidate generation feeds docking."""
    return [
        make_job("generate_candidate", inputs=["anchor", "target"], outputs=["candidate"]),
        make_job("basic_docking", inputs=["candidate", "target", "box"], outputs=["docking", "pose"]),
    ]


# =============================================================================
# Hypothesis Configuration
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # timing varies on shared runners
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))
