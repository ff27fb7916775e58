# tests/property/conftest.py
"""Shared Hypothesis strategies for property-based tests.

Pools are drawn over a small role alphabet so that jobs frequently
share roles, which exercises chaining, multiple producers and cycles.

Usage:
    from tests.property.conftest import job_pools

    @given(pool=job_pools())
    def test_partition_is_complete(pool: list[Job]) -> None:
        ...
"""

# =============================================================================
# Hypothesis Settings
# =============================================================================
#
# For standardized @settings decorators, import from tests.property.settings:
#   from tests.property.settings import STANDARD_SETTINGS, DETERMINISM_SETTINGS
#
# Tiers: DETERMINISM (300), STANDARD (100), QUICK (20)
# =============================================================================

from __future__ import annotations

from hypothesis import strategies as st

from jobweave.core.dag import Job
from tests.conftest import make_job

ROLE_ALPHABET = ("anchor", "target", "candidate", "box", "pose", "score")

role_lists = st.lists(st.sampled_from(ROLE_ALPHABET), max_size=3, unique=True)


@st.composite
def job_pools(draw: st.DrawFn, min_jobs: int = 0, max_jobs: int = 8) -> list[Job]:
    """Generate a pool of jobs with unique ids and overlapping roles."""
    count = draw(st.integers(min_value=min_jobs, max_value=max_jobs))
    return [make_job(f"job_{index}", inputs=draw(role_lists), outputs=draw(role_lists)) for index in range(count)]
