"""Property-based tests for workflow resolution and layering.

These tests verify the invariants every resolved job pool must satisfy:
- Each pool job lands in exactly one workflow
- Edges only carry roles their endpoints produce and consume
- Every input of a wired job is fed by exactly one incoming edge
- Execution levels increase strictly along every edge
- Socket order is a permutation of the declared inputs
- A repeated job id is always rejected up front
"""

from __future__ import annotations

from collections import Counter

import pytest
from hypothesis import given
from hypothesis import strategies as st

from jobweave.contracts import DuplicateJobIdError
from jobweave.core.dag import (
    Job,
    compute_execution_levels,
    level_positions,
    optimized_input_order,
    plan_layout,
    resolve_workflows,
)
from tests.conftest import make_job
from tests.property.conftest import job_pools, role_lists
from tests.property.settings import DETERMINISM_SETTINGS, QUICK_SETTINGS, STANDARD_SETTINGS


class TestPartitionProperties:
    """Partitioning covers the pool exactly once."""

    @given(pool=job_pools())
    @STANDARD_SETTINGS
    def test_every_job_in_exactly_one_workflow(self, pool: list[Job]) -> None:
        workflows = resolve_workflows(pool)

        counts = Counter(job_id for workflow in workflows for job_id in workflow.job_ids())
        assert set(counts) == {job.id for job in pool}
        assert all(count == 1 for count in counts.values())

    @given(pool=job_pools())
    @STANDARD_SETTINGS
    def test_node_ids_unique_across_run(self, pool: list[Job]) -> None:
        workflows = resolve_workflows(pool)

        node_ids = [node.node_id for workflow in workflows for node in workflow.nodes]
        assert len(node_ids) == len(set(node_ids))

    @given(pool=job_pools())
    @DETERMINISM_SETTINGS
    def test_resolution_is_deterministic(self, pool: list[Job]) -> None:
        assert resolve_workflows(pool) == resolve_workflows(pool)

    @given(pool=job_pools(min_jobs=1), data=st.data())
    @QUICK_SETTINGS
    def test_duplicate_id_rejected(self, pool: list[Job], data: st.DataObject) -> None:
        original = data.draw(st.sampled_from(pool))
        clone = make_job(original.id, inputs=data.draw(role_lists), outputs=data.draw(role_lists))
        position = data.draw(st.integers(min_value=0, max_value=len(pool)))

        with pytest.raises(DuplicateJobIdError) as exc_info:
            resolve_workflows([*pool[:position], clone, *pool[position:]])

        assert exc_info.value.duplicates == (original.id,)


class TestWiringProperties:
    """Edges agree with the jobs they connect."""

    @given(pool=job_pools(min_jobs=1))
    @STANDARD_SETTINGS
    def test_edge_roles_are_produced_and_consumed(self, pool: list[Job]) -> None:
        for workflow in resolve_workflows(pool):
            for edge in workflow.edges:
                source = workflow.get_node(edge.source).job
                target = workflow.get_node(edge.target).job
                assert edge.data_flow
                for role in edge.data_flow:
                    assert role in source.outputs
                    assert role in target.inputs

    @given(pool=job_pools(min_jobs=1))
    @STANDARD_SETTINGS
    def test_each_input_fed_by_exactly_one_edge(self, pool: list[Job]) -> None:
        for workflow in resolve_workflows(pool):
            for node in workflow.nodes:
                carried = Counter(role for edge in workflow.get_edges_to(node.node_id) for role in edge.data_flow)
                assert carried == Counter(node.job.inputs)

    @given(pool=job_pools(min_jobs=1))
    @STANDARD_SETTINGS
    def test_synthetic_nodes_are_sources(self, pool: list[Job]) -> None:
        for workflow in resolve_workflows(pool):
            for node in workflow.synthetic_nodes():
                assert node.job.inputs == ()
                assert len(node.job.outputs) == 1
                assert workflow.get_edges_from(node.node_id)


class TestLevelProperties:
    """Levels layer every resolved workflow."""

    @given(pool=job_pools(min_jobs=1))
    @STANDARD_SETTINGS
    def test_levels_increase_along_edges(self, pool: list[Job]) -> None:
        for workflow in resolve_workflows(pool):
            levels = compute_execution_levels(workflow)
            for edge in workflow.edges:
                assert levels[edge.target] > levels[edge.source]

    @given(pool=job_pools(min_jobs=1))
    @STANDARD_SETTINGS
    def test_level_is_longest_path(self, pool: list[Job]) -> None:
        for workflow in resolve_workflows(pool):
            levels = compute_execution_levels(workflow)
            for node in workflow.nodes:
                predecessors = [edge.source for edge in workflow.get_edges_to(node.node_id)]
                expected = 1 + max(levels[p] for p in predecessors) if predecessors else 0
                assert levels[node.node_id] == expected

    @given(pool=job_pools(min_jobs=1))
    @STANDARD_SETTINGS
    def test_positions_centered_per_level(self, pool: list[Job]) -> None:
        for workflow in resolve_workflows(pool):
            levels = compute_execution_levels(workflow)
            positions = level_positions(workflow, levels)
            for level in set(levels.values()):
                members = sorted(positions[node_id] for node_id, node_level in levels.items() if node_level == level)
                assert sum(members) == 0
                assert all(b - a == 1 for a, b in zip(members, members[1:], strict=False))


class TestSocketOrderProperties:
    """Socket ordering reorders without adding or dropping roles."""

    @given(pool=job_pools(min_jobs=1))
    @STANDARD_SETTINGS
    def test_order_is_permutation_of_inputs(self, pool: list[Job]) -> None:
        for workflow in resolve_workflows(pool):
            for node in workflow.nodes:
                order = optimized_input_order(workflow, node.node_id)
                assert sorted(order) == sorted(node.job.inputs)

    @given(pool=job_pools(min_jobs=1))
    @STANDARD_SETTINGS
    def test_order_follows_producer_positions(self, pool: list[Job]) -> None:
        for workflow in resolve_workflows(pool):
            layout = plan_layout(workflow)
            for node in workflow.nodes:
                producer_of = {role: edge.source for edge in workflow.get_edges_to(node.node_id) for role in edge.data_flow}
                keys = [layout.positions[producer_of[role]] for role in layout.input_order[node.node_id]]
                assert keys == sorted(keys)
