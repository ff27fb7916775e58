"""Tests for per-workflow layout plans."""

from jobweave.core.dag import WorkflowLayout, plan_layout, resolve_workflows
from tests.conftest import make_job


class TestPlanLayout:
    """plan_layout bundles levels, positions and socket order."""

    def test_docking_layout(self, docking_jobs) -> None:
        (workflow,) = resolve_workflows(docking_jobs)

        layout = plan_layout(workflow)

        assert layout.level_count == 3
        assert layout.nodes_at_level(0) == ["load_anchor", "load_target", "load_box"]
        assert layout.nodes_at_level(1) == ["generate_candidate"]
        assert layout.nodes_at_level(2) == ["basic_docking"]
        assert layout.positions["load_anchor"] == -1.0
        assert layout.input_order["generate_candidate"] == ("anchor", "target")
        assert layout.input_order["basic_docking"] == ("candidate", "target", "box")

    def test_nodes_at_level_sorted_by_position(self) -> None:
        layout = WorkflowLayout(
            levels={"a": 0, "b": 0},  # type: ignore[dict-item]
            positions={"a": 0.5, "b": -0.5},  # type: ignore[dict-item]
            input_order={},
        )
        assert layout.nodes_at_level(0) == ["b", "a"]

    def test_empty_layout(self) -> None:
        layout = WorkflowLayout(levels={}, positions={}, input_order={})
        assert layout.level_count == 0
        assert layout.nodes_at_level(0) == []

    def test_every_node_planned(self) -> None:
        (workflow,) = resolve_workflows([make_job("a", outputs=["x"]), make_job("b", inputs=["x", "ext"])])

        layout = plan_layout(workflow)

        node_ids = {node.node_id for node in workflow.nodes}
        assert set(layout.levels) == set(layout.positions) == set(layout.input_order) == node_ids
