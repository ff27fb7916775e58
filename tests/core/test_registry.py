"""Tests for the resource type registry."""

import pytest

from jobweave.contracts import ResourceTypeNotFoundError
from jobweave.core.registry import COMMON_RESOURCE_TYPES, ResourceTypeRegistry, default_registry


class TestDefine:
    """Defining resource types."""

    def test_define_returns_resource_type(self, registry: ResourceTypeRegistry) -> None:
        candidate = registry.define("candidate", "Candidate ligand", format="pdb")

        assert candidate.display_name == "candidate"
        assert candidate.description == "Candidate ligand"
        assert candidate.format == "pdb"
        assert candidate.schema is None
        assert candidate.embedding == ()
        assert candidate.id

    def test_define_is_idempotent(self, registry: ResourceTypeRegistry) -> None:
        first = registry.define("target", "Receptor")
        second = registry.define("target", "A different description", format="pdb")

        assert second is first
        assert second.description == "Receptor"
        assert len(registry) == 1

    def test_define_defaults_to_json(self, registry: ResourceTypeRegistry) -> None:
        assert registry.define("number").format == "json"

    def test_define_many(self, registry: ResourceTypeRegistry) -> None:
        defined = registry.define_many(
            [
                {"display_name": "anchor", "format": "pdb"},
                {"display_name": "box", "description": "Search box", "embedding": [0.1, 0.2]},
                {"display_name": "anchor", "format": "sdf"},
            ]
        )

        assert [rt.display_name for rt in defined] == ["anchor", "box", "anchor"]
        assert defined[0] is defined[2]
        assert defined[0].format == "pdb"
        assert defined[1].embedding == (0.1, 0.2)
        assert len(registry) == 2

    def test_ids_are_unique(self, registry: ResourceTypeRegistry) -> None:
        ids = {rt.id for rt in registry.define_many({"display_name": name} for name in ("a", "b", "c"))}
        assert len(ids) == 3


class TestLookup:
    """Read queries."""

    def test_get_defined(self, registry: ResourceTypeRegistry) -> None:
        pose = registry.define("pose")
        assert registry.get("pose") is pose

    def test_get_undefined_raises_not_found(self, registry: ResourceTypeRegistry) -> None:
        with pytest.raises(ResourceTypeNotFoundError, match="'pose' not found"):
            registry.get("pose")

    def test_not_found_is_a_key_error(self, registry: ResourceTypeRegistry) -> None:
        with pytest.raises(KeyError):
            registry.get("missing")

    def test_not_found_suggests_similar_names(self, registry: ResourceTypeRegistry) -> None:
        registry.define("candidate")

        with pytest.raises(ResourceTypeNotFoundError) as exc_info:
            registry.get("candidat")

        assert exc_info.value.suggestions == ("candidate",)
        assert "Similar: candidate" in str(exc_info.value)

    def test_has(self, registry: ResourceTypeRegistry) -> None:
        registry.define("box")

        assert registry.has("box") is True
        assert registry.has("pose") is False
        assert "box" in registry

    def test_get_all_preserves_definition_order(self, registry: ResourceTypeRegistry) -> None:
        registry.define_many({"display_name": name} for name in ("z", "a", "m"))
        assert [rt.display_name for rt in registry.get_all()] == ["z", "a", "m"]

    def test_find_by_format(self, registry: ResourceTypeRegistry) -> None:
        registry.define("anchor", format="pdb")
        registry.define("target", format="pdb")
        registry.define("score")

        assert [rt.display_name for rt in registry.find_by_format("pdb")] == ["anchor", "target"]
        assert registry.find_by_format("csv") == []

    def test_find_by_display_name_ignores_case(self, registry: ResourceTypeRegistry) -> None:
        registry.define("DockingPose")
        registry.define("pose_score")
        registry.define("box")

        assert [rt.display_name for rt in registry.find_by_display_name("POSE")] == ["DockingPose", "pose_score"]


class TestIsolation:
    """Registries are independent instances."""

    def test_instances_do_not_share_state(self) -> None:
        first = ResourceTypeRegistry()
        second = ResourceTypeRegistry()
        first.define("number")

        assert second.has("number") is False

    def test_default_registry_has_common_types(self) -> None:
        registry = default_registry()
        assert [rt.display_name for rt in registry.get_all()] == list(COMMON_RESOURCE_TYPES)

    def test_default_registry_is_fresh_each_call(self) -> None:
        default_registry().define("extra")
        assert default_registry().has("extra") is False
