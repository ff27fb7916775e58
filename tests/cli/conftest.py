# tests/cli/conftest.py
"""Shared fixtures for CLI tests."""

from pathlib import Path

import pytest
import yaml

DOCKING_POOL = {
    "schema_version": 1,
    "resource_types": [
        {"display_name": "candidate", "format": "pdb"},
        {"display_name": "target", "format": "pdb"},
    ],
    "jobs": [
        {"id": "generate_candidate", "inputs": ["anchor", "target"], "outputs": ["candidate"]},
        {"id": "basic_docking", "inputs": ["candidate", "target", "box"], "outputs": ["docking", "pose"]},
    ],
}


def write_yaml(path: Path, data: object) -> Path:
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture
def docking_pool_file(tmp_path: Path) -> Path:
    return write_yaml(tmp_path / "pool.yaml", DOCKING_POOL)


@pytest.fixture
def cyclic_pool_file(tmp_path: Path) -> Path:
    return write_yaml(
        tmp_path / "cycle.yaml",
        {
            "jobs": [
                {"id": "d", "inputs": ["e"], "outputs": ["d"]},
                {"id": "e", "inputs": ["d"], "outputs": ["e"]},
            ]
        },
    )
