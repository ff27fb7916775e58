"""Semantic type aliases for compile-time type safety.

NewType creates distinct types that mypy treats as incompatible,
preventing accidental misuse of semantically different string values.
"""

from typing import NewType

JobID = NewType("JobID", str)
"""Unique job identifier within one job pool (e.g., 'generate_candidate')"""

NodeID = NewType("NodeID", str)
"""Workflow node identifier; always equal to the wrapped job's id"""

RoleName = NewType("RoleName", str)
"""Resource role name flowing between jobs (e.g., 'candidate', 'num_a')"""

ExecutionLevels = dict[NodeID, int]
"""Execution level per node; nodes sharing a level may run in parallel."""
