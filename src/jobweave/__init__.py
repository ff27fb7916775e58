"""
Jobweave: dataflow-graph resolution for pools of typed jobs.

Wires jobs into workflows by matching output roles to input roles,
partitions a pool into independent workflows, and layers each workflow
into parallel execution levels.
"""

__version__ = "0.1.0"
